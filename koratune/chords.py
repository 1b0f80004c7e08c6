"""ChordPlanner: scores chords against a resolved tuning and picks playable strings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from koratune.models import LeverState, PegCorrectStringResult
from koratune.pitch import SEMITONES_PER_OCTAVE, NoteName, circular_semitone_distance
from koratune.scales import notes_from_offsets

logger = logging.getLogger(__name__)

# ── Scoring weights ──────────────────────────────────────────────────────────
MATCHED_NOTE_WEIGHT = 120
MISSING_NOTE_PENALTY = 95
PLAYED_STRING_WEIGHT = 5
DETUNED_STRING_PENALTY = 35
COMFORTABLE_STRUM_COUNT = 6  # strings in a relaxed full-instrument strum
COMPLETE_CHORD_BONUS = 200

OVERLAP_WEIGHT = 120
QUALITY_MATCH_BONUS = 2
QUALITY_BONUS_WEIGHT = 25
ROOT_DISTANCE_PENALTY = 6

MAX_GRIP_NOTES = 4  # strings one hand can pluck together


@dataclass(frozen=True)
class ChordTone:
    """One chord member: semitones above the root and its degree label."""

    semitone_offset: int
    label: str


class ChordQuality(Enum):
    """Chord qualities as (display name, tones)."""

    MAJOR = ("Major", (ChordTone(0, "R"), ChordTone(4, "3"), ChordTone(7, "5")))
    MINOR = ("Minor", (ChordTone(0, "R"), ChordTone(3, "b3"), ChordTone(7, "5")))
    DIMINISHED = ("Diminished", (ChordTone(0, "R"), ChordTone(3, "b3"), ChordTone(6, "b5")))
    HALF_DIMINISHED = (
        "Half-Diminished (m7b5)",
        (ChordTone(0, "R"), ChordTone(3, "b3"), ChordTone(6, "b5"), ChordTone(10, "b7")),
    )
    SUS2 = ("Sus2", (ChordTone(0, "R"), ChordTone(2, "2"), ChordTone(7, "5")))
    SUS4 = ("Sus4", (ChordTone(0, "R"), ChordTone(5, "4"), ChordTone(7, "5")))
    DOMINANT7 = (
        "Dominant 7",
        (ChordTone(0, "R"), ChordTone(4, "3"), ChordTone(7, "5"), ChordTone(10, "b7")),
    )
    MAJOR7 = (
        "Major 7",
        (ChordTone(0, "R"), ChordTone(4, "3"), ChordTone(7, "5"), ChordTone(11, "7")),
    )
    MINOR7 = (
        "Minor 7",
        (ChordTone(0, "R"), ChordTone(3, "b3"), ChordTone(7, "5"), ChordTone(10, "b7")),
    )

    def __init__(self, display_name: str, tones: tuple[ChordTone, ...]) -> None:
        self.display_name = display_name
        self.tones = tones

    @property
    def offsets(self) -> tuple[int, ...]:
        return tuple(tone.semitone_offset for tone in self.tones)

    def notes_for_root(self, root: NoteName) -> tuple[NoteName, ...]:
        return notes_from_offsets(root, self.offsets)


@dataclass(frozen=True)
class ChordDefinition:
    """A chord quality on a root; ``chord_notes`` keeps tone order."""

    root: NoteName
    quality: ChordQuality
    chord_notes: tuple[NoteName, ...] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "chord_notes", self.quality.notes_for_root(self.root))

    @property
    def label(self) -> str:
        """Display name, e.g. ``'C Major'``."""
        return f"{self.root.symbol} {self.quality.display_name}"


@dataclass(frozen=True)
class ChordMatch:
    """
    How well a resolved tuning plays one chord.

    Attributes:
        definition:            The chord that was scored.
        played_string_numbers: Strings whose selected pitch is a chord note.
        matched_notes:         Chord notes sounded by at least one string.
        missing_notes:         Chord notes no string sounds.
        uses_detuned_strings:  Whether any played string needs a peg retune.
        open_play_count:       Played, not retuned, lever open.
        closed_play_count:     Played, not retuned, lever closed.
        detuned_play_count:    Played strings that need a peg retune.
        score:                 Higher is better; see :func:`analyze_chord`.
    """

    definition: ChordDefinition
    played_string_numbers: frozenset[int]
    matched_notes: tuple[NoteName, ...]
    missing_notes: tuple[NoteName, ...]
    uses_detuned_strings: bool
    open_play_count: int
    closed_play_count: int
    detuned_play_count: int
    score: int

    @property
    def is_complete(self) -> bool:
        return not self.missing_notes

    @property
    def ranking_score(self) -> int:
        """Score used for ranking: complete chords always beat incomplete ones."""
        return self.score + COMPLETE_CHORD_BONUS if self.is_complete else self.score


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------

def _all_definitions() -> list[ChordDefinition]:
    """Every quality on every root, roots outermost."""
    return [ChordDefinition(root, quality) for root in NoteName for quality in ChordQuality]


def _absolute(row: PegCorrectStringResult) -> int:
    return row.selected_pitch.absolute_semitone()


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def analyze_chord(
    rows: Sequence[PegCorrectStringResult],
    definition: ChordDefinition,
) -> ChordMatch:
    """
    Score one chord against a peg-correct table.

    Every string whose selected pitch class is a chord note is "played".
    The score rewards coverage and penalizes missing notes, retuned strings
    and straying from a comfortable strum size::

        120*matched - 95*missing + 5*played - 35*detuned - |played - 6|
    """
    chord_notes = definition.chord_notes
    played_rows = [row for row in rows if row.selected_pitch.note in chord_notes]
    matched = tuple(dict.fromkeys(row.selected_pitch.note for row in played_rows))
    missing = tuple(note for note in chord_notes if note not in matched)
    detuned = sum(1 for row in played_rows if row.peg_retune_required)
    steady = [row for row in played_rows if not row.peg_retune_required]

    score = (
        MATCHED_NOTE_WEIGHT * len(matched)
        - MISSING_NOTE_PENALTY * len(missing)
        + PLAYED_STRING_WEIGHT * len(played_rows)
        - DETUNED_STRING_PENALTY * detuned
        - abs(len(played_rows) - COMFORTABLE_STRUM_COUNT)
    )

    return ChordMatch(
        definition=definition,
        played_string_numbers=frozenset(row.string_number for row in played_rows),
        matched_notes=matched,
        missing_notes=missing,
        uses_detuned_strings=detuned > 0,
        open_play_count=sum(1 for row in steady if row.selected_lever_state is LeverState.OPEN),
        closed_play_count=sum(1 for row in steady if row.selected_lever_state is LeverState.CLOSED),
        detuned_play_count=detuned,
        score=score,
    )


def best_chord_matches(
    rows: Sequence[PegCorrectStringResult],
    limit: int = 12,
) -> list[ChordMatch]:
    """
    Rank every root/quality combination and return the top ``limit``.

    Complete chords get a flat bonus so they outrank any incomplete chord.
    Equal scores keep enumeration order (root, then quality).
    """
    matches = [analyze_chord(rows, definition) for definition in _all_definitions()]
    matches.sort(key=lambda match: match.ranking_score, reverse=True)
    return matches[: max(limit, 0)]


def suggest_stable_chord(
    rows: Sequence[PegCorrectStringResult],
    desired: ChordDefinition,
) -> ChordMatch | None:
    """
    Find the chord closest to ``desired`` that plays completely without retuning.

    Candidates must be complete, use no detuned string and sound at least
    one string. Among them the first one maximizing::

        120*overlap + 25*quality_bonus - 6*root_distance + played

    wins, where ``overlap`` counts shared pitch classes with ``desired``.

    Returns:
        The best candidate, or ``None`` if nothing qualifies.
    """
    desired_notes = set(desired.chord_notes)

    def closeness(match: ChordMatch) -> int:
        overlap = len(desired_notes.intersection(match.definition.chord_notes))
        quality_bonus = QUALITY_MATCH_BONUS if match.definition.quality is desired.quality else 0
        root_distance = circular_semitone_distance(
            match.definition.root.semitone, desired.root.semitone
        )
        return (
            OVERLAP_WEIGHT * overlap
            + QUALITY_BONUS_WEIGHT * quality_bonus
            - ROOT_DISTANCE_PENALTY * root_distance
            + len(match.played_string_numbers)
        )

    best: ChordMatch | None = None
    best_closeness = 0
    for definition in _all_definitions():
        match = analyze_chord(rows, definition)
        if not match.is_complete or match.uses_detuned_strings or not match.played_string_numbers:
            continue
        value = closeness(match)
        if best is None or value > best_closeness:
            best, best_closeness = match, value

    logger.debug(
        "Stable alternative for %s: %s",
        desired.label,
        best.definition.label if best else "none",
    )
    return best


def choose_chord_strings(
    rows: Sequence[PegCorrectStringResult],
    definition: ChordDefinition,
    included_offsets: Iterable[int] = (),
    max_notes: int = MAX_GRIP_NOTES,
) -> list[PegCorrectStringResult]:
    """
    Pick a small set of strings that voices a chord, lowest first.

    Two greedy passes over the candidates sorted by pitch: the first takes
    one string per distinct pitch class so every included tone sounds, the
    second fills any remaining slots with the lowest unused strings.

    Args:
        rows:             Peg-correct table.
        definition:       Chord to voice.
        included_offsets: Semitone offsets above the root to allow; empty
                          means every tone of the chord quality.
        max_notes:        Grip size, clamped to 1..4.

    Returns:
        At most ``max_notes`` rows, no string repeated, ascending by pitch.
    """
    offsets = {offset % SEMITONES_PER_OCTAVE for offset in included_offsets}
    if not offsets:
        offsets = {offset % SEMITONES_PER_OCTAVE for offset in definition.quality.offsets}
    allowed_notes = {NoteName.from_semitone(definition.root.semitone + offset) for offset in offsets}

    candidates = sorted(
        (row for row in rows if row.selected_pitch.note in allowed_notes),
        key=_absolute,
    )
    if not candidates:
        return []

    selected: list[PegCorrectStringResult] = []
    selected_notes: set[NoteName] = set()
    selected_strings: set[int] = set()

    # Coverage pass
    for row in candidates:
        if row.selected_pitch.note not in selected_notes and len(selected) < max_notes:
            selected.append(row)
            selected_notes.add(row.selected_pitch.note)
            selected_strings.add(row.string_number)

    # Fill pass
    for row in candidates:
        if len(selected) >= max_notes:
            break
        if row.string_number not in selected_strings:
            selected.append(row)
            selected_strings.add(row.string_number)

    limit = min(max(max_notes, 1), MAX_GRIP_NOTES)
    return sorted(selected, key=_absolute)[:limit]
