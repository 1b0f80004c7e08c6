"""Instrument profiles: per-string open pitches, lever pitches and intonation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Final

from koratune.pitch import Pitch

SUPPORTED_STRING_COUNTS: Final[frozenset[int]] = frozenset({21, 22})


@dataclass(frozen=True)
class StringTuning:
    """
    One physical string and the two pitches its lever can produce.

    The closed (lever engaged) pitch is always exactly one semitone above the
    open pitch. Intonation cents are fine-tuning offsets that travel with the
    string but never take part in pitch-class decisions.
    """

    string_number: int
    open_pitch: Pitch
    open_intonation_cents: float = 0.0
    closed_intonation_cents: float = 0.0
    closed_pitch: Pitch = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "closed_pitch", self.open_pitch.plus_semitones(1))

    def transposed(self, semitones: int) -> StringTuning:
        """Return this string shifted by ``semitones``, or ``self`` when zero."""
        if semitones == 0:
            return self
        return replace(self, open_pitch=self.open_pitch.plus_semitones(semitones))


@dataclass(frozen=True)
class InstrumentProfile:
    """
    The tuning of a whole instrument as configured by the player.

    Attributes:
        string_count:            Number of strings (21 or 22 on a standard kora).
        open_pitches:            Open pitch of strings 1..string_count.
        open_intonation_cents:   Per-string cents offset of the open pitch.
        closed_intonation_cents: Per-string cents offset of the closed pitch.
        closed_lever_enabled:    ``False`` emulates an instrument without levers,
                                 where only the open pitch can sound.
    """

    string_count: int
    open_pitches: tuple[Pitch, ...]
    open_intonation_cents: tuple[float, ...] = ()
    closed_intonation_cents: tuple[float, ...] = ()
    closed_lever_enabled: bool = True

    def __post_init__(self) -> None:
        if self.string_count < 1:
            raise ValueError("String count must be positive.")

        object.__setattr__(self, "open_pitches", tuple(self.open_pitches))
        object.__setattr__(
            self, "open_intonation_cents", self._cents_or_zero(self.open_intonation_cents)
        )
        object.__setattr__(
            self, "closed_intonation_cents", self._cents_or_zero(self.closed_intonation_cents)
        )

        if len(self.open_pitches) != self.string_count:
            raise ValueError("Open tuning count must match selected string count.")
        if len(self.open_intonation_cents) != self.string_count:
            raise ValueError("Open intonation count must match selected string count.")
        if len(self.closed_intonation_cents) != self.string_count:
            raise ValueError("Closed intonation count must match selected string count.")
        if not all(math.isfinite(c) for c in self.open_intonation_cents):
            raise ValueError("Open intonation cents must be finite values.")
        if not all(math.isfinite(c) for c in self.closed_intonation_cents):
            raise ValueError("Closed intonation cents must be finite values.")

    def _cents_or_zero(self, cents: tuple[float, ...]) -> tuple[float, ...]:
        values = tuple(float(c) for c in cents)
        return values if values else (0.0,) * self.string_count

    @property
    def strings(self) -> tuple[StringTuning, ...]:
        return tuple(
            StringTuning(
                string_number=index + 1,
                open_pitch=open_pitch,
                open_intonation_cents=self.open_intonation_cents[index],
                closed_intonation_cents=self.closed_intonation_cents[index],
            )
            for index, open_pitch in enumerate(self.open_pitches)
        )

    @classmethod
    def from_text(
        cls,
        pitches: list[str],
        closed_lever_enabled: bool = True,
    ) -> InstrumentProfile:
        """
        Build a profile from pitch names such as ``["F2", "C3", ...]``.

        Raises:
            ValueError: If any entry is not a valid pitch.
        """
        return cls(
            string_count=len(pitches),
            open_pitches=tuple(_parse_pitch(text) for text in pitches),
            closed_lever_enabled=closed_lever_enabled,
        )


def _parse_pitch(text: str) -> Pitch:
    pitch = Pitch.parse(text)
    if pitch is None:
        raise ValueError(f"Invalid pitch '{text}'.")
    return pitch


# ── Traditional presets ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class TraditionalPreset:
    """A named traditional tuning, ready to turn into an InstrumentProfile."""

    id: str
    display_name: str
    description: str
    string_count: int
    open_pitches: tuple[Pitch, ...]
    open_intonation_cents: tuple[float, ...]
    closed_intonation_cents: tuple[float, ...]

    def to_instrument_profile(self, closed_lever_enabled: bool = True) -> InstrumentProfile:
        return InstrumentProfile(
            string_count=self.string_count,
            open_pitches=self.open_pitches,
            open_intonation_cents=self.open_intonation_cents,
            closed_intonation_cents=self.closed_intonation_cents,
            closed_lever_enabled=closed_lever_enabled,
        )


# Cents deviations by note symbol, concert F reference:
#   Tomora Ba / Silaba: F G A Bb C D E -> [0, 0, -15, 0, 0, 0, -15]
#   Sauta:              F G A B  C D E -> [0, -15, +5, +5, 0, -15, +5]
#   Hardino:            F G A Bb C D E -> [0, -15, +5, 0, 0, -15, +5]
_HARDINO_CENTS: dict[str, float] = {
    "F": 0.0, "G": -15.0, "A": 5.0, "A#": 0.0, "C": 0.0, "D": -15.0, "E": 5.0,
}
_SAUTA_CENTS: dict[str, float] = {
    "F": 0.0, "G": -15.0, "A": 5.0, "B": 5.0, "C": 0.0, "D": -15.0, "E": 5.0,
}
_SILABA_CENTS: dict[str, float] = {
    "F": 0.0, "G": 0.0, "A": -15.0, "A#": 0.0, "C": 0.0, "D": 0.0, "E": -15.0,
}

_UPPER_BB = ["F3", "G3", "A3", "Bb3", "C4", "D4", "E4", "F4", "G4", "A4", "Bb4", "C5", "D5", "E5",
             "F5", "G5", "A5"]
_UPPER_B = ["F3", "G3", "A3", "B3", "C4", "D4", "E4", "F4", "G4", "A4", "B4", "C5", "D5", "E5",
            "F5", "G5", "A5"]

# (id, display name, description, 21-string pitches, 22-string pitches, cents template)
_PRESET_DEFINITIONS: list[tuple[str, str, str, list[str], list[str], dict[str, float]]] = [
    (
        "hardino",
        "Hardino",
        "Traditional Hardino map in concert-F reference (equal-tempered nominal notes).",
        ["F2", "C3", "D3", "E3", *_UPPER_BB],
        ["F2", "Bb2", "C3", "D3", "E3", *_UPPER_BB],
        _HARDINO_CENTS,
    ),
    (
        "sauta",
        "Sauta",
        "Traditional Sauta map (raised 4th degree) in concert-F reference.",
        ["F2", "C3", "D3", "E3", *_UPPER_B],
        ["F2", "B2", "C3", "D3", "E3", *_UPPER_B],
        _SAUTA_CENTS,
    ),
    (
        "silaba",
        "Silaba",
        "Traditional Silaba map (Tomora Ba family) in concert-F reference.",
        ["F2", "C3", "D3", "E3", *_UPPER_BB],
        ["F2", "Bb2", "C3", "D3", "E3", *_UPPER_BB],
        _SILABA_CENTS,
    ),
    (
        "tomora_ba",
        "Tomora Ba",
        "Traditional Tomora Ba map in concert-F reference.",
        ["F2", "C3", "D3", "E3", *_UPPER_BB],
        ["F2", "Bb2", "C3", "D3", "E3", *_UPPER_BB],
        _SILABA_CENTS,
    ),
]


def presets_for_string_count(string_count: int) -> list[TraditionalPreset]:
    """
    Return the traditional presets available for a 21- or 22-string kora.

    Raises:
        ValueError: For any other string count.
    """
    if string_count not in SUPPORTED_STRING_COUNTS:
        raise ValueError("Supported string counts are 21 and 22.")

    presets: list[TraditionalPreset] = []
    for preset_id, name, description, pitches_21, pitches_22, cents in _PRESET_DEFINITIONS:
        pitches = tuple(_parse_pitch(p) for p in (pitches_21 if string_count == 21 else pitches_22))
        presets.append(
            TraditionalPreset(
                id=f"{preset_id}_{string_count}",
                display_name=name,
                description=description,
                string_count=string_count,
                open_pitches=pitches,
                open_intonation_cents=tuple(cents.get(p.note.symbol, 0.0) for p in pitches),
                closed_intonation_cents=tuple(
                    cents.get(p.plus_semitones(1).note.symbol, 0.0) for p in pitches
                ),
            )
        )
    return presets


def preset_by_id(preset_id: str) -> TraditionalPreset:
    """
    Look up a preset by its full id, e.g. ``"sauta_21"``.

    Raises:
        ValueError: If no preset has that id.
    """
    for string_count in sorted(SUPPORTED_STRING_COUNTS):
        for preset in presets_for_string_count(string_count):
            if preset.id == preset_id:
                return preset
    raise ValueError(f"Unknown preset '{preset_id}'.")
