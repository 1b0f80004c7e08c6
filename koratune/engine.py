"""ScaleCalculationEngine: resolves a scale onto a kora's levers and pegs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection, Sequence

from koratune.instrument import InstrumentProfile, StringTuning
from koratune.layout import DEFAULT_LAYOUT, StringLayout
from koratune.models import (
    EngineMode,
    LeverOnlyStringResult,
    LeverOption,
    LeverState,
    PegCorrectStringResult,
    ScaleCalculationRequest,
    ScaleCalculationResult,
    sort_by_role,
)
from koratune.pitch import SEMITONES_PER_OCTAVE, NoteName, Pitch
from koratune.scales import ScaleType
from koratune.voicing import build_suggestions, detect_conflicts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetuneCandidate:
    retuned_open_absolute: int
    lever_state: LeverState
    distance: int

    def rank(self) -> tuple[int, int, int]:
        return (self.distance, self.lever_state.penalty, self.retuned_open_absolute)


class ScaleCalculationEngine:
    """
    Computes lever-only and peg-correct tunings for a kora and a target scale.

    Algorithm overview
    ------------------
    1. **Root anchoring** – The whole instrument is transposed rigidly so that
       the lowest Left-side string lands on the chosen root. The shift is
       folded into (-6, +6] semitones so the instrument moves the short way.

    2. **Lever-only** – Each string keeps its pitch and may only choose a lever
       position whose pitch class is in the target set. Open wins over Closed.
       Strings with no matching position are flagged for a peg retune.

    3. **Peg-correct** – Strings that failed step 2 are retuned to the nearest
       target note within two octaves, either landing the open pitch on the
       note or landing the closed pitch on it (open one semitone below). Ties
       prefer Open, then the lower retuned pitch.

    4. **Voicing check** – Both tables are scanned for pitch crossings on each
       side and lever-swap suggestions are generated.
    """

    #: Octaves searched on either side of the original open pitch.
    SEARCH_OCTAVES = 2

    #: Largest transpose applied by root anchoring; larger shifts go the other way.
    MAX_ANCHOR_SHIFT = 6

    def __init__(self, layout: StringLayout = DEFAULT_LAYOUT) -> None:
        """
        Args:
            layout: Topology used to place each string on a side and position.
        """
        self.layout = layout

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _anchor_transpose(self, profile: InstrumentProfile, root: NoteName) -> int:
        """Semitones that move the lowest Left string's pitch class onto ``root``."""
        strings = profile.strings
        left_order = self.layout.left_order(profile.string_count)
        bass_number = left_order[0] if left_order else 1
        bass = next((s for s in strings if s.string_number == bass_number), strings[0])

        delta = (root.semitone - bass.open_pitch.note.semitone) % SEMITONES_PER_OCTAVE
        if delta > self.MAX_ANCHOR_SHIFT:
            delta -= SEMITONES_PER_OCTAVE
        return delta

    def _lever_options(
        self,
        string: StringTuning,
        target_notes: Collection[NoteName],
        closed_lever_enabled: bool,
    ) -> tuple[LeverOption, ...]:
        options: list[LeverOption] = []
        if string.open_pitch.note in target_notes:
            options.append(
                LeverOption(LeverState.OPEN, string.open_pitch, string.open_intonation_cents)
            )
        if closed_lever_enabled and string.closed_pitch.note in target_notes:
            options.append(
                LeverOption(LeverState.CLOSED, string.closed_pitch, string.closed_intonation_cents)
            )
        return tuple(options)

    @staticmethod
    def _select_lever_option(options: Sequence[LeverOption]) -> LeverOption | None:
        if not options:
            return None
        return min(options, key=lambda option: option.lever_state.penalty)

    def _best_retune(
        self,
        original_open: Pitch,
        target_notes: Collection[NoteName],
        closed_lever_enabled: bool,
    ) -> _RetuneCandidate:
        """
        Search nearby octaves for the cheapest retune that sounds a target note.

        Candidates are ranked by (distance, lever penalty, retuned open pitch),
        a total order, so the winner is unique.
        """
        original_absolute = original_open.absolute_semitone()
        best: _RetuneCandidate | None = None

        octaves = range(
            original_open.octave - self.SEARCH_OCTAVES,
            original_open.octave + self.SEARCH_OCTAVES + 1,
        )
        for octave in octaves:
            for note in target_notes:
                target_absolute = Pitch(note, octave).absolute_semitone()
                landings = [(target_absolute, LeverState.OPEN)]
                if closed_lever_enabled:
                    landings.append((target_absolute - 1, LeverState.CLOSED))

                for retuned_open, lever_state in landings:
                    candidate = _RetuneCandidate(
                        retuned_open_absolute=retuned_open,
                        lever_state=lever_state,
                        distance=abs(retuned_open - original_absolute),
                    )
                    if best is None or candidate.rank() < best.rank():
                        best = candidate

        assert best is not None, "Target notes must not be empty."
        return best

    def _lever_only_row(
        self,
        profile: InstrumentProfile,
        string: StringTuning,
        options: Sequence[LeverOption],
    ) -> LeverOnlyStringResult:
        selected = self._select_lever_option(options)
        return LeverOnlyStringResult(
            string_number=string.string_number,
            role=self.layout.role_for(profile.string_count, string.string_number),
            open_pitch=string.open_pitch,
            closed_pitch=string.closed_pitch,
            selected_lever_state=selected.lever_state if selected else None,
            selected_pitch=selected.pitch if selected else None,
            peg_retune_required=selected is None,
            selected_intonation_cents=selected.intonation_cents if selected else 0.0,
        )

    def _peg_correct_row(
        self,
        profile: InstrumentProfile,
        string: StringTuning,
        options: Sequence[LeverOption],
        target_notes: Collection[NoteName],
    ) -> PegCorrectStringResult:
        role = self.layout.role_for(profile.string_count, string.string_number)
        selected = self._select_lever_option(options)
        if selected is not None:
            return PegCorrectStringResult(
                string_number=string.string_number,
                role=role,
                original_open_pitch=string.open_pitch,
                original_closed_pitch=string.closed_pitch,
                retuned_open_pitch=string.open_pitch,
                retuned_closed_pitch=string.closed_pitch,
                selected_lever_state=selected.lever_state,
                selected_pitch=selected.pitch,
                peg_retune_semitones=0,
                peg_retune_required=False,
                selected_intonation_cents=selected.intonation_cents,
            )

        retune = self._best_retune(string.open_pitch, target_notes, profile.closed_lever_enabled)
        retuned_open = Pitch.from_absolute(retune.retuned_open_absolute)
        retuned_closed = retuned_open.plus_semitones(1)
        semitones = retune.retuned_open_absolute - string.open_pitch.absolute_semitone()

        return PegCorrectStringResult(
            string_number=string.string_number,
            role=role,
            original_open_pitch=string.open_pitch,
            original_closed_pitch=string.closed_pitch,
            retuned_open_pitch=retuned_open,
            retuned_closed_pitch=retuned_closed,
            selected_lever_state=retune.lever_state,
            selected_pitch=retuned_open if retune.lever_state is LeverState.OPEN else retuned_closed,
            peg_retune_semitones=semitones,
            peg_retune_required=semitones != 0,
            selected_intonation_cents=0.0,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def calculate_for_notes(
        self,
        request: ScaleCalculationRequest,
        target_notes: Sequence[NoteName],
    ) -> ScaleCalculationResult:
        """
        Resolve an instrument against an explicit target pitch-class set.

        Args:
            request:      Instrument and root note (the scale type is informational).
            target_notes: Allowed pitch classes; must not be empty.

        Returns:
            Both result tables in canonical role order, with conflicts and
            suggestions.

        Raises:
            ValueError: If ``target_notes`` is empty.
        """
        if not target_notes:
            raise ValueError("Target notes must not be empty.")

        profile = request.instrument_profile
        target_notes = tuple(dict.fromkeys(target_notes))
        transpose = self._anchor_transpose(profile, request.root_note)
        strings = [string.transposed(transpose) for string in profile.strings]
        logger.debug(
            "Anchoring %d-string profile on %s: transpose %+d",
            profile.string_count,
            request.root_note,
            transpose,
        )

        lever_rows: list[LeverOnlyStringResult] = []
        peg_rows: list[PegCorrectStringResult] = []
        options_by_string: dict[int, tuple[LeverOption, ...]] = {}
        for string in strings:
            options = self._lever_options(string, target_notes, profile.closed_lever_enabled)
            options_by_string[string.string_number] = options
            lever_rows.append(self._lever_only_row(profile, string, options))
            peg_rows.append(self._peg_correct_row(profile, string, options, target_notes))

        lever_table = sort_by_role(lever_rows, lambda row: row.role)
        peg_table = sort_by_role(peg_rows, lambda row: row.role)
        logger.debug(
            "%d string(s) need a peg retune",
            sum(1 for row in peg_table if row.peg_retune_required),
        )

        lever_conflicts = detect_conflicts(lever_table, EngineMode.LEVER_ONLY)
        peg_conflicts = detect_conflicts(peg_table, EngineMode.PEG_CORRECT)
        suggestions = build_suggestions(lever_conflicts, peg_conflicts, lever_table, options_by_string)

        return ScaleCalculationResult(
            request=request,
            scale_notes=target_notes,
            lever_only_table=tuple(lever_table),
            peg_correct_table=tuple(peg_table),
            conflicts=tuple(lever_conflicts + peg_conflicts),
            suggestions=tuple(suggestions),
        )

    def calculate(self, request: ScaleCalculationRequest) -> ScaleCalculationResult:
        """
        Resolve ``request.scale_type`` on ``request.root_note`` against the instrument.

        Raises:
            ValueError: If the request carries no scale type.
        """
        if request.scale_type is None:
            raise ValueError("A scale type is required; use calculate_for_notes for custom sets.")
        notes = request.scale_type.notes_for_root(request.root_note)
        return self.calculate_for_notes(request, notes)


# ── Functional entry points ──────────────────────────────────────────────────

def resolve(
    profile: InstrumentProfile,
    root: NoteName,
    scale: ScaleType,
    layout: StringLayout = DEFAULT_LAYOUT,
) -> ScaleCalculationResult:
    """Resolve a scale against an instrument. See :class:`ScaleCalculationEngine`."""
    engine = ScaleCalculationEngine(layout=layout)
    return engine.calculate(ScaleCalculationRequest(profile, root, scale))


def resolve_for_notes(
    profile: InstrumentProfile,
    root: NoteName,
    target_notes: Sequence[NoteName],
    layout: StringLayout = DEFAULT_LAYOUT,
) -> ScaleCalculationResult:
    """Resolve an already-computed pitch-class set (scale or chord tones)."""
    engine = ScaleCalculationEngine(layout=layout)
    return engine.calculate_for_notes(ScaleCalculationRequest(profile, root), target_notes)

