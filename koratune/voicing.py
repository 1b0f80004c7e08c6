"""Voicing conflict detection and lever-swap suggestions."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence, TypeVar, Union

from koratune.layout import StringSide
from koratune.models import (
    EngineMode,
    LeverOnlyStringResult,
    LeverOption,
    PegCorrectStringResult,
    VoicingConflict,
    VoicingSuggestion,
)

logger = logging.getLogger(__name__)

Row = TypeVar("Row", bound=Union[LeverOnlyStringResult, PegCorrectStringResult])


def detect_conflicts(rows: Sequence[Row], mode: EngineMode) -> list[VoicingConflict]:
    """
    Find adjacent strings on the same side whose selected pitches do not ascend.

    Each side is scanned from its lowest position upward. A pair is a conflict
    when both strings have a selected pitch and the higher-position string is
    equal to or below the lower one. Only direct neighbours are compared, so a
    string without a selected pitch is never bridged over.

    Args:
        rows: Lever-only or peg-correct result rows, any order.
        mode: Which table ``rows`` came from; copied into each conflict.

    Returns:
        Conflicts for the Left side first, then the Right side.
    """
    conflicts: list[VoicingConflict] = []
    for side in StringSide:
        side_rows = sorted(
            (row for row in rows if row.role.side is side),
            key=lambda row: row.role.position_from_low,
        )
        for previous, current in zip(side_rows, side_rows[1:]):
            if previous.selected_pitch is None or current.selected_pitch is None:
                continue
            if current.selected_pitch <= previous.selected_pitch:
                conflicts.append(
                    VoicingConflict(
                        mode=mode,
                        side=side,
                        lower_string_number=previous.string_number,
                        higher_string_number=current.string_number,
                        detail=f"Pitch crossing detected on {side.short_label} side.",
                    )
                )

    logger.debug("%s: %d voicing conflict(s)", mode.name, len(conflicts))
    return conflicts


def build_suggestions(
    lever_conflicts: Sequence[VoicingConflict],
    peg_conflicts: Sequence[VoicingConflict],
    lever_rows: Sequence[LeverOnlyStringResult],
    lever_options: Mapping[int, Sequence[LeverOption]],
) -> list[VoicingSuggestion]:
    """
    Propose fixes for the first lever-only conflict and flag peg-correct ones.

    Args:
        lever_conflicts: Conflicts found in the lever-only table.
        peg_conflicts:   Conflicts found in the peg-correct table.
        lever_rows:      The lever-only table.
        lever_options:   In-target lever options per string number.

    Returns:
        At most one lever-only suggestion followed by at most one
        peg-correct suggestion.
    """
    suggestions: list[VoicingSuggestion] = []
    rows_by_string = {row.string_number: row for row in lever_rows}

    if lever_conflicts:
        conflict = lever_conflicts[0]
        swap = _suggest_lever_swap(
            rows_by_string.get(conflict.lower_string_number),
            rows_by_string.get(conflict.higher_string_number),
            conflict.side,
            lever_options,
        )
        suggestions.append(
            swap
            or VoicingSuggestion(
                mode=EngineMode.LEVER_ONLY,
                suggestion=(
                    "Use peg-correct mode or choose a different root/scale to remove "
                    f"{conflict.side.short_label}-side crossing."
                ),
            )
        )

    if peg_conflicts:
        suggestions.append(
            VoicingSuggestion(
                mode=EngineMode.PEG_CORRECT,
                suggestion=(
                    "Try transposing the musical center and recalculate to avoid "
                    "peg-correct voicing crossings."
                ),
            )
        )

    return suggestions


def _suggest_lever_swap(
    lower: LeverOnlyStringResult | None,
    higher: LeverOnlyStringResult | None,
    side: StringSide,
    lever_options: Mapping[int, Sequence[LeverOption]],
) -> VoicingSuggestion | None:
    """Try flipping the lower string's lever, then the higher string's."""
    if lower is None or higher is None:
        return None
    if lower.selected_pitch is None or higher.selected_pitch is None:
        return None

    for option in lever_options.get(lower.string_number, ()):
        if option.lever_state is not lower.selected_lever_state and option.pitch < higher.selected_pitch:
            return _swap_suggestion(lower.string_number, option, side)

    for option in lever_options.get(higher.string_number, ()):
        if option.lever_state is not higher.selected_lever_state and option.pitch > lower.selected_pitch:
            return _swap_suggestion(higher.string_number, option, side)

    return None


def _swap_suggestion(string_number: int, option: LeverOption, side: StringSide) -> VoicingSuggestion:
    return VoicingSuggestion(
        mode=EngineMode.LEVER_ONLY,
        suggestion=(
            f"Set string {string_number} to {option.lever_state.name} "
            f"to preserve {side.short_label}-side ascending order."
        ),
    )
