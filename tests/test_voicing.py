"""Unit tests for voicing conflict detection and suggestions."""

from builders import profile_with_pitches

from koratune.engine import resolve
from koratune.layout import DEFAULT_LAYOUT, StringRole, StringSide
from koratune.models import (
    EngineMode,
    LeverOnlyStringResult,
    LeverOption,
    LeverState,
    VoicingConflict,
)
from koratune.pitch import NoteName, Pitch
from koratune.scales import ScaleType
from koratune.voicing import build_suggestions, detect_conflicts


def _lever_only(string_number: int, position: int, pitch: str | None) -> LeverOnlyStringResult:
    selected = Pitch.parse(pitch) if pitch else None
    open_pitch = selected or Pitch(NoteName.C, 4)
    return LeverOnlyStringResult(
        string_number=string_number,
        role=StringRole(StringSide.LEFT, position),
        open_pitch=open_pitch,
        closed_pitch=open_pitch.plus_semitones(1),
        selected_lever_state=LeverState.OPEN if selected else None,
        selected_pitch=selected,
        peg_retune_required=selected is None,
    )


def test_equal_neighbours_produce_one_conflict() -> None:
    # string 2 duplicates the left bass F2
    result = resolve(profile_with_pitches({2: "F2"}), NoteName.F, ScaleType.MAJOR)
    lever_conflicts = [c for c in result.conflicts if c.mode is EngineMode.LEVER_ONLY]
    assert lever_conflicts == [
        VoicingConflict(
            mode=EngineMode.LEVER_ONLY,
            side=StringSide.LEFT,
            lower_string_number=1,
            higher_string_number=2,
            detail="Pitch crossing detected on L side.",
        )
    ]
    assert [c.mode for c in result.conflicts] == [EngineMode.LEVER_ONLY, EngineMode.PEG_CORRECT]


def test_unfixable_lever_conflict_gets_generic_suggestion() -> None:
    result = resolve(profile_with_pitches({2: "F2"}), NoteName.F, ScaleType.MAJOR)
    assert [s.mode for s in result.suggestions] == [EngineMode.LEVER_ONLY, EngineMode.PEG_CORRECT]
    assert result.suggestions[0].suggestion == (
        "Use peg-correct mode or choose a different root/scale to remove L-side crossing."
    )
    assert result.suggestions[1].suggestion == (
        "Try transposing the musical center and recalculate to avoid peg-correct voicing crossings."
    )


def test_lever_swap_suggested_for_higher_string() -> None:
    # In the chromatic scale string 2 could close to F#2, above the bass F2.
    result = resolve(profile_with_pitches({2: "F2"}), NoteName.F, ScaleType.CHROMATIC)
    assert result.suggestions[0].mode is EngineMode.LEVER_ONLY
    assert result.suggestions[0].suggestion == (
        "Set string 2 to CLOSED to preserve L-side ascending order."
    )


def test_swap_must_be_strictly_higher() -> None:
    # Closing E2 only reaches F2, which still does not rise above the bass.
    result = resolve(profile_with_pitches({2: "E2"}), NoteName.F, ScaleType.CHROMATIC)
    assert result.suggestions[0].suggestion.startswith("Use peg-correct mode")


def test_conflicts_are_side_local() -> None:
    # Crossings on both sides: string 2 (L2) and string 7 (R2).
    result = resolve(profile_with_pitches({2: "E2", 7: "E3"}), NoteName.F, ScaleType.CHROMATIC)
    sides = {c.side for c in result.conflicts}
    assert sides == {StringSide.LEFT, StringSide.RIGHT}
    for conflict in result.conflicts:
        for string_number in (conflict.lower_string_number, conflict.higher_string_number):
            assert DEFAULT_LAYOUT.role_for(21, string_number).side is conflict.side


def test_missing_pitch_is_never_compared() -> None:
    rows = [
        _lever_only(1, 1, "C4"),
        _lever_only(2, 2, None),
        _lever_only(3, 3, "B3"),
    ]
    assert detect_conflicts(rows, EngineMode.LEVER_ONLY) == []


def test_lower_pitch_counts_as_crossing() -> None:
    rows = [_lever_only(3, 2, "B3"), _lever_only(1, 1, "C4")]
    conflicts = detect_conflicts(rows, EngineMode.LEVER_ONLY)
    assert [(c.lower_string_number, c.higher_string_number) for c in conflicts] == [(1, 3)]


def test_no_conflicts_no_suggestions() -> None:
    assert build_suggestions([], [], [], {}) == []


def test_lever_swap_prefers_lower_string() -> None:
    # String 1 sits on CLOSED C#4, level with string 3; opening it restores order.
    lower = LeverOnlyStringResult(
        string_number=1,
        role=StringRole(StringSide.LEFT, 1),
        open_pitch=Pitch(NoteName.C, 4),
        closed_pitch=Pitch(NoteName.C_SHARP, 4),
        selected_lever_state=LeverState.CLOSED,
        selected_pitch=Pitch(NoteName.C_SHARP, 4),
        peg_retune_required=False,
    )
    higher = _lever_only(3, 2, "C#4")
    conflicts = detect_conflicts([lower, higher], EngineMode.LEVER_ONLY)
    assert len(conflicts) == 1

    options = {
        1: (
            LeverOption(LeverState.OPEN, Pitch(NoteName.C, 4), 0.0),
            LeverOption(LeverState.CLOSED, Pitch(NoteName.C_SHARP, 4), 0.0),
        ),
        3: (
            LeverOption(LeverState.OPEN, Pitch(NoteName.C_SHARP, 4), 0.0),
            LeverOption(LeverState.CLOSED, Pitch(NoteName.D, 4), 0.0),
        ),
    }
    suggestions = build_suggestions(conflicts, [], [lower, higher], options)
    assert [s.suggestion for s in suggestions] == [
        "Set string 1 to OPEN to preserve L-side ascending order."
    ]
