"""Unit tests for the chord planner."""

from builders import peg_row

from koratune.chords import (
    COMPLETE_CHORD_BONUS,
    ChordDefinition,
    ChordQuality,
    analyze_chord,
    best_chord_matches,
    choose_chord_strings,
    suggest_stable_chord,
)
from koratune.engine import resolve
from koratune.instrument import preset_by_id
from koratune.models import LeverState, PegCorrectStringResult
from koratune.pitch import NoteName, Pitch
from koratune.scales import ScaleType


def _sample_rows(*pitches: str) -> list[PegCorrectStringResult]:
    return [peg_row(index + 1, pitch) for index, pitch in enumerate(pitches)]


C_MAJOR = ChordDefinition(NoteName.C, ChordQuality.MAJOR)


def test_chord_definition_notes_and_label() -> None:
    definition = ChordDefinition(NoteName.A, ChordQuality.MINOR7)
    assert [n.symbol for n in definition.chord_notes] == ["A", "C", "E", "G"]
    assert definition.label == "A Minor 7"


def test_analyze_complete_chord_without_detune() -> None:
    match = analyze_chord(_sample_rows("C4", "E4", "G4", "D4"), C_MAJOR)
    assert match.is_complete
    assert match.uses_detuned_strings is False
    assert match.missing_notes == ()
    assert match.played_string_numbers == frozenset({1, 2, 3})
    assert match.open_play_count == 3
    # 120*3 - 0 + 5*3 - 0 - |3 - 6|
    assert match.score == 372


def test_analyze_counts_missing_and_detuned_strings() -> None:
    rows = [
        peg_row(1, "C4"),
        peg_row(2, "E4", lever=LeverState.CLOSED),
        peg_row(3, "C5", retune=-1),
    ]
    match = analyze_chord(rows, C_MAJOR)
    assert match.matched_notes == (NoteName.C, NoteName.E)
    assert match.missing_notes == (NoteName.G,)
    assert not match.is_complete
    assert match.uses_detuned_strings
    assert (match.open_play_count, match.closed_play_count, match.detuned_play_count) == (1, 1, 1)
    # 120*2 - 95*1 + 5*3 - 35*1 - |3 - 6|
    assert match.score == 122


def test_best_matches_rank_complete_chords_first() -> None:
    rows = _sample_rows("C3", "E3", "G3", "C4", "E4", "G4", "D5")
    matches = best_chord_matches(rows, limit=20)
    assert len(matches) == 20
    assert matches[0].definition == C_MAJOR
    ranking = [m.ranking_score for m in matches]
    assert ranking == sorted(ranking, reverse=True)
    # C Major, C Sus2 and G Sus4 are the only complete chords
    assert [m.is_complete for m in matches[:4]] == [True, True, True, False]


def test_best_matches_bonus_beats_raw_score() -> None:
    rows = _sample_rows("C4", "E4", "G4")
    match = analyze_chord(rows, C_MAJOR)
    assert match.ranking_score == match.score + COMPLETE_CHORD_BONUS


def test_best_matches_limit() -> None:
    rows = _sample_rows("C4", "E4", "G4")
    assert len(best_chord_matches(rows)) == 12
    assert len(best_chord_matches(rows, limit=200)) == 12 * len(ChordQuality)
    assert best_chord_matches(rows, limit=0) == []


def test_suggest_stable_chord_prefers_shared_notes_and_quality() -> None:
    rows = _sample_rows("C4", "E4", "G4", "A4")
    desired = ChordDefinition(NoteName.D, ChordQuality.MINOR)
    stable = suggest_stable_chord(rows, desired)
    assert stable is not None
    assert stable.definition == ChordDefinition(NoteName.A, ChordQuality.MINOR)


def test_suggest_stable_chord_returns_itself_when_playable() -> None:
    rows = _sample_rows("C4", "E4", "G4", "A4")
    stable = suggest_stable_chord(rows, C_MAJOR)
    assert stable is not None and stable.definition == C_MAJOR


def test_suggest_stable_chord_ignores_detuned_strings() -> None:
    rows = [peg_row(1, "C4", retune=1), peg_row(2, "E4", retune=1), peg_row(3, "G4", retune=1)]
    assert suggest_stable_chord(rows, C_MAJOR) is None


def test_choose_chord_strings_with_selected_offsets() -> None:
    rows = _sample_rows("E4", "B4", "C4", "E3", "G4", "B3")
    definition = ChordDefinition(NoteName.C, ChordQuality.MAJOR7)
    chosen = choose_chord_strings(rows, definition, included_offsets={4, 11}, max_notes=2)
    assert [r.selected_pitch for r in chosen] == [Pitch.parse("E3"), Pitch.parse("B3")]


def test_choose_chord_strings_covers_tones_before_doubling() -> None:
    rows = _sample_rows("C3", "C4", "E4", "G4", "C5", "E5")
    chosen = choose_chord_strings(rows, C_MAJOR)
    assert [r.selected_pitch.as_text() for r in chosen] == ["C3", "C4", "E4", "G4"]


def test_choose_chord_strings_coverage_limited_by_max_notes() -> None:
    rows = _sample_rows("C3", "E3", "G3", "C4")
    chosen = choose_chord_strings(rows, C_MAJOR, max_notes=2)
    assert [r.selected_pitch.as_text() for r in chosen] == ["C3", "E3"]


def test_choose_chord_strings_clamps_and_never_repeats() -> None:
    rows = _sample_rows("C3", "E3", "G3", "C4", "E4", "G4", "C5")
    chosen = choose_chord_strings(rows, C_MAJOR, max_notes=9)
    assert len(chosen) == 4
    assert len({r.string_number for r in chosen}) == 4


def test_choose_chord_strings_normalizes_negative_offsets() -> None:
    rows = _sample_rows("C4", "E4", "G4")
    chosen = choose_chord_strings(rows, C_MAJOR, included_offsets=[-8])
    assert [r.selected_pitch.as_text() for r in chosen] == ["E4"]


def test_choose_chord_strings_without_candidates() -> None:
    assert choose_chord_strings(_sample_rows("D4", "F4"), C_MAJOR) == []


def test_planner_on_resolved_tuning() -> None:
    result = resolve(preset_by_id("hardino_21").to_instrument_profile(), NoteName.F, ScaleType.MAJOR)
    f_major = analyze_chord(result.peg_correct_table, ChordDefinition(NoteName.F, ChordQuality.MAJOR))
    assert f_major.is_complete
    assert not f_major.uses_detuned_strings

    grip = choose_chord_strings(result.peg_correct_table, f_major.definition)
    assert [r.selected_pitch.as_text() for r in grip] == ["F2", "C3", "F3", "A3"]
