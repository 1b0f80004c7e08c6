"""Unit tests for pitch arithmetic."""

import pytest

from koratune.pitch import NoteName, Pitch, circular_semitone_distance


def test_parse_accepts_sharp_and_flat_inputs() -> None:
    assert Pitch.parse("C#4") == Pitch(NoteName.C_SHARP, 4)
    assert Pitch.parse("Db4") == Pitch(NoteName.C_SHARP, 4)
    assert Pitch.parse(" bb3 ") == Pitch(NoteName.A_SHARP, 3)


def test_parse_rolls_accidentals_across_octave_boundary() -> None:
    assert Pitch.parse("Cb4") == Pitch(NoteName.B, 3)
    assert Pitch.parse("B#3") == Pitch(NoteName.C, 4)


def test_parse_returns_none_for_invalid_pitch() -> None:
    assert Pitch.parse("H2") is None
    assert Pitch.parse("A#") is None
    assert Pitch.parse("") is None


def test_parse_negative_octave() -> None:
    pitch = Pitch.parse("C-1")
    assert pitch == Pitch(NoteName.C, -1)
    assert pitch is not None and pitch.midi_number() == 0


def test_plus_semitones_rolls_over_octave() -> None:
    assert Pitch(NoteName.B, 3).plus_semitones(1) == Pitch(NoteName.C, 4)
    assert Pitch(NoteName.C, 4).plus_semitones(-1) == Pitch(NoteName.B, 3)
    assert Pitch(NoteName.F, 2).plus_semitones(-17) == Pitch(NoteName.C, 1)


def test_absolute_semitone_and_ordering() -> None:
    b3 = Pitch(NoteName.B, 3)
    c4 = Pitch(NoteName.C, 4)
    assert c4.absolute_semitone() == 48
    assert b3 < c4
    assert c4 >= b3
    assert sorted([c4, b3]) == [b3, c4]


def test_from_absolute_handles_negative_values() -> None:
    assert Pitch.from_absolute(-1) == Pitch(NoteName.B, -1)


def test_note_name_from_semitone_wraps() -> None:
    assert NoteName.from_semitone(-1) is NoteName.B
    assert NoteName.from_semitone(14) is NoteName.D


def test_note_name_from_symbol() -> None:
    assert NoteName.from_symbol("Bb") is NoteName.A_SHARP
    assert NoteName.from_symbol("f#") is NoteName.F_SHARP
    with pytest.raises(ValueError):
        NoteName.from_symbol("X")


def test_as_text_uses_sharp_spelling() -> None:
    assert str(Pitch(NoteName.A_SHARP, 3)) == "A#3"


def test_circular_semitone_distance() -> None:
    assert circular_semitone_distance(0, 7) == 5
    assert circular_semitone_distance(11, 1) == 2
    assert circular_semitone_distance(4, 4) == 0
    assert circular_semitone_distance(0, 6) == 6
