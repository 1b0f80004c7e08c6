"""Unit tests for instrument profiles, presets and the string layout."""

import pytest

from koratune.instrument import InstrumentProfile, preset_by_id, presets_for_string_count
from koratune.layout import DEFAULT_LAYOUT, StringRole, StringSide
from koratune.pitch import NoteName, Pitch


def test_closed_pitch_is_one_semitone_above_open() -> None:
    profile = preset_by_id("hardino_22").to_instrument_profile()
    for string in profile.strings:
        assert string.closed_pitch.absolute_semitone() == string.open_pitch.absolute_semitone() + 1


def test_transposed_string_keeps_lever_invariant() -> None:
    string = preset_by_id("sauta_21").to_instrument_profile().strings[7]
    moved = string.transposed(-5)
    assert moved.open_pitch == string.open_pitch.plus_semitones(-5)
    assert moved.closed_pitch.absolute_semitone() == moved.open_pitch.absolute_semitone() + 1
    assert moved.open_intonation_cents == string.open_intonation_cents


def test_transposed_by_zero_returns_same_string() -> None:
    string = preset_by_id("sauta_21").to_instrument_profile().strings[0]
    assert string.transposed(0) is string


def test_profile_numbers_strings_from_one() -> None:
    profile = InstrumentProfile.from_text(["F2", "C3", "D3"])
    assert [s.string_number for s in profile.strings] == [1, 2, 3]
    assert profile.open_intonation_cents == (0.0, 0.0, 0.0)


def test_profile_rejects_count_mismatch() -> None:
    with pytest.raises(ValueError, match="Open tuning count"):
        InstrumentProfile(string_count=21, open_pitches=(Pitch(NoteName.F, 2),))


def test_profile_rejects_non_finite_cents() -> None:
    with pytest.raises(ValueError, match="finite"):
        InstrumentProfile(
            string_count=1,
            open_pitches=(Pitch(NoteName.F, 2),),
            open_intonation_cents=(float("nan"),),
        )


def test_profile_rejects_invalid_pitch_text() -> None:
    with pytest.raises(ValueError, match="Invalid pitch 'H2'"):
        InstrumentProfile.from_text(["F2", "H2"])


def test_closed_lever_enabled_by_default() -> None:
    assert InstrumentProfile.from_text(["F2"]).closed_lever_enabled is True


def test_presets_cover_both_sizes() -> None:
    for count in (21, 22):
        presets = presets_for_string_count(count)
        assert [p.id for p in presets] == [
            f"hardino_{count}",
            f"sauta_{count}",
            f"silaba_{count}",
            f"tomora_ba_{count}",
        ]
        assert all(len(p.open_pitches) == count for p in presets)


def test_presets_reject_unsupported_size() -> None:
    with pytest.raises(ValueError):
        presets_for_string_count(19)


def test_preset_intonation_template() -> None:
    hardino = preset_by_id("hardino_21")
    # string 6 is G3: open G is -15 cents, closed G# is not in the template
    assert hardino.open_pitches[5] == Pitch(NoteName.G, 3)
    assert hardino.open_intonation_cents[5] == -15.0
    assert hardino.closed_intonation_cents[5] == 0.0
    # string 4 is E3: closed F is 0 cents, open E is +5
    assert hardino.open_intonation_cents[3] == 5.0
    assert hardino.closed_intonation_cents[3] == 0.0


def test_unknown_preset_id() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        preset_by_id("hardino_23")


def test_layout_roles_for_21_strings() -> None:
    assert DEFAULT_LAYOUT.role_for(21, 1) == StringRole(StringSide.LEFT, 1)
    assert DEFAULT_LAYOUT.role_for(21, 2) == StringRole(StringSide.LEFT, 2)
    assert DEFAULT_LAYOUT.role_for(21, 5) == StringRole(StringSide.RIGHT, 1)
    assert DEFAULT_LAYOUT.role_for(21, 21) == StringRole(StringSide.RIGHT, 10)


def test_layout_roles_for_22_strings() -> None:
    assert DEFAULT_LAYOUT.role_for(22, 2) == StringRole(StringSide.RIGHT, 1)
    assert DEFAULT_LAYOUT.role_for(22, 3) == StringRole(StringSide.LEFT, 2)
    assert DEFAULT_LAYOUT.left_order(22)[0] == 1


def test_layout_fallback_for_unlisted_count() -> None:
    assert DEFAULT_LAYOUT.left_order(5) == (1, 3, 5)
    assert DEFAULT_LAYOUT.right_order(5) == (2, 4)
    assert DEFAULT_LAYOUT.role_for(5, 5) == StringRole(StringSide.LEFT, 3)
    assert DEFAULT_LAYOUT.role_for(5, 4) == StringRole(StringSide.RIGHT, 2)


def test_role_label() -> None:
    assert StringRole(StringSide.RIGHT, 10).as_label() == "R10"
