"""Scale interval tables and target pitch-class set resolution."""

from __future__ import annotations

from enum import Enum

from koratune.pitch import NoteName


class ScaleType(Enum):
    """Supported scales as (display name, semitone intervals above the root)."""

    MAJOR = ("Major (Heptatonic)", (0, 2, 4, 5, 7, 9, 11))
    NATURAL_MINOR = ("Natural Minor (Heptatonic)", (0, 2, 3, 5, 7, 8, 10))
    HARMONIC_MINOR = ("Harmonic Minor (Heptatonic)", (0, 2, 3, 5, 7, 8, 11))
    MELODIC_MINOR = ("Melodic Minor (Heptatonic)", (0, 2, 3, 5, 7, 9, 11))

    IONIAN = ("Ionian (Mode 1)", (0, 2, 4, 5, 7, 9, 11))
    DORIAN = ("Dorian (Mode 2)", (0, 2, 3, 5, 7, 9, 10))
    PHRYGIAN = ("Phrygian (Mode 3)", (0, 1, 3, 5, 7, 8, 10))
    LYDIAN = ("Lydian (Mode 4)", (0, 2, 4, 6, 7, 9, 11))
    MIXOLYDIAN = ("Mixolydian (Mode 5)", (0, 2, 4, 5, 7, 9, 10))
    AEOLIAN = ("Aeolian (Mode 6)", (0, 2, 3, 5, 7, 8, 10))
    LOCRIAN = ("Locrian (Mode 7)", (0, 1, 3, 5, 6, 8, 10))

    MAJOR_PENTATONIC = ("Major Pentatonic", (0, 2, 4, 7, 9))
    MINOR_PENTATONIC = ("Minor Pentatonic", (0, 3, 5, 7, 10))

    MAJOR_HEXATONIC = ("Major Hexatonic", (0, 2, 4, 5, 7, 9))
    MINOR_HEXATONIC = ("Minor Hexatonic", (0, 2, 3, 5, 7, 10))
    WHOLE_TONE = ("Whole Tone (Hexatonic)", (0, 2, 4, 6, 8, 10))
    MAJOR_BLUES = ("Major Blues (Hexatonic)", (0, 2, 3, 4, 7, 9))
    MINOR_BLUES = ("Minor Blues (Hexatonic)", (0, 3, 5, 6, 7, 10))

    BEBOP_MAJOR = ("Bebop Major", (0, 2, 4, 5, 7, 8, 9, 11))
    BEBOP_DOMINANT = ("Bebop Dominant", (0, 2, 4, 5, 7, 9, 10, 11))
    BEBOP_DORIAN = ("Bebop Dorian", (0, 2, 3, 4, 5, 7, 9, 10))

    DIMINISHED_WHOLE_HALF = ("Diminished Whole-Half (Octatonic)", (0, 2, 3, 5, 6, 8, 9, 11))
    DIMINISHED_HALF_WHOLE = ("Diminished Half-Whole (Octatonic)", (0, 1, 3, 4, 6, 7, 9, 10))

    CHROMATIC = ("Chromatic", tuple(range(12)))

    def __init__(self, display_name: str, intervals: tuple[int, ...]) -> None:
        self.display_name = display_name
        self.intervals = intervals

    def notes_for_root(self, root: NoteName) -> tuple[NoteName, ...]:
        """Pitch classes of this scale on ``root``, in interval order."""
        return notes_from_offsets(root, self.intervals)


def notes_from_offsets(root: NoteName, offsets: tuple[int, ...] | list[int]) -> tuple[NoteName, ...]:
    """Apply semitone offsets to a root; duplicates collapse, first occurrence wins."""
    notes = (NoteName.from_semitone(root.semitone + offset) for offset in offsets)
    return tuple(dict.fromkeys(notes))
