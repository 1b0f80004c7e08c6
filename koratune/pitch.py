"""Pitch arithmetic: pitch classes, octave-qualified pitches and transposition."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

# ── Constants ────────────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12

_PITCH_PATTERN = re.compile(r"^([A-Ga-g])([#bB]?)(-?\d+)$")

_NATURAL_SEMITONES: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}


class NoteName(Enum):
    """The twelve pitch classes, spelled with sharps."""

    C = (0, "C")
    C_SHARP = (1, "C#")
    D = (2, "D")
    D_SHARP = (3, "D#")
    E = (4, "E")
    F = (5, "F")
    F_SHARP = (6, "F#")
    G = (7, "G")
    G_SHARP = (8, "G#")
    A = (9, "A")
    A_SHARP = (10, "A#")
    B = (11, "B")

    def __init__(self, semitone: int, symbol: str) -> None:
        self.semitone = semitone
        self.symbol = symbol

    @classmethod
    def from_semitone(cls, value: int) -> NoteName:
        """Return the pitch class for any integer, wrapping modulo 12."""
        return _NOTES_BY_SEMITONE[value % SEMITONES_PER_OCTAVE]

    @classmethod
    def from_symbol(cls, symbol: str) -> NoteName:
        """
        Look up a pitch class by name (``"C#"``, ``"Db"``, ``"f"``).

        Raises:
            ValueError: If the symbol is not a note name.
        """
        pitch = Pitch.parse(f"{symbol.strip()}4")
        if pitch is None:
            raise ValueError(f"Unknown note name '{symbol}'.")
        return pitch.note

    def __str__(self) -> str:
        return self.symbol


_NOTES_BY_SEMITONE: dict[int, NoteName] = {note.semitone: note for note in NoteName}


@dataclass(frozen=True, order=False)
class Pitch:
    """
    A pitch class in a concrete octave.

    Pitches are totally ordered by their absolute semitone
    (``octave * 12 + pitch_class``), so ``B3 < C4``.

    Attributes:
        note:   Pitch class.
        octave: Scientific octave number (C4 is middle C).
    """

    note: NoteName
    octave: int

    def absolute_semitone(self) -> int:
        return self.octave * SEMITONES_PER_OCTAVE + self.note.semitone

    def plus_semitones(self, semitones: int) -> Pitch:
        """Transpose by a signed number of semitones, carrying the octave."""
        return Pitch.from_absolute(self.absolute_semitone() + semitones)

    def midi_number(self) -> int:
        """MIDI note number for this pitch (C-1 = 0, C4 = 60)."""
        return (self.octave + 1) * SEMITONES_PER_OCTAVE + self.note.semitone

    def as_text(self) -> str:
        return f"{self.note.symbol}{self.octave}"

    def __str__(self) -> str:
        return self.as_text()

    def __lt__(self, other: Pitch) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.absolute_semitone() < other.absolute_semitone()

    def __le__(self, other: Pitch) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.absolute_semitone() <= other.absolute_semitone()

    def __gt__(self, other: Pitch) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.absolute_semitone() > other.absolute_semitone()

    def __ge__(self, other: Pitch) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.absolute_semitone() >= other.absolute_semitone()

    @classmethod
    def from_absolute(cls, value: int) -> Pitch:
        """Inverse of :meth:`absolute_semitone`, using floor division."""
        octave, semitone = divmod(value, SEMITONES_PER_OCTAVE)
        return cls(note=NoteName.from_semitone(semitone), octave=octave)

    @classmethod
    def parse(cls, value: str) -> Pitch | None:
        """
        Parse scientific pitch notation such as ``"F2"``, ``"Bb3"`` or ``"C#-1"``.

        Flats are resolved to their sharp spelling; an accidental that crosses
        the B/C boundary carries into the neighbouring octave (``Cb4`` is
        ``B3``, ``B#3`` is ``C4``).

        Returns:
            The parsed pitch, or ``None`` if the text is not a valid pitch.
        """
        match = _PITCH_PATTERN.match(value.strip())
        if match is None:
            return None

        letter, accidental, octave_text = match.groups()
        semitone = _NATURAL_SEMITONES[letter.upper()]
        if accidental == "#":
            semitone += 1
        elif accidental in ("b", "B"):
            semitone -= 1

        return cls.from_absolute(int(octave_text) * SEMITONES_PER_OCTAVE + semitone)


def circular_semitone_distance(first: int, second: int) -> int:
    """Shortest distance between two pitch classes around the circle of 12."""
    delta = abs(first - second) % SEMITONES_PER_OCTAVE
    return min(delta, SEMITONES_PER_OCTAVE - delta)
