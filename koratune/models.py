"""Data models for tuning resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, TypeVar

from koratune.instrument import InstrumentProfile
from koratune.layout import StringRole, StringSide
from koratune.pitch import NoteName, Pitch
from koratune.scales import ScaleType

T = TypeVar("T")


class LeverState(Enum):
    """Lever position. Member order is the selection preference: Open first."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"

    @property
    def penalty(self) -> int:
        return 0 if self is LeverState.OPEN else 1


class EngineMode(Enum):
    """Which result table a conflict or suggestion refers to."""

    LEVER_ONLY = "LEVER_ONLY"
    PEG_CORRECT = "PEG_CORRECT"


@dataclass(frozen=True)
class LeverOption:
    """A lever position whose pitch belongs to the target set."""

    lever_state: LeverState
    pitch: Pitch
    intonation_cents: float


@dataclass(frozen=True)
class ScaleCalculationRequest:
    """Instrument plus the musical target to resolve against it."""

    instrument_profile: InstrumentProfile
    root_note: NoteName
    scale_type: ScaleType | None = None


@dataclass(frozen=True)
class LeverOnlyStringResult:
    """
    Outcome of tuning one string with its lever alone.

    ``selected_lever_state`` and ``selected_pitch`` are ``None`` when neither
    lever position sounds a target note; ``peg_retune_required`` is then True.
    """

    string_number: int
    role: StringRole
    open_pitch: Pitch
    closed_pitch: Pitch
    selected_lever_state: LeverState | None
    selected_pitch: Pitch | None
    peg_retune_required: bool
    selected_intonation_cents: float = 0.0


@dataclass(frozen=True)
class PegCorrectStringResult:
    """
    Outcome of tuning one string when peg changes are allowed.

    Always playable. ``peg_retune_semitones`` is the signed move of the open
    pitch (retuned minus original); zero when the lever alone was enough.
    """

    string_number: int
    role: StringRole
    original_open_pitch: Pitch
    original_closed_pitch: Pitch
    retuned_open_pitch: Pitch
    retuned_closed_pitch: Pitch
    selected_lever_state: LeverState
    selected_pitch: Pitch
    peg_retune_semitones: int
    peg_retune_required: bool
    selected_intonation_cents: float = 0.0


@dataclass(frozen=True)
class VoicingConflict:
    """Two neighbouring strings on one side whose pitches do not ascend."""

    mode: EngineMode
    side: StringSide
    lower_string_number: int
    higher_string_number: int
    detail: str


@dataclass(frozen=True)
class VoicingSuggestion:
    mode: EngineMode
    suggestion: str


@dataclass(frozen=True)
class ScaleCalculationResult:
    """Everything the engine computes for one request."""

    request: ScaleCalculationRequest
    scale_notes: tuple[NoteName, ...]
    lever_only_table: tuple[LeverOnlyStringResult, ...]
    peg_correct_table: tuple[PegCorrectStringResult, ...]
    conflicts: tuple[VoicingConflict, ...]
    suggestions: tuple[VoicingSuggestion, ...]


def sort_by_role(rows: Iterable[T], role_of: Callable[[T], StringRole]) -> list[T]:
    """Canonical display order: Left side before Right, then low to high."""
    return sorted(rows, key=lambda row: role_of(row).sort_key())
