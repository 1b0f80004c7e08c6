"""koratune: lever and peg tuning planner for the 21/22-string kora."""

from koratune.chords import (
    ChordDefinition,
    ChordMatch,
    ChordQuality,
    ChordTone,
    analyze_chord,
    best_chord_matches,
    choose_chord_strings,
    suggest_stable_chord,
)
from koratune.engine import ScaleCalculationEngine, resolve, resolve_for_notes
from koratune.instrument import InstrumentProfile, StringTuning, presets_for_string_count
from koratune.layout import DEFAULT_LAYOUT, StringLayout, StringRole, StringSide
from koratune.models import (
    EngineMode,
    LeverOnlyStringResult,
    LeverState,
    PegCorrectStringResult,
    ScaleCalculationRequest,
    ScaleCalculationResult,
    VoicingConflict,
    VoicingSuggestion,
)
from koratune.pitch import NoteName, Pitch
from koratune.scales import ScaleType

__version__ = "0.1.0"

__all__ = [
    "ChordDefinition",
    "ChordMatch",
    "ChordQuality",
    "ChordTone",
    "DEFAULT_LAYOUT",
    "EngineMode",
    "InstrumentProfile",
    "LeverOnlyStringResult",
    "LeverState",
    "NoteName",
    "PegCorrectStringResult",
    "Pitch",
    "ScaleCalculationEngine",
    "ScaleCalculationRequest",
    "ScaleCalculationResult",
    "ScaleType",
    "StringLayout",
    "StringRole",
    "StringSide",
    "StringTuning",
    "VoicingConflict",
    "VoicingSuggestion",
    "analyze_chord",
    "best_chord_matches",
    "choose_chord_strings",
    "presets_for_string_count",
    "resolve",
    "resolve_for_notes",
    "suggest_stable_chord",
]
