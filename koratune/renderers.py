"""Renderer implementations for tuning and chord reports."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Final, Sequence

from koratune.chords import ChordMatch
from koratune.models import ScaleCalculationResult
from koratune.pitch import NoteName, Pitch

SUPPORTED_FORMATS: Final[set[str]] = {"text", "json"}


def _to_payload(value: Any) -> Any:
    """Convert result objects into JSON-compatible structures."""
    if isinstance(value, Pitch):
        return value.as_text()
    if isinstance(value, NoteName):
        return value.symbol
    if isinstance(value, Enum):
        return value.name
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_payload(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, frozenset):
        return sorted(_to_payload(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_to_payload(item) for item in value]
    return value


def _pitch_text(pitch: Pitch | None) -> str:
    return pitch.as_text() if pitch is not None else "-"


class ReportRenderer(ABC):
    """Abstract report renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render_result(self, result: ScaleCalculationResult) -> str:
        """Render a scale calculation into a file content string."""

    @abstractmethod
    def render_chords(self, matches: Sequence[ChordMatch]) -> str:
        """Render ranked chord matches into a file content string."""


class JsonReportRenderer(ReportRenderer):
    """Compact JSON; pitches as text, enums by name."""

    @property
    def default_extension(self) -> str:
        return ".json"

    def render_result(self, result: ScaleCalculationResult) -> str:
        return json.dumps(_to_payload(result), separators=(",", ":"))

    def render_chords(self, matches: Sequence[ChordMatch]) -> str:
        payload = []
        for match in matches:
            entry = _to_payload(match)
            entry["label"] = match.definition.label
            entry["is_complete"] = match.is_complete
            payload.append(entry)
        return json.dumps(payload, separators=(",", ":"))


class TextReportRenderer(ReportRenderer):
    """Aligned plain-text tables for terminal output."""

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render_result(self, result: ScaleCalculationResult) -> str:
        request = result.request
        scale_name = request.scale_type.display_name if request.scale_type else "Custom"
        notes = " ".join(note.symbol for note in result.scale_notes)
        lines = [
            f"{request.root_note.symbol} {scale_name}: {notes}",
            "",
            "Lever only",
            f"  {'Role':<5} {'Str':>3}  {'Open':<5} {'Closed':<6} {'Lever':<6} {'Pitch':<5}",
        ]
        for row in result.lever_only_table:
            lever = row.selected_lever_state.name if row.selected_lever_state else "PEG"
            lines.append(
                f"  {row.role.as_label():<5} {row.string_number:>3}  "
                f"{row.open_pitch.as_text():<5} {row.closed_pitch.as_text():<6} "
                f"{lever:<6} {_pitch_text(row.selected_pitch):<5}"
            )

        lines += [
            "",
            "Peg correct",
            f"  {'Role':<5} {'Str':>3}  {'Open':<5} {'Retuned':<7} {'Move':>4} {'Lever':<6} {'Pitch':<5}",
        ]
        for peg_row in result.peg_correct_table:
            lines.append(
                f"  {peg_row.role.as_label():<5} {peg_row.string_number:>3}  "
                f"{peg_row.original_open_pitch.as_text():<5} "
                f"{peg_row.retuned_open_pitch.as_text():<7} "
                f"{peg_row.peg_retune_semitones:>+4} "
                f"{peg_row.selected_lever_state.name:<6} "
                f"{peg_row.selected_pitch.as_text():<5}"
            )

        if result.conflicts:
            lines += ["", "Conflicts"]
            for conflict in result.conflicts:
                lines.append(
                    f"  [{conflict.mode.name}] strings {conflict.lower_string_number} -> "
                    f"{conflict.higher_string_number}: {conflict.detail}"
                )

        if result.suggestions:
            lines += ["", "Suggestions"]
            for suggestion in result.suggestions:
                lines.append(f"  [{suggestion.mode.name}] {suggestion.suggestion}")

        return "\n".join(lines) + "\n"

    def render_chords(self, matches: Sequence[ChordMatch]) -> str:
        lines = [f"  {'Chord':<30} {'Score':>5}  {'Strings':>7}  Missing"]
        for match in matches:
            missing = " ".join(note.symbol for note in match.missing_notes) or "-"
            flag = "*" if match.uses_detuned_strings else " "
            lines.append(
                f"{flag} {match.definition.label:<30} {match.score:>5}  "
                f"{len(match.played_string_numbers):>7}  {missing}"
            )
        return "\n".join(lines) + "\n"


def renderer_for(output_format: str) -> ReportRenderer:
    """
    Return the renderer for ``output_format`` (``"text"`` or ``"json"``).

    Raises:
        ValueError: For any other format.
    """
    normalized = output_format.strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        supported = ", ".join(sorted(SUPPORTED_FORMATS))
        raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
    if normalized == "json":
        return JsonReportRenderer()
    return TextReportRenderer()
