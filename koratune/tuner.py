"""Tuner targets: turn a peg-correct plan into frequencies and match detected pitches."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from koratune.models import LeverState, PegCorrectStringResult
from koratune.pitch import Pitch

REFERENCE_A4_HZ = 440.0
A4_MIDI = 69
CENTS_PER_OCTAVE = 1200.0
DEFAULT_IN_TUNE_THRESHOLD_CENTS = 5.0


@dataclass(frozen=True)
class TunerTarget:
    """
    What one string should sound like once the plan is applied.

    Attributes:
        string_number:           String to tune.
        role_label:              Side/position label, e.g. ``'L3'``.
        target_pitch:            Pitch the string sounds with the required lever.
        target_frequency_hz:     Equal-tempered frequency shifted by the
                                 intonation offset.
        required_lever_state:    Lever position to play in.
        peg_retune_semitones:    Peg move relative to the configured tuning.
        target_intonation_cents: Intonation offset folded into the frequency.
    """

    string_number: int
    role_label: str
    target_pitch: Pitch
    target_frequency_hz: float
    required_lever_state: LeverState
    peg_retune_semitones: int
    target_intonation_cents: float = 0.0


@dataclass(frozen=True)
class TunerMatch:
    target: TunerTarget
    cents_deviation: float


class TuningFeedback(Enum):
    IN_TUNE = "IN_TUNE"
    FLAT = "FLAT"
    SHARP = "SHARP"


def pitch_to_frequency_hz(
    pitch: Pitch,
    reference_a_hz: float = REFERENCE_A4_HZ,
    cents_offset: float = 0.0,
) -> float:
    """
    Equal-tempered frequency of ``pitch``, detuned by ``cents_offset``.

    Raises:
        ValueError: If ``reference_a_hz`` is not a positive finite frequency.
    """
    if not (math.isfinite(reference_a_hz) and reference_a_hz > 0.0):
        raise ValueError("Reference frequency must be positive.")
    semitones_from_a4 = pitch.midi_number() - A4_MIDI
    return float(
        reference_a_hz
        * np.power(2.0, semitones_from_a4 / 12.0)
        * np.power(2.0, cents_offset / CENTS_PER_OCTAVE)
    )


def build_targets(
    rows: Sequence[PegCorrectStringResult],
    reference_a_hz: float = REFERENCE_A4_HZ,
) -> list[TunerTarget]:
    """One tuner target per peg-correct row, in table order."""
    return [
        TunerTarget(
            string_number=row.string_number,
            role_label=row.role.as_label(),
            target_pitch=row.selected_pitch,
            target_frequency_hz=pitch_to_frequency_hz(
                row.selected_pitch,
                reference_a_hz=reference_a_hz,
                cents_offset=row.selected_intonation_cents,
            ),
            required_lever_state=row.selected_lever_state,
            peg_retune_semitones=row.peg_retune_semitones,
            target_intonation_cents=row.selected_intonation_cents,
        )
        for row in rows
    ]


def match_nearest_target(
    detected_frequency_hz: float,
    targets: Sequence[TunerTarget],
) -> TunerMatch | None:
    """
    Find the target closest in cents to a detected frequency.

    Returns:
        The nearest target and the signed deviation (positive = sharp), or
        ``None`` for a non-positive or non-finite frequency or an empty target list. The
        first target wins a tie.
    """
    if not (math.isfinite(detected_frequency_hz) and detected_frequency_hz > 0.0) or not targets:
        return None

    frequencies = np.array([target.target_frequency_hz for target in targets], dtype=float)
    deviations = CENTS_PER_OCTAVE * np.log2(detected_frequency_hz / frequencies)
    index = int(np.argmin(np.abs(deviations)))
    return TunerMatch(target=targets[index], cents_deviation=float(deviations[index]))


def classify_feedback(
    cents_deviation: float,
    in_tune_threshold_cents: float = DEFAULT_IN_TUNE_THRESHOLD_CENTS,
) -> TuningFeedback:
    """
    Classify a deviation as flat, sharp or in tune.

    Raises:
        ValueError: If the threshold is not positive.
    """
    if in_tune_threshold_cents <= 0.0:
        raise ValueError("In-tune threshold must be positive.")

    if cents_deviation < -in_tune_threshold_cents:
        return TuningFeedback.FLAT
    if cents_deviation > in_tune_threshold_cents:
        return TuningFeedback.SHARP
    return TuningFeedback.IN_TUNE
