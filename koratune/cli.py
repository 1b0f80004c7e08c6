"""koratune CLI entry point."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import NoReturn, TypeVar

import click

from koratune import __version__
from koratune.chords import (
    MAX_GRIP_NOTES,
    ChordDefinition,
    ChordQuality,
    best_chord_matches,
    choose_chord_strings,
    suggest_stable_chord,
)
from koratune.engine import resolve
from koratune.instrument import (
    SUPPORTED_STRING_COUNTS,
    InstrumentProfile,
    preset_by_id,
    presets_for_string_count,
)
from koratune.models import ScaleCalculationResult
from koratune.pitch import NoteName
from koratune.renderers import SUPPORTED_FORMATS, renderer_for
from koratune.scales import ScaleType
from koratune.tuner import build_targets, classify_feedback, match_nearest_target

DEFAULT_PRESET = "hardino_21"
POSITIVE_HZ = click.FloatRange(min=0.0, min_open=True)

E = TypeVar("E", bound=Enum)


def _choice_name(member: Enum) -> str:
    """CLI spelling of an enum member, e.g. ``MAJOR_PENTATONIC`` -> ``major-pentatonic``."""
    return member.name.lower().replace("_", "-")


def _from_choice(enum_type: type[E], value: str) -> E:
    return enum_type[value.upper().replace("-", "_")]


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _build_profile(preset: str, pitches: str | None, no_lever: bool) -> InstrumentProfile:
    """Profile from a comma-separated pitch list, or from a named preset."""
    if pitches:
        return InstrumentProfile.from_text(
            [p for p in pitches.replace(" ", "").split(",") if p],
            closed_lever_enabled=not no_lever,
        )
    return preset_by_id(preset).to_instrument_profile(closed_lever_enabled=not no_lever)


def _resolve_from_options(
    preset: str, pitches: str | None, no_lever: bool, root: str, scale: str
) -> ScaleCalculationResult:
    try:
        profile = _build_profile(preset, pitches, no_lever)
    except ValueError as exc:
        _fail(str(exc))
    return resolve(profile, NoteName.from_symbol(root), _from_choice(ScaleType, scale))


def instrument_options(func):  # type: ignore[no-untyped-def]
    """Options shared by every command that resolves a tuning."""
    func = click.option(
        "--scale",
        type=click.Choice([_choice_name(s) for s in ScaleType], case_sensitive=False),
        default="major",
        show_default=True,
        help="Target scale.",
    )(func)
    func = click.option(
        "--root",
        type=click.Choice([n.symbol for n in NoteName], case_sensitive=False),
        default="F",
        show_default=True,
        help="Root note; the lowest Left string is re-seated on it.",
    )(func)
    func = click.option(
        "--no-lever",
        is_flag=True,
        default=False,
        help="Treat the instrument as having no closing levers.",
    )(func)
    func = click.option(
        "--pitches",
        default=None,
        metavar="LIST",
        help='Comma-separated open pitches for strings 1..N, e.g. "F2,C3,D3,...". '
        "Overrides --preset.",
    )(func)
    func = click.option(
        "--preset",
        default=DEFAULT_PRESET,
        show_default=True,
        metavar="ID",
        help="Traditional preset id (see 'koratune presets').",
    )(func)
    return func


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="koratune")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log engine decisions.")
def main(verbose: bool) -> None:
    """koratune — kora lever and peg tuning planner."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")


# ── presets subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.option(
    "--strings",
    "string_count",
    type=click.Choice([str(c) for c in sorted(SUPPORTED_STRING_COUNTS)]),
    default="21",
    show_default=True,
    help="Instrument size.",
)
def presets(string_count: str) -> None:
    """List traditional tuning presets."""
    for preset in presets_for_string_count(int(string_count)):
        pitches = " ".join(p.as_text() for p in preset.open_pitches)
        click.echo(f"{preset.id:<14} {preset.display_name}")
        click.echo(f"  {preset.description}")
        click.echo(f"  {pitches}")


# ── scale subcommand ───────────────────────────────────────────────────────────

@main.command()
@instrument_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="text",
    show_default=True,
    help="Report format.",
)
def scale(preset: str, pitches: str | None, no_lever: bool, root: str, scale: str, output_format: str) -> None:
    """
    Resolve a scale onto the instrument's levers and pegs.

    \b
    Examples:
      koratune scale --root C --scale major-pentatonic
      koratune scale --preset sauta_22 --root G --scale dorian --format json
    """
    result = _resolve_from_options(preset, pitches, no_lever, root, scale)
    click.echo(renderer_for(output_format).render_result(result), nl=False)


# ── chords subcommand ──────────────────────────────────────────────────────────

@main.command()
@instrument_options
@click.option("--limit", type=click.IntRange(1, 108), default=12, show_default=True,
              help="Number of chords to list.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="text",
    show_default=True,
    help="Report format.",
)
def chords(
    preset: str,
    pitches: str | None,
    no_lever: bool,
    root: str,
    scale: str,
    limit: int,
    output_format: str,
) -> None:
    """
    Rank the chords the peg-correct tuning plays best.

    Chords marked with '*' rely on re-tuned strings.
    """
    result = _resolve_from_options(preset, pitches, no_lever, root, scale)
    matches = best_chord_matches(result.peg_correct_table, limit=limit)
    click.echo(renderer_for(output_format).render_chords(matches), nl=False)


# ── grip subcommand ────────────────────────────────────────────────────────────

@main.command()
@instrument_options
@click.option(
    "--chord-root",
    type=click.Choice([n.symbol for n in NoteName], case_sensitive=False),
    required=True,
    help="Root of the chord to voice.",
)
@click.option(
    "--quality",
    type=click.Choice([_choice_name(q) for q in ChordQuality], case_sensitive=False),
    default="major",
    show_default=True,
    help="Chord quality.",
)
@click.option(
    "--offset",
    "offsets",
    type=int,
    multiple=True,
    metavar="SEMITONES",
    help="Chord tone to include, in semitones above the root. Repeatable; default all tones.",
)
@click.option(
    "--max-notes",
    type=click.IntRange(1, MAX_GRIP_NOTES),
    default=MAX_GRIP_NOTES,
    show_default=True,
    help="Strings to pluck together.",
)
def grip(
    preset: str,
    pitches: str | None,
    no_lever: bool,
    root: str,
    scale: str,
    chord_root: str,
    quality: str,
    offsets: tuple[int, ...],
    max_notes: int,
) -> None:
    """Choose strings that voice a chord, and suggest a stable alternative."""
    result = _resolve_from_options(preset, pitches, no_lever, root, scale)
    definition = ChordDefinition(NoteName.from_symbol(chord_root), _from_choice(ChordQuality, quality))

    rows = choose_chord_strings(result.peg_correct_table, definition, offsets, max_notes)
    click.echo(f"{definition.label}: {' '.join(n.symbol for n in definition.chord_notes)}")
    if not rows:
        click.echo("  No string sounds a chord tone.")
    for row in rows:
        retune = f"  peg {row.peg_retune_semitones:+d}" if row.peg_retune_required else ""
        click.echo(
            f"  {row.role.as_label():<4} string {row.string_number:>2}  "
            f"{row.selected_pitch.as_text():<4} {row.selected_lever_state.name}{retune}"
        )

    stable = suggest_stable_chord(result.peg_correct_table, definition)
    if stable is not None and stable.definition != definition:
        click.echo(f"Closest chord without re-tuning: {stable.definition.label}")


# ── tune subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("frequency", type=POSITIVE_HZ)
@instrument_options
@click.option("--reference", type=POSITIVE_HZ, default=440.0, show_default=True, metavar="HZ",
              help="Concert A4 frequency.")
@click.option("--threshold", type=float, default=5.0, show_default=True, metavar="CENTS",
              help="In-tune window, +/- cents.")
def tune(
    frequency: float,
    preset: str,
    pitches: str | None,
    no_lever: bool,
    root: str,
    scale: str,
    reference: float,
    threshold: float,
) -> None:
    """
    Match a detected FREQUENCY (Hz) to the nearest string of the tuning plan.

    \b
    Examples:
      koratune tune 87.3 --root F --scale major
    """
    result = _resolve_from_options(preset, pitches, no_lever, root, scale)
    try:
        targets = build_targets(result.peg_correct_table, reference_a_hz=reference)
        match = match_nearest_target(frequency, targets)
        if match is None:
            _fail("Frequency must be positive.")
        feedback = classify_feedback(match.cents_deviation, threshold)
    except ValueError as exc:
        _fail(str(exc))

    target = match.target
    click.echo(
        f"String {target.string_number} ({target.role_label}) "
        f"{target.target_pitch.as_text()} {target.required_lever_state.name} "
        f"@ {target.target_frequency_hz:.2f} Hz"
    )
    click.echo(f"  {match.cents_deviation:+.1f} cents  {feedback.name}")
