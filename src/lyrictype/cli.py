"""Command-line interface using Click."""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import SyncConfig
from .core.lrc import clean_lyrics, format_timestamp, has_timestamps, parse_lyrics, parse_timed_lines
from .core.models import LyricSequence
from .core.sources import default_source
from .core.sync import sync_to_time
from .core.timing import normalize_timing
from .core.typing_eval import evaluate_typing, format_clock, grade_for_accuracy
from .exceptions import LyricTypeError, LyricsError
from .utils.logging import setup_logging
from .utils.validation import validate_duration, validate_line_order, validate_playback_time


def _load_sequence(lyrics_file: str, duration: Optional[float], clean: bool) -> LyricSequence:
    try:
        raw = Path(lyrics_file).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LyricsError(f"{lyrics_file} is not UTF-8 text: {e}")
    text = clean_lyrics(raw) if clean else raw
    sequence = parse_lyrics(text)
    if duration is not None:
        validate_duration(duration)
        if not has_timestamps(text):
            config = SyncConfig.from_env()
            sequence = normalize_timing(
                sequence, duration, config.start_offset, config.end_offset
            )
    validate_line_order(sequence.lines)
    return sequence


def _echo_sequence(sequence: LyricSequence) -> None:
    if sequence.is_empty:
        click.echo("No lyrics found")
        return
    for idx, line in enumerate(sequence):
        start = format_timestamp(line.start_time, brackets=False)
        end = format_timestamp(line.end_time, brackets=False)
        click.echo(f"{idx + 1:3d}  {start} -> {end}  {line.text}")


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """LyricType - type along to time-coded song lyrics."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "WARNING",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('lyrics_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--duration', type=float, default=None,
              help='Media duration in seconds; re-times untimed lyrics to fit')
@click.option('--clean/--no-clean', default=True,
              help='Strip credits, section markers and disclaimers first')
@click.pass_context
def parse(ctx, lyrics_file, duration, clean):
    """Show the timed lines parsed from LYRICS_FILE."""
    try:
        sequence = _load_sequence(lyrics_file, duration, clean)
        _echo_sequence(sequence)
    except LyricTypeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('lyrics_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('current_time', type=float)
@click.option('--duration', type=float, default=None,
              help='Media duration in seconds; re-times untimed lyrics to fit')
@click.pass_context
def sync(ctx, lyrics_file, current_time, duration):
    """Show which line of LYRICS_FILE is active at CURRENT_TIME seconds."""
    try:
        validate_playback_time(current_time)
        sequence = _load_sequence(lyrics_file, duration, clean=True)
        index = sync_to_time(sequence, current_time, config=SyncConfig.from_env())
    except LyricTypeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if index < 0:
        click.echo(f"{format_clock(current_time)}  No active line")
    else:
        click.echo(f"{format_clock(current_time)}  Line {index + 1}: {sequence[index].text}")


@cli.command()
@click.argument('target')
@click.argument('typed')
@click.option('--seconds', type=float, default=60.0,
              help='Seconds spent typing')
def score(target, typed, seconds):
    """Score TYPED against TARGET."""
    if seconds <= 0:
        click.echo("Error: --seconds must be positive", err=True)
        sys.exit(1)
    stats = evaluate_typing(target, typed, started_at=0.0, now=seconds)
    click.echo(f"Errors:   {stats.errors}")
    click.echo(f"WPM:      {stats.wpm}")
    click.echo(f"Accuracy: {stats.accuracy}% ({grade_for_accuracy(stats.accuracy)})")
    click.echo(f"Complete: {'yes' if stats.completed else 'no'}")


@cli.command()
@click.argument('song_id')
def demo(song_id):
    """Show the lyrics the built-in sources give for SONG_ID."""
    payload = default_source().fetch(song_id)
    if isinstance(payload, str):
        sequence = parse_lyrics(payload)
    else:
        sequence = parse_timed_lines(payload or [])
    _echo_sequence(sequence)


if __name__ == '__main__':
    cli()
