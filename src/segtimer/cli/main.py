"""CLI entry point for segtimer.

Uses Click to expose the ``segtimer`` command group: render a single face
to a PNG, list the themes, or drive a timer from a reference frame loop.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Callable, TypeVar

import click

import segtimer
from segtimer.core.render import render_face
from segtimer.core.segments import digits_of
from segtimer.core.themes import THEMES, get_theme
from segtimer.core.timer import (
    MAX_DIGITS,
    CountdownState,
    CountdownTimer,
    create_timer,
    monotonic_ms,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

# A running timer that has shown no step for this long missed its window.
_STALL_MS = 2000


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting bad arguments to a CLI error.

    On ``ValueError`` or ``TypeError`` the message is printed to stderr and
    the process exits with code 1.
    """
    try:
        return action()
    except (ValueError, TypeError) as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")
        logging.getLogger("PIL").setLevel(logging.WARNING)
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)


def _drive(timer: CountdownTimer, fps: int) -> None:
    """Tick *timer* every frame until its alarm sounds, then silence it.

    The frame before a step is shortened so that it lands on the step.
    """
    frame_ms = 1000.0 / fps
    now = monotonic_ms()
    timer.start(now)
    shown = timer.value
    last_step = now
    click.echo(str(shown))

    while True:
        now = monotonic_ms()
        timer.tick(now)
        if timer.value != shown:
            shown = timer.value
            last_step = now
            click.echo(str(shown))
        elif now - last_step > _STALL_MS:
            log.warning("Frame at %d missed the decrement window; restarting the second", now)
            timer.start(now)
            last_step = now

        if timer.state is CountdownState.ALARM_SOUNDING:
            click.echo(f"Alarm: {timer.theme.sound_id}")
            timer.silence_alarm()
            return
        remaining = last_step + 1000 - now
        if 0 < remaining < frame_ms:
            time.sleep(remaining / 1000.0)
        else:
            time.sleep(frame_ms / 1000.0)


@click.group()
@click.version_option(version=segtimer.__version__, prog_name="segtimer")
@click.option("-v", "--verbose", count=True, help="Increase log output (-vv for debug).")
def cli(verbose: int) -> None:
    """segtimer: a seven-segment countdown timer widget."""
    _configure_logging(verbose)


@cli.command()
def themes() -> None:
    """List the available colour themes."""
    for index, theme in enumerate(THEMES):
        click.echo(f"{index}  {theme.name:<9} {theme.sound_id}")


@cli.command()
@click.argument("value", type=click.IntRange(min=0))
@click.option("--digits", type=click.IntRange(1, MAX_DIGITS), default=None,
              help="Number of digit cells (default: enough for VALUE).")
@click.option("--theme", type=int, default=0, show_default=True)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              default=Path("timer.png"), show_default=True)
def render(value: int, digits: int | None, theme: int, output: Path) -> None:
    """Render VALUE as a seven-segment face and save it as a PNG."""
    palette = _run(lambda: get_theme(theme))
    digit_count = digits if digits is not None else min(MAX_DIGITS, digits_of(value))
    shown = min(value, 10**digit_count - 1)
    image = render_face(shown, digit_count, palette)
    image.save(output)
    click.echo(f"Saved {shown} ({image.width}x{image.height}) to {output}")


@cli.command()
@click.argument("seconds", type=int, required=False)
@click.option("--theme", type=int, default=0, show_default=True)
@click.option("--volume", type=int, default=80, show_default=True)
@click.option("--fps", type=click.IntRange(min=1), default=100, show_default=True)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Save the final face to this PNG.")
def run(seconds: int | None, theme: int, volume: int, fps: int, output: Path | None) -> None:
    """Count down from SECONDS (default: 60) in a frame loop."""
    timer = _run(lambda: create_timer(seconds, theme=theme, volume=volume))
    _drive(timer, fps)
    if output is not None:
        timer.current_bitmap().save(output)
        click.echo(f"Saved final face to {output}")
