"""Timer core — a frame-driven seven-segment countdown timer."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, runtime_checkable

from PIL import Image

from segtimer.core.alarm import (
    AlarmGate,
    AudioDevice,
    LoggingAudioDevice,
    should_loop,
    validate_volume,
)
from segtimer.core.render import face_size, render_face
from segtimer.core.segments import digits_of
from segtimer.core.themes import Theme, get_theme

log = logging.getLogger(__name__)

MAX_DIGITS = 5
MAX_INITIAL_VALUE = 10**MAX_DIGITS - 1

DEFAULT_VALUE = 60
DEFAULT_DIGITS = 2
DEFAULT_THEME = 0
DEFAULT_VOLUME = 80

DEBOUNCE_MS = 1000

# Accepted elapsed time, in seconds, for a one-second step.
_DECREMENT_WINDOW = (0.99, 1.01)


def monotonic_ms() -> int:
    """Return monotonic milliseconds since an arbitrary epoch."""
    return int(time.monotonic() * 1000)


class CountdownState(Enum):
    """Possible states of the timer."""

    IDLE = "idle"
    RUNNING = "running"
    ALARM_SOUNDING = "alarm_sounding"


@runtime_checkable
class Renderable(Protocol):
    """Something the host can draw each frame."""

    def current_bitmap(self) -> Image.Image: ...


@runtime_checkable
class Tickable(Protocol):
    """Something the host advances each frame."""

    def tick(self, now_ms: int) -> None: ...


@dataclass(frozen=True)
class TimerConfig:
    """Fixed settings of one timer, resolved once at construction."""

    digit_count: int
    max_value: int
    original_value: int
    theme: Theme
    volume: int

    @classmethod
    def for_value(cls, initial_value: int, theme: int, volume: int) -> TimerConfig:
        """Build a config sized to *initial_value*.

        Values above 99999 are clamped to a five-digit 99999 and negative
        values to 0.  Raises for an unknown theme or an out-of-range volume.
        """
        if isinstance(initial_value, bool) or not isinstance(initial_value, int):
            raise TypeError(
                f"initial_value must be an integer, got {type(initial_value).__name__}"
            )
        value = min(max(initial_value, 0), MAX_INITIAL_VALUE)
        digit_count = min(MAX_DIGITS, digits_of(value))
        return cls(
            digit_count=digit_count,
            max_value=10**digit_count - 1,
            original_value=value,
            theme=get_theme(theme),
            volume=validate_volume(volume),
        )

    @classmethod
    def default(cls, theme: int = DEFAULT_THEME, volume: int = DEFAULT_VOLUME) -> TimerConfig:
        """The stock 60-second timer, capped at 60 rather than 99."""
        return cls(
            digit_count=DEFAULT_DIGITS,
            max_value=DEFAULT_VALUE,
            original_value=DEFAULT_VALUE,
            theme=get_theme(theme),
            volume=validate_volume(volume),
        )


class CountdownTimer:
    """A seven-segment countdown widget driven by the host's frame loop.

    The host calls :meth:`tick` every frame with the current monotonic time
    and shows :meth:`current_bitmap`.  The value drops by one whenever a tick
    lands between 0.99 s and 1.01 s after the previous step; a tick that
    falls outside that window does not decrement.  Contains no threads and
    no persistence -- it is a simple state machine.
    """

    def __init__(
        self,
        config: TimerConfig,
        audio: AudioDevice | None = None,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self._config = config
        self._clock = clock
        self._value: int = config.original_value
        self._running: bool = False
        self._last_decrement_ms: int = 0
        self._last_control_ms: int | None = None
        self._alarm_silenced: bool = False
        self._alarm = AlarmGate(
            audio if audio is not None else LoggingAudioDevice(),
            config.theme.sound_id,
            config.volume,
        )
        self._bitmap: Image.Image = self._render()

    # -- public interface ----------------------------------------------------

    def start(self, now_ms: int | None = None) -> None:
        """Start counting down; calling again restarts the one-second window."""
        self._running = True
        self._last_decrement_ms = self._now(now_ms)
        log.info("Timer started at %d", self._value)

    def stop(self) -> None:
        """Stop counting down, leaving the face as it was last drawn."""
        self._running = False
        log.info("Timer stopped at %d", self._value)

    def reset(self, now_ms: int | None = None) -> None:
        """Restore the original value and stop the timer.

        Ignored while a previous reset or adjust is within the debounce
        window, but the window and the silenced flag are refreshed either way.
        """
        now = self._now(now_ms)
        if not self._debounced(now):
            self._alarm.stop()
            self._value = self._config.original_value
            self._running = False
            self._bitmap = self._render()
            log.info("Timer reset to %d", self._value)
        else:
            log.debug("reset() ignored inside debounce window")
        self._touch_control(now)

    def adjust(self, delta: int, now_ms: int | None = None) -> None:
        """Add *delta* seconds (plus one) to the value, clamped to the cap.

        ``adjust(0)`` therefore moves the value up by one.  Debounced the same
        way as :meth:`reset`, with which it shares one window.
        """
        now = self._now(now_ms)
        if not self._debounced(now):
            self._alarm.stop()
            candidate = self._value + delta + 1
            if candidate > self._config.max_value:
                self._value = self._config.max_value
            elif candidate < 0:
                self._value = 0
            else:
                self._value = candidate
            self._bitmap = self._render()
            log.info("Timer adjusted by %d to %d", delta, self._value)
        else:
            log.debug("adjust(%d) ignored inside debounce window", delta)
        self._touch_control(now)

    def tick(self, now_ms: int) -> None:
        """Advance the countdown for the frame at *now_ms*.

        Decrements when due, redraws the face from the resulting value and
        then lets the alarm gate decide whether the alarm loops.
        """
        if not self._running:
            return

        elapsed = (now_ms - self._last_decrement_ms) / 1000.0
        low, high = _DECREMENT_WINDOW
        if self._value > 0 and low <= elapsed <= high:
            self._value -= 1
            self._last_decrement_ms = now_ms
            log.debug("Tick at %d: %d remaining", now_ms, self._value)

        self._bitmap = self._render()
        self._alarm.update(self._value, self._alarm_silenced)

    def silence_alarm(self) -> None:
        """Stop the alarm without touching the value or the running flag."""
        self._alarm.stop()
        self._alarm_silenced = True
        log.info("Alarm silenced")

    def get_remaining_display_value(self) -> int:
        """Return the value plus one while counting, or 0 once finished.

        This is the one-ahead convention of the display query, not a count
        of remaining seconds.
        """
        if self._value > 0:
            return self._value + 1
        return 0

    def current_bitmap(self) -> Image.Image:
        """Return the most recently rendered face."""
        return self._bitmap

    # -- read-only state -----------------------------------------------------

    @property
    def value(self) -> int:
        return self._value

    @property
    def original_value(self) -> int:
        return self._config.original_value

    @property
    def max_value(self) -> int:
        return self._config.max_value

    @property
    def digit_count(self) -> int:
        return self._config.digit_count

    @property
    def theme(self) -> Theme:
        return self._config.theme

    @property
    def volume(self) -> int:
        return self._config.volume

    @property
    def width(self) -> int:
        return face_size(self._config.digit_count)[0]

    @property
    def height(self) -> int:
        return face_size(self._config.digit_count)[1]

    @property
    def running(self) -> bool:
        return self._running

    @property
    def alarm_silenced(self) -> bool:
        return self._alarm_silenced

    @property
    def state(self) -> CountdownState:
        """Return the current state.

        ALARM_SOUNDING holds whenever the value is 0 and the alarm has not
        been silenced, whether or not the timer is running.
        """
        if should_loop(self._value, self._alarm_silenced):
            return CountdownState.ALARM_SOUNDING
        if self._running:
            return CountdownState.RUNNING
        return CountdownState.IDLE

    # -- private helpers -----------------------------------------------------

    def _now(self, now_ms: int | None) -> int:
        return now_ms if now_ms is not None else self._clock()

    def _debounced(self, now: int) -> bool:
        """Whether a control call at *now* falls inside the debounce window."""
        return self._last_control_ms is not None and now - self._last_control_ms <= DEBOUNCE_MS

    def _touch_control(self, now: int) -> None:
        self._last_control_ms = now
        self._alarm_silenced = False

    def _render(self) -> Image.Image:
        return render_face(self._value, self._config.digit_count, self._config.theme)


def create_timer(
    initial_value: int | None = None,
    theme: int = DEFAULT_THEME,
    volume: int = DEFAULT_VOLUME,
    audio: AudioDevice | None = None,
) -> CountdownTimer:
    """Create a timer counting down from *initial_value* seconds.

    With no *initial_value* the stock timer is returned: 60 seconds on two
    digits, standard theme, volume 80, capped at 60.
    """
    if initial_value is None:
        config = TimerConfig.default(theme, volume)
    else:
        config = TimerConfig.for_value(initial_value, theme, volume)
    return CountdownTimer(config, audio=audio)
