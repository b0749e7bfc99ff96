"""Alarm policy and the audio device it drives."""

from __future__ import annotations

import logging
from typing import Protocol

log = logging.getLogger(__name__)

_MIN_VOLUME = 0
_MAX_VOLUME = 100


class InvalidVolumeError(ValueError):
    """Raised when an alarm volume is outside 0--100."""


class AudioDevice(Protocol):
    """Playback device the alarm borrows; it never owns the device."""

    def play_loop(self, sound_id: str) -> None: ...

    def stop(self, sound_id: str) -> None: ...

    def set_volume(self, sound_id: str, volume: int) -> None: ...


class LoggingAudioDevice:
    """An audio device that only reports what it was asked to play."""

    def play_loop(self, sound_id: str) -> None:
        log.info("Alarm %s looping", sound_id)

    def stop(self, sound_id: str) -> None:
        log.info("Alarm %s stopped", sound_id)

    def set_volume(self, sound_id: str, volume: int) -> None:
        log.debug("Alarm %s volume set to %d", sound_id, volume)


def validate_volume(volume: int) -> int:
    """Return *volume* if it is an integer in 0--100, otherwise raise."""
    if isinstance(volume, bool) or not isinstance(volume, int):
        raise TypeError(f"volume must be an integer, got {type(volume).__name__}")
    if not (_MIN_VOLUME <= volume <= _MAX_VOLUME):
        raise InvalidVolumeError(
            f"volume must be between {_MIN_VOLUME} and {_MAX_VOLUME}, got {volume}"
        )
    return volume


def should_loop(value: int, alarm_silenced: bool) -> bool:
    """Return True when the alarm must be sounding."""
    return value == 0 and not alarm_silenced


class AlarmGate:
    """Keeps the audio device in step with :func:`should_loop`.

    The device is asked to loop once per sounding period rather than on
    every frame, and is told to stop whenever the owner stops or silences
    the alarm.
    """

    def __init__(self, audio: AudioDevice, sound_id: str, volume: int) -> None:
        self._audio = audio
        self._sound_id = sound_id
        self._looping = False
        self._audio.set_volume(sound_id, volume)

    @property
    def looping(self) -> bool:
        """Whether the device was last asked to loop."""
        return self._looping

    def update(self, value: int, alarm_silenced: bool) -> None:
        """Start or stop the loop according to *value* and *alarm_silenced*."""
        if should_loop(value, alarm_silenced):
            if not self._looping:
                self._audio.play_loop(self._sound_id)
                self._looping = True
        elif self._looping:
            self.stop()

    def stop(self) -> None:
        """Stop playback."""
        self._audio.stop(self._sound_id)
        self._looping = False
