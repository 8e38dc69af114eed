"""Synthesized phase-finished chimes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from pomodoro import Phase

from .errors import AudioError

DEFAULT_SAMPLE_RATE_HZ = 22050

# Focus ending rises to a higher pitch than a break ending.
CHIME_FREQUENCIES_HZ: dict[Phase, tuple[float, ...]] = {
    Phase.FOCUS: (660.0, 880.0),
    Phase.SHORT_BREAK: (880.0, 660.0),
    Phase.LONG_BREAK: (880.0, 660.0, 523.25),
}


class AudioOutputLike(Protocol):
    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        ...


@dataclass(frozen=True)
class ChimeConfig:
    """Resolved chime playback settings."""
    enabled: bool = True
    output_device_index: Optional[int] = None
    volume: float = 0.3
    duration_seconds: float = 0.6
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ

    def __post_init__(self) -> None:
        if not 0.0 <= self.volume <= 1.0:
            raise AudioError(f"Chime volume must be in [0, 1], got: {self.volume}")
        if self.duration_seconds <= 0:
            raise AudioError("Chime duration must be greater than zero")
        if self.sample_rate_hz <= 0:
            raise AudioError("Chime sample rate must be greater than zero")

    @classmethod
    def from_settings(cls, settings) -> "ChimeConfig":
        return cls(
            enabled=bool(settings.enabled),
            output_device_index=settings.output_device,
            volume=float(settings.volume),
            duration_seconds=float(settings.duration_seconds),
        )


def synthesize_chime(
    frequencies_hz: tuple[float, ...],
    *,
    duration_seconds: float,
    volume: float,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
) -> np.ndarray:
    """Render consecutive sine notes with a short fade to avoid clicks."""
    if not frequencies_hz:
        raise AudioError("Chime needs at least one note")

    note_samples = max(1, int(sample_rate_hz * duration_seconds / len(frequencies_hz)))
    t = np.arange(note_samples, dtype=np.float32) / float(sample_rate_hz)
    fade = min(note_samples // 2, int(sample_rate_hz * 0.01))
    envelope = np.ones(note_samples, dtype=np.float32)
    if fade > 0:
        ramp = np.linspace(0.0, 1.0, fade, dtype=np.float32)
        envelope[:fade] = ramp
        envelope[-fade:] = ramp[::-1]

    notes = [
        np.sin(2.0 * np.pi * frequency * t).astype(np.float32) * envelope
        for frequency in frequencies_hz
    ]
    return (np.concatenate(notes) * np.float32(volume)).astype(np.float32)


class ChimePlayer:
    """Plays the chime for a finished phase through an audio output."""

    def __init__(
        self,
        config: ChimeConfig,
        output: AudioOutputLike,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._output = output
        self._logger = logger or logging.getLogger("audio.chime")
        self._cache: dict[Phase, np.ndarray] = {}

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def play(self, phase: Phase) -> None:
        if not self._config.enabled:
            return
        wav = self._cache.get(phase)
        if wav is None:
            wav = synthesize_chime(
                CHIME_FREQUENCIES_HZ[phase],
                duration_seconds=self._config.duration_seconds,
                volume=self._config.volume,
                sample_rate_hz=self._config.sample_rate_hz,
            )
            self._cache[phase] = wav
        self._logger.debug("Playing %s chime (%d samples)", phase.value, len(wav))
        self._output.play(wav, self._config.sample_rate_hz)
