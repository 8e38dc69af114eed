"""Sounddevice-backed audio playback for phase-finished chimes."""

import logging
from typing import Optional

import numpy as np

from .errors import AudioDependencyError, AudioError


class SoundDeviceAudioOutput:
    """Plays mono PCM arrays in the background through a sounddevice output."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._logger = logger or logging.getLogger(__name__)
        self._sd = None

    def _backend(self):
        if self._sd is not None:
            return self._sd
        try:
            import sounddevice as sd
        except ImportError as error:  # pragma: no cover - depends on audio env
            raise AudioDependencyError(
                f"sounddevice import failed ({error}). Install sounddevice."
            ) from error
        except OSError as error:  # pragma: no cover - depends on audio env
            raise AudioDependencyError(
                f"PortAudio library not found ({error}). Install libportaudio2."
            ) from error
        self._sd = sd
        return sd

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        """Start playback and return; sounddevice keeps the buffer alive."""
        if wav.ndim != 1:
            raise AudioError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise AudioError("Cannot play empty audio buffer")

        sd = self._backend()
        try:
            sd.play(wav, samplerate=sample_rate_hz, device=self._output_device_index)
        except Exception as error:
            raise AudioError(f"Audio playback failed: {error}") from error
        self._logger.debug(
            "Playback started: samples=%d rate=%d device=%s",
            len(wav),
            sample_rate_hz,
            self._output_device_index,
        )
