"""Public exports for phase-finished audio cues."""

from .chime import ChimeConfig, ChimePlayer, synthesize_chime
from .errors import AudioDependencyError, AudioError
from .output import SoundDeviceAudioOutput

__all__ = [
    "AudioDependencyError",
    "AudioError",
    "ChimeConfig",
    "ChimePlayer",
    "SoundDeviceAudioOutput",
    "synthesize_chime",
]
