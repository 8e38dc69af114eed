class AudioError(Exception):
    """Raised when chime synthesis or playback fails."""


class AudioDependencyError(AudioError):
    """Raised when the sounddevice/PortAudio backend is unavailable."""
