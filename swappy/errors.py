"""Exceptions raised by the analysis core."""


class SwappyError(Exception):
    """Base class for all swappy errors."""


class NotInitializedError(SwappyError):
    """Analysis was requested before the session was set up, or after cleanup."""


class AudioNotLoadedError(NotInitializedError):
    """No decoded audio buffer is present in the session."""

    def __init__(self, message: str = "Audio not loaded"):
        super().__init__(message)


class UnsupportedAudioError(SwappyError, ValueError):
    """The provided bytes could not be decoded as audio."""
