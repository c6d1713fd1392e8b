"""Exception classes for tonebox."""


class ToneBoxError(Exception):
    """Base exception for tonebox errors."""
    pass


class InvalidParameterError(ToneBoxError, ValueError):
    """Raised when an input is outside its documented domain.

    Engine state is left unchanged when this is raised.
    """
    pass


class DeviceError(ToneBoxError):
    """Raised when the audio output device cannot be opened or driven."""
    pass
