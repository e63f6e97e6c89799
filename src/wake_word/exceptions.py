"""Custom exceptions for wake word template training."""


class WakeWordError(Exception):
    """Base exception for wake word errors."""

    pass


class EmptyInputError(WakeWordError):
    """Raised when training is called without any samples."""

    pass


class NoValidSamplesError(WakeWordError):
    """Raised when every training sample is shorter than one analysis frame."""

    pass
