"""Timer error taxonomy"""


class TimerError(Exception):
    """Base class for timer errors"""


class ValidationError(TimerError):
    """The requested timer action is not valid for the subject as configured"""


class InvalidTimerConfigError(ValidationError):
    """Duration missing, zero or negative, so no remaining time or progress exists"""


class NotFoundError(TimerError):
    """The subject no longer exists"""


class TransientRemoteError(TimerError):
    """Network or backend failure; the action may succeed if retried"""


class StorageError(TimerError):
    """Local pause storage is unavailable or failed"""
