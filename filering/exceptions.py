"""Exception classes for the file ring channel."""


class FileRingError(Exception):
    """Base error for the file ring channel."""


class ConsistencyFault(FileRingError):
    """Raised when a cursor would move outside the bounds of its block.

    This cannot happen while both sides follow the protocol, so the failed
    call is aborted rather than retried.
    """


class ConfigurationMismatch(FileRingError):
    """Raised when the channel geometry is invalid or disagrees with the file."""
