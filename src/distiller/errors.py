"""Exception classes for Distiller.

Malformed markup never raises: the engine degrades to literal passthrough or a
silent drop. These exceptions cover misuse of the API and the internal signal
used to suspend an incremental feed.
"""

from __future__ import annotations


class DistillerError(Exception):
    """Base exception for all Distiller errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(DistillerError):
    """Invalid configuration value.

    Raised when a DistillConfig is built with values the engine cannot honor.
    """

    def __init__(self, option: str, message: str) -> None:
        """Initialize config error.

        Args:
            option: Name of the offending option (e.g., "max_length")
            message: Description of the problem
        """
        self.option = option
        super().__init__(f"Option '{option}': {message}")


class ConcurrentUseError(DistillerError):
    """A Distiller was entered while it was already running.

    The tokenizer state machine is not reentrant. Use one Distiller per parse
    or guard a shared instance with an external lock.
    """

    pass


class IncompleteInputError(DistillerError):
    """Input ended mid-token during incremental parsing.

    Internal signal only. The Distiller catches it, keeps the unconsumed tail
    from the last sync point and waits for the next feed().
    """

    def __init__(self, sync_point: int) -> None:
        self.sync_point = sync_point
        super().__init__(f"input ended mid-token (sync point {sync_point})")
