"""Transition rejections raised by the synchronizer.

Both subclass protean's ``ValidationError``. ``ConflictingWriteError`` marks a
lost race, ``InvalidTransitionError`` an illegal move.
"""

from protean.exceptions import ValidationError


class InvalidTransitionError(ValidationError):
    """The requested status is not reachable from the current one."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__({"status": [f"Cannot transition from {current} to {requested}"]})


class ConflictingWriteError(ValidationError):
    """The record moved on since the caller last read it."""

    def __init__(self, current: str, requested: str, expected: str):
        self.current = current
        self.requested = requested
        self.expected = expected
        super().__init__(
            {
                "status": [
                    f"Fulfillment order is {current}, not {expected}; "
                    f"it changed before the move to {requested} was applied"
                ]
            }
        )
