"""Error taxonomy for the newsletter paging engine."""

from typing import Optional


class InboxError(Exception):
    """Base class for errors raised by the inbox package."""
    pass


class FetchFailure(InboxError):
    """A page request was rejected or could not be completed.

    The loaded window is never modified by a failed fetch, so callers can
    retry by issuing another fetch.
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.cause = cause

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (offset {self.offset})"


class InvalidTarget(InboxError):
    """Navigation target that cannot be resolved in the loaded window.

    Navigation never raises this; it is built for logging and resolved as
    the no-selection case.
    """

    def __init__(self, target_id: Optional[str]):
        super().__init__(f"Newsletter {target_id!r} is not in the loaded window")
        self.target_id = target_id
