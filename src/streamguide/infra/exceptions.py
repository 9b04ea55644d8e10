"""
Custom exceptions for streamguide operations.

Every error aborts the whole operation that raised it; there is no
partial-result mode. Callers decide whether to retry, skip, or surface it.
"""


class StreamGuideError(Exception):
    """Base exception for all streamguide errors."""

    pass


class InvalidInputError(StreamGuideError):
    """Raised when an argument has the wrong shape (e.g. non-string duration)."""

    pass


class MalformedDurationError(StreamGuideError):
    """Raised when a duration token is missing or does not match the grammar."""

    pass


class ScheduleError(StreamGuideError):
    """Raised when a catalog cannot be turned into a daily schedule."""

    pass


class EmptyCatalogError(ScheduleError):
    """Raised when synthesis is asked to loop over zero items."""

    pass


class ZeroDurationCatalogError(ScheduleError):
    """Raised when no catalog item has a positive duration."""

    pass
