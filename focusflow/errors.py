"""Exception types raised by FocusFlow."""


class FocusFlowError(Exception):
    """Base class for FocusFlow errors."""


class InvalidTaskError(FocusFlowError, ValueError):
    """Rejected create request: empty title or no positive budget."""
