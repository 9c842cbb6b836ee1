"""
Engine error taxonomy.

Only input errors and invariant violations are raised.  Missing data
(no RPE, no recovery check-ins, no history) is never an error: every
computation treats it as "no signal".  Storage errors propagate as-is.
"""


class EngineError(Exception):
    """Base class for errors raised by the training engine."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(EngineError):
    """Unknown user, exercise or deload period id."""


class ConflictError(EngineError):
    """Operation would break a per-user invariant (e.g. two active deloads)."""
