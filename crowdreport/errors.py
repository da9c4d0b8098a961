"""
Error taxonomy of the reporting engine.

Every error is raised synchronously by the operation that detected it and is
never retried by the engine. The HTTP layer maps them to status codes in
main.py.
"""


class ReportingError(Exception):
    """Base class for all engine errors."""


class NotFound(ReportingError):
    """A report, reporter, trend, alert, campaign or flag id is unknown."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class DuplicateVote(ReportingError):
    """The principal already voted on this report."""

    def __init__(self, report_id: str, principal_id: str):
        self.report_id = report_id
        self.principal_id = principal_id
        super().__init__(f"{principal_id} has already voted on report {report_id}")


class InvalidTransition(ReportingError):
    """The requested state change is not allowed from the current state."""


class ValidationError(ReportingError):
    """Missing or malformed input (required submission fields, bad ids, ...)."""
