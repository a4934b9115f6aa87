"""Error taxonomy for the negotiation API.

Every error carries the HTTP status it maps to and a stable ``code`` so the
exception handlers in ``locai.main`` can render a uniform JSON payload.
"""


class NegotiationError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(NegotiationError):
    """Missing or malformed caller input. Never retried."""

    status_code = 400
    code = "VALIDATION_ERROR"


class UpstreamError(NegotiationError):
    """The settings store could not be read or returned unusable data."""

    status_code = 500
    code = "UPSTREAM_ERROR"


class ComputationError(NegotiationError):
    """The engine was invoked in violation of its preconditions."""

    status_code = 500
    code = "COMPUTATION_ERROR"
