"""Failure taxonomy for the import pipeline.

Every failure carries an HTTP status and a fixed, caller-safe message.  The
exception text itself (``str(exc)``) and any chained cause are diagnostic
detail meant for the logs only.
"""


class ImportFailure(Exception):
    status_code = 500
    public_message = "An unexpected error occurred."


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class InvalidInputError(ImportFailure):
    status_code = 400
    public_message = "Invalid URL"


class InvalidURLError(InvalidInputError):
    pass


class SchemeNotAllowedError(InvalidInputError):
    public_message = "Only http/https allowed"


class AccessDeniedError(ImportFailure):
    status_code = 403
    public_message = "Access denied"


class PrivateNetworkDeniedError(AccessDeniedError):
    public_message = "Private network access denied"


# ---------------------------------------------------------------------------
# Resource limits (terminal, never retried)
# ---------------------------------------------------------------------------

class ResourceLimitError(ImportFailure):
    pass


class ContentTooLargeError(ResourceLimitError):
    status_code = 413
    public_message = "Content too large"


class FetchTimeoutError(ResourceLimitError):
    """The upstream did not deliver the body within the fetch time budget.

    Answered with 504 rather than a 4xx: the caller's request was valid and it
    is the upstream that failed to respond in time.  Like every resource limit
    it is terminal and never retried.
    """

    status_code = 504
    public_message = "Upstream request timed out"


# ---------------------------------------------------------------------------
# Upstream failures
# ---------------------------------------------------------------------------

class UpstreamNetworkError(ImportFailure):
    status_code = 502
    public_message = "Failed to fetch URL"


class ResolutionFailedError(UpstreamNetworkError):
    public_message = "Could not resolve host"


class TooManyRedirectsError(UpstreamNetworkError):
    public_message = "Too many redirects"


class UpstreamStatusError(UpstreamNetworkError):
    def __init__(self, message: str, upstream_status: int) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return f"Upstream returned HTTP {self.upstream_status}"


class ExtractionFailedError(ImportFailure):
    status_code = 500
    public_message = "Failed to parse content"
