"""Error taxonomy shared by the pipeline, the HTTP service and the CLI."""

from __future__ import annotations


class PantryError(Exception):
    """Base class for errors surfaced to the caller.

    ``status_code`` and ``error`` drive the HTTP error body
    ``{error, message, statusCode}``.
    """

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": self.error,
            "message": self.message,
            "statusCode": self.status_code,
        }


class ValidationError(PantryError):
    """Malformed caller input."""

    status_code = 400
    error = "Validation Error"


class RateLimitError(PantryError):
    status_code = 429
    error = "Too Many Requests"

    def __init__(
        self,
        retry_after: int,
        message: str = "Rate limit exceeded. Please try again later.",
    ) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamError(PantryError):
    """The extraction model or product catalog returned a non-success reply."""

    status_code = 502
    error = "Bad Gateway"


class MalformedResponseError(PantryError):
    """The upstream call succeeded but its payload could not be used."""

    status_code = 502
    error = "Bad Gateway"


class ConfigurationError(PantryError):
    """A required secret or setting is missing."""

    status_code = 500
    error = "Configuration Error"


class StoreError(PantryError):
    status_code = 500
    error = "Database Error"

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ReviewStateError(PantryError):
    """A review decision was made out of order."""

    status_code = 409
    error = "Conflict"


class InvalidJSONError(ValidationError):
    error = "Invalid JSON"


class MethodNotAllowedError(PantryError):
    status_code = 405
    error = "Method Not Allowed"


class NotFoundError(PantryError):
    status_code = 404
    error = "Not Found"
