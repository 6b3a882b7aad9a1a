class CopyFixerError(Exception):
    """Base class for errors rendered as ``{"error": message}`` responses."""

    status_code = 500
    user_message = "Unexpected server error"

    def __init__(self, message: str | None = None, *, hint: str | None = None):
        self.message = message or self.user_message
        self.hint = hint
        super().__init__(self.message)


class ValidationError(CopyFixerError):
    status_code = 400
    user_message = "Invalid request"


class NotFoundError(CopyFixerError):
    status_code = 404
    user_message = "Not found"


class ConflictError(CopyFixerError):
    status_code = 409
    user_message = "Conflict"


class AdminAuthError(CopyFixerError):
    status_code = 401
    user_message = "Admin authentication required"


class ConfigurationError(CopyFixerError):
    user_message = "Server configuration incomplete"


class ProcessingError(CopyFixerError):
    user_message = "Failed to process upload"


class StorageError(CopyFixerError):
    user_message = "Storage error"


# LLM provider failures


class AuthenticationError(CopyFixerError):
    user_message = "AI service authentication failed"


class RateLimitError(CopyFixerError):
    user_message = "Rate limit exceeded. Please try again later"


class UpstreamError(CopyFixerError):
    user_message = "AI service error"

    def __init__(
        self,
        message: str | None = None,
        *,
        upstream_status: int | None = None,
        status_text: str | None = None,
        hint: str | None = None,
    ):
        self.upstream_status = upstream_status
        self.status_text = status_text
        if message is None and upstream_status is not None:
            message = f"AI service error: {upstream_status} {status_text or ''}".rstrip()
        super().__init__(message, hint=hint)


class UpstreamServiceError(UpstreamError):
    user_message = "AI service is temporarily unavailable. Please try again"


class NetworkError(UpstreamError):
    user_message = "Network error: Unable to reach AI service"


class EmptyResponseError(UpstreamError):
    user_message = "AI service returned no content"
