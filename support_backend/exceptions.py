"""
Error taxonomy shared by the store, the reply generator and the HTTP layer.

Every error the service surfaces derives from ``SupportError`` and carries the
three values rendered into the JSON error body:

- ``message``     human-readable text, safe to show to the end user
- ``code``        stable machine-readable code (e.g. ``RATE_LIMIT``)
- ``status_code`` HTTP status suggested for the response

``LLMError`` groups the failures of the reply generator. The chat flow treats
that family specially: a failed generation is recorded in the transcript
before the error is surfaced.
"""

from typing import Optional


class SupportError(Exception):
    """Base class for all errors surfaced by the support backend."""

    error = "API Error"
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} ({self.code}, HTTP {self.status_code})"


# ---------------------------------------------------------------------------
# Request / storage errors
# ---------------------------------------------------------------------------

class InvalidRequestError(SupportError):
    """Malformed input: bad session id shape, message length violation."""

    code = "VALIDATION_ERROR"
    status_code = 400


class EmptyMessageError(SupportError):
    code = "EMPTY_MESSAGE"
    status_code = 400

    def __init__(self, message: str = "Message cannot be empty after sanitization"):
        super().__init__(message)


class ConversationNotFoundError(SupportError):
    code = "CONVERSATION_NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Conversation not found"):
        super().__init__(message)


class StorageError(SupportError):
    """Persistence read or write failure. Fatal for the current request."""

    code = "STORAGE_ERROR"
    status_code = 500


# ---------------------------------------------------------------------------
# Reply generator errors
# ---------------------------------------------------------------------------

class LLMError(SupportError):
    """Failure of a single reply generation attempt."""

    error = "AI Service Error"
    code = "UNKNOWN_ERROR"


class MissingApiKeyError(LLMError):
    code = "MISSING_API_KEY"
    status_code = 500

    def __init__(
        self,
        message: str = "OpenAI API key is not configured. Please set OPENAI_API_KEY environment variable.",
    ):
        super().__init__(message)


class InvalidApiKeyError(LLMError):
    code = "INVALID_API_KEY"
    status_code = 401

    def __init__(self, message: str = "Invalid API key. Please check your OpenAI API key configuration."):
        super().__init__(message)


class RateLimitError(LLMError):
    code = "RATE_LIMIT"
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please wait a moment and try again."):
        super().__init__(message)


class ServiceUnavailableError(LLMError):
    code = "SERVICE_UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str = "OpenAI service is temporarily unavailable. Please try again later."):
        super().__init__(message)


class EmptyResponseError(LLMError):
    code = "EMPTY_RESPONSE"
    status_code = 500

    def __init__(self, message: str = "No response generated from the AI. Please try again."):
        super().__init__(message)


class LLMTimeoutError(LLMError):
    code = "TIMEOUT"
    status_code = 504

    def __init__(self, message: str = "Request timed out. Please try again."):
        super().__init__(message)


class ProviderAPIError(LLMError):
    """Any other error reported by the provider; keeps the provider status."""

    code = "API_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, status_code=status_code or 500)


class UnexpectedLLMError(LLMError):
    code = "UNKNOWN_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred while generating the response. Please try again.",
    ):
        super().__init__(message)
