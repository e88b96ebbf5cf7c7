"""Error taxonomy for the chat API."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of a Response Source failure."""

    AUTH = "auth"
    OVERLOADED = "overloaded"
    UNKNOWN = "unknown"


class ResponseSourceError(Exception):
    """Raised by the AI backend boundary with a typed failure kind."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UNKNOWN):
        super().__init__(message)
        self.kind = kind


def classify_error(error: BaseException) -> ErrorKind:
    """Map an arbitrary upstream failure onto an ErrorKind."""
    if isinstance(error, ResponseSourceError):
        return error.kind

    text = str(error)
    if "API_KEY" in text:
        return ErrorKind.AUTH
    if "quota" in text or "limit" in text:
        return ErrorKind.OVERLOADED
    return ErrorKind.UNKNOWN


class ChatError(Exception):
    """Base class for errors rendered as JSON by the API."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class InvalidRequestError(ChatError):
    """Client sent an unusable request."""

    status_code = 400
    message = "Message is required"


class RateLimitedError(ChatError):
    """Client exceeded its request quota for the current window."""

    status_code = 429
    message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int):
        super().__init__()
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "retryAfter": self.retry_after}

    @property
    def headers(self) -> dict[str, str]:
        return {"Retry-After": str(self.retry_after)}


class AuthFailureError(ChatError):
    """The AI backend rejected our credentials."""

    status_code = 500
    message = "AI service authentication failed. Please contact support."


class OverloadedError(ChatError):
    """The AI backend is out of quota or throttling us."""

    status_code = 429
    message = "AI service is temporarily busy. Please try again in a moment."


class UnknownChatError(ChatError):
    """Any other AI backend failure; carries displayable fallback text."""

    status_code = 500
    message = "Sorry, I encountered an issue. Please try again."

    def __init__(self, fallback: str):
        super().__init__()
        self.fallback = fallback

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "fallback": self.fallback}
