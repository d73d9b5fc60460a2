from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    HTTP_STATUS_ERROR = "HTTP_STATUS_ERROR"
    EMPTY_BODY = "EMPTY_BODY"
    INDEX_FETCH_FAILED = "INDEX_FETCH_FAILED"
    INDEX_PARSE_FAILED = "INDEX_PARSE_FAILED"
    CONTENT_UNAVAILABLE = "CONTENT_UNAVAILABLE"
    INVALID_INPUT = "INVALID_INPUT"


class JourneyError(Exception):
    """Raised for all expected failure conditions while loading a journey.

    Tool handlers let it propagate; server.py serialises it into the MCP
    error response. Subclasses preset ``code`` for each failure kind.
    """

    code: ErrorCode = ErrorCode.CONTENT_UNAVAILABLE

    def __init__(
        self,
        message: str,
        suggestion: str = "",
        recoverable: bool = False,
        *,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


class NetworkError(JourneyError):
    """The request was rejected or timed out before a response arrived."""

    code = ErrorCode.NETWORK_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            suggestion="The documentation host may be temporarily unreachable.",
            recoverable=True,
        )


class HttpStatusError(JourneyError):
    code = ErrorCode.HTTP_STATUS_ERROR

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(
            message,
            suggestion="The page may have moved or the docs host may be unavailable.",
            recoverable=status_code >= 500,
        )
        self.status_code = status_code


class EmptyBodyError(JourneyError):
    code = ErrorCode.EMPTY_BODY

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            suggestion="The documentation host returned an empty page.",
            recoverable=True,
        )


class IndexFetchError(JourneyError):
    code = ErrorCode.INDEX_FETCH_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            suggestion="The journey's index.json could not be retrieved. Try again later.",
            recoverable=True,
        )


class IndexParseError(JourneyError):
    """index.json is malformed, not an array, or lists no milestones."""

    code = ErrorCode.INDEX_PARSE_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            suggestion="The journey index is malformed; pagination cannot be built.",
            recoverable=False,
        )


class ContentUnavailableError(JourneyError):
    code = ErrorCode.CONTENT_UNAVAILABLE

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            suggestion="Every URL variant for this page failed. Check the URL or try again later.",
            recoverable=True,
        )


class InvalidInputError(JourneyError):
    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, suggestion: str) -> None:
        super().__init__(message, suggestion=suggestion, recoverable=False)
