"""
SecFeed Custom Exceptions
=========================

Exception hierarchy for the feed ingestion engine with error codes,
context information, and user-friendly error messages.

Feed failures keep their raw message untouched in ``.message`` so callers can
classify them (network / server / general) by substring.
"""

from typing import Optional, Dict, Any, Union
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Key-value store errors (D001-D099)
    DATABASE_CONNECTION = "D001"
    DATABASE_SCHEMA = "D002"
    DATABASE_ERROR = "D003"
    DATABASE_CORRUPTION = "D004"

    # Feed ingestion errors (F001-F099)
    FEED_INVALID_URL = "F001"
    FEED_FETCH_TIMEOUT = "F002"
    FEED_PARSE_ERROR = "F003"
    FEED_NETWORK_ERROR = "F004"
    FEED_HTTP_ERROR = "F005"
    FEED_INVALID_CONTENT = "F006"
    FEED_EMPTY = "F007"
    FEED_FETCH_FAILED = "F008"

    # Content processing errors (P001-P099)
    CONTENT_INVALID = "P001"
    CONTENT_MISSING_FIELD = "P002"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"


class FailureKind(str, Enum):
    """Coarse failure classes used when presenting fetch errors."""

    NETWORK = "network"
    SERVER = "server"
    GENERAL = "general"


class SecFeedError(Exception):
    """Base exception for all SecFeed errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize SecFeed error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": self.message,
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {self.message}"
        return self.message


def _split_kwargs(kwargs: Dict[str, Any], *handled: str) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in handled}


class ConfigurationError(SecFeedError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class StoreError(SecFeedError):
    """Key-value store errors."""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        """Initialize store error.

        Args:
            message: Error message
            key: Store key involved in the failed operation
            **kwargs: Additional arguments for SecFeedError
        """
        context = kwargs.get("context", {})
        if key:
            context["key"] = key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.DATABASE_ERROR),
            context=context,
            user_message=kwargs.get("user_message", "Local storage operation failed"),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(
                kwargs, "context", "error_code", "user_message", "recoverable"
            ),
        )


class FeedError(SecFeedError):
    """Feed retrieval and parsing errors."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize feed error.

        Args:
            message: Error message
            feed_url: Feed URL that caused the error
            **kwargs: Additional arguments for SecFeedError
        """
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_PARSE_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Feed processing failed: {message}"
            ),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(
                kwargs, "context", "error_code", "user_message", "recoverable"
            ),
        )


class HttpError(FeedError):
    """Feed endpoint answered with a non-2xx status."""

    def __init__(self, status: int, reason: Optional[str] = None, **kwargs):
        self.status = status
        self.reason = reason or ""
        message = f"HTTP error! status: {status}"
        if self.reason:
            message = f"{message} - {self.reason}"

        context = kwargs.pop("context", {})
        context["status"] = status
        kwargs.setdefault("error_code", ErrorCode.FEED_HTTP_ERROR)
        super().__init__(message, context=context, **kwargs)


class InvalidContentError(FeedError):
    """Response body carries neither an RSS nor an Atom root marker."""

    def __init__(self, message: str = "Invalid RSS/XML content received", **kwargs):
        kwargs.setdefault("error_code", ErrorCode.FEED_INVALID_CONTENT)
        super().__init__(message, **kwargs)


class FeedFormatError(FeedError):
    """No item blocks could be extracted from the payload."""

    def __init__(self, message: str = "No items found in RSS feed", **kwargs):
        kwargs.setdefault("error_code", ErrorCode.FEED_PARSE_ERROR)
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class EmptyFeedError(FeedError):
    """Items were found but none survived normalization."""

    def __init__(self, message: str = "No articles found in RSS feed", **kwargs):
        kwargs.setdefault("error_code", ErrorCode.FEED_EMPTY)
        super().__init__(message, **kwargs)


class FetchFailed(FeedError):
    """Catch-all fetch failure carrying the inner error's message verbatim."""

    def __init__(self, original_message: str, **kwargs):
        self.original_message = original_message
        kwargs.setdefault("error_code", ErrorCode.FEED_FETCH_FAILED)
        kwargs.setdefault(
            "user_message",
            "Failed to fetch articles. Please check your internet connection.",
        )
        super().__init__(original_message, **kwargs)


class ProcessingError(SecFeedError):
    """Content processing errors."""

    def __init__(self, message: str, item_index: Optional[int] = None, **kwargs):
        context = kwargs.get("context", {})
        if item_index is not None:
            context["item_index"] = item_index

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONTENT_INVALID),
            context=context,
            user_message=kwargs.get("user_message", "Article processing failed"),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(
                kwargs, "context", "error_code", "user_message", "recoverable"
            ),
        )


class ContentValidationError(ProcessingError):
    """A single feed item is missing data required to build an article."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONTENT_MISSING_FIELD),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Content validation failed: {message}"
            ),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class ValidationError(SecFeedError):
    """Data validation errors."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Invalid {field_name or 'input'}: {message}"
            ),
            recoverable=kwargs.get("recoverable", False),
            **_split_kwargs(
                kwargs, "context", "error_code", "user_message", "recoverable"
            ),
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> SecFeedError:
    """Convert generic exceptions to SecFeed exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        SecFeed exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, SecFeedError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        error = SecFeedError(
            message=f"Network error during {operation}: {str(exception)}",
            error_code=ErrorCode.FEED_NETWORK_ERROR,
            context=context,
            user_message="Network connection failed",
            recoverable=True,
        )

    elif isinstance(exception, FileNotFoundError):
        error = ConfigurationError(
            message=f"Required file not found during {operation}: {str(exception)}",
            error_code=ErrorCode.CONFIG_MISSING,
            context=context,
            user_message="Configuration file missing",
        )

    else:
        error = SecFeedError(
            message=f"Unexpected error during {operation}: {str(exception)}",
            context=context,
            user_message="An unexpected error occurred",
            recoverable=True,
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error


# Substrings checked against the raw failure message, in priority order.
_NETWORK_MARKERS = ("network", "connection", "internet", "timed out", "timeout")
_SERVER_MARKERS = ("server", "http")


def classify_failure(failure: Union[Exception, str]) -> FailureKind:
    """Classify a fetch failure from its preserved message.

    Args:
        failure: Exception (its raw message is used) or message text

    Returns:
        FailureKind for the message
    """
    if isinstance(failure, FetchFailed):
        text = failure.original_message
    elif isinstance(failure, SecFeedError):
        text = failure.message
    else:
        text = str(failure)

    text = text.lower()
    if any(marker in text for marker in _NETWORK_MARKERS):
        return FailureKind.NETWORK
    if any(marker in text for marker in _SERVER_MARKERS):
        return FailureKind.SERVER
    return FailureKind.GENERAL


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception."""
    if isinstance(exception, SecFeedError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."
