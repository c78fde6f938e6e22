"""Status-code classification for non-2xx upstream responses.

Each status (or range) gets its own handler class; handlers are tried in
registration order and the first match wins. Add a classification by
registering a handler, not by growing an if/elif.
"""

from typing import Protocol

from unified_finance.shared.exceptions import ApiError, ErrorCode

BODY_PREVIEW_LIMIT = 500


def redact_url(url: str) -> str:
    """Drop the query string, which carries crumbs and API keys."""
    return url.split("?", 1)[0]


def preview(body: str | None, limit: int = BODY_PREVIEW_LIMIT) -> str:
    """Truncate a response body for error messages and logs."""
    if not body:
        return ""
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


class IErrorHandler(Protocol):
    """Strategy for handling a specific error condition."""

    def can_handle(self, status_code: int) -> bool:
        ...

    def handle(self, status_code: int, body: str, url: str) -> ApiError:
        ...


class _StatusHandler:
    """Maps a fixed set of statuses to one ErrorCode."""

    statuses: frozenset[int] = frozenset()
    error_code: ErrorCode = ErrorCode.EXTERNAL_API_ERROR
    summary: str = "Upstream request failed"

    def can_handle(self, status_code: int) -> bool:
        return status_code in self.statuses

    def handle(self, status_code: int, body: str, url: str) -> ApiError:
        return ApiError(
            f"{self.summary} (HTTP {status_code})",
            status_code=status_code,
            body_preview=preview(body),
            error_code=self.error_code,
            metadata={"url": redact_url(url)},
        )


class RateLimitHandler(_StatusHandler):
    """429 - upstream throttled us despite the local bucket."""

    statuses = frozenset({429})
    error_code = ErrorCode.RATE_LIMIT_EXCEEDED
    summary = "Upstream rate limit exceeded"


class AuthenticationHandler(_StatusHandler):
    """401/403 from a provider without a session, and 403 from one with a session."""

    statuses = frozenset({401, 403})
    error_code = ErrorCode.AUTHENTICATION_FAILED
    summary = "Upstream rejected credentials"


class BadRequestHandler(_StatusHandler):
    """400 - the economic-data provider's answer to an unknown series or bad argument."""

    statuses = frozenset({400})
    error_code = ErrorCode.INVALID_PARAMETER
    summary = "Upstream rejected request parameters"


class NotFoundHandler(_StatusHandler):
    statuses = frozenset({404})
    error_code = ErrorCode.DATA_NOT_FOUND
    summary = "Upstream resource not found"


class FallbackHandler(_StatusHandler):
    """Any other non-2xx status."""

    def can_handle(self, status_code: int) -> bool:
        return True


class ErrorMapperChain:
    """Chain of Responsibility for status classification."""

    def __init__(self):
        self._handlers: list[IErrorHandler] = []

    def register(self, handler: IErrorHandler) -> None:
        """Handlers are tried in registration order; first match wins."""
        self._handlers.append(handler)

    def map_error(self, status_code: int, body: str, url: str) -> ApiError:
        for handler in self._handlers:
            if handler.can_handle(status_code):
                return handler.handle(status_code, body, url)
        return FallbackHandler().handle(status_code, body, url)


def create_error_mapper_chain() -> ErrorMapperChain:
    """Factory for the standard classification chain."""
    chain = ErrorMapperChain()
    chain.register(RateLimitHandler())
    chain.register(AuthenticationHandler())
    chain.register(NotFoundHandler())
    chain.register(FallbackHandler())
    return chain


def create_fred_error_mapper_chain() -> ErrorMapperChain:
    """Standard chain plus 400 as INVALID_PARAMETER."""
    chain = ErrorMapperChain()
    chain.register(BadRequestHandler())
    chain.register(RateLimitHandler())
    chain.register(AuthenticationHandler())
    chain.register(NotFoundHandler())
    chain.register(FallbackHandler())
    return chain
