"""HTTP communication abstractions for the access layer.

Separates the HTTP transport from business logic (auth, rate limiting, error
classification). Allows easy mocking and swapping of HTTP implementations in
tests.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class HttpResponse:
    """HTTP response data container.

    ``body`` is the raw decoded text; JSON decoding is the pipeline's job so
    that malformed bodies can be classified rather than crash the transport.
    """

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    cookies: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class IHttpClient(Protocol):
    """Abstraction for HTTP client.

    Single Responsibility: Execute HTTP requests and return responses.
    Does NOT handle:
    - Response classification
    - Re-authentication
    - Rate limiting
    """

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute GET request.

        Args:
            url: Full URL to request
            params: Query parameters
            headers: HTTP headers merged over the client defaults
            cookies: Cookies to send with this request
            timeout: Request timeout in seconds

        Raises:
            aiohttp.ClientError: On network or connection errors
            asyncio.TimeoutError: When the request exceeds its timeout
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...
