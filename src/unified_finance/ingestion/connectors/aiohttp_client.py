"""Concrete HTTP client implementation for async requests.

Wraps aiohttp behind the IHttpClient abstraction.
"""

from typing import Any

import aiohttp

from unified_finance.infrastructure.observability import get_infrastructure_logger
from unified_finance.ingestion.config.value_objects import HttpClientConfig
from unified_finance.ingestion.ports.http import HttpResponse, IHttpClient

logger = get_infrastructure_logger("aiohttp-client")


class AiohttpClient(IHttpClient):
    """HTTP client implementation using aiohttp.

    One pooled ClientSession is shared by every request the client makes.
    Its cookie jar keeps whatever the upstream sets, and explicit ``cookies``
    passed per request are sent on top of it.
    """

    def __init__(self, config: HttpClientConfig | None = None):
        self.config = config or HttpClientConfig()
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.config.timeout,
                connect=self.config.connect_timeout,
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers=self.config.default_headers(),
                cookie_jar=aiohttp.CookieJar(),
            )
            logger.debug("session_created", timeout=self.config.timeout)
        return self._session

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
            url: Full URL
            params: Query parameters; None values are dropped
            headers: HTTP headers merged over the defaults
            cookies: Cookies for this request
            timeout: Request timeout override

        Returns:
            HttpResponse with status, raw body text, headers and response cookies

        Raises:
            aiohttp.ClientError: On connection errors
            asyncio.TimeoutError: On timeout
        """
        session = await self._get_session()
        timeout_obj = aiohttp.ClientTimeout(total=timeout or self.config.timeout)
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}

        async with session.get(
            url,
            params=query,
            headers=headers,
            cookies=cookies,
            timeout=timeout_obj,
            ssl=self.config.verify_ssl,
        ) as resp:
            body = await resp.text(errors="replace")
            logger.debug("http_get", url=url, status=resp.status)
            return HttpResponse(
                status_code=resp.status,
                body=body,
                headers=dict(resp.headers),
                url=str(resp.url),
                cookies={name: morsel.value for name, morsel in resp.cookies.items()},
            )

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
