"""
Cookie/crumb authentication for the quote provider.

The provider requires every call to carry an anti-forgery token ("crumb")
bound to session cookies. Obtaining the pair takes two round trips, so it is
done once per client lifetime and repeated only after the upstream rejects
the current session.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

import aiohttp

from unified_finance.infrastructure.observability import get_ingestion_logger
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.auth import AuthSession, AuthState
from unified_finance.ingestion.ports.http import IHttpClient
from unified_finance.shared.exceptions import AuthenticationError, ErrorCode

MIN_CRUMB_LENGTH = 10
# Bodies served by the crumb endpoint when it refuses to issue one
_ERROR_BODY_PREFIXES = ("<!doctype", "<html", '{"error"')

AUTH_TIMEOUT = 15.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_crumb(body: str) -> str:
    """Return the crumb carried by ``body`` or raise AuthenticationError."""
    crumb = (body or "").strip()
    if not crumb:
        raise AuthenticationError(
            "Crumb endpoint returned an empty body",
            error_code=ErrorCode.CRUMB_ACQUISITION_FAILED,
        )
    if crumb.lower().startswith(_ERROR_BODY_PREFIXES):
        raise AuthenticationError(
            "Crumb endpoint returned an error document",
            error_code=ErrorCode.CRUMB_ACQUISITION_FAILED,
        )
    if len(crumb) < MIN_CRUMB_LENGTH:
        raise AuthenticationError(
            f"Crumb shorter than {MIN_CRUMB_LENGTH} characters",
            error_code=ErrorCode.CRUMB_ACQUISITION_FAILED,
            metadata={"length": len(crumb)},
        )
    return crumb


class YahooAuthProvider:
    """Acquires and holds the session for the quote provider.

    The held AuthSession is replaced wholesale, never mutated. Any failure
    to authenticate moves the provider to FAILED, after which every call
    raises AuthenticationError without touching the network.
    """

    unauthenticated_statuses = frozenset({401})

    def __init__(
        self,
        http_client: IHttpClient,
        endpoints: YahooEndpoints | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.http_client = http_client
        self.endpoints = endpoints or YahooEndpoints()
        self._clock = clock
        self._state = AuthState.UNAUTHENTICATED
        self._session: AuthSession | None = None
        self._lock = asyncio.Lock()
        self.logger = get_ingestion_logger("yahoo-auth", provider="YAHOO")

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def session(self) -> AuthSession | None:
        return self._session

    def _ensure_usable(self) -> None:
        if self._state is AuthState.FAILED:
            raise AuthenticationError(
                "Authentication previously failed; create a new client to retry"
            )

    async def authenticate(self) -> AuthSession:
        """Run the cookie + crumb handshake and hold the resulting session.

        Raises:
            AuthenticationError: On any step failure, or if already FAILED
        """
        self._ensure_usable()
        previous = self._state
        self._state = AuthState.AUTHENTICATING
        self.logger.debug("auth_started")

        try:
            session = await self._handshake()
        except AuthenticationError as e:
            self._state = AuthState.FAILED
            self.logger.error("auth_failed", code=e.code, error=e.message)
            raise
        except asyncio.CancelledError:
            self._state = previous
            raise

        self._session = session
        self._state = AuthState.AUTHENTICATED
        self.logger.info("auth_succeeded", cookies=len(session.cookies))
        return session

    async def _handshake(self) -> AuthSession:
        # Step 1: the provider sets its cookies even on error pages
        try:
            page = await self.http_client.get(
                self.endpoints.cookie_url, timeout=AUTH_TIMEOUT
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthenticationError(
                f"Failed to load session cookies: {e.__class__.__name__}",
                metadata={"url": self.endpoints.cookie_url},
            ) from e
        if not page.ok:
            self.logger.warning("cookie_page_status", status=page.status_code)
        cookies = dict(page.cookies)

        # Step 2: exchange the cookies for a crumb
        try:
            response = await self.http_client.get(
                self.endpoints.crumb_url, cookies=cookies, timeout=AUTH_TIMEOUT
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthenticationError(
                f"Failed to fetch crumb: {e.__class__.__name__}",
                error_code=ErrorCode.CRUMB_ACQUISITION_FAILED,
                metadata={"url": self.endpoints.crumb_url},
            ) from e
        if not response.ok:
            raise AuthenticationError(
                f"Crumb endpoint returned HTTP {response.status_code}",
                error_code=ErrorCode.CRUMB_ACQUISITION_FAILED,
                metadata={"status_code": response.status_code},
            )

        crumb = validate_crumb(response.body)
        cookies.update(response.cookies)
        return AuthSession(token=crumb, cookies=cookies, acquired_at=self._clock())

    async def current_session(self) -> AuthSession:
        """Held session, authenticating on first use.

        Concurrent first callers share one handshake.
        """
        self._ensure_usable()
        if self._session is not None:
            return self._session
        async with self._lock:
            if self._session is not None:
                return self._session
            return await self.authenticate()

    async def reauthenticate(self, stale: AuthSession | None) -> AuthSession:
        """Replace ``stale`` with a fresh session.

        If another task already replaced it, the newer session is returned
        and no second handshake happens.
        """
        async with self._lock:
            self._ensure_usable()
            if self._session is not None and self._session is not stale:
                self.logger.debug("reauth_skipped_already_replaced")
                return self._session
            self.logger.info("reauth_started")
            return await self.authenticate()

    def mark_failed(self, status_code: int) -> None:
        """Give up after the upstream rejected a freshly issued session."""
        self._state = AuthState.FAILED
        self._session = None
        self.logger.error("session_rejected_after_renewal", status=status_code)
