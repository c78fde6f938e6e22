"""Session abstractions for providers that authenticate before each call."""

from datetime import datetime
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class AuthState(str, Enum):
    """Lifecycle of a provider session.

    FAILED is terminal for the owning client instance.
    """

    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"
    FAILED = "FAILED"


class AuthSession(BaseModel):
    """Anti-forgery token plus the cookies it is bound to.

    Immutable: a session is replaced wholesale, never edited, so readers can
    never observe a token from one session paired with cookies from another.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    cookies: dict[str, str] = Field(default_factory=dict)
    acquired_at: datetime

    def __repr__(self) -> str:
        # The token is a credential
        return f"AuthSession(cookies={sorted(self.cookies)}, acquired_at={self.acquired_at!r})"

    __str__ = __repr__


class IAuthProvider(Protocol):
    """Holds the session for a provider that requires one."""

    unauthenticated_statuses: frozenset[int]

    async def current_session(self) -> AuthSession:
        """Return the held session, authenticating lazily on first use."""
        ...

    async def reauthenticate(self, stale: AuthSession | None) -> AuthSession:
        """Replace ``stale`` with a fresh session unless another task already did."""
        ...

    def mark_failed(self, status_code: int) -> None:
        """Move to FAILED; later calls raise without touching the network."""
        ...
