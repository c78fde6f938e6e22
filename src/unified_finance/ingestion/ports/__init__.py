"""Protocols separating the access layer from its implementations."""

from .auth import AuthSession, AuthState, IAuthProvider
from .http import HttpResponse, IHttpClient
from .pipeline import ICache, IPipeline, IRateLimiter

__all__ = [
    "AuthSession",
    "AuthState",
    "HttpResponse",
    "IAuthProvider",
    "ICache",
    "IHttpClient",
    "IPipeline",
    "IRateLimiter",
]
