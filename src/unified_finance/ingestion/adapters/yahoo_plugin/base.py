"""Outbound call construction for the quote provider.

Every call carries the session's crumb as a query parameter and its cookies.
"""

from typing import Any

from unified_finance.ingestion.ports.auth import AuthSession
from unified_finance.ingestion.ports.http import HttpResponse, IHttpClient
from unified_finance.ingestion.ports.pipeline import OutboundCall


def authenticated_get(
    http_client: IHttpClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> OutboundCall:
    """Build a call closure for RequestPipeline.execute.

    The pipeline decides which session to pass, so a retry after
    re-authentication picks up the new crumb automatically.
    """

    async def call(session: AuthSession | None) -> HttpResponse:
        query = dict(params or {})
        cookies = None
        if session is not None:
            query["crumb"] = session.token
            cookies = dict(session.cookies)
        return await http_client.get(url, params=query, cookies=cookies)

    return call
