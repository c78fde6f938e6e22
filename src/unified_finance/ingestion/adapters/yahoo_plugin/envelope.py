"""Unwrapping of the quote provider's common response envelope.

    {"<resource>": {"result": [...] | null, "error": {...} | null}}

A populated error is never a successful answer. An empty result is treated
as not-found unless the endpoint documents empty pages as valid.
"""

from typing import Any

from unified_finance.shared.exceptions import DataNotFoundError, DataParsingError


def unwrap_result(
    body: Any,
    resource: str,
    key: str = "result",
    allow_empty: bool = False,
) -> list[dict[str, Any]]:
    """Return the list stored under ``resource.key``.

    Raises:
        DataNotFoundError: Envelope carries an error, or no results and
            ``allow_empty`` is false
        DataParsingError: Envelope is missing or has the wrong shape
    """
    if not isinstance(body, dict) or not isinstance(body.get(resource), dict):
        raise DataParsingError(
            f"Response has no '{resource}' envelope",
            metadata={"resource": resource},
        )
    envelope = body[resource]

    error = envelope.get("error")
    if error:
        code, description = _describe(error)
        raise DataNotFoundError(
            f"{resource}: {description}",
            metadata={"resource": resource, "upstream_code": code},
        )

    result = envelope.get(key)
    if result is None or result == []:
        if allow_empty:
            return []
        raise DataNotFoundError(
            f"{resource}: empty {key}", metadata={"resource": resource}
        )
    if not isinstance(result, list):
        raise DataParsingError(
            f"{resource}.{key} is not a list", metadata={"resource": resource}
        )
    return result


def first_result(body: Any, resource: str, key: str = "result") -> dict[str, Any]:
    result = unwrap_result(body, resource, key)[0]
    if not isinstance(result, dict):
        raise DataParsingError(
            f"{resource}.{key}[0] is not an object", metadata={"resource": resource}
        )
    return result


def _describe(error: Any) -> tuple[str | None, str]:
    if isinstance(error, dict):
        return error.get("code"), error.get("description") or "upstream error"
    return None, str(error)
