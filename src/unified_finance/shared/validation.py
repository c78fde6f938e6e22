"""Input validation shared by domain services.

Everything here raises InvalidInputError before any cache or network
activity takes place.
"""

import re
from collections.abc import Iterable
from datetime import date, datetime, timezone

from unified_finance.shared.exceptions import ErrorCode, InvalidInputError

# Covers indices (^GSPC), currencies (EURUSD=X), share classes (BRK-B) and exchange suffixes (7203.T)
_SYMBOL_RE = re.compile(r"^[A-Z0-9^][A-Z0-9.\-=^&]{0,19}$")
_SERIES_ID_RE = re.compile(r"^[A-Z0-9_]{1,50}$")

MAX_BATCH_SIZE = 100


def validate_symbol(symbol: str) -> str:
    """Normalize a ticker symbol to upper case, rejecting malformed input."""
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidInputError(
            "Symbol must be a non-empty string",
            field="symbol",
            error_code=ErrorCode.INVALID_SYMBOL,
        )
    normalized = symbol.strip().upper()
    if not _SYMBOL_RE.match(normalized):
        raise InvalidInputError(
            f"Invalid symbol: {symbol!r}",
            field="symbol",
            error_code=ErrorCode.INVALID_SYMBOL,
            metadata={"symbol": symbol},
        )
    return normalized


def validate_symbols(symbols: Iterable[str]) -> list[str]:
    """Validate a batch of symbols; duplicates collapse, order is preserved."""
    if isinstance(symbols, str):
        symbols = [symbols]
    normalized = list(dict.fromkeys(validate_symbol(s) for s in symbols))
    if not normalized:
        raise InvalidInputError("At least one symbol is required", field="symbols")
    if len(normalized) > MAX_BATCH_SIZE:
        raise InvalidInputError(
            f"At most {MAX_BATCH_SIZE} symbols per batch, got {len(normalized)}",
            field="symbols",
        )
    return normalized


def validate_series_id(series_id: str) -> str:
    if not isinstance(series_id, str) or not _SERIES_ID_RE.match(series_id.strip().upper()):
        raise InvalidInputError(
            f"Invalid series id: {series_id!r}", field="series_id"
        )
    return series_id.strip().upper()


def validate_range(value: int, field: str, low: int, high: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
        raise InvalidInputError(
            f"{field} must be between {low} and {high}, got {value!r}", field=field
        )
    return value


def to_utc_datetime(value: date | datetime, field: str) -> datetime:
    """Coerce a date or datetime to an aware UTC datetime.

    Naive datetimes are taken to be UTC; plain dates mean midnight UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise InvalidInputError(
        f"{field} must be a date or datetime, got {type(value).__name__}", field=field
    )
