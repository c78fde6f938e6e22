"""Configuration value objects for dependency injection.

Instead of injecting the global ConfigState into each component, the
composition root converts it into these frozen dataclasses. Enables:
- Easy testing with different configurations
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 30.0
    connect_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "en-US,en;q=0.9"
    verify_ssl: bool = True

    def default_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json,text/html;q=0.9,*/*;q=0.8",
            "Accept-Language": self.accept_language,
        }


@dataclass(frozen=True)
class RateLimitConfig:
    """Token bucket parameters for one provider.

    capacity is the burst size; refill_rate is tokens added per second.
    """

    capacity: int = 50
    refill_rate: float = 50.0
    enabled: bool = True

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        if self.refill_rate <= 0:
            raise ValueError(f"refill_rate must be positive, got {self.refill_rate}")


@dataclass(frozen=True)
class YahooEndpoints:
    """URLs of the cookie/crumb authenticated quote provider."""

    cookie_url: str = "https://fc.yahoo.com"
    crumb_url: str = "https://query1.finance.yahoo.com/v1/test/getcrumb"
    quote_url: str = "https://query1.finance.yahoo.com/v7/finance/quote"
    chart_url: str = "https://query2.finance.yahoo.com/v8/finance/chart"
    options_url: str = "https://query2.finance.yahoo.com/v7/finance/options"
    quote_summary_url: str = "https://query2.finance.yahoo.com/v10/finance/quoteSummary"
    search_url: str = "https://query1.finance.yahoo.com/v1/finance/search"
    lookup_url: str = "https://query1.finance.yahoo.com/v1/finance/lookup"
    market_summary_url: str = (
        "https://query1.finance.yahoo.com/v6/finance/quote/marketSummary"
    )
    market_time_url: str = "https://query1.finance.yahoo.com/v6/finance/markettime"
    screener_url: str = (
        "https://query1.finance.yahoo.com/v1/finance/screener/predefined/saved"
    )


@dataclass(frozen=True)
class FredEndpoints:
    """URLs of the API-key documented economic-data provider."""

    base_url: str = "https://api.stlouisfed.org/fred"

    @property
    def series_url(self) -> str:
        return f"{self.base_url}/series"

    @property
    def observations_url(self) -> str:
        return f"{self.base_url}/series/observations"


@dataclass(frozen=True)
class BatchConfig:
    """Bounded fan-out for multi-symbol operations."""

    max_concurrency: int = 8

    def __post_init__(self):
        if self.max_concurrency <= 0:
            raise ValueError(
                f"max_concurrency must be positive, got {self.max_concurrency}"
            )
