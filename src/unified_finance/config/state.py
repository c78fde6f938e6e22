"""
Unified configuration state for unified-finance.

Single source of truth for client configuration, combining hierarchical YAML
files with environment overrides, type validation and sensible defaults. The
composition root converts these settings into the frozen value objects in
``unified_finance.ingestion.config`` before handing them to components.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from unified_finance.ingestion.config.value_objects import (
    DEFAULT_USER_AGENT,
    BatchConfig,
    FredEndpoints,
    HttpClientConfig,
    RateLimitConfig,
    YahooEndpoints,
)

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class RateLimitSettings(BaseModel):
    """Token bucket settings for one provider."""

    model_config = ConfigDict(extra="allow")

    capacity: int = Field(default=50, ge=1)
    refill_rate: float = Field(default=50.0, gt=0)
    enabled: bool = Field(default=True)

    def to_value_object(self) -> RateLimitConfig:
        return RateLimitConfig(
            capacity=self.capacity,
            refill_rate=self.refill_rate,
            enabled=self.enabled,
        )


class YahooSettings(BaseModel):
    """Cookie/crumb authenticated quote provider."""

    model_config = ConfigDict(extra="allow")

    cookie_url: str = Field(default=YahooEndpoints.cookie_url)
    crumb_url: str = Field(default=YahooEndpoints.crumb_url)
    quote_url: str = Field(default=YahooEndpoints.quote_url)
    chart_url: str = Field(default=YahooEndpoints.chart_url)
    options_url: str = Field(default=YahooEndpoints.options_url)
    quote_summary_url: str = Field(default=YahooEndpoints.quote_summary_url)
    search_url: str = Field(default=YahooEndpoints.search_url)
    lookup_url: str = Field(default=YahooEndpoints.lookup_url)
    market_summary_url: str = Field(default=YahooEndpoints.market_summary_url)
    market_time_url: str = Field(default=YahooEndpoints.market_time_url)
    screener_url: str = Field(default=YahooEndpoints.screener_url)

    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    def endpoints(self) -> YahooEndpoints:
        return YahooEndpoints(
            cookie_url=self.cookie_url,
            crumb_url=self.crumb_url,
            quote_url=self.quote_url,
            chart_url=self.chart_url,
            options_url=self.options_url,
            quote_summary_url=self.quote_summary_url,
            search_url=self.search_url,
            lookup_url=self.lookup_url,
            market_summary_url=self.market_summary_url,
            market_time_url=self.market_time_url,
            screener_url=self.screener_url,
        )


class FredSettings(BaseModel):
    """API-key documented economic-data provider."""

    model_config = ConfigDict(extra="allow")

    api_key: str | None = Field(default=None)
    base_url: str = Field(default=FredEndpoints.base_url)
    rate_limit: RateLimitSettings = Field(
        default_factory=lambda: RateLimitSettings(capacity=10, refill_rate=10.0)
    )

    @field_validator("api_key")
    @classmethod
    def blank_key_is_missing(cls, v: str | None) -> str | None:
        """Treat an empty or whitespace key as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()

    def endpoints(self) -> FredEndpoints:
        return FredEndpoints(base_url=self.base_url.rstrip("/"))


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    max_entries: int | None = Field(default=None, ge=1)


class BatchSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    max_concurrency: int = Field(default=8, ge=1, le=256)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for client config.

    Every section has defaults, so ``ConfigState()`` is a working configuration
    for the quote provider; the economic-data provider stays disabled until an
    API key is supplied.
    """

    model_config = ConfigDict(extra="allow")

    yahoo: YahooSettings = Field(default_factory=YahooSettings)
    fred: FredSettings = Field(default_factory=FredSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Environment metadata
    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")

    def http_client_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            timeout=self.yahoo.timeout,
            user_agent=self.yahoo.user_agent,
        )

    def batch_config(self) -> BatchConfig:
        return BatchConfig(max_concurrency=self.batch.max_concurrency)


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from hierarchical YAML files.

    Merges:
      1. Global defaults (model defaults)
      2. unified_finance.yaml from config_dir
      3. env/<UFC_ENV>.yaml
      4. Environment variable overrides
    """

    CONFIG_FILE = "unified_finance.yaml"

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("UFC_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load {path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Ignoring {path}: top level must be a mapping")
            return {}

        self._yaml_cache[path] = data
        logger.debug(f"Loaded config: {path}")
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if api_key := os.getenv("FRED_API_KEY"):
            config.setdefault("fred", {})["api_key"] = api_key

        if log_level := os.getenv("UFC_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        # Applies to every provider; used for offline runs and tests
        if enabled := os.getenv("UFC_RATE_LIMIT_ENABLED"):
            flag = enabled.strip().lower()
            if flag in _TRUTHY or flag in _FALSY:
                for section in ("yahoo", "fred"):
                    provider = config.setdefault(section, {})
                    provider.setdefault("rate_limit", {})["enabled"] = flag in _TRUTHY
            else:
                logger.warning(f"Ignoring UFC_RATE_LIMIT_ENABLED={enabled!r}")

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Raises:
            ValidationError: If configuration is invalid
        """
        logger.info(f"Loading configuration from {self.config_dir} (env: {self.env})")

        config = self._load_yaml(self.config_dir / self.CONFIG_FILE)

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        logger.info(
            f"Configuration loaded: fred_enabled={state.fred.api_key is not None}, "
            f"batch_concurrency={state.batch.max_concurrency}"
        )
        return state


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $UFC_CONFIG_DIR or ./config
    """
    if config_dir is None:
        config_dir = os.getenv("UFC_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.warning(f"Config directory not found at {config_dir}, using defaults")

    loader = ConfigLoader(config_dir=config_dir)
    return loader.load()


__all__ = [
    "BatchSettings",
    "CacheSettings",
    "ConfigLoader",
    "ConfigState",
    "FredSettings",
    "LoggingSettings",
    "RateLimitSettings",
    "YahooSettings",
    "get_config",
]
