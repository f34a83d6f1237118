"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from debridarr.infrastructure.sources.constants import DEFAULT_USER_AGENT

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _positive(name: str, v: float) -> float:
    if v <= 0:
        raise ValueError(f"{name} must be > 0")
    return v


class CacheConfig(BaseModel):
    """Resolved-stream cache (in-process, lost on restart)."""

    ttl_seconds: int = Field(
        default=3600,
        description="Lifetime of a cached stream list (seconds).",
    )
    max_entries: Optional[int] = Field(
        default=None,
        description="Upper bound on cached keys; oldest pruned first. None = unbounded.",
    )

    @field_validator("ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache.ttl_seconds must be >= 0")
        return v

    @field_validator("max_entries")
    @classmethod
    def _validate_max_entries(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("cache.max_entries must be > 0")
        return v


class TrackerConfig(BaseModel):
    """One scraped tracker."""

    enabled: bool = True
    base_url: str
    cookie: Optional[str] = Field(
        default=None,
        description="Session cookie; required to read real info hashes on gated trackers.",
    )
    detail_limit: int = Field(
        default=10,
        description="Max detail pages fetched per search to resolve hashes.",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class JackettConfig(BaseModel):
    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout_seconds: float = 15.0

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        return _positive("sources.jackett.timeout_seconds", v)

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.api_key)


class SourcesConfig(BaseModel):
    """Torrent discovery backends."""

    timeout_seconds: float = Field(
        default=10.0,
        description="Per-source deadline applied by the aggregator.",
    )
    jackett: JackettConfig = Field(default_factory=JackettConfig)
    rutor: TrackerConfig = Field(
        default_factory=lambda: TrackerConfig(base_url="http://rutor.info")
    )
    rutracker: TrackerConfig = Field(
        default_factory=lambda: TrackerConfig(base_url="https://rutracker.org")
    )
    kinozal: TrackerConfig = Field(
        default_factory=lambda: TrackerConfig(base_url="https://kinozal.tv")
    )

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        return _positive("sources.timeout_seconds", v)


class ResolverConfig(BaseModel):
    """Ranking and availability resolution knobs."""

    max_candidates: int = Field(
        default=15,
        description="Only the top-N ranked candidates are checked against the debrid cache.",
    )
    max_concurrent: int = Field(
        default=3,
        description="Parallel availability checks per request.",
    )
    seeder_margin: int = Field(
        default=10,
        description="Seeder difference above which seeders beat quality when ranking.",
    )

    @field_validator("max_candidates", "max_concurrent")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("seeder_margin")
    @classmethod
    def _validate_margin(cls, v: int) -> int:
        if v < 0:
            raise ValueError("resolver.seeder_margin must be >= 0")
        return v


class MetadataConfig(BaseModel):
    base_url: str = "http://www.omdbapi.com/"
    omdb_api_key: str = Field(
        default="trilogy",
        description="OMDb API key (the public demo key works for light use).",
    )
    timeout_seconds: float = 5.0

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        return _positive("metadata.timeout_seconds", v)


class DebridConfig(BaseModel):
    base_url: str = "https://api.real-debrid.com/rest/1.0"
    timeout_seconds: float = 10.0

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        return _positive("debrid.timeout_seconds", v)

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/sources/resolver/...).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="debridarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Default timeout of the shared HTTP client.",
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    debrid: DebridConfig = Field(default_factory=DebridConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        return _positive("http_timeout_seconds", v)

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read DEBRIDARR_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - DEBRIDARR_LOG_LEVEL
    - DEBRIDARR_CACHE_TTL_SECONDS
    - DEBRIDARR_RUTRACKER_COOKIE
    - JACKETT_URL / JACKETT_API_KEY (also with DEBRIDARR_ prefix)
    """

    model_config = SettingsConfigDict(
        env_prefix="DEBRIDARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_ttl_seconds: Optional[int] = None
    cache_max_entries: Optional[int] = None

    sources_timeout_seconds: Optional[float] = None
    jackett_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDARR_JACKETT_URL", "JACKETT_URL"),
    )
    jackett_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBRIDARR_JACKETT_API_KEY", "JACKETT_API_KEY"),
    )
    rutor_enabled: Optional[bool] = None
    rutracker_enabled: Optional[bool] = None
    rutracker_cookie: Optional[str] = None
    kinozal_enabled: Optional[bool] = None
    kinozal_cookie: Optional[str] = None

    resolver_max_candidates: Optional[int] = None
    resolver_max_concurrent: Optional[int] = None

    omdb_api_key: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
