"""Configuration models for the sync API."""

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SUPPORTED_LOCALES: list[str] = ["en", "fr", "es", "de", "pt", "it"]


class LocaleConfig(BaseModel):
    """Configuration for locale negotiation."""

    default_locale: str = Field(
        default="en", description="Locale used when no Accept-Language entry matches"
    )
    supported_locales: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_LOCALES),
        min_length=1,
        description="Two-letter lowercase primary subtags accepted by the API",
    )

    @model_validator(mode="after")
    def default_must_be_supported(self) -> "LocaleConfig":
        """Negotiation must always end on a supported tag."""
        if self.default_locale not in self.supported_locales:
            raise ValueError(
                f"default_locale '{self.default_locale}' is not one of "
                f"supported_locales {self.supported_locales}"
            )
        return self


class SyncConfig(BaseModel):
    """Configuration for incremental sync queries."""

    default_limit: int = Field(default=20, ge=1, description="Page size when limit is omitted")
    watermark_field: str = Field(
        default="updated_at", description="Column compared against sync_from"
    )


class ApiConfig(BaseModel):
    """Configuration for the HTTP boundary."""

    prefix: str = Field(default="/api/v1", description="Route prefix for resource endpoints")
    host: str = Field(default="127.0.0.1", description="Bind address for uvicorn")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port for uvicorn")


class DatabaseConfig(BaseModel):
    """Configuration for the SQLAlchemy collection store."""

    url: str = Field(default="sqlite:///./walletsync.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Log emitted SQL statements")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="If True, output JSON logs. If False, use console format.",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional path to log file. If None, logs only to stdout.",
    )


class AppConfig(BaseSettings):
    """Main application configuration.

    This class uses pydantic-settings to load configuration from environment
    variables with the APP_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    locale: LocaleConfig = Field(default_factory=LocaleConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
