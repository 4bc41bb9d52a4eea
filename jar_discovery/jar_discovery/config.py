"""Discovery configuration loaded from environment variables.

The classification pattern lists are the only settings the engine itself
consumes.  They are read once per classification pass through
:meth:`Settings.classification_patterns`, which returns an immutable
snapshot; callers that want hot-reload simply build new settings.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


_DEFAULT_APP_CONFIG_PATTERNS: list[str] = [
    r"^application(-[\w.-]+)?\.(properties|ya?ml)$",
    r"^bootstrap(-[\w.-]+)?\.(properties|ya?ml)$",
]

_DEFAULT_LOGGING_CONFIG_PATTERNS: list[str] = [
    r"^logback(-[\w.-]+)?\.(xml|groovy)$",
    r"^log4j2?(-[\w.-]+)?\.(xml|properties|ya?ml|json)$",
    r"^logging\.properties$",
]

_DEFAULT_CERTIFICATE_EXTENSIONS: list[str] = [
    ".crt",
    ".cer",
    ".pem",
    ".der",
    ".p12",
    ".pfx",
    ".jks",
    ".keystore",
    ".truststore",
]

_DEFAULT_STATIC_FOLDERS: list[str] = [
    "static/",
    "public/",
    "META-INF/resources/",
]

_DEFAULT_STATIC_EXTENSIONS: list[str] = [
    ".html",
    ".htm",
    ".css",
    ".js",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".ico",
    ".woff",
    ".woff2",
    ".ttf",
]


class ClassificationPatterns(BaseModel):
    """One consistent read of the classification pattern store."""

    model_config = ConfigDict(frozen=True)

    app_config_patterns: tuple[str, ...] = Field(
        default=tuple(_DEFAULT_APP_CONFIG_PATTERNS),
        description="Regular expressions matched against an entry's base name.",
    )
    logging_config_patterns: tuple[str, ...] = Field(
        default=tuple(_DEFAULT_LOGGING_CONFIG_PATTERNS),
        description="Regular expressions matched against an entry's base name.",
    )
    certificate_extensions: frozenset[str] = Field(default=frozenset(_DEFAULT_CERTIFICATE_EXTENSIONS))
    static_folders: tuple[str, ...] = Field(
        default=tuple(_DEFAULT_STATIC_FOLDERS),
        description="Substrings that mark an entry path as a static asset.",
    )
    static_extensions: frozenset[str] = Field(default=frozenset(_DEFAULT_STATIC_EXTENSIONS))

    @field_validator("app_config_patterns", "logging_config_patterns")
    @classmethod
    def validate_regexes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid classification pattern '{pattern}': {exc}") from exc
        return v


class Settings(BaseSettings):
    """Application settings loaded from environment variables with JAR_DISCOVERY_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="JAR_DISCOVERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    debug: bool = False

    # Telemetry
    structured_logging: bool = False
    log_level: str = "INFO"

    # Classification patterns
    app_config_patterns: list[str] = Field(default_factory=lambda: list(_DEFAULT_APP_CONFIG_PATTERNS))
    logging_config_patterns: list[str] = Field(default_factory=lambda: list(_DEFAULT_LOGGING_CONFIG_PATTERNS))
    certificate_extensions: list[str] = Field(default_factory=lambda: list(_DEFAULT_CERTIFICATE_EXTENSIONS))
    static_folders: list[str] = Field(default_factory=lambda: list(_DEFAULT_STATIC_FOLDERS))
    static_extensions: list[str] = Field(default_factory=lambda: list(_DEFAULT_STATIC_EXTENSIONS))

    @field_validator("log_level")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'.")
        return level

    def classification_patterns(self) -> ClassificationPatterns:
        """Return an immutable snapshot of the current pattern lists."""
        return ClassificationPatterns(
            app_config_patterns=tuple(self.app_config_patterns),
            logging_config_patterns=tuple(self.logging_config_patterns),
            certificate_extensions=frozenset(self.certificate_extensions),
            static_folders=tuple(self.static_folders),
            static_extensions=frozenset(self.static_extensions),
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info(
            "Loaded settings with %d app-config and %d logging-config pattern(s)",
            len(settings.app_config_patterns),
            len(settings.logging_config_patterns),
        )

    return settings
