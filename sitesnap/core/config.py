"""Configuration module for the sitesnap archiving service.

Provides Pydantic-based configuration management with environment variable
support and field validation. Every field can be overridden with a
``SITESNAP_``-prefixed environment variable or a ``.env`` file.

Example:
    >>> from sitesnap.core.config import Settings
    >>> settings = Settings(data_dir="/srv/snapshots")
    >>> print(settings.default_max_pages)
    20
"""

import logging
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

SKIP_CATEGORIES = ("image", "stylesheet", "script")


class Settings(BaseSettings):
    """Archiving service configuration.

    Attributes:
        data_dir: Root directory holding one subdirectory per archived host
        default_max_pages: Page budget used when a request does not supply one
        page_timeout: Timeout in seconds for HTML page fetches
        asset_timeout: Timeout in seconds for asset fetches (never shorter
            than page_timeout, assets are typically larger)
        asset_interval: Minimum seconds between two asset downloads of a crawl
        page_interval: Minimum seconds between two page fetches of a crawl
        user_agent: Browser-like User-Agent header sent with every request
        extra_skip_patterns: Additional skip regexes keyed by asset category
            (image, stylesheet, script), appended to the built-in rules
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional rotating log file path

    Raises:
        ValidationError: If values are out of range

    Example:
        >>> settings = Settings(data_dir="/tmp/snaps", page_interval=0.5)
        >>> settings.asset_timeout
        60.0
    """

    data_dir: Path = Path("data")
    default_max_pages: int = 20

    # Network
    page_timeout: float = 30.0
    asset_timeout: float = 60.0
    user_agent: str = DEFAULT_USER_AGENT

    # Throttling
    asset_interval: float = 0.2
    page_interval: float = 1.0

    # Resource classification
    extra_skip_patterns: dict[str, list[str]] = {}

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="SITESNAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("default_max_pages")
    @classmethod
    def validate_default_max_pages(cls: type["Settings"], v: int) -> int:
        """Validate the default page budget is positive.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Default max pages value

        Returns:
            Validated default_max_pages

        Raises:
            ValueError: If default_max_pages is not positive
        """
        if v <= 0:
            raise ValueError("default_max_pages must be positive")
        return v

    @field_validator("page_timeout", "asset_timeout")
    @classmethod
    def validate_timeouts(cls: type["Settings"], v: float) -> float:
        """Validate network timeouts are positive."""
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("asset_interval", "page_interval")
    @classmethod
    def validate_intervals(cls: type["Settings"], v: float) -> float:
        """Validate throttle intervals are not negative.

        Zero disables the corresponding wait, which is what tests use.
        """
        if v < 0:
            raise ValueError("throttle intervals must not be negative")
        return v

    @field_validator("extra_skip_patterns")
    @classmethod
    def validate_skip_categories(
        cls: type["Settings"], v: dict[str, list[str]]
    ) -> dict[str, list[str]]:
        """Validate extra skip patterns only target known asset categories.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Mapping of category name to regex list

        Returns:
            Validated mapping

        Raises:
            ValueError: If a category is not image, stylesheet or script
        """
        unknown = sorted(set(v) - set(SKIP_CATEGORIES))
        if unknown:
            raise ValueError(
                f"unknown skip categories: {', '.join(unknown)} "
                f"(expected one of {', '.join(SKIP_CATEGORIES)})"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls: type["Settings"], v: str) -> str:
        """Validate log_level names a standard logging level."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"invalid log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_timeout_order(self) -> "Settings":
        """Ensure asset downloads get at least as long as page fetches."""
        if self.asset_timeout < self.page_timeout:
            raise ValueError("asset_timeout must not be shorter than page_timeout")
        return self
