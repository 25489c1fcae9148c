"""Settings for the Lightspeed Retail API client."""

from typing import Optional, ClassVar
from typing import Literal
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables with error handling
try:
    load_dotenv()
except FileNotFoundError:
    # Expected when .env doesn't exist
    pass
except Exception as e:
    # Log unexpected errors but don't fail
    import warnings

    warnings.warn(f"Failed to load .env file: {e}")


class Settings(BaseSettings):
    """Configuration settings for the Lightspeed Retail API client.

    Uses Pydantic BaseSettings to load and validate configuration from environment variables.
    Credentials are optional here because callers may also pass them to the client directly.
    """

    # Credentials
    LIGHTSPEED_CLIENT_ID: Optional[str] = Field(
        default=None,
        json_schema_extra={
            "env": "LIGHTSPEED_CLIENT_ID",
            "description": "OAuth client identifier issued by Lightspeed",
            "example": "a1b2c3d4e5",
        },
    )

    LIGHTSPEED_CLIENT_SECRET: Optional[str] = Field(
        default=None,
        json_schema_extra={
            "env": "LIGHTSPEED_CLIENT_SECRET",
            "description": "OAuth client secret issued by Lightspeed",
            "example": "f6e5d4c3b2a1",
            "sensitive": True,
        },
    )

    LIGHTSPEED_REFRESH_TOKEN: Optional[str] = Field(
        default=None,
        json_schema_extra={
            "env": "LIGHTSPEED_REFRESH_TOKEN",
            "description": "Long-lived refresh token exchanged for access tokens",
            "example": "0123456789abcdef0123456789abcdef",
            "sensitive": True,
        },
    )

    # Endpoints
    LIGHTSPEED_AUTH_URL: str = Field(
        default="https://cloud.lightspeedapp.com",
        json_schema_extra={
            "env": "LIGHTSPEED_AUTH_URL",
            "description": "Base URL of the Lightspeed authorization host",
            "example": "https://cloud.lightspeedapp.com",
        },
    )

    LIGHTSPEED_API_URL: str = Field(
        default="https://api.lightspeedapp.com",
        json_schema_extra={
            "env": "LIGHTSPEED_API_URL",
            "description": "Base URL of the Lightspeed Retail API host",
            "example": "https://api.lightspeedapp.com",
        },
    )

    # Token lifecycle
    TOKEN_EXPIRY_MARGIN_SECONDS: int = Field(
        default=30,
        ge=0,
        json_schema_extra={
            "env": "TOKEN_EXPIRY_MARGIN_SECONDS",
            "description": "Seconds subtracted from the token lifetime before it is treated as expired",
            "example": 30,
        },
    )

    HTTP_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        json_schema_extra={
            "env": "HTTP_TIMEOUT",
            "description": "Timeout in seconds for requests to Lightspeed",
            "example": 30.0,
        },
    )

    # Default relations embedded by list operations
    ITEM_RELATIONS: list[str] = Field(
        default_factory=lambda: ["Category", "ItemAttributes"],
        json_schema_extra={
            "env": "ITEM_RELATIONS",
            "description": "Relations loaded by default when listing items",
            "example": '["Category", "ItemAttributes"]',
        },
    )

    CATEGORY_ITEM_RELATIONS: list[str] = Field(
        default_factory=lambda: ["Category", "ItemAttributes", "ItemShops"],
        json_schema_extra={
            "env": "CATEGORY_ITEM_RELATIONS",
            "description": "Relations loaded by default when listing items of a category",
            "example": '["Category", "ItemAttributes", "ItemShops"]',
        },
    )

    SALE_RELATIONS: list[str] = Field(
        default_factory=lambda: ["SaleLines"],
        json_schema_extra={
            "env": "SALE_RELATIONS",
            "description": "Relations loaded by default when listing sales",
            "example": '["SaleLines"]',
        },
    )

    # Logging Configuration
    LOGGING_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        json_schema_extra={
            "env": "LOGGING_LEVEL",
            "description": "Logging level for the application",
            "example": "INFO",
        },
    )

    # Accept lower/any-case input from env (e.g., "debug") and normalize
    @field_validator("LOGGING_LEVEL", mode="before")
    @classmethod
    def _normalize_logging_level(cls, v):  # type: ignore[no-untyped-def]
        return v.upper() if isinstance(v, str) else v

    LOGGER_NAME: str = Field(
        default="",
        json_schema_extra={
            "env": "LOGGER_NAME",
            "description": "Name for the logger",
            "example": "lightspeed-retail",
        },
    )

    LOG_TO_FILE: bool = Field(
        default=False,
        json_schema_extra={
            "env": "LOG_TO_FILE",
            "description": "Also write logs to lightspeed-retail.log",
            "example": False,
        },
    )

    model_config: ClassVar[SettingsConfigDict] = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
        # Enable runtime assignment so tests can patch settings fields
        "validate_assignment": True,
        "frozen": False,
    }


def validate_config(cfg: Settings) -> None:
    """Validate configuration settings.

    Ensures the credentials needed for the refresh-token exchange are present
    and that numeric values are within acceptable ranges.

    Args:
        cfg: Settings instance to validate.

    Raises:
        ValueError: If required configuration is missing or invalid.
    """
    missing = [
        name
        for name in (
            "LIGHTSPEED_CLIENT_ID",
            "LIGHTSPEED_CLIENT_SECRET",
            "LIGHTSPEED_REFRESH_TOKEN",
        )
        if not getattr(cfg, name)
    ]
    if missing:
        raise ValueError(f"Missing required settings: {', '.join(missing)}")

    # Validate log level
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if cfg.LOGGING_LEVEL.upper() not in valid_log_levels:
        raise ValueError(
            f"LOGGING_LEVEL must be one of {valid_log_levels}, got {cfg.LOGGING_LEVEL}"
        )


# Create config instance without validation (validation happens in main.py if needed)
settings = Settings()


def get_setting(name: str) -> Any:
    """Return setting value, honoring runtime test patches.

    unittest.mock.patch may set attributes directly on the instance which can
    bypass pydantic's internal field store. Prefer a direct __dict__ lookup
    first, then fall back to normal attribute access.
    """
    if name in settings.__dict__:
        return settings.__dict__[name]
    return getattr(settings, name)
