"""wamention configuration management."""

import logging
from typing import Optional
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger("wamention.config")

_LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


class MentionSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Cross-domain lookup; session store wins when both are set
    lid_store_path: Optional[str] = Field(
        default=None,
        description="Path to the bridge session.db holding whatsmeow_lid_map",
    )
    bridge_url: Optional[str] = Field(default=None, description="HTTP bridge base URL for LID lookups")
    lookup_timeout: float = Field(default=5.0, description="HTTP bridge timeout in seconds")

    # CLI
    participants_path: Optional[str] = Field(default=None, description="Default roster JSON file")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: Optional[str] = Field(default=None, description="Also log to this file")
    debug: bool = Field(default=False, description="Debug mode (forces DEBUG logging)")

    model_config = {"env_prefix": "WAMENTION_", "env_file": ".env", "extra": "ignore"}


def load_settings(**overrides) -> MentionSettings:
    """Load settings from environment, with explicit overrides on top."""
    settings = MentionSettings(**overrides)

    if settings.lid_store_path and settings.bridge_url:
        logger.warning(
            "Both WAMENTION_LID_STORE_PATH and WAMENTION_BRIDGE_URL are set; "
            "using the session store, the bridge URL is ignored."
        )
    if settings.bridge_url:
        parsed = urlparse(settings.bridge_url)
        if parsed.scheme == "http" and parsed.hostname not in _LOCAL_HOSTS:
            logger.warning(
                f"Bridge URL {settings.bridge_url} is plain HTTP to a non-local host, "
                "phone numbers will cross the network unencrypted."
            )

    return settings
