"""
Application configuration module.

Uses pydantic-settings to load configuration values from environment
variables prefixed with ``SAFFRON_`` (or a .env file). The defaults are
the values the Saffron web client itself sends, so nothing needs to be
set for normal use.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Name reported to MCP clients.
SERVER_NAME = "saffron"
SERVER_INSTRUCTIONS = "MCP server for interacting with Saffron recipe management"


def _default_token_file() -> Path:
    return Path.home() / ".saffron-tokens.json"


class Settings(BaseSettings):
    """
    Validated application settings loaded from environment variables.

    Attributes:
        graphql_url: Saffron GraphQL endpoint.
        origin:      Value sent as the Origin header; the Referer is derived from it.
        app_version: Web client version sent as x-app-version.
        platform:    Client platform sent as x-platform.
        token_file:  File holding the cached session cookies per account.
        log_level:   Logging level for the stderr log.
    """

    graphql_url: str = "https://prod.mysaffronapp.com/graphql"
    origin: str = "https://www.mysaffronapp.com"
    app_version: str = "1.4.109"
    platform: str = "main-web"
    token_file: Path = Field(default_factory=_default_token_file)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SAFFRON_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def referer(self) -> str:
        return self.origin.rstrip("/") + "/"
