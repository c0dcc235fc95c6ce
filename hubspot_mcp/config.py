from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

from pydantic import BaseModel, Field

from hubspot_mcp.connectors.base import ConfigurationError

API = "https://api.hubapi.com"
TOKEN_ENV = "HUBSPOT_ACCESS_TOKEN"
LOG_LEVEL_ENV = "HUBSPOT_MCP_LOG_LEVEL"

# HubSpot private apps allow 100 requests per rolling 10 seconds.
RATE_WINDOW_SECONDS = 10.0
RATE_CEILING = 100
RATE_SAFETY_MARGIN_SECONDS = 0.05
DEFAULT_RETRY_AFTER_SECONDS = 10.0

SEARCH_LIMIT = 20
DEFAULT_LIST_LIMIT = 10
MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 100

MISSING_TOKEN_MESSAGE = (
    f"{TOKEN_ENV} environment variable is not set. "
    "Get your access token from HubSpot developer account and set it as an environment variable. "
    "See: https://developers.hubspot.com/docs/api/private-apps"
)


class Settings(BaseModel):
    """Strongly-typed runtime configuration, read once per process."""

    access_token: str = Field(..., description="HubSpot Private App Access Token.")
    base_url: str = Field(API, description="HubSpot API host.")
    timeout_seconds: float = Field(30.0, description="Per-request HTTP timeout.")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from the environment. Raises ConfigurationError before any
        network activity if the access token is missing or blank.
        """
        env = os.environ if environ is None else environ
        token = (env.get(TOKEN_ENV) or "").strip()
        if not token:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)
        return cls(access_token=token)


def configure_logging(default: str = "INFO", environ: Mapping[str, str] | None = None) -> str:
    """Send log records to stderr at the level named by HUBSPOT_MCP_LOG_LEVEL, else `default`."""
    env = os.environ if environ is None else environ
    level = (env.get(LOG_LEVEL_ENV) or default).upper()
    # stdout carries the MCP stdio transport; anything logged there corrupts it.
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    return level
