"""
Builder module for wiring a configured Insightly client.

This module provides the generate_client function that combines saved
settings, the environment and an API key into a working client.
"""

import logging

import httpx

from ..core import load_client_config
from .crm_client import InsightlyClient

logger = logging.getLogger(__name__)


def generate_client(
    api_key: str | None = None,
    http_client: httpx.Client | None = None,
) -> InsightlyClient:
    """
    Generate a working client from saved settings and the environment.

    Args:
        api_key: API key (falls back to INSIGHTLY_API_KEY)
        http_client: Optional httpx client to reuse

    Returns:
        Configured InsightlyClient ready to use

    Raises:
        ConfigError: If no API key is available or settings are invalid

    Example:
        >>> client = generate_client("my-api-key")
        >>> contacts = client.get_contacts(top=10)
        >>> client.close()
    """
    config = load_client_config(api_key)
    logger.debug(f"Creating client for {config.base_url}/{config.api_version}")
    return InsightlyClient(config, http_client=http_client)
