"""Client factory for creating LightspeedClient instances from settings.

This module provides a centralized way to create LightspeedClient instances,
making it easier to mock in tests.
"""

from typing import Any

from lightspeed_retail.src.logger import log
from lightspeed_retail.src.service_client.lightspeed_api import LightspeedClient
from lightspeed_retail.src.settings import get_setting


def get_credentials() -> tuple[str, str, str]:
    """
    Retrieve the Lightspeed credentials from settings.

    Returns:
        tuple[str, str, str]: client id, client secret and refresh token.

    Raises:
        RuntimeError: If any of the three credentials is not configured.
    """
    names = (
        "LIGHTSPEED_CLIENT_ID",
        "LIGHTSPEED_CLIENT_SECRET",
        "LIGHTSPEED_REFRESH_TOKEN",
    )
    values = [get_setting(name) for name in names]
    missing = [name for name, value in zip(names, values) if not value]
    if missing:
        log.error("Missing Lightspeed credentials: %s", ", ".join(missing))
        raise RuntimeError(f"Missing Lightspeed credentials: {', '.join(missing)}")
    client_id, client_secret, refresh_token = values
    return client_id, client_secret, refresh_token


async def create_client(**kwargs: Any) -> LightspeedClient:
    """Create an initialized LightspeedClient from the configured credentials.

    Args:
        **kwargs: Extra keyword arguments for LightspeedClient, e.g. http_client.

    Returns:
        LightspeedClient: A client with its token and account resolved when possible.
    """
    client_id, client_secret, refresh_token = get_credentials()
    return await LightspeedClient.create(
        client_id, client_secret, refresh_token, **kwargs
    )
