"""OAuth module for the Lightspeed Retail API client.

This module provides the refresh-token grant and access token caching.
"""

from lightspeed_retail.src.oauth.manager import TokenManager
from lightspeed_retail.src.oauth.models import AccessToken, Credentials

__all__ = [
    # Manager
    "TokenManager",
    # Models
    "AccessToken",
    "Credentials",
]
