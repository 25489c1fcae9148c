"""Access token lifecycle for the Lightspeed Retail API.

Exchanges the long-lived refresh token for access tokens on demand and
caches the current one until it expires.
"""

import time
from typing import Optional

import httpx

from lightspeed_retail.src.logger import log
from lightspeed_retail.src.metrics import API_CALL_LATENCY
from lightspeed_retail.src.oauth.models import AccessToken, Credentials
from lightspeed_retail.src.service_client.exceptions import LightspeedAuthError
from lightspeed_retail.src.settings import get_setting

TOKEN_PATH = "/oauth/access_token.php"


class TokenManager:
    """Owns the cached access token of a single client.

    There is no locking: two concurrent callers that both find the token
    expired will both refresh, and the later response simply replaces the
    earlier one.
    """

    def __init__(
        self,
        credentials: Credentials,
        auth_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        margin: Optional[float] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            credentials: Client credentials for the refresh-token grant
            auth_url: Authorization host, defaults to LIGHTSPEED_AUTH_URL
            http_client: Shared client; a short-lived one is used per exchange if omitted
            margin: Expiry safety margin in seconds, defaults to TOKEN_EXPIRY_MARGIN_SECONDS
        """
        self.credentials = credentials
        base_url = auth_url or get_setting("LIGHTSPEED_AUTH_URL")
        self.token_url = f"{base_url.rstrip('/')}{TOKEN_PATH}"
        self.margin = (
            margin if margin is not None else get_setting("TOKEN_EXPIRY_MARGIN_SECONDS")
        )
        self._http_client = http_client
        self._token: Optional[AccessToken] = None

    @property
    def token(self) -> Optional[AccessToken]:
        """Currently cached token, expired or not."""
        return self._token

    async def _post(self, client: httpx.AsyncClient) -> httpx.Response:
        with API_CALL_LATENCY.labels(api_method="access_token").time():
            return await client.post(
                self.token_url,
                json=self.credentials.to_payload(),
                timeout=get_setting("HTTP_TIMEOUT"),
            )

    async def acquire_token(self) -> AccessToken:
        """Exchange the refresh token for a new access token.

        The cached token is replaced only when the exchange succeeds.

        Returns:
            The new AccessToken

        Raises:
            LightspeedAuthError: If the exchange fails for any reason
        """
        log.debug("Requesting access token from %s", self.token_url)
        try:
            if self._http_client is not None:
                response = await self._post(self._http_client)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client)
            response.raise_for_status()
            token = AccessToken.from_response(response.json(), self.margin)
        except httpx.HTTPStatusError as e:
            log.error(
                "Access token request rejected with status %s",
                e.response.status_code,
            )
            raise LightspeedAuthError(
                f"Token exchange failed: Status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            log.error("Failed to reach token endpoint: %s", e)
            raise LightspeedAuthError(f"Token endpoint unreachable: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            log.error("Invalid access token response: %s", e)
            raise LightspeedAuthError(
                "Invalid token response: missing or malformed access_token"
            ) from e

        self._token = token
        log.info("Obtained access token valid until %s", time.ctime(token.expires_at))
        return token

    async def get_valid_token(self) -> str:
        """Return a usable access token, acquiring one if absent or expired.

        Returns:
            Access token string

        Raises:
            LightspeedAuthError: If a new token was needed and could not be acquired
        """
        token = self._token
        if token is None or token.is_expired():
            if token is not None:
                log.info("Access token expired, refreshing")
            token = await self.acquire_token()
        return token.access_token

    def invalidate(self) -> None:
        """Forget the cached token so the next call acquires a new one."""
        self._token = None
