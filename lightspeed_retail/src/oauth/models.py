"""OAuth data models for type safety and clarity."""

import time
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Credentials:
    """Client credentials used for the refresh-token exchange.

    Immutable for the lifetime of a client. Secrets are kept out of repr().
    """

    client_id: str
    client_secret: str = field(repr=False)
    refresh_token: str = field(repr=False)

    def to_payload(self) -> dict[str, str]:
        """Build the JSON body of the token exchange request."""
        return {
            "refresh_token": self.refresh_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "refresh_token",
        }


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer token and the instant it stops being usable.

    Replaced wholesale on refresh, never mutated.
    """

    access_token: str = field(repr=False)
    expires_at: float
    token_type: str = "Bearer"
    scope: Optional[str] = None
    refresh_token: Optional[str] = field(default=None, repr=False)

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if token is expired.

        Args:
            now: Current epoch time, defaults to time.time()

        Returns:
            True once the current time has passed expires_at
        """
        if now is None:
            now = time.time()
        return now > self.expires_at

    @classmethod
    def from_response(
        cls, data: dict[str, Any], margin: float, now: Optional[float] = None
    ) -> "AccessToken":
        """Create from a token endpoint response.

        Args:
            data: Parsed JSON body with access_token and expires_in (seconds)
            margin: Safety margin in seconds subtracted from the lifetime
            now: Current epoch time, defaults to time.time()

        Raises:
            KeyError: If access_token or expires_in is missing
            ValueError: If expires_in is not numeric
        """
        if now is None:
            now = time.time()
        access_token = data["access_token"]
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("access_token must be a non-empty string")
        expires_in = float(data["expires_in"])
        return cls(
            access_token=access_token,
            expires_at=now + expires_in - margin,
            token_type=data.get("token_type", "Bearer"),
            scope=data.get("scope"),
            refresh_token=data.get("refresh_token"),
        )
