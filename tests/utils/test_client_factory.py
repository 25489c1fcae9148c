import json
from unittest.mock import patch

import httpx
import pytest

from lightspeed_retail.utils import client_factory


SETTINGS = "lightspeed_retail.src.settings.settings"


def test_get_credentials_from_settings() -> None:
    with (
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_ID", "cid"),
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_SECRET", "secret"),
        patch(f"{SETTINGS}.LIGHTSPEED_REFRESH_TOKEN", "refresh"),
    ):
        assert client_factory.get_credentials() == ("cid", "secret", "refresh")


def test_get_credentials_raises_when_missing() -> None:
    with (
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_ID", "cid"),
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_SECRET", None),
        patch(f"{SETTINGS}.LIGHTSPEED_REFRESH_TOKEN", None),
    ):
        with pytest.raises(RuntimeError, match="LIGHTSPEED_REFRESH_TOKEN"):
            client_factory.get_credentials()


async def test_create_client_initializes_account() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/access_token.php":
            assert json.loads(request.content)["client_id"] == "cid"
            return httpx.Response(200, json={"access_token": "t", "expires_in": 600})
        return httpx.Response(200, json={"Account": {"accountID": "42", "name": "Lab"}})

    with (
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_ID", "cid"),
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_SECRET", "secret"),
        patch(f"{SETTINGS}.LIGHTSPEED_REFRESH_TOKEN", "refresh"),
    ):
        client = await client_factory.create_client(
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )

    assert client.account_id == "42"
