from unittest.mock import AsyncMock, patch

import httpx

from lightspeed_retail.src import main as main_mod
from lightspeed_retail.src.service_client.lightspeed_api import LightspeedClient

SETTINGS = "lightspeed_retail.src.settings.settings"


def _handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/oauth/access_token.php":
        return httpx.Response(200, json={"access_token": "t", "expires_in": 600})
    if path == "/API/V3/Account.json":
        return httpx.Response(200, json={"Account": {"accountID": "9", "name": "Lab"}})
    if path == "/API/V3/Account/9/Category.json":
        return httpx.Response(200, json={"Category": [{"categoryID": "1"}]})
    if path == "/API/V3/Account/9/Item.json":
        return httpx.Response(
            200,
            json={
                "Item": [
                    {
                        "itemID": "3",
                        "description": "Filament",
                        "Prices": {"ItemPrice": [{"amount": "20.00", "useType": "Default"}]},
                        "ItemShops": {"ItemShop": [{"shopID": "0", "qoh": "4"}]},
                    }
                ]
            },
        )
    return httpx.Response(404)


def _client() -> LightspeedClient:
    return LightspeedClient(
        "cid",
        "secret",
        "refresh",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_handler)),
        auth_url="https://auth.example.com",
        api_url="https://api.example.com",
    )


async def test_run_reports_success() -> None:
    with (
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_ID", "cid"),
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_SECRET", "secret"),
        patch(f"{SETTINGS}.LIGHTSPEED_REFRESH_TOKEN", "refresh"),
        patch(f"{SETTINGS}.LOG_TO_FILE", False),
        patch.object(main_mod, "create_client", AsyncMock(return_value=_client())),
    ):
        assert await main_mod.run() == 0


async def test_run_fails_without_account() -> None:
    client = _client()
    client.api_url = "https://api.example.com/missing"

    with (
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_ID", "cid"),
        patch(f"{SETTINGS}.LIGHTSPEED_CLIENT_SECRET", "secret"),
        patch(f"{SETTINGS}.LIGHTSPEED_REFRESH_TOKEN", "refresh"),
        patch(f"{SETTINGS}.LOG_TO_FILE", False),
        patch.object(main_mod, "create_client", AsyncMock(return_value=client)),
    ):
        assert await main_mod.run() == 1
