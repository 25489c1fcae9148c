"""
Client for the Lightspeed Retail (R-Series) API.

This module provides the LightspeedClient class, a read-only wrapper around
Lightspeed's V3 REST API. It keeps an access token alive through the
refresh-token grant, resolves the account the credentials belong to, and
fetches account, category, item and sale resources.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union
from urllib.parse import quote

import httpx

from lightspeed_retail.src.logger import log
from lightspeed_retail.src.metrics import API_CALL_LATENCY
from lightspeed_retail.src.oauth.manager import TokenManager
from lightspeed_retail.src.oauth.models import Credentials
from lightspeed_retail.src.service_client.exceptions import (
    LightspeedAccountError,
    LightspeedAPIError,
    LightspeedError,
    LightspeedResponseError,
    LightspeedTransportError,
    Result,
    returns_result,
)
from lightspeed_retail.src.service_client.query import QueryOptions, build_query_string
from lightspeed_retail.src.settings import get_setting

API_PREFIX = "/API/V3"

Options = Optional[Union[QueryOptions, Mapping[str, Any]]]


@dataclass(frozen=True)
class Account:
    """The account the credentials belong to."""

    account_id: str
    name: str


class LightspeedClient:
    """
    Client for interacting with the Lightspeed Retail API.

    Every public operation returns a Result: the requested data on success,
    or the LightspeedError that prevented it. Nothing is retried.

    Args:
        client_id (str): OAuth client identifier.
        client_secret (str): OAuth client secret.
        refresh_token (str): Refresh token exchanged for access tokens.
        http_client (httpx.AsyncClient): Optional shared HTTP client; one is
            created (and closed by close()) when omitted.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        auth_url: Optional[str] = None,
        api_url: Optional[str] = None,
        item_relations: Optional[Sequence[str]] = None,
        category_item_relations: Optional[Sequence[str]] = None,
        sale_relations: Optional[Sequence[str]] = None,
    ):
        """Initialize the LightspeedClient with its credentials."""
        self.credentials = Credentials(client_id, client_secret, refresh_token)
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=get_setting("HTTP_TIMEOUT")
        )
        self.api_url = (api_url or get_setting("LIGHTSPEED_API_URL")).rstrip("/")
        self.item_relations = list(
            item_relations
            if item_relations is not None
            else get_setting("ITEM_RELATIONS")
        )
        self.category_item_relations = list(
            category_item_relations
            if category_item_relations is not None
            else get_setting("CATEGORY_ITEM_RELATIONS")
        )
        self.sale_relations = list(
            sale_relations
            if sale_relations is not None
            else get_setting("SALE_RELATIONS")
        )
        self.token_manager = TokenManager(
            self.credentials, auth_url=auth_url, http_client=self._http_client
        )
        # None until the account has been resolved
        self._account: Optional[Account] = None

    @classmethod
    async def create(
        cls,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        **kwargs: Any,
    ) -> "LightspeedClient":
        """
        Create a client and resolve its token and account up front.

        A failed resolution is logged and retried lazily by the first operation,
        so the returned client is always usable.

        Returns:
            LightspeedClient: The initialized client.
        """
        client = cls(client_id, client_secret, refresh_token, **kwargs)
        result = await client.get_account_information()
        if not result.ok:
            log.warning("Client created without a resolved account: %s", result.error)
        return client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def __aenter__(self) -> "LightspeedClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def account_id(self) -> Optional[str]:
        """Resolved account identifier, None while unresolved."""
        return self._account.account_id if self._account is not None else None

    def _account_url(self, resource: str) -> str:
        return f"{self.api_url}{API_PREFIX}/Account/{self.account_id}/{resource}"

    async def _get_json(self, url: str, api_method: str) -> dict[str, Any]:
        """
        GET an URL with bearer authentication and parse the JSON body.

        Raises:
            LightspeedAuthError: If no access token could be obtained.
            LightspeedTransportError: If the request failed at network level.
            LightspeedAPIError: If the response status is not 2xx.
            LightspeedResponseError: If the body is not a JSON object.
        """
        access_token = await self.token_manager.get_valid_token()
        log.debug("GET %s", url)
        try:
            with API_CALL_LATENCY.labels(api_method=api_method).time():
                response = await self._http_client.get(
                    url, headers={"Authorization": f"Bearer {access_token}"}
                )
        except httpx.HTTPError as e:
            raise LightspeedTransportError(f"Request to {api_method} failed: {e}") from e

        if response.status_code == 401:
            # Revoked before its expiry; the next call acquires a new one
            self.token_manager.invalidate()
        if not response.is_success:
            raise LightspeedAPIError(
                f"API error: Status {response.status_code}", response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise LightspeedResponseError(
                f"Response of {api_method} is not valid JSON"
            ) from e
        if not isinstance(data, dict):
            raise LightspeedResponseError(f"Response of {api_method} is not an object")
        return data

    @staticmethod
    def _envelope(data: dict[str, Any], key: str) -> Any:
        try:
            return data[key]
        except KeyError as e:
            raise LightspeedResponseError(f"Response has no '{key}' envelope") from e

    @staticmethod
    def _as_list(value: Any) -> list:
        # Lightspeed returns a lone object instead of a one-element array
        if isinstance(value, dict):
            return [value]
        if not isinstance(value, list):
            raise LightspeedResponseError("Envelope is neither an object nor an array")
        return value

    async def _fetch_account(self) -> Account:
        data = await self._get_json(f"{self.api_url}{API_PREFIX}/Account.json", "Account")
        envelope = self._envelope(data, "Account")
        if isinstance(envelope, list):
            envelope = envelope[0] if envelope else {}
        try:
            account_id = envelope["accountID"]
            name = envelope.get("name", "")
        except (KeyError, TypeError, AttributeError) as e:
            raise LightspeedResponseError("Account envelope has no accountID") from e
        if account_id is None or str(account_id) == "":
            raise LightspeedResponseError("Account envelope has an empty accountID")
        account = Account(account_id=str(account_id), name=name)
        self._account = account
        log.info("Resolved account %s (%s)", account.account_id, account.name)
        return account

    async def _require_account_id(self) -> str:
        """Return the cached account identifier, resolving it once if needed."""
        if self._account is None:
            try:
                await self._fetch_account()
            except LightspeedError as e:
                raise LightspeedAccountError(
                    f"Could not resolve account: {e}", kind=e.kind
                ) from e
        return self._account.account_id  # type: ignore[union-attr]

    @returns_result
    async def get_account_information(self) -> Account:
        """
        Get the account the credentials belong to.

        Always queries Lightspeed and refreshes the cached account.

        Returns:
            Result[Account]: Account identifier and name.
        """
        return await self._fetch_account()

    @returns_result
    async def get_account_id(self) -> str:
        """
        Get the account identifier, resolving it only if not yet known.

        Returns:
            Result[str]: The account identifier.
        """
        return await self._require_account_id()

    @returns_result
    async def get_categories(self) -> list[dict[str, Any]]:
        """
        List the categories of the account.

        Returns:
            Result[list[dict]]: The Category array.
        """
        await self._require_account_id()
        data = await self._get_json(self._account_url("Category.json"), "Category")
        categories = self._as_list(self._envelope(data, "Category"))
        log.info("Retrieved %d categories", len(categories))
        return categories

    async def _list_items(
        self,
        options: Options,
        default_relations: Sequence[str],
        fixed: Optional[Mapping[str, str]] = None,
    ) -> list[dict[str, Any]]:
        await self._require_account_id()
        query_string = build_query_string(options, default_relations, fixed)
        log.debug("Item query string: %s", query_string)
        url = f"{self._account_url('Item.json')}?{query_string}"
        data = await self._get_json(url, "Item")
        # Accounts without matching items get an envelope without the Item key
        if "Item" not in data and "@attributes" in data:
            return []
        return self._as_list(self._envelope(data, "Item"))

    @returns_result
    async def get_items(self, options: Options = None) -> list[dict[str, Any]]:
        """
        List inventory items.

        Args:
            options: Query options; without load_relations the client's
                item_relations are embedded.

        Returns:
            Result[list[dict]]: The Item array.
        """
        items = await self._list_items(options, self.item_relations)
        log.info("Retrieved %d items", len(items))
        return items

    @returns_result
    async def get_item_by_id(self, item_id: str) -> dict[str, Any]:
        """
        Get a single inventory item.

        Args:
            item_id: The Lightspeed itemID.

        Returns:
            Result[dict]: The Item object.
        """
        await self._require_account_id()
        url = self._account_url(f"Item/{quote(str(item_id), safe='')}.json")
        data = await self._get_json(url, "Item")
        item = self._envelope(data, "Item")
        if not isinstance(item, dict):
            raise LightspeedResponseError("Item envelope is not an object")
        log.info("Retrieved item %s", item_id)
        return item

    @returns_result
    async def get_items_by_category(
        self, category_id: str, options: Options = None
    ) -> list[dict[str, Any]]:
        """
        List the inventory items of one category.

        Args:
            category_id: The Lightspeed categoryID to filter on.
            options: Query options; without load_relations the client's
                category_item_relations are embedded.

        Returns:
            Result[list[dict]]: The Item array.
        """
        items = await self._list_items(
            options,
            self.category_item_relations,
            fixed={"categoryID": str(category_id)},
        )
        log.info("Retrieved %d items of category %s", len(items), category_id)
        return items

    @returns_result
    async def get_sales(self, options: Options = None) -> list[dict[str, Any]]:
        """
        List sales.

        Args:
            options: Query options; without load_relations the client's
                sale_relations are embedded.

        Returns:
            Result[list[dict]]: The Sale array.
        """
        await self._require_account_id()
        query_string = build_query_string(options, self.sale_relations)
        data = await self._get_json(
            f"{self._account_url('Sale.json')}?{query_string}", "Sale"
        )
        if "Sale" not in data and "@attributes" in data:
            return []
        sales = self._as_list(self._envelope(data, "Sale"))
        log.info("Retrieved %d sales", len(sales))
        return sales

    async def get_recent_sales(self, limit: str = "10") -> Result[list[dict[str, Any]]]:
        """
        List the most recent sales, newest first.

        Args:
            limit: Maximum number of sales to return.

        Returns:
            Result[list[dict]]: The Sale array.
        """
        return await self.get_sales({"sort": "-timeStamp", "limit": limit})
