"""Helper functions for reading Lightspeed Item payloads."""

from typing import Any


class Helpers:
    """Helpers contains pure accessors over payloads returned by the service client."""

    NOT_AVAILABLE = "Not available"

    # Shop identifier under which Lightspeed reports stock summed across all shops
    ALL_SHOPS_ID = "0"

    DEFAULT_PRICE_USE_TYPE = "Default"

    @staticmethod
    def _entries(source: Any, container: str, entry: str) -> list[dict[str, Any]]:
        """
        Extract a nested entry list from an Item, tolerating every shape Lightspeed uses.

        Accepts either the whole Item ({container: {entry: [...]}}) or the bare list.
        Lightspeed returns a single object instead of a one-element list, and omits
        the container entirely when there is nothing to report.
        """
        if isinstance(source, dict):
            nested = source.get(container)
            if isinstance(nested, dict):
                source = nested.get(entry)
            elif container not in source and (
                source.get("useType") is not None or source.get("shopID") is not None
            ):
                source = [source]
            else:
                source = nested
        if isinstance(source, dict):
            source = [source]
        if not isinstance(source, list):
            return []
        return [e for e in source if isinstance(e, dict)]

    @staticmethod
    def get_default_price(item: Any) -> str:
        """
        Get the default price of an item.

        Args:
            item: An Item payload or its ItemPrice list

        Returns:
            str: The amount of the price whose useType is "Default",
                or "Not available" if there is none
        """
        for price in Helpers._entries(item, "Prices", "ItemPrice"):
            if price.get("useType") == Helpers.DEFAULT_PRICE_USE_TYPE:
                amount = price.get("amount")
                if amount is not None:
                    return str(amount)
        return Helpers.NOT_AVAILABLE

    @staticmethod
    def get_total_quantity(item: Any) -> str:
        """
        Get the quantity on hand summed across all shops.

        Args:
            item: An Item payload or its ItemShop list

        Returns:
            str: The qoh of the ItemShop entry for shop "0",
                or "Not available" if there is none
        """
        for item_shop in Helpers._entries(item, "ItemShops", "ItemShop"):
            if str(item_shop.get("shopID")) == Helpers.ALL_SHOPS_ID:
                qoh = item_shop.get("qoh")
                if qoh is not None:
                    return str(qoh)
        return Helpers.NOT_AVAILABLE
