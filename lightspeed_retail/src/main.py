"""Example entry point: dump account, categories and items of the configured account."""

import asyncio
import json

from lightspeed_retail.src.logger import configure_logging
from lightspeed_retail.src.service_client.helpers import Helpers
from lightspeed_retail.src import settings as settings_mod
from lightspeed_retail.utils.client_factory import create_client


async def run() -> int:
    """Fetch and log the account overview.

    Returns:
        int: Process exit code, 1 if any fetch failed.
    """
    log = configure_logging()
    settings_mod.validate_config(settings_mod.settings)

    async with await create_client() as client:
        account = await client.get_account_information()
        if not account.ok:
            log.error("Could not load account: %s", account.error)
            return 1
        log.info("Account: %s", account.value)

        categories = await client.get_categories()
        if categories.ok:
            log.info("Categories: %s", json.dumps(categories.value, indent=2))
        else:
            log.error("Could not load categories: %s", categories.error)

        items = await client.get_items(
            {"limit": "10", "load_relations": '["Category", "ItemShops"]'}
        )
        if items.ok:
            for item in items.value_or([]):
                log.info(
                    "%s: price %s, on hand %s",
                    item.get("description", item.get("itemID")),
                    Helpers.get_default_price(item),
                    Helpers.get_total_quantity(item),
                )
        else:
            log.error("Could not load items: %s", items.error)

    return 0 if categories.ok and items.ok else 1


def main() -> None:
    """Run the example against the configured Lightspeed account."""
    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
