from lightspeed_retail.src.service_client.helpers import Helpers


def test_default_price_from_price_list() -> None:
    prices = [
        {"amount": "10.00", "useType": "Default"},
        {"amount": "12.00", "useType": "MSRP"},
    ]
    assert Helpers.get_default_price(prices) == "10.00"


def test_default_price_missing_returns_sentinel() -> None:
    assert Helpers.get_default_price([{"amount": "12.00", "useType": "MSRP"}]) == (
        "Not available"
    )


def test_default_price_from_item_payload() -> None:
    item = {
        "itemID": "7",
        "Prices": {
            "ItemPrice": [
                {"amount": "12.00", "useType": "MSRP", "useTypeID": "2"},
                {"amount": "9.50", "useType": "Default", "useTypeID": "1"},
            ]
        },
    }
    assert Helpers.get_default_price(item) == "9.50"


def test_default_price_single_object_shape() -> None:
    item = {"Prices": {"ItemPrice": {"amount": "3.00", "useType": "Default"}}}
    assert Helpers.get_default_price(item) == "3.00"


def test_total_quantity_from_shop_list() -> None:
    shops = [{"shopID": "0", "qoh": "42"}, {"shopID": "3", "qoh": "5"}]
    assert Helpers.get_total_quantity(shops) == "42"


def test_total_quantity_missing_returns_sentinel() -> None:
    assert Helpers.get_total_quantity([{"shopID": "3", "qoh": "5"}]) == "Not available"


def test_total_quantity_from_item_payload() -> None:
    item = {
        "ItemShops": {
            "ItemShop": [
                {"itemShopID": "11", "shopID": "1", "qoh": "2"},
                {"itemShopID": "12", "shopID": "0", "qoh": "2"},
            ]
        }
    }
    assert Helpers.get_total_quantity(item) == "2"


def test_helpers_never_raise_on_unexpected_shapes() -> None:
    for payload in (None, {}, [], "x", 5, {"Prices": "none"}, [None, 1, "a"]):
        assert Helpers.get_default_price(payload) == Helpers.NOT_AVAILABLE
        assert Helpers.get_total_quantity(payload) == Helpers.NOT_AVAILABLE


def test_item_without_relations_loaded() -> None:
    item = {"itemID": "7", "description": "Laser cutter time"}
    assert Helpers.get_default_price(item) == "Not available"
    assert Helpers.get_total_quantity(item) == "Not available"
