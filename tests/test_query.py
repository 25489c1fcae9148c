"""Tests for query option handling and query-string encoding."""

import json
from urllib.parse import parse_qsl

import pytest
from pydantic import ValidationError

from lightspeed_retail.src.service_client.exceptions import (
    ErrorKind,
    LightspeedQueryError,
)
from lightspeed_retail.src.service_client.query import (
    QueryOptions,
    build_query_string,
    serialize_relations,
)

DEFAULTS = ["Category", "ItemAttributes"]


def _params(query_string: str) -> dict[str, str]:
    return dict(parse_qsl(query_string))


def test_default_relations_used_when_absent() -> None:
    params = _params(build_query_string({"limit": "2"}, DEFAULTS))
    assert params["load_relations"] == '["Category","ItemAttributes"]'
    assert params["limit"] == "2"


def test_default_relations_used_without_options() -> None:
    assert build_query_string(None, DEFAULTS) == (
        "load_relations=%5B%22Category%22%2C%22ItemAttributes%22%5D"
    )


def test_supplied_relations_replace_defaults() -> None:
    params = _params(
        build_query_string({"load_relations": '["ItemShops"]'}, DEFAULTS)
    )
    assert json.loads(params["load_relations"]) == ["ItemShops"]


def test_supplied_empty_relations_are_not_merged() -> None:
    params = _params(build_query_string(QueryOptions(load_relations=[]), DEFAULTS))
    assert params["load_relations"] == "[]"


def test_relations_accept_list_or_json_string() -> None:
    from_string = QueryOptions(load_relations='["Category", "Images"]')
    from_list = QueryOptions(load_relations=["Category", "Images"])
    assert from_string == from_list


def test_parameter_order_is_deterministic() -> None:
    options = {"sort": "description", "shopID": "1", "limit": "5"}
    first = build_query_string(options, DEFAULTS)
    second = build_query_string(options, DEFAULTS)
    assert first == second
    keys = [key for key, _ in parse_qsl(first)]
    assert keys == ["limit", "sort", "shopID", "load_relations"]


def test_unknown_parameters_go_to_extra() -> None:
    options = QueryOptions.from_mapping({"shopID": "1", "limit": 3})
    assert options.extra == {"shopID": "1"}
    assert options.limit == "3"


def test_none_values_are_skipped() -> None:
    params = _params(build_query_string({"limit": None, "sort": "itemID"}, DEFAULTS))
    assert "limit" not in params
    assert params["sort"] == "itemID"


def test_values_are_percent_encoded() -> None:
    query = build_query_string({"description": "Blue & Red, 50%"}, [])
    assert "description=Blue+%26+Red%2C+50%25" in query


def test_fixed_parameters_override_caller_values() -> None:
    query = build_query_string(
        {"categoryID": "1", "limit": "2"}, DEFAULTS, fixed={"categoryID": "116"}
    )
    pairs = parse_qsl(query)
    assert pairs[-1] == ("categoryID", "116")
    assert [key for key, _ in pairs].count("categoryID") == 1


def test_invalid_relations_raise_query_error() -> None:
    with pytest.raises(LightspeedQueryError) as exc_info:
        build_query_string({"load_relations": "Category"}, DEFAULTS)
    assert exc_info.value.kind is ErrorKind.INVALID_OPTIONS


def test_relations_must_be_an_array() -> None:
    with pytest.raises(LightspeedQueryError):
        QueryOptions.from_mapping({"load_relations": '{"Category": true}'})


def test_serialize_relations_is_compact() -> None:
    assert serialize_relations(("Category", "ItemShops")) == '["Category","ItemShops"]'


def test_relations_in_extra_replace_defaults() -> None:
    options = QueryOptions(extra={"load_relations": '["ItemShops"]'})
    assert options.load_relations == ["ItemShops"]
    assert options.extra == {}
    pairs = parse_qsl(build_query_string(options, DEFAULTS))
    assert pairs == [("load_relations", '["ItemShops"]')]


def test_named_parameter_in_extra_is_sent_once() -> None:
    options = QueryOptions(extra={"limit": "5", "description": "x"})
    assert options.limit == "5"
    pairs = parse_qsl(build_query_string(options, []))
    assert [key for key, _ in pairs].count("limit") == 1
    assert pairs[0] == ("limit", "5")


def test_named_parameter_given_twice_is_rejected() -> None:
    with pytest.raises(ValidationError):
        QueryOptions(limit="2", extra={"limit": "5"})


def test_flags_render_the_same_in_fields_and_extra() -> None:
    options = QueryOptions(archived=True, extra={"discountable": False, "qoh": 3})
    assert options.archived == "true"
    assert options.extra == {"discountable": "false", "qoh": "3"}
    params = _params(build_query_string({"archived": True, "tax": True}, []))
    assert params["archived"] == "true"
    assert params["tax"] == "true"
