"""Query options for Lightspeed list endpoints and their query-string encoding."""

import json
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlencode

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from lightspeed_retail.src.service_client.exceptions import LightspeedQueryError

# Parameters with a dedicated field, in encoding order
NAMED_PARAMETERS = (
    "limit",
    "offset",
    "sort",
    "archived",
    "after",
    "before",
    "count",
    "timeStamp",
)

RELATIONS_PARAMETER = "load_relations"


def stringify_value(v: Any) -> Any:
    """Render numbers and flags the way Lightspeed expects them, leave the rest alone."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (int, float)):
        return str(v)
    return v


class QueryOptions(BaseModel):
    """Optional parameters of a list request.

    load_relations, when given, replaces the operation's default relation list
    entirely. Parameters without a dedicated field go in extra.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: Optional[str] = None
    offset: Optional[str] = None
    sort: Optional[str] = None
    archived: Optional[str] = None
    after: Optional[str] = None
    before: Optional[str] = None
    count: Optional[str] = None
    timeStamp: Optional[str] = None
    load_relations: Optional[list[str]] = None
    extra: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _promote_extra(cls, data: Any) -> Any:
        """Move named parameters passed through extra into their fields."""
        if not isinstance(data, dict) or not isinstance(data.get("extra"), Mapping):
            return data
        data = dict(data)
        extra = dict(data["extra"])
        for key in (*NAMED_PARAMETERS, RELATIONS_PARAMETER):
            if key not in extra:
                continue
            value = extra.pop(key)
            if data.get(key) is not None:
                raise ValueError(f"{key} given both as a field and in extra")
            data[key] = value
        data["extra"] = extra
        return data

    @field_validator(*NAMED_PARAMETERS, mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        # Lightspeed takes every parameter as a string; accept plain numbers and flags
        return stringify_value(v)

    @field_validator("extra", mode="before")
    @classmethod
    def _stringify_extra(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return {key: stringify_value(value) for key, value in v.items()}
        return v

    @field_validator("load_relations", mode="before")
    @classmethod
    def _parse_relations(cls, v: Any) -> Any:
        """Accept the upstream's serialized form, a JSON array string."""
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"load_relations is not valid JSON: {e}") from e
            if not isinstance(v, list):
                raise ValueError("load_relations must be a JSON array")
        return v

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "QueryOptions":
        """Build options from an open parameter mapping.

        Known parameter names fill their fields, everything else lands in extra.

        Raises:
            LightspeedQueryError: If a value cannot be converted
        """
        known: dict[str, Any] = {}
        extra: dict[str, str] = {}
        for key, value in mapping.items():
            if value is None:
                continue
            if key in NAMED_PARAMETERS or key == RELATIONS_PARAMETER:
                known[key] = value
            else:
                extra[key] = str(stringify_value(value))
        try:
            return cls(**known, extra=extra)
        except ValidationError as e:
            raise LightspeedQueryError(f"Invalid query options: {e}") from e

    def to_params(
        self, default_relations: Sequence[str]
    ) -> list[tuple[str, str]]:
        """Return the ordered parameters with the relation list resolved."""
        params: list[tuple[str, str]] = []
        for name in NAMED_PARAMETERS:
            value = getattr(self, name)
            if value is not None:
                params.append((name, value))
        params.extend(self.extra.items())
        relations = (
            self.load_relations
            if self.load_relations is not None
            else list(default_relations)
        )
        params.append((RELATIONS_PARAMETER, serialize_relations(relations)))
        return params


def serialize_relations(relations: Sequence[str]) -> str:
    """Serialize relation names as a compact JSON array."""
    return json.dumps(list(relations), separators=(",", ":"))


def coerce_options(
    options: "QueryOptions | Mapping[str, Any] | None",
) -> QueryOptions:
    """Normalize what callers pass as options into QueryOptions."""
    if options is None:
        return QueryOptions()
    if isinstance(options, QueryOptions):
        return options
    return QueryOptions.from_mapping(options)


def build_query_string(
    options: "QueryOptions | Mapping[str, Any] | None",
    default_relations: Sequence[str],
    fixed: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Build the URL-encoded query string of a list request.

    Args:
        options: Caller options; a load_relations value overrides default_relations
        default_relations: Relations embedded when the caller supplies none
        fixed: Parameters the operation always sends, e.g. categoryID; they win
            over caller parameters of the same name

    Returns:
        str: Query string without the leading "?"

    Raises:
        LightspeedQueryError: If options cannot be converted
    """
    params = coerce_options(options).to_params(default_relations)
    if fixed:
        params = [(key, value) for key, value in params if key not in fixed]
        params.extend(fixed.items())
    return urlencode(params)
