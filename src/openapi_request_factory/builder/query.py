"""Query string serialization for OpenAPI parameters.

Implements the style x explode x type matrix described at
https://swagger.io/docs/specification/serialization/ for the query
component. Names, keys and values are escaped once; the brackets that
mark nested keys are emitted literally.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from openapi_request_factory.errors import InvalidArgumentError, InvalidFieldError
from openapi_request_factory.parser.base import ParameterDescriptor, ParameterStyle

SEPARATORS = {
    ParameterStyle.FORM: "&",
    ParameterStyle.MATRIX: ";",
    ParameterStyle.LABEL: ".",
    ParameterStyle.SPACE_DELIMITED: "%20",
    ParameterStyle.PIPE_DELIMITED: "|",
}


def to_param(value: Any) -> str:
    """Render a scalar the way it appears on the wire."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def escape(value: Any) -> str:
    return quote_plus(to_param(value))


def build_query_fragment(param: ParameterDescriptor, value: Any) -> str | None:
    """Serialize one query parameter, or return None when it has no schema."""
    if param.type is not None:
        raise InvalidFieldError(
            param.name, "type", "'type' is not a supported field for Parameter, declare it under 'schema'"
        )
    if not param.schema_:
        return None

    style = param.style or ParameterStyle.FORM
    explode = param.explode is None or param.explode
    schema_type = param.schema_.get("type")

    if schema_type == "object":
        return _object_fragment(param, value, style, explode)
    if schema_type == "array":
        return _array_fragment(param, value, style, explode)
    return f"{quote_plus(param.name)}={escape(value)}"


def _object_fragment(param: ParameterDescriptor, value: Any, style: ParameterStyle, explode: bool) -> str:
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(f"Value of object parameter '{param.name}' must be a mapping")
    name = quote_plus(param.name)

    if style == ParameterStyle.DEEP_OBJECT:
        return "&".join(_query_pairs(value, name))
    if style == ParameterStyle.FORM:
        if explode:
            return "&".join(_query_pairs(value))
        flat = [item for pair in value.items() for item in _flatten(pair)]
        return f"{name}=" + ",".join(escape(v) for v in flat)
    raise InvalidFieldError(param.name, "style", f"style '{style.value}' is not supported for object values")


def _array_fragment(param: ParameterDescriptor, value: Any, style: ParameterStyle, explode: bool) -> str:
    items = list(value) if isinstance(value, (list, tuple)) else [value]
    separator = SEPARATORS.get(style)
    if separator is None:
        raise InvalidFieldError(param.name, "style", f"style '{style.value}' is not supported for array values")
    name = quote_plus(param.name)

    if not explode:
        return f"{name}=" + separator.join(escape(v) for v in _flatten(items))

    items_type = (param.schema_.get("items") or {}).get("type")
    if items_type == "object" and items and isinstance(items[0], Mapping):
        indexed = {str(i): item for i, item in enumerate(items)}
        return "&".join(_query_pairs(indexed, name))
    if items_type in ("object", "array"):
        return separator.join("&".join(_query_pairs(item, name)) for item in items)
    return separator.join(f"{name}[]={escape(item)}" for item in items)


def _query_pairs(value: Any, prefix: str | None = None) -> list[str]:
    """Flatten a nested value into ``prefix[key][...]=value`` pairs."""
    if isinstance(value, Mapping):
        pairs = []
        for key, item in value.items():
            segment = quote_plus(to_param(key))
            pairs.extend(_query_pairs(item, f"{prefix}[{segment}]" if prefix else segment))
        return pairs
    if isinstance(value, (list, tuple)):
        if not value:
            return [f"{prefix}[]="]
        return [pair for item in value for pair in _query_pairs(item, f"{prefix}[]")]
    return [f"{prefix}={escape(value)}"]


def _flatten(values: Any) -> list[Any]:
    flat = []
    for v in values:
        if isinstance(v, (list, tuple)):
            flat.extend(_flatten(v))
        else:
            flat.append(v)
    return flat
