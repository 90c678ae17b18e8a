"""Merges operation, path-item and security parameters into one list."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from openapi_request_factory.builder.refs import has_reference, resolve_references
from openapi_request_factory.builder.security import derive_security_parameters
from openapi_request_factory.errors import InvalidFieldError
from openapi_request_factory.parser.base import ExampleContext, ParameterDescriptor, RequestMetadata


def expand_parameters(
    metadata: RequestMetadata, document: Mapping, context: ExampleContext
) -> list[ParameterDescriptor]:
    """Return the de-duplicated parameters every builder works from.

    Operation parameters take precedence over path-item ones, which take
    precedence over those derived from security schemes. Parameters that
    are explicitly optional and have no supplied value are dropped.
    """
    raw_params = [
        *metadata.operation.parameters,
        *metadata.path_item.parameters,
        *derive_security_parameters(metadata.operation, document),
    ]

    seen: set[str] = set()
    result = []
    for raw in raw_params:
        if has_reference(raw):
            raw = resolve_references(raw, document)
        param = _to_descriptor(raw)
        if param.name in seen:
            continue
        seen.add(param.name)

        if param.required is False and not _is_supplied(param.name, context):
            continue
        result.append(param)
    return result


def _to_descriptor(raw: Any) -> ParameterDescriptor:
    try:
        return ParameterDescriptor.model_validate(raw)
    except ValidationError as e:
        name = raw.get("name") if isinstance(raw, Mapping) else None
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidFieldError(name, fields, f"invalid parameter definition ({fields})") from e


def _is_supplied(name: str, context: ExampleContext) -> bool:
    return name in context.request_headers or name in context.request_params
