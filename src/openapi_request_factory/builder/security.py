"""Turns security requirements into synthetic parameters."""

from collections.abc import Mapping
from typing import Any

from openapi_request_factory.builder.refs import has_reference, resolve_references
from openapi_request_factory.parser.base import OperationMetadata


def security_requirements(operation: OperationMetadata, document: Mapping) -> list[dict[str, Any]]:
    """Operation requirements win, even when explicitly empty."""
    if operation.security is not None:
        return operation.security
    return document.get("security") or []


def derive_security_parameters(operation: OperationMetadata, document: Mapping) -> list[dict[str, Any]]:
    """Build one parameter per security scheme the operation accepts.

    An apiKey scheme contributes its own name and location; every other
    scheme type is sent as an Authorization header. A parameter is only
    required when the operation names exactly one scheme.
    """
    requirements = security_requirements(operation, document)
    scheme_names: list[str] = []
    for requirement in requirements:
        for name in requirement:
            if name not in scheme_names:
                scheme_names.append(name)

    registered = (document.get("components") or {}).get("securitySchemes") or {}
    required = len(scheme_names) == 1

    params = []
    for name in scheme_names:
        scheme = registered.get(name)
        if scheme is None:
            continue
        if has_reference(scheme):
            scheme = resolve_references(scheme, document)

        if scheme.get("type") == "apiKey":
            param = {"name": scheme.get("name"), "in": scheme.get("in")}
        else:
            param = {"name": "Authorization", "in": "header"}
        param["schema"] = {"type": "string"}
        param["required"] = required
        params.append(param)
    return params
