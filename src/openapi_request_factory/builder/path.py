"""Renders the request path, including the query string."""

import re
from collections.abc import Mapping
from urllib.parse import urlsplit

from openapi_request_factory.builder.query import build_query_fragment, to_param
from openapi_request_factory.errors import MissingValueError
from openapi_request_factory.parser.base import (
    ExampleContext,
    ParameterDescriptor,
    ParameterLocation,
    RequestMetadata,
)

SERVER_VARIABLE = re.compile(r"\{(.*?)\}")


def base_path_from_servers(document: Mapping, use_server: str = "default") -> str:
    """Path component of the first declared server, variables substituted."""
    servers = document.get("servers")
    if not servers:
        return ""

    server = servers[0]
    variables = {name: var.get(use_server) for name, var in (server.get("variables") or {}).items()}
    url = SERVER_VARIABLE.sub(lambda m: to_param(variables.get(m.group(1))), server.get("url", ""))
    return urlsplit(url).path


def build_path(
    metadata: RequestMetadata,
    document: Mapping,
    parameters: list[ParameterDescriptor],
    context: ExampleContext,
) -> str:
    path = base_path_from_servers(document) + metadata.path_item.template
    params = context.request_params

    for param in parameters:
        if param.location != ParameterLocation.PATH:
            continue
        if param.name not in params:
            raise MissingValueError(param.name, param.location.value)
        path = path.replace(f"{{{param.name}}}", to_param(params[param.name]))

    fragments = []
    for param in parameters:
        if param.location != ParameterLocation.QUERY or param.name not in params:
            continue
        fragment = build_query_fragment(param, params[param.name])
        if fragment:
            fragments.append(fragment)

    if fragments:
        path += "?" + "&".join(fragments)
    return path
