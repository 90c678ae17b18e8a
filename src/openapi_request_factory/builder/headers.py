"""Builds the request headers, keyed by their WSGI environ names."""

from collections.abc import Mapping

from openapi_request_factory.builder.query import to_param
from openapi_request_factory.errors import MissingValueError
from openapi_request_factory.parser.base import (
    ExampleContext,
    ParameterDescriptor,
    ParameterLocation,
    RequestMetadata,
)

# Test clients built on WSGI (werkzeug, Django) expect these keys.
TRANSPORT_NAMES = {
    "Accept": "HTTP_ACCEPT",
    "Content-Type": "CONTENT_TYPE",
    "Authorization": "HTTP_AUTHORIZATION",
    "Host": "HTTP_HOST",
}


def transport_name(header: str) -> str:
    return TRANSPORT_NAMES.get(header, header)


def build_headers(
    metadata: RequestMetadata,
    document: Mapping,
    parameters: list[ParameterDescriptor],
    context: ExampleContext,
) -> dict[str, str]:
    """Resolve header parameters plus Accept, Content-Type and Host.

    Accept and Content-Type fall back to the first media type the
    operation (or the document) produces or consumes.
    """
    supplied = context.request_headers
    tuples = []

    for param in parameters:
        if param.location != ParameterLocation.HEADER:
            continue
        if param.name not in supplied:
            raise MissingValueError(param.name, param.location.value)
        tuples.append((param.name, to_param(supplied[param.name])))

    operation = metadata.operation
    produces = operation.produces if operation.produces is not None else document.get("produces")
    accept = supplied.get("Accept", produces[0] if produces else None)
    if accept is not None:
        tuples.append(("Accept", to_param(accept)))

    consumes = operation.consumes if operation.consumes is not None else document.get("consumes")
    content_type = supplied.get("Content-Type", consumes[0] if consumes else None)
    if content_type is not None:
        tuples.append(("Content-Type", to_param(content_type)))

    host = operation.host or document.get("host")
    if host and str(host).strip():
        tuples.append(("Host", to_param(context.host or host)))

    return {transport_name(name): value for name, value in tuples}
