"""OpenAPI / Swagger document loading.

Loads documents from disk and turns their path items into the
RequestMetadata the request factory consumes.
"""

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from openapi_request_factory.builder.refs import has_reference, resolve_references
from openapi_request_factory.errors import ConfigurationError
from openapi_request_factory.parser.base import (
    FORM_MEDIA_TYPES,
    OperationMetadata,
    PathItemMetadata,
    RequestMetadata,
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def load_document(file_path: Path) -> dict:
    """Load a YAML or JSON document into a mapping."""
    try:
        text = file_path.read_text(encoding="utf-8")
        doc = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot load OpenAPI document '{file_path}': {e}") from e

    if not isinstance(doc, dict):
        raise ConfigurationError(f"OpenAPI document '{file_path}' must contain a mapping at the root")
    return doc


def detect_format(doc: Mapping) -> str:
    """Returns: 'openapi', 'swagger', or 'unknown'."""
    if "openapi" in doc:
        return "openapi"
    if "swagger" in doc:
        return "swagger"
    return "unknown"


def iter_operations(doc: Mapping, openapi_spec: str | None = None) -> Iterator[RequestMetadata]:
    """Yield metadata for every operation declared under ``paths``."""
    for template, path_item in (doc.get("paths") or {}).items():
        path_params = list(path_item.get("parameters", []))
        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS:
                continue
            yield RequestMetadata(
                path_item=PathItemMetadata(template=template, parameters=path_params),
                operation=_operation_metadata(method, operation, doc),
                openapi_spec=openapi_spec,
            )


def find_operation(doc: Mapping, verb: str, template: str, openapi_spec: str | None = None) -> RequestMetadata:
    for metadata in iter_operations(doc, openapi_spec):
        if metadata.operation.verb == verb.lower() and metadata.path_item.template == template:
            return metadata
    raise ConfigurationError(f"Operation '{verb.upper()} {template}' is not declared in the document")


def _operation_metadata(method: str, operation: Mapping, doc: Mapping) -> OperationMetadata:
    parameters = list(operation.get("parameters", []))
    request_body = operation.get("requestBody")
    if has_reference(request_body):
        request_body = resolve_references(request_body, doc)
    consumes = operation.get("consumes")

    if request_body:
        content = request_body.get("content") or {}
        if consumes is None and content:
            consumes = list(content)
        parameters.extend(_request_body_parameters(request_body, content))

    produces = operation.get("produces")
    if produces is None:
        produces = _response_media_types(operation.get("responses") or {})

    return OperationMetadata(
        verb=method.lower(),
        parameters=parameters,
        security=operation.get("security"),
        consumes=consumes,
        produces=produces,
        host=operation.get("host"),
    )


def _request_body_parameters(request_body: Mapping, content: Mapping) -> list[dict[str, Any]]:
    """Express an OAS3 requestBody as body and formData parameters.

    Every form media type whose schema lists properties contributes one
    formData parameter per property, first declaration of a name wins. The
    first remaining media type contributes the single ``body`` parameter,
    so the Content-Type picked at build time decides which ones are used.
    """
    parameters = []
    form_names = set()
    has_body = False
    for media_type, media in content.items():
        schema = (media or {}).get("schema") or {}
        if media_type.split(";")[0].strip().lower() in FORM_MEDIA_TYPES and "properties" in schema:
            required = set(schema.get("required", []))
            for name, prop in schema["properties"].items():
                if name in form_names:
                    continue
                form_names.add(name)
                parameters.append({"name": name, "in": "formData", "required": name in required, "schema": prop})
        elif not has_body:
            has_body = True
            parameters.append(
                {"name": "body", "in": "body", "required": request_body.get("required", False), "schema": schema}
            )
    return parameters


def _response_media_types(responses: Mapping) -> list[str] | None:
    for response in responses.values():
        content = (response or {}).get("content")
        if content:
            return list(content)
    return None
