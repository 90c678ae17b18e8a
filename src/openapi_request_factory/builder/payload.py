"""Builds the request body according to the resolved Content-Type."""

from typing import Any

from pydantic_core import PydanticSerializationError, to_json

from openapi_request_factory.errors import InvalidArgumentError, MissingParameterError, MissingValueError
from openapi_request_factory.parser.base import (
    ExampleContext,
    MediaTypeCategory,
    ParameterDescriptor,
    ParameterLocation,
)


def build_payload(
    parameters: list[ParameterDescriptor], headers: dict[str, str], context: ExampleContext
) -> Any:
    content_type = headers.get("CONTENT_TYPE")
    if content_type is None:
        return None

    category = MediaTypeCategory.from_content_type(content_type)
    if category == MediaTypeCategory.FORM:
        return build_form_payload(parameters, context)
    if category == MediaTypeCategory.JSON:
        return build_json_payload(parameters, context)
    return build_raw_payload(parameters, context)


def build_form_payload(parameters: list[ParameterDescriptor], context: ExampleContext) -> dict[str, Any]:
    """Map formData parameters to their values.

    Values are passed through untouched; encoding them is left to the
    transport (test clients accept the mapping directly).
    """
    payload = {}
    for param in parameters:
        if param.location != ParameterLocation.FORM_DATA:
            continue
        if param.name not in context.request_params:
            raise MissingValueError(param.name, param.location.value)
        payload[param.name] = context.request_params[param.name]
    return payload


def build_raw_payload(parameters: list[ParameterDescriptor], context: ExampleContext) -> Any:
    body_param = next((p for p in parameters if p.location == ParameterLocation.BODY), None)
    if body_param is None:
        return None
    try:
        return context.request_params[body_param.name]
    except KeyError:
        raise MissingParameterError(body_param.name) from None


def build_json_payload(parameters: list[ParameterDescriptor], context: ExampleContext) -> str | None:
    value = build_raw_payload(parameters, context)
    if value is None:
        return None
    # Models, dates, UUIDs and decimals are handled at any depth.
    try:
        return to_json(value).decode()
    except PydanticSerializationError as e:
        raise InvalidArgumentError(f"Body value cannot be serialized as JSON: {e}") from e
