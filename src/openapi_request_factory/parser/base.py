"""Data models shared by the document parser and the request builders.

Operation metadata describes what the document declares; the example
context carries the concrete values a caller wants to send; the request
descriptor is what comes out of a build.
"""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from openapi_request_factory.errors import InvalidArgumentError


class ParameterLocation(str, Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    FORM_DATA = "formData"
    BODY = "body"


class ParameterStyle(str, Enum):
    FORM = "form"
    MATRIX = "matrix"
    LABEL = "label"
    SPACE_DELIMITED = "spaceDelimited"
    PIPE_DELIMITED = "pipeDelimited"
    DEEP_OBJECT = "deepObject"


FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
JSON_MEDIA_TYPE = re.compile(r"\Aapplication/([0-9A-Za-z._-]+\+json|json)\Z")


class MediaTypeCategory(str, Enum):
    """How a request body is encoded for a given Content-Type."""

    FORM = "form"
    JSON = "json"
    OTHER = "other"

    @classmethod
    def from_content_type(cls, content_type: str) -> "MediaTypeCategory":
        media_type = content_type.split(";", 1)[0].strip()
        if media_type in FORM_MEDIA_TYPES:
            return cls.FORM
        if JSON_MEDIA_TYPE.match(media_type):
            return cls.JSON
        return cls.OTHER


class ParameterDescriptor(BaseModel):
    """A single, fully resolved operation parameter."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool | None = None  # None: not declared either way
    schema_: dict | None = Field(default=None, alias="schema")
    type: str | None = None  # Swagger 2 leftover, rejected when serializing
    style: ParameterStyle | None = None
    explode: bool | None = None
    items: dict | None = None


class PathItemMetadata(BaseModel):
    """The path-item an operation lives under."""

    template: str  # /pets/{id}
    parameters: list[dict[str, Any]] = []


class OperationMetadata(BaseModel):
    """What the document declares for one verb on a path."""

    verb: str
    parameters: list[dict[str, Any]] = []
    security: list[dict[str, Any]] | None = None  # None inherits, [] disables
    consumes: list[str] | None = None
    produces: list[str] | None = None
    host: str | None = None


class RequestMetadata(BaseModel):
    """Operation metadata handed to the request factory."""

    path_item: PathItemMetadata
    operation: OperationMetadata
    openapi_spec: str | None = None  # registry name, see Config


def normalize_key(key: Any) -> str:
    """Map a caller's key (str, enum member, ...) to its canonical string."""
    if isinstance(key, Enum):
        key = key.value
    return key if isinstance(key, str) else str(key)


class ExampleContext(BaseModel):
    """Concrete values supplied by the surrounding example.

    Keys of both mappings are normalized to strings on construction, so
    later lookups are plain exact matches.
    """

    request_params: dict[str, Any] = {}
    request_headers: dict[str, Any] = {}
    host: str | None = None

    @field_validator("request_params", "request_headers", mode="before")
    @classmethod
    def _normalize_keys(cls, value: Any, info) -> dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise InvalidArgumentError(f"{info.field_name} must be a mapping")
        return {normalize_key(k): v for k, v in value.items()}


class RequestDescriptor(BaseModel):
    """The wire-ready request produced by one build."""

    model_config = ConfigDict(frozen=True)

    verb: str
    path: str
    headers: dict[str, str]
    payload: Any = None
