"""Request factory: turns operation metadata plus example values into a request."""

from collections.abc import Mapping
from typing import Any

from openapi_request_factory.builder.headers import build_headers
from openapi_request_factory.builder.parameters import expand_parameters
from openapi_request_factory.builder.path import build_path
from openapi_request_factory.builder.payload import build_payload
from openapi_request_factory.config import Config
from openapi_request_factory.errors import ConfigurationError
from openapi_request_factory.logging import get_logger
from openapi_request_factory.parser.base import ExampleContext, RequestDescriptor, RequestMetadata

logger = get_logger("request")


class RequestFactory:
    """Builds a RequestDescriptor for one example of one operation.

    The document comes either from ``document`` or, when the metadata names
    one, from the config registry.
    """

    def __init__(
        self,
        metadata: RequestMetadata,
        example: ExampleContext | Mapping[str, Any],
        document: Mapping | None = None,
        config: Config | None = None,
    ):
        self.metadata = metadata
        self.example = example if isinstance(example, ExampleContext) else ExampleContext(**example)
        self.document = document
        self.config = config

    def build_request(self) -> RequestDescriptor:
        document = self._openapi_spec()
        operation = self.metadata.operation
        logger.debug("Building %s %s", operation.verb.upper(), self.metadata.path_item.template)

        parameters = expand_parameters(self.metadata, document, self.example)
        logger.debug("Expanded parameters: %s", [p.name for p in parameters])

        path = build_path(self.metadata, document, parameters, self.example)
        headers = build_headers(self.metadata, document, parameters, self.example)
        payload = build_payload(parameters, headers, self.example)
        logger.debug("Built request path %s with headers %s", path, sorted(headers))

        return RequestDescriptor(verb=operation.verb, path=path, headers=headers, payload=payload)

    def _openapi_spec(self) -> Mapping:
        if self.config is not None and (self.metadata.openapi_spec is not None or self.document is None):
            return self.config.get_openapi_spec(self.metadata.openapi_spec)
        if self.document is None:
            raise ConfigurationError("No document given and no config to look one up in")
        return self.document
