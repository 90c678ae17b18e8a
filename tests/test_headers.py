import pytest

from openapi_request_factory.builder.headers import build_headers, transport_name
from openapi_request_factory.errors import MissingValueError
from openapi_request_factory.parser.base import (
    ExampleContext,
    OperationMetadata,
    ParameterDescriptor,
    PathItemMetadata,
    RequestMetadata,
)


def _metadata(**operation) -> RequestMetadata:
    return RequestMetadata(
        path_item=PathItemMetadata(template="/pets"),
        operation=OperationMetadata(verb="post", **operation),
    )


def _header(name: str) -> ParameterDescriptor:
    return ParameterDescriptor.model_validate({"name": name, "in": "header", "required": True})


class TestTransportName:
    @pytest.mark.parametrize("header,expected", [
        ("Accept", "HTTP_ACCEPT"),
        ("Content-Type", "CONTENT_TYPE"),
        ("Authorization", "HTTP_AUTHORIZATION"),
        ("Host", "HTTP_HOST"),
        ("X-Api-Key", "X-Api-Key"),
    ])
    def test_canonical_names(self, header, expected):
        assert transport_name(header) == expected


class TestBuildHeaders:
    def test_header_parameters(self):
        ctx = ExampleContext(request_headers={"X-Api-Key": "secret", "Authorization": "Bearer t"})
        headers = build_headers(_metadata(), {}, [_header("X-Api-Key"), _header("Authorization")], ctx)
        assert headers == {"X-Api-Key": "secret", "HTTP_AUTHORIZATION": "Bearer t"}

    def test_missing_header_value(self):
        with pytest.raises(MissingValueError, match="X-Api-Key"):
            build_headers(_metadata(), {}, [_header("X-Api-Key")], ExampleContext())

    def test_header_values_stringified(self):
        ctx = ExampleContext(request_headers={"X-Retry": 3})
        assert build_headers(_metadata(), {}, [_header("X-Retry")], ctx) == {"X-Retry": "3"}

    def test_accept_and_content_type_from_operation(self):
        metadata = _metadata(produces=["application/json", "application/xml"], consumes=["application/json"])
        headers = build_headers(metadata, {}, [], ExampleContext())
        assert headers == {"HTTP_ACCEPT": "application/json", "CONTENT_TYPE": "application/json"}

    def test_document_media_types_used_as_fallback(self):
        doc = {"produces": ["application/xml"], "consumes": ["text/plain"]}
        headers = build_headers(_metadata(), doc, [], ExampleContext())
        assert headers == {"HTTP_ACCEPT": "application/xml", "CONTENT_TYPE": "text/plain"}

    def test_explicit_empty_operation_media_types(self):
        doc = {"produces": ["application/xml"]}
        assert build_headers(_metadata(produces=[]), doc, [], ExampleContext()) == {}

    def test_supplied_headers_override_media_types(self):
        metadata = _metadata(produces=["application/json"], consumes=["application/json"])
        ctx = ExampleContext(request_headers={"Accept": "text/csv", "Content-Type": "application/vnd.api+json"})
        headers = build_headers(metadata, {}, [], ctx)
        assert headers == {"HTTP_ACCEPT": "text/csv", "CONTENT_TYPE": "application/vnd.api+json"}

    def test_no_media_types_declared(self):
        assert build_headers(_metadata(), {}, [], ExampleContext()) == {}

    def test_host_from_operation(self):
        assert build_headers(_metadata(host="api.example.com"), {}, [], ExampleContext()) == {
            "HTTP_HOST": "api.example.com"
        }

    def test_host_from_document_overridden_by_example(self):
        headers = build_headers(_metadata(), {"host": "api.example.com"}, [], ExampleContext(host="localhost:8000"))
        assert headers == {"HTTP_HOST": "localhost:8000"}

    def test_blank_host_ignored(self):
        assert build_headers(_metadata(host="   "), {}, [], ExampleContext(host="localhost")) == {}
