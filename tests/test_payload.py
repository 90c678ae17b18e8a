import io
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest
from pydantic import BaseModel

from openapi_request_factory.builder.payload import build_payload
from openapi_request_factory.errors import InvalidArgumentError, MissingParameterError, MissingValueError
from openapi_request_factory.parser.base import ExampleContext, ParameterDescriptor

BODY = ParameterDescriptor.model_validate({"name": "pet", "in": "body", "required": True, "schema": {"type": "object"}})
FORM = [
    ParameterDescriptor.model_validate({"name": "file", "in": "formData", "required": True}),
    ParameterDescriptor.model_validate({"name": "caption", "in": "formData"}),
]


class Pet(BaseModel):
    name: str
    tags: list[str] = []


class TestBuildPayload:
    def test_no_content_type_no_payload(self):
        ctx = ExampleContext(request_params={"pet": {"name": "Fido"}})
        assert build_payload([BODY], {}, ctx) is None

    def test_json_body(self):
        ctx = ExampleContext(request_params={"pet": {"name": "Fido"}})
        assert build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ctx) == '{"name":"Fido"}'

    def test_vendor_json_body(self):
        ctx = ExampleContext(request_params={"pet": [1, 2]})
        assert build_payload([BODY], {"CONTENT_TYPE": "application/vnd.api+json"}, ctx) == "[1,2]"

    def test_json_body_from_model(self):
        ctx = ExampleContext(request_params={"pet": Pet(name="Fido")})
        payload = build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ctx)
        assert payload == '{"name":"Fido","tags":[]}'

    def test_json_body_list_of_models(self):
        ctx = ExampleContext(request_params={"pet": [Pet(name="Fido"), Pet(name="Rex", tags=["good"])]})
        payload = build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ctx)
        assert payload == '[{"name":"Fido","tags":[]},{"name":"Rex","tags":["good"]}]'

    def test_json_body_with_date_uuid_and_decimal(self):
        value = {
            "born": date(2020, 1, 2),
            "id": UUID("12345678-1234-5678-1234-567812345678"),
            "weight": Decimal("4.5"),
        }
        ctx = ExampleContext(request_params={"pet": value})
        payload = build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ctx)
        assert payload == '{"born":"2020-01-02","id":"12345678-1234-5678-1234-567812345678","weight":"4.5"}'

    def test_json_body_keeps_unicode(self):
        ctx = ExampleContext(request_params={"pet": {"name": "Ñandú"}})
        payload = build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ctx)
        assert payload == '{"name":"Ñandú"}'

    def test_unserializable_json_body(self):
        ctx = ExampleContext(request_params={"pet": {"handle": object()}})
        with pytest.raises(InvalidArgumentError, match="cannot be serialized as JSON"):
            build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ctx)

    def test_json_without_body_parameter(self):
        assert build_payload([], {"CONTENT_TYPE": "application/json"}, ExampleContext()) is None

    def test_missing_body_value(self):
        with pytest.raises(MissingParameterError) as exc_info:
            build_payload([BODY], {"CONTENT_TYPE": "application/json"}, ExampleContext())
        assert exc_info.value.parameter == "pet"
        assert "Missing parameter 'pet'" in str(exc_info.value)
        assert 'request_params={"pet": ...}' in str(exc_info.value)

    def test_form_values_passed_through(self):
        upload = io.BytesIO(b"\x89PNG")
        ctx = ExampleContext(request_params={"file": upload, "caption": "Fido"})
        payload = build_payload(FORM, {"CONTENT_TYPE": "multipart/form-data"}, ctx)
        assert payload == {"file": upload, "caption": "Fido"}
        assert payload["file"] is upload

    def test_urlencoded_form(self):
        ctx = ExampleContext(request_params={"file": "a", "caption": "b"})
        payload = build_payload(FORM, {"CONTENT_TYPE": "application/x-www-form-urlencoded"}, ctx)
        assert payload == {"file": "a", "caption": "b"}

    def test_missing_form_value(self):
        with pytest.raises(MissingValueError, match="caption"):
            build_payload(FORM, {"CONTENT_TYPE": "multipart/form-data"}, ExampleContext(request_params={"file": "a"}))

    def test_other_content_type_passes_raw_value(self):
        ctx = ExampleContext(request_params={"pet": "<pet><name>Fido</name></pet>"})
        payload = build_payload([BODY], {"CONTENT_TYPE": "application/xml"}, ctx)
        assert payload == "<pet><name>Fido</name></pet>"
