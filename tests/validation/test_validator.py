"""Tests for the schema validation gate."""

import jsonschema
import pytest

from zdata.errors import ApiError, ErrorKind
from zdata.validation import (
    API_CONFIG_SCHEMA,
    AUTH_RESPONSE_SCHEMA,
    FIND_RECORDS_PARAMS_SCHEMA,
    LOGIN_REQUEST_SCHEMA,
    PAGINATED_RESPONSE_SCHEMA,
    REGISTER_REQUEST_SCHEMA,
    collect_failures,
    validate,
    validate_safely,
)
from zdata.validation.schemas import paginated_response_schema

PERSON_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "email": {"type": "string", "format": "email"},
        "age": {"type": "integer", "minimum": 0},
    },
    "required": ["name", "email", "age"],
}


class TestValidate:
    """Test raising validation."""

    def test_conforming_value_returned_as_is(self):
        value = {"name": "Jane", "email": "jane@example.com", "age": 30, "nickname": "J"}
        assert validate(PERSON_SCHEMA, value) is value

    def test_every_violation_reported_in_order(self):
        with pytest.raises(ApiError) as exc_info:
            validate(PERSON_SCHEMA, {"name": "", "email": "invalid-email", "age": -1})

        error = exc_info.value
        assert error.kind == ErrorKind.VALIDATION
        assert [d.path for d in error.details] == [("name",), ("email",), ("age",)]
        assert [d.code for d in error.details] == ["minLength", "format", "minimum"]
        assert all(d.message for d in error.details)

    def test_missing_field(self):
        with pytest.raises(ApiError) as exc_info:
            validate(PERSON_SCHEMA, {"name": "Jane", "email": "jane@example.com"})

        (detail,) = exc_info.value.details
        assert detail.code == "required"
        assert detail.path == ()
        assert "age" in detail.message

    def test_nested_path(self):
        body = {"records": [], "meta": {"activePageNumber": "one"}}

        failures = collect_failures(PAGINATED_RESPONSE_SCHEMA, body)

        paths = [f.path for f in failures]
        assert ("meta", "activePageNumber") in paths

    def test_array_index_in_path(self):
        shape = paginated_response_schema({"type": "object", "required": ["id"]})
        body = {
            "records": [{"id": "1"}, {"name": "no id"}],
            "meta": {
                "activePageNumber": 1,
                "limit": 10,
                "totalRecords": 2,
                "totalPages": 1,
                "hasNext": False,
                "hasPrev": False,
            },
        }

        (failure,) = collect_failures(shape, body)
        assert failure.path == ("records", "1")

    def test_wrong_top_level_type(self):
        with pytest.raises(ApiError) as exc_info:
            validate(PERSON_SCHEMA, ["not", "an", "object"])
        assert exc_info.value.details[0].code == "type"

    def test_invalid_schema_rejected(self):
        with pytest.raises(jsonschema.SchemaError):
            validate({"type": "no-such-type"}, 1)


class TestValidateSafely:
    """Test non-raising validation."""

    def test_ok(self):
        result = validate_safely(LOGIN_REQUEST_SCHEMA, {"email": "a@b.co", "password": "x"})
        assert result.ok
        assert result.error is None

    def test_failure(self):
        result = validate_safely(LOGIN_REQUEST_SCHEMA, {"email": "a@b.co"})

        assert not result.ok
        assert result.value is None
        assert result.error.kind == ErrorKind.VALIDATION


class TestSchemas:
    """Test the client's boundary shapes."""

    def test_exported_shapes_are_used_and_valid(self):
        """Every exported shape is a valid schema with a caller in the client."""
        import zdata.validation as validation

        shapes = {name for name in validation.__all__ if name.endswith("_SCHEMA")}
        assert shapes == {
            "API_CONFIG_SCHEMA",
            "API_ERROR_SCHEMA",
            "AUTH_RESPONSE_SCHEMA",
            "FIND_RECORDS_PARAMS_SCHEMA",
            "LOGIN_REQUEST_SCHEMA",
            "PAGINATED_RESPONSE_SCHEMA",
            "PAGINATION_META_SCHEMA",
            "REGISTER_REQUEST_SCHEMA",
        }
        for name in shapes:
            jsonschema.Draft202012Validator.check_schema(getattr(validation, name))

    def test_register_password_length(self):
        failures = collect_failures(
            REGISTER_REQUEST_SCHEMA, {"name": "Jane", "email": "jane@example.com", "password": "123"}
        )
        assert [f.path for f in failures] == [("password",)]

    def test_page_size_limit(self):
        assert collect_failures(FIND_RECORDS_PARAMS_SCHEMA, {"resource_name": "users", "limit": 100}) == []
        failures = collect_failures(FIND_RECORDS_PARAMS_SCHEMA, {"resource_name": "users", "limit": 101})
        assert failures[0].code == "maximum"

    def test_api_config_requires_http_url(self):
        failures = collect_failures(API_CONFIG_SCHEMA, {"base_url": "ftp://x", "workspace_id": "w"})
        assert failures[0].path == ("base_url",)

    def test_api_config_rejects_unknown_retry_option(self):
        config = {"base_url": "https://x.io", "workspace_id": "w", "retry_config": {"retries": 3}}
        failures = collect_failures(API_CONFIG_SCHEMA, config)
        assert failures[0].code == "additionalProperties"

    def test_auth_response(self):
        response = {
            "access_token": "t",
            "expires_in": 3600,
            "token_type": "Bearer",
            "user": {"id": "u1", "email": "user@example.com", "name": "User"},
        }
        assert collect_failures(AUTH_RESPONSE_SCHEMA, response) == []
