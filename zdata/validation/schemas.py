"""Shape descriptors (JSON Schema) for values crossing the client boundary."""

from typing import Any

# Validation Constants
MIN_PASSWORD_LENGTH = 6
MAX_PAGE_SIZE = 100
MAX_TIMEOUT_MS = 300_000

_POSITIVE_INT = {"type": "integer", "minimum": 1}
_POSITIVE_NUMBER = {"type": "number", "exclusiveMinimum": 0}

CACHE_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "default_ttl_ms": _POSITIVE_INT,
        "max_entries": _POSITIVE_INT,
    },
    "additionalProperties": False,
    "required": ["default_ttl_ms"],
}

RETRY_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "max_attempts": _POSITIVE_INT,
        "base_delay_ms": _POSITIVE_NUMBER,
        "max_delay_ms": _POSITIVE_NUMBER,
        "backoff_multiplier": _POSITIVE_NUMBER,
        "jitter_ms": _POSITIVE_NUMBER,
    },
    "additionalProperties": False,
}

API_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "base_url": {"type": "string", "pattern": r"^https?://[^\s/$.?#].[^\s]*$"},
        "workspace_id": {"type": "string", "minLength": 1},
        "timeout": {"type": "number", "minimum": 1, "maximum": MAX_TIMEOUT_MS},
        "headers": {"type": "object", "additionalProperties": {"type": "string"}},
        "enable_cache": {"type": "boolean"},
        "enable_retry": {"type": "boolean"},
        "cache_config": CACHE_CONFIG_SCHEMA,
        "retry_config": RETRY_CONFIG_SCHEMA,
    },
    "required": ["base_url", "workspace_id"],
}

LOGIN_REQUEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "email": {"type": "string", "format": "email"},
        "password": {"type": "string", "minLength": 1},
    },
    "required": ["email", "password"],
}

REGISTER_REQUEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "email": {"type": "string", "format": "email"},
        "password": {"type": "string", "minLength": MIN_PASSWORD_LENGTH},
    },
    "required": ["name", "email", "password"],
}

FIND_RECORDS_PARAMS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "resource_name": {"type": "string", "minLength": 1},
        "search": {"type": "string"},
        "page": {"type": "integer", "minimum": 1},
        "limit": {"type": "integer", "minimum": 1, "maximum": MAX_PAGE_SIZE},
    },
    "required": ["resource_name"],
}

USER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "email": {"type": "string", "format": "email"},
        "name": {"type": "string"},
    },
    "required": ["id", "email", "name"],
}

AUTH_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "access_token": {"type": "string", "minLength": 1},
        "expires_in": {"type": "number"},
        "token_type": {"type": "string"},
        "user": USER_SCHEMA,
    },
    "required": ["access_token", "expires_in", "token_type", "user"],
}

PAGINATION_META_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "activePageNumber": {"type": "number"},
        "limit": {"type": "number"},
        "totalRecords": {"type": "number"},
        "totalPages": {"type": "number"},
        "hasNext": {"type": "boolean"},
        "hasPrev": {"type": "boolean"},
    },
    "required": ["activePageNumber", "limit", "totalRecords", "totalPages", "hasNext", "hasPrev"],
}

API_ERROR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "message": {"type": "string"},
        "errors": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "field": {"type": "string"},
                    "message": {"type": "string"},
                },
                "required": ["field", "message"],
            },
        },
    },
    "required": ["message"],
}


def paginated_response_schema(record_schema: Any = True) -> dict[str, Any]:
    """Envelope shape for list endpoints.

    Args:
        record_schema: Shape of each record (True accepts anything)

    Returns:
        Schema for {"records": [...], "meta": {...}}
    """
    return {
        "type": "object",
        "properties": {
            "records": {"type": "array", "items": record_schema},
            "meta": PAGINATION_META_SCHEMA,
        },
        "required": ["records", "meta"],
    }


PAGINATED_RESPONSE_SCHEMA = paginated_response_schema()
