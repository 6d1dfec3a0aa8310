"""Schema validation for the zdata client.

This module provides:
- validate / validate_safely against JSON Schema shape descriptors
- Shapes for configuration, auth payloads and paginated responses
"""

from .schemas import (
    API_CONFIG_SCHEMA,
    API_ERROR_SCHEMA,
    AUTH_RESPONSE_SCHEMA,
    FIND_RECORDS_PARAMS_SCHEMA,
    LOGIN_REQUEST_SCHEMA,
    PAGINATED_RESPONSE_SCHEMA,
    PAGINATION_META_SCHEMA,
    REGISTER_REQUEST_SCHEMA,
    paginated_response_schema,
)
from .validator import ValidationResult, collect_failures, validate, validate_safely

__all__ = [
    "validate",
    "validate_safely",
    "collect_failures",
    "ValidationResult",
    "API_CONFIG_SCHEMA",
    "API_ERROR_SCHEMA",
    "AUTH_RESPONSE_SCHEMA",
    "FIND_RECORDS_PARAMS_SCHEMA",
    "LOGIN_REQUEST_SCHEMA",
    "PAGINATED_RESPONSE_SCHEMA",
    "PAGINATION_META_SCHEMA",
    "REGISTER_REQUEST_SCHEMA",
    "paginated_response_schema",
]
