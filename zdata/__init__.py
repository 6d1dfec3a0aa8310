"""zdata: async client for the zdata resource API."""

__version__ = "0.1.0"

from .client import DataSourceClient, ZDataClient
from .errors import ApiError, ErrorKind, ValidationFailureDetail

__all__ = ["ZDataClient", "DataSourceClient", "ApiError", "ErrorKind", "ValidationFailureDetail"]
