"""Python client for the Insightly CRM REST API."""

from .core import (
    ClientConfig,
    QueryOptions,
    SAMPLE,
    Filter,
    InsightlyError,
    ConfigError,
    ResourceNotFoundError,
    EncodeError,
    FileError,
    APIError,
    TransportError,
    HttpStatusError,
    DecodeError,
)
from .generator import InsightlyClient, generate_client

__all__ = [
    "ClientConfig",
    "QueryOptions",
    "SAMPLE",
    "Filter",
    "InsightlyError",
    "ConfigError",
    "ResourceNotFoundError",
    "EncodeError",
    "FileError",
    "APIError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "InsightlyClient",
    "generate_client",
]
