"""Core components for the Insightly client."""

from .models import (
    ClientConfig,
    QueryOptions,
    SampleRequest,
    SAMPLE,
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
from .odata import Filter, build_odata_params, rewrite_filter
from .multipart import encode_multipart, upload_fields
from .registry import (
    ResourceDefinition,
    register_resource,
    get_resource,
    list_resources,
    reset_registry,
)
from .config_store import (
    get_base_dir,
    save_json,
    load_json,
    save_settings,
    load_settings,
    load_client_config,
)

__all__ = [
    "ClientConfig",
    "QueryOptions",
    "SampleRequest",
    "SAMPLE",
    "InsightlyError",
    "ConfigError",
    "ResourceNotFoundError",
    "EncodeError",
    "FileError",
    "APIError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "Filter",
    "build_odata_params",
    "rewrite_filter",
    "encode_multipart",
    "upload_fields",
    "ResourceDefinition",
    "register_resource",
    "get_resource",
    "list_resources",
    "reset_registry",
    "get_base_dir",
    "save_json",
    "load_json",
    "save_settings",
    "load_settings",
    "load_client_config",
]
