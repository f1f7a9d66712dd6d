"""Core data models for the Insightly client."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

DEFAULT_BASE_URL = "https://api.insight.ly"
DEFAULT_API_VERSION = "v2.2"
DEFAULT_TIMEOUT_SECONDS = 10.0

ODATA_KEYS = ("top", "skip", "orderby", "filters")


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings shared by every request a client builds."""
    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def to_dict(self) -> dict[str, Any]:
        """Convert the non-secret settings to a dictionary."""
        return {
            "base_url": self.base_url,
            "api_version": self.api_version,
            "timeout_seconds": self.timeout_seconds,
        }

    @classmethod
    def from_dict(cls, api_key: str, data: Mapping[str, Any]) -> "ClientConfig":
        """Create ClientConfig from an API key and a settings dictionary."""
        return cls(
            api_key=api_key,
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            api_version=data.get("api_version", DEFAULT_API_VERSION),
            timeout_seconds=float(data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        )


@dataclass
class QueryOptions:
    """
    Paging, ordering and filtering options for list operations.

    Filters are raw comparison strings such as ``FIRST_NAME='Brian'`` or
    structured ``Filter`` objects.
    """
    top: int | None = None
    skip: int | None = None
    orderby: str | None = None
    filters: Sequence[Any] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: "QueryOptions | Mapping[str, Any] | None") -> "QueryOptions":
        """Build options from an existing instance, a plain dict or None."""
        if value is None:
            return cls()
        if isinstance(value, QueryOptions):
            return value
        filters = value.get("filters") or []
        if isinstance(filters, str):
            filters = [filters]
        return cls(
            top=value.get("top"),
            skip=value.get("skip"),
            orderby=value.get("orderby"),
            filters=list(filters),
        )

    def is_empty(self) -> bool:
        return (
            self.top is None
            and self.skip is None
            and not self.orderby
            and not self.filters
        )


class SampleRequest:
    """Marker passed to a write operation to fetch a sample record instead."""

    def __repr__(self) -> str:
        return "SAMPLE"


SAMPLE = SampleRequest()


class InsightlyError(Exception):
    """Base class for every error raised by the client."""
    pass


class ConfigError(InsightlyError):
    """Raised for invalid configuration or an unsupported request setup."""
    pass


class ResourceNotFoundError(InsightlyError):
    """Raised when a resource or sub-resource is not in the registry."""
    pass


class EncodeError(InsightlyError):
    """Raised when an outbound body cannot be serialized to JSON."""
    pass


class FileError(InsightlyError):
    """Raised when an upload source or download target cannot be accessed."""
    pass


class APIError(InsightlyError):
    """Raised when an API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(APIError):
    """Raised on connection, DNS or TLS failures."""
    pass


class HttpStatusError(APIError):
    """Raised when the response status is not 200, 201 or 202."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message, status_code=status_code)


class DecodeError(APIError):
    """Raised when a response body is not valid JSON."""
    pass
