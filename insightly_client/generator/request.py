"""
Outbound request construction and response decoding.

Every API call builds one OutboundRequest, sends it once and discards it.
Requests are never shared between calls.
"""

import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from ..core.models import (
    ClientConfig,
    ConfigError,
    DecodeError,
    EncodeError,
    HttpStatusError,
    QueryOptions,
    SampleRequest,
    TransportError,
)
from ..core.multipart import encode_multipart
from ..core.odata import build_odata_params

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
SUCCESS_STATUSES = (200, 201, 202)


def build_auth_header(api_key: str) -> str:
    """Build the Basic auth header value; the password half is empty."""
    token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _encode_default(obj: Any) -> Any:
    # Attribute-style records (dataclasses, SimpleNamespace, ...) encode as their fields
    if hasattr(obj, "__dict__"):
        return vars(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class OutboundRequest:
    """A fully-formed request: method, path, headers, body and query pairs."""
    method: str
    path: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes | None = None
    query: list[tuple[str, str]] = field(default_factory=list)

    def query_param(self, name: str, value: Any) -> "OutboundRequest":
        """Append one query parameter, keeping insertion order."""
        self.query.append((name, str(value)))
        return self

    def odata(self, options: QueryOptions | Mapping[str, Any] | None) -> "OutboundRequest":
        """Append the OData parameters for the given options."""
        self.query.extend(build_odata_params(options))
        return self

    def json_body(self, obj: Any) -> "OutboundRequest":
        """
        Attach a JSON body.

        Raises:
            EncodeError: If the object cannot be serialized or is the SAMPLE marker
        """
        if isinstance(obj, SampleRequest):
            raise EncodeError("SAMPLE is not a record and cannot be sent as a request body")
        try:
            data = json.dumps(obj, default=_encode_default)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Error encountered encoding JSON: {e}") from e

        self.body = data.encode("utf-8")
        self.headers.append(("Content-Type", "application/json"))
        return self

    def upload_body(self, fields: Mapping[str, Any]) -> "OutboundRequest":
        """
        Attach a multipart/form-data body built from upload fields.

        Raises:
            FileError: If an existing upload file cannot be read
        """
        payload, content_type = encode_multipart(fields)
        self.body = payload
        self.headers.append(("Content-Type", content_type))
        return self

    def url(self, config: ClientConfig) -> str:
        """Build the absolute URL, without the query string."""
        base_url = config.base_url.rstrip("/")
        path = self.path.lstrip("/")
        return f"{base_url}/{config.api_version}/{path}"

    def full_url(self, config: ClientConfig) -> str:
        """Build the absolute URL including the query string."""
        return str(httpx.URL(self.url(config), params=self.query))


def new_request(config: ClientConfig, method: str, path: str) -> OutboundRequest:
    """
    Create an authenticated request.

    Args:
        config: Client configuration providing the credential
        method: HTTP method (GET, POST, PUT or DELETE)
        path: Resource path below the API version, e.g. "Contacts/12"

    Raises:
        ConfigError: If the method is not supported
    """
    if method not in SUPPORTED_METHODS:
        raise ConfigError(f"Invalid HTTP method: {method}")

    return OutboundRequest(
        method=method,
        path=path,
        headers=[("Authorization", build_auth_header(config.api_key))],
    )


def send(
    http_client: httpx.Client,
    config: ClientConfig,
    request: OutboundRequest,
) -> httpx.Response:
    """
    Execute a request once.

    Returns:
        The response, whose status is 200, 201 or 202

    Raises:
        TransportError: On connection failures
        HttpStatusError: On any other status code
    """
    url = request.url(config)
    logger.debug(f"{request.method} {url} params={request.query}")

    try:
        response = http_client.request(
            method=request.method,
            url=url,
            headers=request.headers,
            params=request.query or None,
            content=request.body,
        )
    except httpx.RequestError as e:
        raise TransportError(f"HTTP Error: {e}") from e

    logger.debug(f"{request.method} {url} -> {response.status_code}")
    if response.status_code not in SUCCESS_STATUSES:
        raise HttpStatusError(
            f"Bad HTTP status code: {response.status_code}",
            status_code=response.status_code,
        )

    return response


def decode_json(response: httpx.Response) -> Any:
    """
    Decode a response body as UTF-8 JSON.

    Returns:
        The decoded value

    Raises:
        DecodeError: If the body is empty or not valid JSON
    """
    content = response.content
    try:
        return json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(
            f"Error encountered decoding JSON: {e}",
            status_code=response.status_code,
        ) from e
