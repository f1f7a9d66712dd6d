"""Tests for core data models."""

import pytest

from insightly_client.core.models import (
    SAMPLE,
    APIError,
    ClientConfig,
    ConfigError,
    DecodeError,
    HttpStatusError,
    InsightlyError,
    QueryOptions,
    SampleRequest,
    TransportError,
)


def test_client_config_defaults():
    """Test ClientConfig defaults."""
    config = ClientConfig(api_key="k")

    assert config.base_url == "https://api.insight.ly"
    assert config.api_version == "v2.2"
    assert config.timeout_seconds == 10.0


def test_client_config_to_dict_excludes_key():
    """Test that to_dict never includes the API key."""
    data = ClientConfig(api_key="k").to_dict()

    assert "api_key" not in data
    assert data == {
        "base_url": "https://api.insight.ly",
        "api_version": "v2.2",
        "timeout_seconds": 10.0,
    }


def test_client_config_from_dict():
    """Test creating ClientConfig from a settings dictionary."""
    config = ClientConfig.from_dict("k", {"base_url": "https://x", "timeout_seconds": "3"})

    assert config.api_key == "k"
    assert config.base_url == "https://x"
    assert config.api_version == "v2.2"
    assert config.timeout_seconds == 3.0


def test_query_options_from_dict():
    """Test QueryOptions from a plain dict ignores other keys."""
    options = QueryOptions.from_value({"top": 5, "orderby": "X desc", "email": "a@b.c"})

    assert options == QueryOptions(top=5, orderby="X desc")


def test_query_options_from_none():
    """Test that None gives empty options."""
    assert QueryOptions.from_value(None).is_empty()


def test_query_options_passthrough():
    """Test that an instance is returned as-is."""
    options = QueryOptions(top=1)
    assert QueryOptions.from_value(options) is options


def test_query_options_is_empty():
    """Test is_empty treats 0 as a value."""
    assert QueryOptions().is_empty()
    assert not QueryOptions(top=0).is_empty()
    assert not QueryOptions(filters=["A=1"]).is_empty()


def test_sample_sentinel():
    """Test the sample marker."""
    assert isinstance(SAMPLE, SampleRequest)
    assert repr(SAMPLE) == "SAMPLE"


def test_error_hierarchy():
    """Test the error taxonomy."""
    assert issubclass(ConfigError, InsightlyError)
    assert issubclass(TransportError, APIError)
    assert issubclass(HttpStatusError, APIError)
    assert issubclass(DecodeError, APIError)
    assert not issubclass(DecodeError, HttpStatusError)


def test_api_error_with_status_code():
    """Test APIError stores status code."""
    error = APIError("Request failed", status_code=404)
    assert str(error) == "Request failed"
    assert error.status_code == 404


def test_api_error_without_status_code():
    """Test APIError works without status code."""
    error = APIError("Network error")
    assert str(error) == "Network error"
    assert error.status_code is None


def test_http_status_error_requires_status():
    """Test HttpStatusError carries the numeric status."""
    error = HttpStatusError("Bad HTTP status code: 500", status_code=500)
    assert error.status_code == 500

    with pytest.raises(TypeError):
        HttpStatusError("missing status")
