"""Tests for control channel URL construction."""

from __future__ import annotations

import pytest

from samsung_tv.connection import (
    ConnectionConfig,
    build_url,
    encode_app_name,
    is_valid_app_name,
    is_valid_ip_address,
)
from samsung_tv.errors import URLConstructionFailed


def test_build_url_with_token() -> None:
    """Test URL includes base64 app name and token."""
    config = ConnectionConfig(app="Test", host="192.168.0.1", token="1234567")

    assert build_url(config) == (
        "wss://192.168.0.1:8002/api/v2/channels/samsung.remote.control"
        "?name=VGVzdA==&token=1234567"
    )


def test_build_url_without_token() -> None:
    """Test token parameter is omitted when no token is stored."""
    config = ConnectionConfig(app="Test", host="192.168.0.1")

    assert build_url(config) == (
        "wss://192.168.0.1:8002/api/v2/channels/samsung.remote.control?name=VGVzdA=="
    )


def test_build_url_empty_token_omitted() -> None:
    """Test an empty token counts as absent."""
    config = ConnectionConfig(app="Test", host="192.168.0.1", token="")

    assert "token=" not in build_url(config)


def test_build_url_keeps_base64_padding_literal() -> None:
    """Test padding characters are not percent-escaped."""
    config = ConnectionConfig(app="My TV", host="10.0.0.5")

    url = build_url(config)

    assert f"name={encode_app_name('My TV')}" in url
    assert "%3D" not in url


def test_build_url_custom_endpoint() -> None:
    """Test scheme, port and path come from the config."""
    config = ConnectionConfig(app="Test", host="10.0.0.5", port=8001, scheme="ws", path="/custom")

    assert build_url(config).startswith("ws://10.0.0.5:8001/custom?name=")


@pytest.mark.parametrize(
    "overrides",
    [
        {"host": ""},
        {"host": "bad host"},
        {"host": "a/b"},
        {"port": 0},
        {"port": 70000},
        {"scheme": ""},
        {"scheme": "w$s"},
        {"path": "relative"},
    ],
)
def test_build_url_invalid_components(overrides) -> None:
    """Test invalid components raise URLConstructionFailed."""
    values = {"app": "Test", "host": "192.168.0.1"}
    values.update(overrides)

    with pytest.raises(URLConstructionFailed):
        build_url(ConnectionConfig(**values))


def test_encode_app_name() -> None:
    """Test app name encoding."""
    assert encode_app_name("Test") == "VGVzdA=="
    assert encode_app_name("SamsungTVCommander") == "U2Ftc3VuZ1RWQ29tbWFuZGVy"


def test_validators() -> None:
    """Test app name and IPv4 validation."""
    assert is_valid_app_name("Test")
    assert not is_valid_app_name("")
    assert not is_valid_app_name(None)

    assert is_valid_ip_address("192.168.0.1")
    assert not is_valid_ip_address("192.168.0")
    assert not is_valid_ip_address("192.168.0.256")
    assert not is_valid_ip_address("tv.local")
    assert not is_valid_ip_address("")
