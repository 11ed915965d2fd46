"""Pytest configuration and shared fixtures for cbd tests."""

import base64

import cbor2
import pytest

MIXED_JSON = '[{"key1":"value1","key2":"value2"},{"foo":"bar"},true,false,0,1.0]'


@pytest.fixture
def simple_json() -> str:
    """A one-entry JSON object."""
    return '{"k":"v"}'


@pytest.fixture
def simple_cbor() -> bytes:
    """CBOR encoding of ``{"k":"v"}``."""
    return bytes([161, 97, 107, 97, 118])


@pytest.fixture
def mixed_json() -> str:
    """JSON array mixing maps, booleans, integers and floats."""
    return MIXED_JSON


@pytest.fixture
def mixed_cbor() -> bytes:
    """CBOR encoding of the mixed JSON array."""
    return cbor2.dumps(
        [{"key1": "value1", "key2": "value2"}, {"foo": "bar"}, True, False, 0, 1.0]
    )


@pytest.fixture
def base64_encoders() -> dict:
    """Encoders for each supported base64 alphabet variant."""
    return {
        "url-safe-no-pad": lambda data: base64.urlsafe_b64encode(data).rstrip(b"="),
        "standard": base64.b64encode,
        "url-safe": base64.urlsafe_b64encode,
        "standard-no-pad": lambda data: base64.b64encode(data).rstrip(b"="),
    }


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: end-to-end conversion and CLI tests")
