"""Shared fixtures for Buderus KM200 tests."""

from __future__ import annotations

import base64
import json
from typing import Any

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from custom_components.km200.exceptions import KM200TransportError
from custom_components.km200.models import Credentials, GatewayDevice, SensorDevice

GATEWAY_PASSWORD = b"NeUCsyQMLVYqKJec"
PRIVATE_PASSWORD = b"HnE75f+a%aXP"
EXAMPLE_KEY = bytes.fromhex(
    "91df2cd7631c309f2027b89a5126a481bf39ade2565b0af0947faad456a5cc9c"
)
GATEWAY_UUID = "123456789"


def gateway_encrypt(payload: Any, key: bytes = EXAMPLE_KEY) -> bytes:
    """Encrypt a response body the way the gateway does (CBC, zero IV)."""
    plain = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    plain += bytes(-len(plain) % 16)
    encryptor = Cipher(algorithms.AES(key), modes.CBC(bytes(16))).encryptor()
    return base64.b64encode(encryptor.update(plain) + encryptor.finalize())


class FakeTransport:
    """In-memory transport serving canned, encrypted responses."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.posts: list[tuple[str, bytes]] = []
        self.gets: list[str] = []
        self.closed = False

    async def get(self, path: str) -> bytes:
        self.gets.append(path)
        body = self.responses.get(path)
        if body is None:
            raise KM200TransportError(f"Gateway answered 404 to GET {path}")
        if isinstance(body, Exception):
            raise body
        return body if isinstance(body, bytes) else gateway_encrypt(body)

    async def post(self, path: str, body: bytes) -> bytes:
        self.posts.append((path, body))
        return b""

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations for all tests."""
    yield


@pytest.fixture
def credentials() -> Credentials:
    """Return credentials matching the documented example key."""
    return Credentials(
        gateway_password=GATEWAY_PASSWORD,
        private_password=PRIVATE_PASSWORD,
        host="192.168.1.100",
    )


@pytest.fixture
def transport() -> FakeTransport:
    """Return a transport that knows the gateway info resources."""
    return FakeTransport(
        {
            "/gateway/uuid": {
                "id": "/gateway/uuid",
                "type": "stringValue",
                "writeable": 0,
                "recordable": 0,
                "value": GATEWAY_UUID,
            },
            "/gateway/versionFirmware": {
                "id": "/gateway/versionFirmware",
                "type": "stringValue",
                "value": "04.07.01",
            },
            "/gateway/versionHardware": {
                "id": "/gateway/versionHardware",
                "type": "stringValue",
                "value": "iCom_Low_NSC_v1",
            },
        }
    )


@pytest.fixture
def gateway_device() -> GatewayDevice:
    """Return a sample GatewayDevice."""
    return GatewayDevice(
        name="KM200 iCom_Low_NSC_v1",
        unique_id=GATEWAY_UUID,
        manufacturer="Buderus",
        model="iCom_Low_NSC_v1",
        sw_version="04.07.01",
    )


@pytest.fixture
def sensor_device() -> SensorDevice:
    """Return a sample outdoor temperature SensorDevice."""
    return SensorDevice(
        available=True,
        name="Outdoor temperature",
        unique_id=f"{GATEWAY_UUID}_system_sensors_temperatures_outdoor_t1",
        path="/system/sensors/temperatures/outdoor_t1",
        state=7.4,
        unit_of_measurement="°C",
        device_class="temperature",
        parent_unique_id=GATEWAY_UUID,
    )
