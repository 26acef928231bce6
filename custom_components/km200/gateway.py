"""Buderus KM200 gateway API — encrypted resource reads and writes."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import aiohttp

from .config import load_config
from .const import (
    DEFAULT_CONFIG_PATHS,
    DEFAULT_SENSOR_PATHS,
    DEFAULT_TIMEOUT,
    MANUFACTURER,
    PATH_GATEWAY_FIRMWARE,
    PATH_GATEWAY_HARDWARE,
    PATH_GATEWAY_UUID,
    TYPE_FLOAT_VALUE,
    TYPE_REF_ENUM,
    TYPE_STRING_VALUE,
    TYPE_SWITCH_PROGRAM,
    UNIT_DEVICE_CLASS_MAP,
    UNIT_MAP,
)
from .crypto import KM200Crypto
from .exceptions import (
    KM200AuthenticationError,
    KM200DecodingError,
    KM200ProtocolError,
)
from .models import (
    Credentials,
    FloatValue,
    GatewayDevice,
    RawValue,
    RefEnum,
    ResourceValue,
    SensorDevice,
    StringValue,
    SwitchProgram,
)
from .transport import KM200Transport, Transport

_LOGGER = logging.getLogger(__name__)

_SWITCH_POINT_FIELDS = ("dayOfWeek", "setpoint", "time")


class KM200Gateway:
    """Async client for the Buderus Web-KM200 gateway."""

    def __init__(
        self,
        credentials: Credentials,
        transport: Transport | None = None,
        request_timeout: int = DEFAULT_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
        sensor_paths: Mapping[str, str] | None = None,
        debug: bool = False,
    ) -> None:
        self._crypto = KM200Crypto.from_credentials(credentials)
        self._host = credentials.host
        self._debug = debug

        if transport is None:
            transport = KM200Transport(
                credentials.host,
                credentials.port,
                request_timeout=request_timeout,
                session=session,
            )
        self._transport = transport

        self._sensor_paths = dict(
            DEFAULT_SENSOR_PATHS if sensor_paths is None else sensor_paths
        )
        self._uuid: str | None = None
        self._gateway_device: GatewayDevice | None = None
        self._sensor_devices: dict[str, SensorDevice] = {}

    @classmethod
    def from_config(
        cls,
        filename: str | None = None,
        search_paths: Sequence[str] = DEFAULT_CONFIG_PATHS,
        **kwargs: Any,
    ) -> KM200Gateway:
        """Create a client from a KM200 YAML config file."""
        return cls(load_config(filename, search_paths), **kwargs)

    # ------------------------------------------------------------------
    #  Resources
    # ------------------------------------------------------------------

    async def read_raw(self, path: str) -> str:
        """Read *path* and return the decrypted JSON text."""
        body = await self._transport.get(path)
        plain = self._crypto.decrypt(body)
        try:
            text = plain.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise KM200ProtocolError(
                f"Response for {path} is not valid UTF-8", path
            ) from exc

        if self._debug:
            _LOGGER.debug("Gateway response for %s:\n%s", path, text)
        return text

    async def read_json(self, path: str) -> Any:
        """Read *path* and return the parsed JSON document."""
        text = await self.read_raw(path)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise KM200ProtocolError(
                f"Response for {path} is not valid JSON", path
            ) from exc

    async def read_value(self, path: str) -> ResourceValue:
        """Read *path* and return the payload as a typed value."""
        return self.parse_envelope(path, await self.read_json(path))

    async def write(self, path: str, json_string: str | bytes) -> None:
        """Encrypt *json_string* and POST it to *path*."""
        if self._debug:
            _LOGGER.debug("Gateway write to %s:\n%s", path, json_string)
        body = self._crypto.encrypt(json_string)
        await self._transport.post(path, body.encode("ascii"))

    async def write_value(self, path: str, value: Any) -> None:
        """Set the ``value`` of a writeable resource."""
        await self.write(path, json.dumps({"value": value}))

    @staticmethod
    def parse_envelope(path: str, envelope: Any) -> ResourceValue:
        """Turn a parsed gateway response into a typed value."""
        if not isinstance(envelope, dict):
            return RawValue(path=path, value=envelope)

        type_ = envelope.get("type")

        def fail(reason: str) -> KM200ProtocolError:
            return KM200ProtocolError(
                f"Malformed {type_} envelope at {path}: {reason}", path, type_
            )

        if type_ == TYPE_FLOAT_VALUE:
            value = envelope.get("value")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise fail("'value' must be a number")
            return FloatValue(
                path=path,
                value=value,
                unit=envelope.get("unitOfMeasure"),
                writeable=bool(envelope.get("writeable", 0)),
            )

        if type_ == TYPE_STRING_VALUE:
            value = envelope.get("value")
            if not isinstance(value, str):
                raise fail("'value' must be a string")
            allowed = envelope.get("allowedValues")
            return StringValue(
                path=path,
                value=value,
                allowed_values=tuple(allowed) if isinstance(allowed, list) else None,
                writeable=bool(envelope.get("writeable", 0)),
            )

        if type_ == TYPE_SWITCH_PROGRAM:
            points = envelope.get("switchPoints")
            if not isinstance(points, list):
                raise fail("'switchPoints' must be an array")
            for point in points:
                if not isinstance(point, dict) or any(
                    field not in point for field in _SWITCH_POINT_FIELDS
                ):
                    raise fail(
                        "switch points need " + ", ".join(_SWITCH_POINT_FIELDS)
                    )
            return SwitchProgram(path=path, value=points)

        if type_ == TYPE_REF_ENUM:
            references = envelope.get("references")
            if not isinstance(references, list):
                raise fail("'references' must be an array")
            ids: set[str] = set()
            for ref in references:
                if not isinstance(ref, dict) or not isinstance(ref.get("id"), str):
                    raise fail("every reference needs a string 'id'")
                ids.add(ref["id"])
            return RefEnum(path=path, value=frozenset(ids))

        return RawValue(path=path, value=envelope)

    # ------------------------------------------------------------------
    #  Connection
    # ------------------------------------------------------------------

    async def connect(self) -> str:
        """Check credentials against the gateway and return its UUID."""
        _LOGGER.debug("Trying to connect to gateway at %s", self._host)

        try:
            uuid = await self.read_value(PATH_GATEWAY_UUID)
        except (KM200DecodingError, KM200ProtocolError) as exc:
            # The transport worked, so the key must be wrong.
            raise KM200AuthenticationError(
                "Gateway reachable but decryption failed — check passwords"
            ) from exc

        if not isinstance(uuid, StringValue):
            raise KM200AuthenticationError(
                f"Unexpected response for {PATH_GATEWAY_UUID} — check passwords"
            )
        self._uuid = uuid.value
        return uuid.value

    # ------------------------------------------------------------------
    #  Polling
    # ------------------------------------------------------------------

    async def poll_status(self) -> None:
        """Refresh gateway info and every configured sensor resource."""
        await self._refresh_gateway_device()
        await self._refresh_sensor_devices()

    async def _refresh_gateway_device(self) -> None:
        uuid = self._uuid or await self.connect()
        firmware = await self._read_optional_string(PATH_GATEWAY_FIRMWARE)
        hardware = await self._read_optional_string(PATH_GATEWAY_HARDWARE)

        self._gateway_device = GatewayDevice(
            name=f"KM200 {hardware}" if hardware else "KM200 Gateway",
            unique_id=uuid,
            manufacturer=MANUFACTURER,
            model=hardware,
            sw_version=firmware,
        )
        _LOGGER.debug("Refreshed gateway device")

    async def _read_optional_string(self, path: str) -> str | None:
        try:
            value = await self.read_value(path)
        except (KM200DecodingError, KM200ProtocolError):
            _LOGGER.exception("Failed to read %s", path)
            return None
        return value.value if isinstance(value, StringValue) else None

    async def _refresh_sensor_devices(self) -> None:
        local: dict[str, SensorDevice] = {}
        parent = self._gateway_device.unique_id if self._gateway_device else None

        for path, name in self._sensor_paths.items():
            unique_id = self._sensor_unique_id(parent, path)
            try:
                value = await self.read_value(path)
            except (KM200DecodingError, KM200ProtocolError):
                _LOGGER.exception("Failed to poll sensor %s", path)
                local[unique_id] = SensorDevice(
                    available=False,
                    name=name,
                    unique_id=unique_id,
                    path=path,
                    state=None,
                    unit_of_measurement=None,
                    device_class=None,
                    parent_unique_id=parent,
                )
                continue

            match value:
                case FloatValue(unit=unit):
                    state: Any = value.value
                    unit_of_measurement = UNIT_MAP.get(unit, unit) if unit else None
                    device_class = UNIT_DEVICE_CLASS_MAP.get(unit) if unit else None
                case StringValue():
                    state = value.value
                    unit_of_measurement = None
                    device_class = None
                case _:
                    _LOGGER.warning(
                        "Resource %s is not a scalar, skipping sensor", path
                    )
                    continue

            local[unique_id] = SensorDevice(
                available=True,
                name=name,
                unique_id=unique_id,
                path=path,
                state=state,
                unit_of_measurement=unit_of_measurement,
                device_class=device_class,
                parent_unique_id=parent,
            )

        self._sensor_devices = local
        _LOGGER.debug("Refreshed %s sensor devices", len(local))

    @staticmethod
    def _sensor_unique_id(parent: str | None, path: str) -> str:
        """Build a stable id such as ``<uuid>_system_sensors_outdoor_t1``."""
        slug = path.strip("/").replace("/", "_")
        return f"{parent}_{slug}" if parent else slug

    # ------------------------------------------------------------------
    #  Getters
    # ------------------------------------------------------------------

    def get_gateway_device(self) -> GatewayDevice | None:
        return self._gateway_device

    def get_sensor_devices(self) -> dict[str, SensorDevice]:
        return self._sensor_devices

    def get_sensor_device(self, device_id: str) -> SensorDevice | None:
        return self._sensor_devices.get(device_id)

    # ------------------------------------------------------------------
    #  Session lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the transport (and its HTTP session if we own it)."""
        await self._transport.close()

    async def __aenter__(self) -> KM200Gateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
