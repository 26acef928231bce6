"""Data models for the Buderus KM200 gateway and its resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .const import DEFAULT_PORT


@dataclass(frozen=True, slots=True)
class Credentials:
    """Connection settings for one gateway."""

    gateway_password: bytes
    private_password: bytes
    host: str
    port: int = DEFAULT_PORT

    def __repr__(self) -> str:
        return f"Credentials(host={self.host!r}, port={self.port!r})"


# ── Resource values (one variant per envelope type) ────────────────


@dataclass(frozen=True, slots=True)
class SwitchPoint:
    """One entry of a weekly switch program."""

    day_of_week: str
    setpoint: str
    time: int


@dataclass(frozen=True, slots=True)
class FloatValue:
    """Numeric resource (``floatValue``)."""

    path: str
    value: float
    unit: str | None = None
    writeable: bool = False


@dataclass(frozen=True, slots=True)
class StringValue:
    """Textual resource (``stringValue``)."""

    path: str
    value: str
    allowed_values: tuple[str, ...] | None = None
    writeable: bool = False


@dataclass(frozen=True, slots=True)
class SwitchProgram:
    """Weekly schedule (``switchProgram``).

    ``value`` is the gateway's ``switchPoints`` array exactly as received.
    """

    path: str
    value: list[Any]

    @property
    def points(self) -> list[SwitchPoint]:
        return [
            SwitchPoint(
                day_of_week=p["dayOfWeek"],
                setpoint=p["setpoint"],
                time=p["time"],
            )
            for p in self.value
        ]


@dataclass(frozen=True, slots=True)
class RefEnum:
    """Directory node (``refEnum``): the ids of its child resources."""

    path: str
    value: frozenset[str]


@dataclass(frozen=True, slots=True)
class RawValue:
    """Any other payload, passed through unchanged."""

    path: str
    value: Any


ResourceValue = Union[FloatValue, StringValue, SwitchProgram, RefEnum, RawValue]


# ── Home Assistant facing devices ──────────────────────────────────


@dataclass(frozen=True, slots=True)
class GatewayDevice:
    """KM200 gateway device info."""

    name: str
    unique_id: str
    manufacturer: str
    model: str | None
    sw_version: str | None


@dataclass(frozen=True, slots=True)
class SensorDevice:
    """A polled gateway resource."""

    available: bool
    name: str
    unique_id: str
    path: str
    state: Any
    unit_of_measurement: str | None
    device_class: str | None
    parent_unique_id: str | None = None
