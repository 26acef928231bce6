"""Constants for the Buderus KM200 integration and gateway library."""

from __future__ import annotations

import os

# ── Home Assistant integration ──────────────────────────────────────
DOMAIN = "km200"
MANUFACTURER = "Buderus"

CONF_GATEWAY_PASSWORD = "gateway_password"
CONF_PRIVATE_PASSWORD = "private_password"

# ── Protocol ────────────────────────────────────────────────────────
# Salt for key derivation, fixed by the vendor protocol.
MAGIC = bytes(
    [0x86, 0x78, 0x45, 0xE9, 0x7C, 0x4E, 0x29, 0xDC,
     0xE5, 0x22, 0xB9, 0xA7, 0xD3, 0xA3, 0xE0, 0x7B,
     0x15, 0x2B, 0xFF, 0xAD, 0xDD, 0xBE, 0xD7, 0xF5,
     0xFF, 0xD8, 0x42, 0xE9, 0x89, 0x5A, 0xD1, 0xE4]
)

KEY_LENGTH = 32
BLOCK_SIZE = 16

USER_AGENT = "TeleHeater"
DEFAULT_PORT = 80
DEFAULT_TIMEOUT = 10

# ── Envelope type discriminators ───────────────────────────────────
TYPE_FLOAT_VALUE = "floatValue"
TYPE_STRING_VALUE = "stringValue"
TYPE_SWITCH_PROGRAM = "switchProgram"
TYPE_REF_ENUM = "refEnum"

# ── Configuration file ─────────────────────────────────────────────
CONFIG_REQUIRED_FIELDS: tuple[str, ...] = (
    "gateway_password",  # from the sticker on the device
    "private_password",  # set by the customer in the app
    "host",
)

DEFAULT_CONFIG_PATHS: tuple[str, ...] = (
    os.path.expanduser("~/.km200.yml"),
    "/etc/km200.yml",
)

# ── Well-known resources ───────────────────────────────────────────
PATH_GATEWAY_UUID = "/gateway/uuid"
PATH_GATEWAY_FIRMWARE = "/gateway/versionFirmware"
PATH_GATEWAY_HARDWARE = "/gateway/versionHardware"

# Resources exposed as sensors: path -> friendly name
DEFAULT_SENSOR_PATHS: dict[str, str] = {
    "/system/sensors/temperatures/outdoor_t1": "Outdoor temperature",
    "/system/sensors/temperatures/supply_t1": "Supply temperature",
    "/system/sensors/temperatures/hotWater_t2": "Hot water temperature",
    "/heatingCircuits/hc1/roomtemperature": "Room temperature",
    "/heatingCircuits/hc1/operationMode": "Heating circuit mode",
    "/dhwCircuits/dhw1/operationMode": "Hot water mode",
}

# ── Units ──────────────────────────────────────────────────────────
TEMP_CELSIUS = "°C"

# Gateway unit strings -> HA sensor device class
UNIT_DEVICE_CLASS_MAP: dict[str, str] = {
    "C": "temperature",
    TEMP_CELSIUS: "temperature",
    "kW": "power",
    "kWh": "energy",
    "bar": "pressure",
}

# Gateway unit strings -> HA unit strings
UNIT_MAP: dict[str, str] = {
    "C": TEMP_CELSIUS,
}
