"""Tests for the KM200 sensor entity."""

from __future__ import annotations

import dataclasses
from unittest.mock import AsyncMock, MagicMock

from homeassistant.components.sensor import SensorDeviceClass, SensorStateClass

from custom_components.km200.models import SensorDevice
from custom_components.km200.sensor import KM200Sensor


def _make_entity(device: SensorDevice) -> KM200Sensor:
    coordinator = MagicMock()
    coordinator.data = {device.unique_id: device}
    coordinator.last_update_success = True
    coordinator.async_request_refresh = AsyncMock()
    coordinator.async_add_listener = MagicMock(return_value=lambda: None)
    return KM200Sensor(coordinator, device.unique_id, AsyncMock())


class TestKM200SensorProperties:
    """Test sensor entity property delegation."""

    def test_unique_id(self, sensor_device):
        entity = _make_entity(sensor_device)
        assert entity.unique_id == "123456789_system_sensors_temperatures_outdoor_t1"

    def test_name(self, sensor_device):
        assert _make_entity(sensor_device).name == "Outdoor temperature"

    def test_available(self, sensor_device):
        assert _make_entity(sensor_device).available is True

    def test_unavailable_resource(self, sensor_device):
        device = dataclasses.replace(sensor_device, available=False, state=None)
        assert _make_entity(device).available is False

    def test_native_value(self, sensor_device):
        assert _make_entity(sensor_device).native_value == 7.4

    def test_should_poll_false(self, sensor_device):
        assert _make_entity(sensor_device).should_poll is False

    def test_device_class_temperature(self, sensor_device):
        entity = _make_entity(sensor_device)
        assert entity.device_class == SensorDeviceClass.TEMPERATURE

    def test_state_class(self, sensor_device):
        entity = _make_entity(sensor_device)
        assert entity.state_class == SensorStateClass.MEASUREMENT

    def test_unit_of_measurement(self, sensor_device):
        assert _make_entity(sensor_device).native_unit_of_measurement == "°C"

    def test_path_attribute(self, sensor_device):
        entity = _make_entity(sensor_device)
        assert entity.extra_state_attributes == {
            "path": "/system/sensors/temperatures/outdoor_t1"
        }

    def test_device_info_uses_gateway(self, sensor_device):
        info = _make_entity(sensor_device).device_info
        assert ("km200", "123456789") in info["identifiers"]
        assert "name" not in info


class TestKM200StringSensor:
    """Test sensor entity for textual resources."""

    @staticmethod
    def _mode_device() -> SensorDevice:
        return SensorDevice(
            available=True,
            name="Heating circuit mode",
            unique_id="hc1_mode",
            path="/heatingCircuits/hc1/operationMode",
            state="auto",
            unit_of_measurement=None,
            device_class=None,
        )

    def test_native_value(self):
        assert _make_entity(self._mode_device()).native_value == "auto"

    def test_no_device_class(self):
        assert _make_entity(self._mode_device()).device_class is None

    def test_no_state_class(self):
        assert _make_entity(self._mode_device()).state_class is None

    def test_device_info_without_parent(self):
        info = _make_entity(self._mode_device()).device_info
        assert ("km200", "hc1_mode") in info["identifiers"]
        assert info["manufacturer"] == "Buderus"


class TestKM200SensorVanished:
    """Test a sensor whose resource dropped out of the coordinator data."""

    @staticmethod
    def _vanished(sensor_device) -> KM200Sensor:
        entity = _make_entity(sensor_device)
        entity.coordinator.data = {}
        return entity

    def test_unavailable(self, sensor_device):
        assert self._vanished(sensor_device).available is False

    def test_unique_id_kept(self, sensor_device):
        entity = self._vanished(sensor_device)
        assert entity.unique_id == "123456789_system_sensors_temperatures_outdoor_t1"

    def test_properties_empty(self, sensor_device):
        entity = self._vanished(sensor_device)
        assert entity.name is None
        assert entity.native_value is None
        assert entity.native_unit_of_measurement is None
        assert entity.device_class is None
        assert entity.state_class is None
        assert entity.extra_state_attributes == {}

    def test_device_info(self, sensor_device):
        info = self._vanished(sensor_device).device_info
        assert (
            "km200",
            "123456789_system_sensors_temperatures_outdoor_t1",
        ) in info["identifiers"]

    def test_no_coordinator_data(self, sensor_device):
        entity = _make_entity(sensor_device)
        entity.coordinator.data = None
        assert entity.available is False
        assert entity.native_value is None
