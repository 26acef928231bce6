"""Sensors for KM200 resources (temperatures, operation modes)."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import DEFAULT_TIMEOUT, DOMAIN
from .entity import KM200Entity

_LOGGER = logging.getLogger(__name__)

SCAN_INTERVAL = timedelta(seconds=60)


async def async_setup_entry(hass, config_entry, async_add_entities):
    """Set up KM200 sensors from a config entry."""

    gateway = hass.data[DOMAIN][config_entry.entry_id]

    async def async_update_data():
        # One request per configured resource, each bounded by the transport.
        async with asyncio.timeout(DEFAULT_TIMEOUT * 10):
            await gateway.poll_status()
            return gateway.get_sensor_devices()

    coordinator = DataUpdateCoordinator(
        hass,
        _LOGGER,
        config_entry=config_entry,
        name="sensor",
        update_method=async_update_data,
        update_interval=SCAN_INTERVAL,
    )

    await coordinator.async_refresh()

    async_add_entities(
        KM200Sensor(coordinator, idx, gateway) for idx in coordinator.data or {}
    )


class KM200Sensor(KM200Entity, SensorEntity):
    """Representation of a single gateway resource."""

    @property
    def native_value(self):
        d = self._device
        return d.state if d else None

    @property
    def native_unit_of_measurement(self) -> str | None:
        d = self._device
        return d.unit_of_measurement if d else None

    @property
    def device_class(self) -> SensorDeviceClass | None:
        d = self._device
        if d is None or not d.device_class:
            return None
        return SensorDeviceClass(d.device_class)

    @property
    def state_class(self) -> SensorStateClass | None:
        if isinstance(self.native_value, (int, float)):
            return SensorStateClass.MEASUREMENT
        return None

    @property
    def extra_state_attributes(self) -> dict:
        d = self._device
        return {"path": d.path} if d else {}
