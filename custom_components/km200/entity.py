"""Base entity for the Buderus KM200 integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import (
    CoordinatorEntity,
    DataUpdateCoordinator,
)

from .const import DOMAIN, MANUFACTURER
from .gateway import KM200Gateway
from .models import SensorDevice


class KM200Entity(CoordinatorEntity):
    """Base class for all KM200 entities.

    Provides shared plumbing: unique_id, name, available, device_info,
    should_poll (False), and coordinator listener registration.
    """

    _attr_has_entity_name = False

    def __init__(
        self,
        coordinator: DataUpdateCoordinator,
        idx: str,
        gateway: KM200Gateway,
    ) -> None:
        """Initialise the entity."""
        super().__init__(coordinator)
        self._idx = idx
        self._gateway = gateway

    @property
    def _device(self) -> SensorDevice | None:
        return (self.coordinator.data or {}).get(self._idx)

    @property
    def available(self) -> bool:
        """Entity available when coordinator succeeded *and* resource read."""
        if not super().available:
            return False
        d = self._device
        return d is not None and d.available

    @property
    def unique_id(self) -> str:
        return self._idx

    @property
    def name(self) -> str | None:
        d = self._device
        return d.name if d else None

    @property
    def device_info(self) -> dict:
        d = self._device
        parent = d.parent_unique_id if d else None
        if parent:
            return {"identifiers": {(DOMAIN, parent)}}
        return {
            "name": "KM200 Gateway",
            "identifiers": {(DOMAIN, self._idx)},
            "manufacturer": MANUFACTURER,
        }
