"""Support for the Buderus KM200 heating gateway."""

from __future__ import annotations

import asyncio
import logging

from homeassistant import config_entries, core
from homeassistant.const import CONF_HOST, CONF_PORT
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.config_validation import config_entry_only_config_schema

from .const import (
    CONF_GATEWAY_PASSWORD,
    CONF_PRIVATE_PASSWORD,
    DEFAULT_PORT,
    DOMAIN,
)
from .exceptions import KM200AuthenticationError, KM200TransportError
from .gateway import KM200Gateway
from .models import Credentials

CONFIG_SCHEMA = config_entry_only_config_schema(DOMAIN)

_LOGGER = logging.getLogger(__name__)

GATEWAY_PLATFORMS = ["sensor"]
RETRY_DELAY = 3


def credentials_from_entry(data: dict) -> Credentials:
    """Build gateway credentials from config entry data."""
    return Credentials(
        gateway_password=data[CONF_GATEWAY_PASSWORD].encode(),
        private_password=data[CONF_PRIVATE_PASSWORD].encode(),
        host=data[CONF_HOST],
        port=data.get(CONF_PORT, DEFAULT_PORT),
    )


async def async_setup(hass: core.HomeAssistant, config: dict) -> bool:
    """Set up the Buderus KM200 component."""
    return True


async def async_setup_entry(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> bool:
    """Set up the gateway from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    gateway = KM200Gateway(credentials_from_entry(entry.data))

    try:
        for remaining in reversed(range(3)):
            try:
                await gateway.connect()
                await gateway.poll_status()
                break
            except KM200TransportError:
                if remaining == 0:
                    raise
                await asyncio.sleep(RETRY_DELAY)
    except KM200TransportError:
        _LOGGER.error(
            "Connection error: check if you have specified "
            "gateway's HOST correctly."
        )
        await gateway.close()
        return False
    except KM200AuthenticationError:
        _LOGGER.error(
            "Authentication error: check the gateway and private passwords."
        )
        await gateway.close()
        return False

    hass.data[DOMAIN][entry.entry_id] = gateway

    gateway_info = gateway.get_gateway_device()
    if gateway_info is not None:
        device_registry = dr.async_get(hass)
        device_registry.async_get_or_create(
            config_entry_id=entry.entry_id,
            identifiers={(DOMAIN, gateway_info.unique_id)},
            manufacturer=gateway_info.manufacturer,
            name=gateway_info.name,
            model=gateway_info.model,
            sw_version=gateway_info.sw_version,
        )

    await hass.config_entries.async_forward_entry_setups(
        entry, GATEWAY_PLATFORMS
    )

    return True


async def async_unload_entry(
    hass: core.HomeAssistant,
    config_entry: config_entries.ConfigEntry,
) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(
        config_entry, GATEWAY_PLATFORMS
    )

    if unload_ok:
        gateway: KM200Gateway | None = hass.data[DOMAIN].pop(
            config_entry.entry_id, None
        )
        if gateway is not None:
            await gateway.close()

    return unload_ok
