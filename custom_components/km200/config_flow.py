"""Config flow to configure the Buderus KM200 component."""

from __future__ import annotations

import logging

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_PORT

from .const import (
    CONF_GATEWAY_PASSWORD,
    CONF_PRIVATE_PASSWORD,
    DEFAULT_PORT,
    DOMAIN,
)
from .exceptions import KM200AuthenticationError, KM200TransportError
from .gateway import KM200Gateway
from .models import Credentials

_LOGGER = logging.getLogger(__name__)

DEFAULT_GATEWAY_NAME = "Buderus KM200"

GATEWAY_SETTINGS = {
    vol.Required(CONF_HOST): str,
    vol.Optional(CONF_PORT, default=DEFAULT_PORT): int,
    vol.Required(CONF_GATEWAY_PASSWORD): vol.All(str, vol.Length(min=1)),
    vol.Required(CONF_PRIVATE_PASSWORD): vol.All(str, vol.Length(min=1)),
    vol.Optional(CONF_NAME, default=DEFAULT_GATEWAY_NAME): str,
}


class KM200FlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a KM200 config flow."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, str] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Handle a flow initialized by the user to configure a gateway."""
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST]
            port = user_input.get(CONF_PORT, DEFAULT_PORT)

            gateway = KM200Gateway(
                Credentials(
                    gateway_password=user_input[CONF_GATEWAY_PASSWORD].encode(),
                    private_password=user_input[CONF_PRIVATE_PASSWORD].encode(),
                    host=host,
                    port=port,
                )
            )
            try:
                unique_id = await gateway.connect()
                await self.async_set_unique_id(unique_id)
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=user_input.get(CONF_NAME, DEFAULT_GATEWAY_NAME),
                    data={
                        CONF_HOST: host,
                        CONF_PORT: port,
                        CONF_GATEWAY_PASSWORD: user_input[CONF_GATEWAY_PASSWORD],
                        CONF_PRIVATE_PASSWORD: user_input[CONF_PRIVATE_PASSWORD],
                        "uuid": unique_id,
                    },
                )
            except KM200TransportError:
                errors["base"] = "connect_error"
            except KM200AuthenticationError:
                errors["base"] = "auth_error"
            finally:
                await gateway.close()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(GATEWAY_SETTINGS),
            errors=errors,
        )
