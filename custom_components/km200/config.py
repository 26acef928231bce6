"""Load KM200 credentials from a YAML configuration file.

The file must contain ``gateway_password``, ``private_password`` and
``host``; ``port`` is optional.  When no filename is given the search paths
are tried in order (``~/.km200.yml`` then ``/etc/km200.yml`` by default).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

import voluptuous as vol
import yaml

from .const import (
    CONFIG_REQUIRED_FIELDS,
    DEFAULT_CONFIG_PATHS,
    DEFAULT_PORT,
)
from .exceptions import KM200ConfigError
from .models import Credentials

_LOGGER = logging.getLogger(__name__)

# YAML may read a password as a number; null and empty values are rejected.
_PASSWORD = vol.All(
    vol.Any(str, int, float), vol.Coerce(str), vol.Length(min=1)
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required("gateway_password"): _PASSWORD,
        vol.Required("private_password"): _PASSWORD,
        vol.Required("host"): vol.All(str, vol.Length(min=1)),
        vol.Optional("port", default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
    },
    extra=vol.ALLOW_EXTRA,
)


def default_config_filename(
    filename: str | None = None,
    search_paths: Sequence[str] = DEFAULT_CONFIG_PATHS,
) -> str:
    """Return the configuration file to use.

    An explicit *filename* is never replaced by a search path; it must exist.
    """
    if filename is None:
        filename = next(
            (path for path in search_paths if path and os.path.isfile(path)),
            None,
        )
    if filename is None or not os.path.isfile(filename):
        raise FileNotFoundError("No KM200 config file found")
    return filename


def load_config(
    filename: str | None = None,
    search_paths: Sequence[str] = DEFAULT_CONFIG_PATHS,
) -> Credentials:
    """Read and validate a configuration file, return its credentials."""
    filename = default_config_filename(filename, search_paths)
    _LOGGER.debug("Loading KM200 configuration from %s", filename)

    with open(filename, encoding="utf-8") as fp:
        try:
            raw = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise KM200ConfigError(
                f"Configfile {filename} is not valid YAML"
            ) from exc

    try:
        config = CONFIG_SCHEMA(raw)
    except vol.Invalid as exc:
        raise KM200ConfigError(
            f"Configfile {filename} does not contain all required fields."
            f"  Required fields are: {', '.join(CONFIG_REQUIRED_FIELDS)}"
        ) from exc

    return Credentials(
        gateway_password=config["gateway_password"].encode(),
        private_password=config["private_password"].encode(),
        host=config["host"],
        port=config["port"],
    )
