"""Construction of admission plugins from configuration.

The host builds its admission chain explicitly with :func:`build_plugins`
instead of looking factories up in a process-wide registry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import IO, Protocol

from .admission import AlwaysQualifyImages
from .config import load_configuration
from .domain import new_domain
from .models import PLUGIN_NAME, AdmissionAttributes

logger = logging.getLogger(__name__)


class MutationPlugin(Protocol):
    def admit(self, attributes: AdmissionAttributes) -> None: ...


def new_plugin(config_file: IO[str] | None = None) -> AlwaysQualifyImages:
    """Build an :class:`AlwaysQualifyImages` plugin from a configuration file.

    Args:
        config_file: JSON configuration, or ``None`` for the default domain.

    Raises:
        ConfigurationError: If the configuration is invalid.
        InvalidDomainError: If the configured domain is invalid.
    """
    config = load_configuration(config_file)
    domain = new_domain(config.domain)
    logger.info(f"{PLUGIN_NAME} will qualify unqualified images with domain {domain}")
    return AlwaysQualifyImages(domain=domain)


PLUGIN_FACTORIES: dict[str, Callable[[IO[str] | None], MutationPlugin]] = {
    PLUGIN_NAME: new_plugin,
}


def build_plugins(plugin_configs: Mapping[str, IO[str] | None]) -> list[MutationPlugin]:
    """Build the admission plugins named in ``plugin_configs``, in order.

    Args:
        plugin_configs: Plugin names mapped to their configuration file (or
            ``None`` for defaults).

    Returns:
        The constructed plugins, in the order they were given.

    Raises:
        ValueError: If a plugin name is unknown.
    """
    plugins: list[MutationPlugin] = []
    for name, config_file in plugin_configs.items():
        factory = PLUGIN_FACTORIES.get(name)
        if factory is None:
            raise ValueError(f"Unknown admission plugin: {name}")
        plugins.append(factory(config_file))
    return plugins
