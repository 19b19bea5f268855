"""Configuration loading for the AlwaysQualifyImages admission plugin.

The plugin reads an optional JSON document::

    {
        "apiVersion": "alwaysqualifyimages.admission.k8s.io/v1alpha1",
        "kind": "Configuration",
        "domain": "registry.example.com:5000"
    }

``apiVersion`` and ``kind`` may be omitted. A missing or empty document
selects the default domain.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import IO, Any

from .domain import InvalidDomainError, new_domain
from .models import DEFAULT_DOMAIN

logger = logging.getLogger(__name__)

CONFIGURATION_API_VERSION: str = "alwaysqualifyimages.admission.k8s.io/v1alpha1"
CONFIGURATION_KIND: str = "Configuration"


class ConfigurationError(ValueError):
    """Raised when a configuration document cannot be read or is invalid."""


@dataclass
class Configuration:
    """Settings for the AlwaysQualifyImages plugin."""

    domain: str = DEFAULT_DOMAIN
    api_version: str = CONFIGURATION_API_VERSION
    kind: str = CONFIGURATION_KIND


def validate_configuration(config: Configuration) -> list[str]:
    """Validate a configuration.

    Args:
        config: Configuration to validate.

    Returns:
        List of field error messages, empty when the configuration is valid.
    """
    errors: list[str] = []

    if config.api_version != CONFIGURATION_API_VERSION:
        errors.append(f"apiVersion: Unsupported value: {config.api_version!r}")
    if config.kind != CONFIGURATION_KIND:
        errors.append(f"kind: Unsupported value: {config.kind!r}")

    if not isinstance(config.domain, str) or not config.domain:
        errors.append("domain: Required value")
    else:
        try:
            new_domain(config.domain)
        except InvalidDomainError as e:
            errors.append(f"domain: Invalid value: {config.domain!r}: {e}")

    return errors


def _configuration_from_dict(document: dict[str, Any]) -> Configuration:
    config = Configuration()
    if "domain" in document:
        config.domain = document["domain"]
    if "apiVersion" in document:
        config.api_version = document["apiVersion"]
    if "kind" in document:
        config.kind = document["kind"]
    return config


def load_configuration(config_file: IO[str] | None = None) -> Configuration:
    """Read and validate a configuration document.

    Args:
        config_file: File-like object holding the JSON document, or ``None``
            for the defaults.

    Returns:
        The validated :class:`Configuration`.

    Raises:
        ConfigurationError: If the document is not a JSON object or fails
            validation.
    """
    raw = config_file.read() if config_file is not None else ""
    if not raw.strip():
        logger.info(f"No configuration provided, using default domain {DEFAULT_DOMAIN!r}")
        return Configuration()

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Configuration is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigurationError("Configuration must be a JSON object")

    config = _configuration_from_dict(document)
    if errors := validate_configuration(config):
        raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")
    return config
