"""Validated registry domains used to qualify image references."""

from __future__ import annotations

from dataclasses import dataclass

from .models import SANITY_REPOSITORY
from .reference_parser import InvalidReferenceError, split_image_name


class InvalidDomainError(ValueError):
    """Raised when a string cannot be used as a qualifying domain."""


def _check_domain(value: str) -> None:
    """Raise unless ``value`` splits back out of ``value/SANITY_REPOSITORY``."""
    try:
        domain, remainder = split_image_name(f"{value}/{SANITY_REPOSITORY}")
    except InvalidReferenceError as e:
        raise InvalidDomainError(f"invalid domain {value!r}: {e}") from e

    if domain != value or remainder != SANITY_REPOSITORY:
        raise InvalidDomainError(f"invalid domain {value!r}")


@dataclass(frozen=True)
class Domain:
    """A registry domain such as ``registry.example.com:5000`` or ``localhost``.

    The value is validated on construction, so every instance is known to be
    detected as a domain when prefixed to an image.

    Raises:
        InvalidDomainError: If ``value`` would not be detected as a domain.
    """

    value: str

    def __post_init__(self) -> None:
        _check_domain(self.value)

    def __str__(self) -> str:
        return self.value


def new_domain(value: str) -> Domain:
    """Validate that ``value`` can be used as the domain of an image reference.

    ``value`` is prefixed to a fixed sanity repository and split back apart
    with :func:`split_image_name`; both halves must come back unchanged.

    Raises:
        InvalidDomainError: If ``value`` would not be detected as a domain.
    """
    return Domain(value)
