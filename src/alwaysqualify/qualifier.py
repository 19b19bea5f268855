"""Qualification of container image names with a registry domain."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kubernetes.client import V1Container

from .domain import Domain
from .reference_parser import InvalidReferenceError, parse_image_name, split_image_name

logger = logging.getLogger(__name__)


class QualificationError(ValueError):
    """Raised when prefixing an image with the domain yields an invalid reference.

    Attributes:
        image: The qualified image name that failed to parse.
        cause: The parse error for ``image``.
    """

    def __init__(self, image: str, cause: InvalidReferenceError) -> None:
        super().__init__(f"invalid image name {image!r}: {cause}")
        self.image = image
        self.cause = cause


def has_domain(image: str) -> bool:
    """Return ``True`` if ``image`` is a valid reference with an explicit domain."""
    try:
        domain, _ = split_image_name(image)
    except InvalidReferenceError:
        return False
    return domain != ""


def qualify_image(domain: Domain, image: str) -> str:
    """Return ``image`` prefixed with ``domain`` unless it already has a domain.

    Raises:
        QualificationError: If the prefixed image is not a valid reference.
    """
    if has_domain(image):
        logger.debug(f"Not qualifying image {image!r} as it has a domain")
        return image

    qualified = f"{domain}/{image}"
    try:
        parse_image_name(qualified)
    except InvalidReferenceError as e:
        raise QualificationError(image=qualified, cause=e) from e

    logger.debug(f"Qualifying image {image!r} as {qualified!r}")
    return qualified


def qualify_container_images(domain: Domain, containers: Iterable[V1Container] | None) -> None:
    """Prefix every unqualified container image with ``domain``, in place.

    Containers are processed in order and processing stops at the first image
    that cannot be qualified. Images rewritten before that point keep their
    new value.

    Args:
        domain: Domain to prefix unqualified images with.
        containers: Containers whose ``image`` attribute may be rewritten.

    Raises:
        QualificationError: If a qualified image is not a valid reference.
    """
    for container in containers or []:
        container.image = qualify_image(domain=domain, image=container.image or "")
