"""Container image reference parser for alwaysqualify.

Validates image references against the Docker distribution reference grammar
and offers two views of a reference: a fully normalized parse (implicit
Docker Hub domain, ``library/`` namespace, default tag) and a lexical split
that only detects whether an explicit domain is present.
"""

from __future__ import annotations

import re

from .models import DEFAULT_IMAGE_TAG, ImageReference

NAME_TOTAL_LENGTH_MAX: int = 255

# Docker Hub host aliases that should be normalized
_DEFAULT_DOMAIN: str = "docker.io"
_LEGACY_DEFAULT_DOMAIN: str = "index.docker.io"
_OFFICIAL_REPO_NAMESPACE: str = "library"

# Supported digest algorithms and the length of their hex encoding
_DIGEST_HEX_LENGTHS: dict[str, int] = {
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}

# ---------------------------------------------------------------------------
# Reference grammar
# ---------------------------------------------------------------------------
_ALPHA_NUMERIC = r"[a-z0-9]+"
_SEPARATOR = r"(?:[._]|__|[-]+)"
_PATH_COMPONENT = rf"{_ALPHA_NUMERIC}(?:{_SEPARATOR}{_ALPHA_NUMERIC})*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = rf"{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*[:][0-9a-fA-F]{32,}"
_NAME = rf"(?:{_DOMAIN}/)?{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*"

_REFERENCE_RE = re.compile(rf"(?P<name>{_NAME})(?::(?P<tag>{_TAG}))?(?:@(?P<digest>{_DIGEST}))?", re.ASCII)
_ANCHORED_IDENTIFIER_RE = re.compile(r"[a-f0-9]{64}")


class InvalidReferenceError(ValueError):
    """Raised when a string is not a valid image reference."""


def _parse_digest(digest: str) -> str:
    """Validate a ``<algorithm>:<hex>`` digest and return it unchanged."""
    algorithm, sep, encoded = digest.partition(":")
    if not algorithm or not sep or not encoded:
        raise InvalidReferenceError("invalid checksum digest format")

    expected_length = _DIGEST_HEX_LENGTHS.get(algorithm)
    if expected_length is None:
        raise InvalidReferenceError("unsupported digest algorithm")
    if len(encoded) != expected_length:
        raise InvalidReferenceError("invalid checksum digest length")
    if not re.fullmatch(r"[a-f0-9]+", encoded):
        raise InvalidReferenceError("invalid checksum digest format")
    return digest


def _parse_reference(image: str) -> tuple[str, str, str]:
    """Validate ``image`` against the reference grammar without normalizing it.

    Returns:
        Tuple of ``(name, tag, digest)`` where ``tag`` and ``digest`` may be empty.

    Raises:
        InvalidReferenceError: If ``image`` violates the grammar.
    """
    match = _REFERENCE_RE.fullmatch(image)
    if match is None:
        if not image:
            raise InvalidReferenceError("repository name must have at least one component")
        if _REFERENCE_RE.fullmatch(image.lower()) is not None:
            raise InvalidReferenceError("repository name must be lowercase")
        raise InvalidReferenceError("invalid reference format")

    name = match.group("name")
    if len(name) > NAME_TOTAL_LENGTH_MAX:
        raise InvalidReferenceError(f"repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters")

    digest = match.group("digest") or ""
    if digest:
        digest = _parse_digest(digest)

    return name, match.group("tag") or "", digest


def _has_domain_prefix(first_segment: str) -> bool:
    """Determine whether the first path segment names a registry domain."""
    return "." in first_segment or ":" in first_segment or first_segment == "localhost"


def _split_docker_domain(name: str) -> tuple[str, str]:
    """Split ``name`` into domain and remainder, defaulting to Docker Hub."""
    first_segment, sep, remainder = name.partition("/")
    if not sep or not _has_domain_prefix(first_segment):
        domain, remainder = _DEFAULT_DOMAIN, name
    else:
        domain = first_segment

    if domain == _LEGACY_DEFAULT_DOMAIN:
        domain = _DEFAULT_DOMAIN
    # Docker Hub with single-segment path implies library/ namespace
    if domain == _DEFAULT_DOMAIN and "/" not in remainder:
        remainder = f"{_OFFICIAL_REPO_NAMESPACE}/{remainder}"
    return domain, remainder


def _parse_normalized_named(image: str) -> tuple[str, str, str]:
    """Parse ``image`` after expanding the implicit Docker Hub domain."""
    if _ANCHORED_IDENTIFIER_RE.fullmatch(image):
        raise InvalidReferenceError(
            f"invalid repository name ({image}), cannot specify 64-byte hexadecimal strings"
        )

    domain, remainder = _split_docker_domain(image)
    remote_name = remainder.split(":", 1)[0]
    if remote_name.lower() != remote_name:
        raise InvalidReferenceError("invalid reference format: repository name must be lowercase")

    return _parse_reference(f"{domain}/{remainder}")


def parse_image_name(image: str) -> ImageReference:
    """Parse an image reference into its repository, tag and digest.

    The repository is normalized, so an image without an explicit domain
    resolves against Docker Hub (``busybox`` becomes
    ``docker.io/library/busybox``). If both tag and digest are empty the
    tag defaults to ``latest``.

    Args:
        image: The raw image reference.

    Returns:
        The parsed :class:`ImageReference`.

    Raises:
        InvalidReferenceError: If ``image`` is not a valid reference.
    """
    try:
        repository, tag, digest = _parse_normalized_named(image)
    except InvalidReferenceError as e:
        raise InvalidReferenceError(f"couldn't parse image name: {e}") from e

    if not tag and not digest:
        tag = DEFAULT_IMAGE_TAG
    return ImageReference(repository=repository, tag=tag, digest=digest)


def split_image_name(image: str) -> tuple[str, str]:
    """Split an image reference into its domain and the rest.

    ``image`` is first validated as a reference without normalizing it. The
    part before the first ``/`` is the domain only if it contains a ``.`` or
    a ``:`` or is ``localhost``; otherwise the domain is empty and the whole
    image is returned as the remainder.

    Examples::

        "busybox"                    -> ("", "busybox")
        "foo/busybox"                -> ("", "foo/busybox")
        "localhost/foo/busybox"      -> ("localhost", "foo/busybox")
        "localhost:5000/foo/busybox" -> ("localhost:5000", "foo/busybox")
        "gcr.io/busybox"             -> ("gcr.io", "busybox")
        "docker.io/library/busybox"  -> ("docker.io", "library/busybox")

    Raises:
        InvalidReferenceError: If ``image`` is not a valid reference.
    """
    _parse_reference(image)

    first_segment, sep, remainder = image.partition("/")
    if not sep or not _has_domain_prefix(first_segment):
        return "", image
    return first_segment, remainder
