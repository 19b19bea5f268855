"""Shared pytest fixtures for the alwaysqualify test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from kubernetes.client import V1Container, V1ObjectMeta, V1Pod, V1PodSpec

from alwaysqualify.admission import AlwaysQualifyImages
from alwaysqualify.domain import Domain, new_domain
from alwaysqualify.models import AdmissionAttributes, GroupVersionResource, Operation

UNQUALIFIED_IMAGES: list[str] = [
    "busybox",
    "busybox:latest",
    "foo/busybox",
    "foo/busybox:v1.2.3",
]


def _image_name(domain: str, repository: str) -> str:
    if not domain:
        return repository
    return f"{domain}/{repository}"


@pytest.fixture()
def make_pod_spec() -> Callable[..., V1PodSpec]:
    """Return a factory for pod specs with four init containers and four containers.

    Returns:
        Callable taking an optional domain, prefixed to every image built from
        :data:`UNQUALIFIED_IMAGES`, or empty for unqualified images.
    """

    def _make(domain: str = "") -> V1PodSpec:
        return V1PodSpec(
            init_containers=[
                V1Container(name=f"init{i}", image=_image_name(domain, image))
                for i, image in enumerate(UNQUALIFIED_IMAGES, start=1)
            ],
            containers=[
                V1Container(name=f"ctrl{i}", image=_image_name(domain, image))
                for i, image in enumerate(UNQUALIFIED_IMAGES, start=1)
            ],
        )

    return _make


@pytest.fixture()
def image_names() -> Callable[[V1PodSpec], tuple[list[str], list[str]]]:
    """Return a function listing the ``(init_container_images, container_images)`` of a spec."""

    def _names(spec: V1PodSpec) -> tuple[list[str], list[str]]:
        return (
            [c.image for c in spec.init_containers or []],
            [c.image for c in spec.containers or []],
        )

    return _names


@pytest.fixture()
def make_attributes() -> Callable[..., AdmissionAttributes]:
    """Return a factory for admission attributes.

    Returns:
        Callable taking the request object and optional ``operation``,
        ``resource`` and ``subresource``; defaults describe a CREATE of the
        pods resource.
    """

    def _make(
        obj: object,
        operation: Operation = Operation.CREATE,
        resource: str = "pods",
        subresource: str = "",
    ) -> AdmissionAttributes:
        return AdmissionAttributes(
            operation=operation,
            resource=GroupVersionResource(group="", version="version", resource=resource),
            object=obj,
            subresource=subresource,
            kind="Pod",
            namespace="test",
            name="123",
        )

    return _make


@pytest.fixture()
def make_pod() -> Callable[[V1PodSpec], V1Pod]:
    """Return a factory wrapping a pod spec in a ``V1Pod``.

    Returns:
        Callable taking a ``V1PodSpec`` and returning a ``V1Pod`` named ``123``
        in namespace ``test``.
    """

    def _make(spec: V1PodSpec) -> V1Pod:
        return V1Pod(metadata=V1ObjectMeta(name="123", namespace="test"), spec=spec)

    return _make


@pytest.fixture()
def domain() -> Domain:
    """Return the validated domain ``test.io``."""
    return new_domain("test.io")


@pytest.fixture()
def handler(domain: Domain) -> AlwaysQualifyImages:
    """Return an admission handler qualifying images with ``test.io``."""
    return AlwaysQualifyImages(domain=domain)
