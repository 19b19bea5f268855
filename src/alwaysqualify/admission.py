"""Admission plugin that qualifies Pod container images with a registry domain.

Only CREATE requests for the Pod resource itself are considered. Init
containers are qualified before regular containers, and an image that cannot
be qualified rejects the whole request.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kubernetes.client import V1Pod

from .domain import Domain
from .models import POD_RESOURCE, AdmissionAttributes, Operation
from .qualifier import QualificationError, qualify_container_images


class AdmissionError(Exception):
    """Base exception for rejected admission requests.

    Attributes:
        reason: Machine-readable reason for the rejection.
        code: HTTP status code the host should answer with.
    """

    reason: str = "InternalError"
    code: int = 500


class BadRequestError(AdmissionError):
    """Raised when the admitted object cannot be accepted as submitted."""

    reason = "BadRequest"
    code = 400


def _is_subresource_request(attributes: AdmissionAttributes) -> bool:
    return len(attributes.subresource) > 0


def _is_pods_request(attributes: AdmissionAttributes) -> bool:
    return attributes.resource.group_resource() == POD_RESOURCE


class AlwaysQualifyImages:
    """Mutating admission plugin adding a domain to unqualified Pod images.

    Args:
        domain: Validated domain used to qualify images.
        operations: Operations this plugin applies to.
    """

    def __init__(
        self,
        domain: Domain,
        operations: Iterable[Operation] = (Operation.CREATE,),
    ) -> None:
        self.logger = logging.getLogger(__name__)
        self.domain = domain
        self.operations: frozenset[Operation] = frozenset(operations)

    def handles(self, operation: Operation) -> bool:
        """Return ``True`` if this plugin acts on ``operation``."""
        return operation in self.operations

    def should_ignore(self, attributes: AdmissionAttributes) -> bool:
        """Decide whether a request is outside the scope of this plugin.

        Subresource requests, requests for resources other than pods and
        operations the plugin does not handle are all ignored.
        """
        if _is_subresource_request(attributes):
            return True
        if not _is_pods_request(attributes):
            return True
        return not self.handles(attributes.operation)

    def admit(self, attributes: AdmissionAttributes) -> None:
        """Qualify the images of the Pod in ``attributes`` in place.

        Raises:
            BadRequestError: If the object is not a Pod or one of its images
                cannot be qualified. Images qualified before the failure keep
                their new value.
        """
        if self.should_ignore(attributes):
            return

        pod = attributes.object
        if not isinstance(pod, V1Pod):
            raise BadRequestError("Resource was marked with kind Pod but was unable to be converted")

        spec = pod.spec
        if spec is None:
            return

        for containers in (spec.init_containers, spec.containers):
            try:
                qualify_container_images(domain=self.domain, containers=containers)
            except QualificationError as e:
                self.logger.debug(f"Rejecting pod {attributes.namespace}/{attributes.name}: {e}")
                raise BadRequestError(f'invalid image name "{e.image}": {e.cause}') from e
