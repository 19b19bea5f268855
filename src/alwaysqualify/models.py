"""Data models for alwaysqualify image references and admission requests."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_IMAGE_TAG: str = "latest"  # Tag assumed when a reference has neither tag nor digest.

DEFAULT_DOMAIN: str = "localhost:5000"  # Qualifying domain used when none is configured.

SANITY_REPOSITORY: str = "foo/bar:latest"  # Appended to a candidate domain to check it splits back out.

PLUGIN_NAME: str = "AlwaysQualifyImages"


class Operation(str, Enum):
    """Admission operation kinds."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


class QualificationStatus(str, Enum):
    """Outcome of qualifying a set of images from the CLI."""

    PASS = "PASS"  # noqa: S105
    FAIL = "FAIL"

    @property
    def exit_code(self) -> int:
        """Return the process exit code for this status.

        Returns:
            0 for PASS, 1 for FAIL.
        """
        return 0 if self is QualificationStatus.PASS else 1


@dataclass(frozen=True)
class ImageReference:
    """Fully parsed and normalized container image reference.

    ``tag`` and ``digest`` may each be empty, but never both: a reference
    carrying neither is given :data:`DEFAULT_IMAGE_TAG`.
    """

    repository: str
    tag: str = ""
    digest: str = ""


@dataclass(frozen=True)
class GroupResource:
    group: str
    resource: str


POD_RESOURCE: GroupResource = GroupResource(group="", resource="pods")


@dataclass(frozen=True)
class GroupVersionResource:
    """API group, version and resource targeted by an admission request."""

    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        return GroupResource(group=self.group, resource=self.resource)


@dataclass
class AdmissionAttributes:
    """Attributes of a single admission request.

    Attributes:
        operation: The operation being performed.
        resource: The resource the request targets.
        object: The request payload; mutated in place by mutating plugins.
        subresource: Subresource name, empty when the request is for the
            resource itself.
        kind: Kind the object was submitted as (informational).
        namespace: Namespace of the object (informational).
        name: Name of the object (informational).
    """

    operation: Operation
    resource: GroupVersionResource
    object: Any
    subresource: str = ""
    kind: str = ""
    namespace: str = ""
    name: str = ""


@dataclass
class ImageResult:
    """Qualification outcome for a single image given on the command line."""

    image: str
    qualified: str | None = None
    changed: bool = False
    error: str | None = None


@dataclass
class QualificationReport:
    """Report printed by the CLI after qualifying image names."""

    domain: str
    status: QualificationStatus
    images: list[ImageResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Serialise the report to a plain dict suitable for JSON output."""
        return asdict(self)
