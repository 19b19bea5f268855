"""Command line front end for alwaysqualify.

Qualifies image names, or the images of a Pod manifest, the same way the
AlwaysQualifyImages admission plugin would, without contacting a cluster:

1. ``alwaysqualify-images busybox gcr.io/pause`` prints a JSON report of the
   qualified names.
2. ``alwaysqualify-images --pod pod.json`` prints the admitted Pod manifest.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from kubernetes.client import ApiClient, V1Pod

from .admission import AdmissionError, AlwaysQualifyImages
from .domain import Domain, new_domain
from .models import (
    AdmissionAttributes,
    GroupVersionResource,
    ImageResult,
    Operation,
    QualificationReport,
    QualificationStatus,
)
from .plugin import new_plugin
from .qualifier import QualificationError, qualify_image

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI usage. Only called from main()."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s : %(name)-13s : %(levelname)s :: %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Plugin construction
# ---------------------------------------------------------------------------


def build_plugin(domain: str | None = None, config_path: str | None = None) -> AlwaysQualifyImages:
    """Build the admission plugin from ``--domain`` or a configuration file.

    An explicit ``domain`` takes precedence over the configuration file.

    Raises:
        ConfigurationError: If the configuration file is invalid.
        InvalidDomainError: If the domain is invalid.
    """
    if domain is not None:
        return AlwaysQualifyImages(domain=new_domain(domain))
    if config_path is None:
        return new_plugin()
    with open(config_path) as f:
        return new_plugin(f)


# ---------------------------------------------------------------------------
# Image names
# ---------------------------------------------------------------------------


def qualify_images(domain: Domain, images: list[str]) -> QualificationReport:
    """Qualify each image name independently and collect the results.

    Args:
        domain: Domain to prefix unqualified images with.
        images: Image names to qualify.

    Returns:
        A :class:`QualificationReport`; its status is FAIL if any image
        could not be qualified.
    """
    report = QualificationReport(domain=str(domain), status=QualificationStatus.PASS)
    for image in images:
        result = ImageResult(image=image)
        try:
            result.qualified = qualify_image(domain=domain, image=image)
            result.changed = result.qualified != image
        except QualificationError as e:
            result.error = str(e)
            report.status = QualificationStatus.FAIL
        report.images.append(result)
    return report


# ---------------------------------------------------------------------------
# Pod manifests
# ---------------------------------------------------------------------------


def load_pod(manifest: str) -> V1Pod:
    """Deserialize a JSON Pod manifest into a ``V1Pod``.

    Raises:
        ValueError: If the manifest is empty, not valid JSON or not a Pod.
    """
    if not manifest.strip():
        raise ValueError("Pod manifest must not be empty")
    try:
        document = json.loads(manifest)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Pod manifest is not valid JSON: {exc}") from exc
    if not isinstance(document, dict) or document.get("kind", "Pod") != "Pod":
        raise ValueError("Pod manifest must be a JSON object of kind Pod")

    return ApiClient().deserialize(manifest, "V1Pod", "application/json")


def admit_pod(plugin: AlwaysQualifyImages, pod: V1Pod) -> None:
    """Run ``pod`` through ``plugin`` as a CREATE request for the pods resource.

    Raises:
        AdmissionError: If the plugin rejects the Pod.
    """
    metadata = pod.metadata
    attributes = AdmissionAttributes(
        operation=Operation.CREATE,
        resource=GroupVersionResource(group="", version="v1", resource="pods"),
        object=pod,
        kind="Pod",
        namespace=(metadata.namespace or "") if metadata else "",
        name=(metadata.name or "") if metadata else "",
    )
    plugin.admit(attributes)


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Optional list of argument strings (defaults to ``sys.argv``).

    Returns:
        Parsed ``argparse.Namespace``.
    """
    parser = argparse.ArgumentParser(
        description="Qualify container image names with an explicit registry domain",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    domain_group = parser.add_mutually_exclusive_group()
    domain_group.add_argument(
        "--domain",
        help="Domain used to qualify images (default: from --config, else localhost:5000)",
    )
    domain_group.add_argument(
        "--config",
        help="Path to a JSON AlwaysQualifyImages configuration file",
    )

    parser.add_argument(
        "--pod",
        help="Path to a JSON Pod manifest to admit; the qualified manifest is printed",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every image decision")
    parser.add_argument("images", nargs="*", help="Image names to qualify")

    parsed = parser.parse_args(args)
    if parsed.pod and parsed.images:
        parser.error("image names cannot be combined with --pod")
    if not parsed.pod and not parsed.images:
        parser.error("either image names or --pod is required")
    return parsed


# ---------------------------------------------------------------------------
# Main execution
# ---------------------------------------------------------------------------


def run(args: argparse.Namespace) -> int:
    """Main execution flow.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Process exit code (0 = PASS, 1 = FAIL).
    """
    try:
        plugin = build_plugin(domain=args.domain, config_path=args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Initialization failed: {e}")
        return 1

    if not args.pod:
        report = qualify_images(domain=plugin.domain, images=args.images)
        print(json.dumps(report.to_dict(), indent=2))
        return report.status.exit_code

    try:
        with open(args.pod) as f:
            pod = load_pod(f.read())
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load pod manifest {args.pod}: {e}")
        return 1

    try:
        admit_pod(plugin=plugin, pod=pod)
    except AdmissionError as e:
        logger.error(f"Pod rejected ({e.reason}): {e}")
        return QualificationStatus.FAIL.exit_code

    print(json.dumps(ApiClient().sanitize_for_serialization(pod), indent=2))
    return QualificationStatus.PASS.exit_code


def main() -> None:
    """CLI entry point for alwaysqualify-images."""
    parsed_args = parse_args()
    _setup_logging(verbose=parsed_args.verbose)
    try:
        sys.exit(run(args=parsed_args))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
