"""alwaysqualify — admission-time registry domain qualification for Pod images.

Rewrites container image references that do not name a registry domain so
that they resolve against a configured registry instead of Docker Hub.
"""

import logging

from alwaysqualify._version import __version__
from alwaysqualify.admission import AdmissionError, AlwaysQualifyImages, BadRequestError
from alwaysqualify.domain import Domain, InvalidDomainError, new_domain
from alwaysqualify.reference_parser import InvalidReferenceError, parse_image_name, split_image_name

__all__ = [
    "AdmissionError",
    "AlwaysQualifyImages",
    "BadRequestError",
    "Domain",
    "InvalidDomainError",
    "InvalidReferenceError",
    "__version__",
    "new_domain",
    "parse_image_name",
    "split_image_name",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
