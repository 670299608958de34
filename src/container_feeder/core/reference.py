"""Image reference parsing and normalization

Follows the docker distribution reference grammar:

    reference   := name [ ":" tag ] [ "@" digest ]
    name        := [domain "/"] path-component ["/" path-component]*
    domain      := domain-component ["." domain-component]* [":" port]

Short Docker Hub names are expanded the same way the docker CLI does it,
so ``opensuse`` becomes ``docker.io/library/opensuse``.
"""

import logging
import re
from typing import Tuple

from container_feeder.exceptions import ParseError

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "docker.io"
LEGACY_DEFAULT_DOMAIN = "index.docker.io"
OFFICIAL_REPO_PREFIX = "library/"
NAME_TOTAL_LENGTH_MAX = 255

_ALPHANUMERIC = r"[a-z0-9]+"
_SEPARATOR = r"(?:[._]|__|[-]+)"
_PATH_COMPONENT = rf"{_ALPHANUMERIC}(?:{_SEPARATOR}{_ALPHANUMERIC})*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = rf"{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"

REFERENCE_REGEXP = re.compile(
    rf"^(?P<name>(?:{_DOMAIN}/)?{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*)"
    rf"(?::(?P<tag>{_TAG}))?"
    rf"(?:@(?P<digest>{_DIGEST}))?$"
)
ANCHORED_IDENTIFIER_REGEXP = re.compile(r"^[a-f0-9]{64}$")
PLACEHOLDER_REGEXP = re.compile(r"<|>")

# hex length of the encoded part for each supported digest algorithm
DIGEST_ALGORITHMS = {"sha256": 64, "sha384": 96, "sha512": 128}
ENCODED_DIGEST_REGEXP = re.compile(r"^[a-f0-9]+$")


def _split_docker_domain(name: str) -> Tuple[str, str]:
    """Split a repository name into its domain and remainder

    A leading component is treated as a domain only when it looks like a
    host: it contains a dot or a port, or it is ``localhost``.
    """
    i = name.find("/")
    if i == -1 or (not any(c in name[:i] for c in ".:") and name[:i] != "localhost"):
        domain, remainder = DEFAULT_DOMAIN, name
    else:
        domain, remainder = name[:i], name[i + 1:]

    if domain == LEGACY_DEFAULT_DOMAIN:
        domain = DEFAULT_DOMAIN
    if domain == DEFAULT_DOMAIN and "/" not in remainder:
        remainder = OFFICIAL_REPO_PREFIX + remainder
    return domain, remainder


def _validate_digest(image: str, digest: str) -> None:
    algorithm, encoded = digest.split(":", 1)
    length = DIGEST_ALGORITHMS.get(algorithm)
    if length is None:
        raise ParseError(
            f"error parsing image name '{image}': unsupported digest algorithm {algorithm}"
        )
    if len(encoded) != length or not ENCODED_DIGEST_REGEXP.match(encoded):
        raise ParseError(f"error parsing image name '{image}': invalid checksum digest format")


def normalize_name_tag(image: str) -> Tuple[str, str]:
    """Split an image reference into its fully qualified name and tag

    Args:
        image: Reference such as ``opensuse:latest`` or ``localhost:5000/foo``

    Returns:
        Tuple of (name, tag); tag is an empty string when not specified

    Raises:
        ParseError: If the reference is not valid
    """
    # Engines report untagged images as "<none>:<none>"
    cleaned = PLACEHOLDER_REGEXP.sub("", image)

    if ANCHORED_IDENTIFIER_REGEXP.match(cleaned):
        raise ParseError(
            f"error parsing image name '{cleaned}': cannot specify 64-byte hexadecimal strings"
        )

    domain, remainder = _split_docker_domain(cleaned)
    remote_name = remainder.split(":", 1)[0]
    if remote_name.lower() != remote_name:
        raise ParseError(
            f"error parsing image name '{cleaned}': repository name must be lowercase"
        )

    match = REFERENCE_REGEXP.match(f"{domain}/{remainder}")
    if match is None:
        raise ParseError(f"error parsing image name '{cleaned}': invalid reference format")

    digest = match.group("digest")
    if digest:
        _validate_digest(cleaned, digest)

    name = match.group("name")
    if len(name) > NAME_TOTAL_LENGTH_MAX:
        raise ParseError(
            f"error parsing image name '{cleaned}': repository name must not be more than "
            f"{NAME_TOTAL_LENGTH_MAX} characters"
        )

    return name, match.group("tag") or ""


def normalize_repotag(image: str) -> str:
    """Return ``<normalized-name>:<tag>`` for a reference, keeping an empty tag"""
    name, tag = normalize_name_tag(image)
    return f"{name}:{tag}"


def is_tagged(image: str) -> bool:
    """Return True if the reference carries an explicit tag"""
    _, tag = normalize_name_tag(image)
    return tag != ""
