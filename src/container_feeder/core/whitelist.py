"""Whitelist of repositories allowed to be imported"""

import logging
from typing import Iterable, List

from container_feeder.core.reference import normalize_name_tag
from container_feeder.exceptions import ParseError, WhitelistFormatError

logger = logging.getLogger(__name__)


def parse_whitelist(whitelist: Iterable[str]) -> List[str]:
    """Return a whitelist with normalized elements

    Whitelisting works on repository names only, entries carrying a tag
    are rejected.

    Raises:
        WhitelistFormatError: If an entry is malformed or has a tag
    """
    normalized = []
    for entry in whitelist:
        if not isinstance(entry, str):
            raise WhitelistFormatError(f"whitelist items must be strings: {entry!r}")
        try:
            name, tag = normalize_name_tag(entry)
        except ParseError as e:
            raise WhitelistFormatError(f"error parsing whitelist item '{entry}': {e}") from e
        if tag:
            raise WhitelistFormatError(f"whitelisting does not support tags: {entry}")
        normalized.append(name)
    return normalized


def is_whitelisted(image: str, whitelist: List[str]) -> bool:
    """Check whether an image may be imported

    An empty whitelist allows every image. The image has the format
    ``repo:tag`` while only the repository must match a whitelist element.

    Args:
        image: Image repotag
        whitelist: Normalized whitelist, see ``parse_whitelist``

    Raises:
        ParseError: If the image is not a valid reference
    """
    if not whitelist:
        return True

    name, _ = normalize_name_tag(image)
    return name in whitelist
