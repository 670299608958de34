"""Computes which images are missing from the engine's image store"""

import logging
from typing import Dict, Iterable, List

from container_feeder.core.metadata import ResolvedImage
from container_feeder.core.models import FailedImport
from container_feeder.core.whitelist import is_whitelisted
from container_feeder.exceptions import ParseError

logger = logging.getLogger(__name__)


class ReconcileResult:
    """Images to import plus the candidates that could not be evaluated"""

    def __init__(self, to_import: Dict[str, ResolvedImage], failed: List[FailedImport]):
        self.to_import = to_import
        self.failed = failed


def should_import(image: ResolvedImage, engine_images: Iterable[str]) -> bool:
    """Return True if any tag of the image is unknown to the engine"""
    known = set(engine_images)
    return any(tag not in known for tag in image.all_tags)


def reconcile(desired: Dict[str, ResolvedImage], whitelist: List[str],
              engine_images: Iterable[str]) -> ReconcileResult:
    """Select the desired images that have to be loaded into the engine

    The input mapping is left untouched, a new one is returned.

    Args:
        desired: Images found on disk, keyed by repotag
        whitelist: Normalized whitelist (empty allows everything)
        engine_images: ``<name>:<tag>`` strings known to the engine

    Returns:
        ReconcileResult with the images to import
    """
    known = set(engine_images)
    to_import: Dict[str, ResolvedImage] = {}
    failed: List[FailedImport] = []

    for repotag, image in desired.items():
        try:
            whitelisted = is_whitelisted(repotag, whitelist)
        except ParseError as e:
            logger.warning(f"Cannot check whitelist for {repotag}: {e}")
            failed.append(FailedImport(image=repotag, error=e))
            continue

        if not whitelisted:
            logger.debug(f"Image {repotag} is not whitelisted: ignoring")
            continue

        if should_import(image, known):
            logger.debug(f"Image {repotag} is whitelisted: marking as to be imported")
            to_import[repotag] = image
        else:
            logger.info(f"Skipping import of {repotag}, all tags exist")

    logger.debug(f"Images to be imported: {sorted(to_import)}")
    return ReconcileResult(to_import=to_import, failed=failed)
