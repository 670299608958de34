"""CRI-O backend

CRI-O keeps its images in containers/storage, which podman manages as
well, so images are loaded and tagged through the podman CLI.
"""

import logging
import subprocess
from typing import List

from .base import BaseBackend, parse_loaded_image
from container_feeder.core.reference import is_tagged
from container_feeder.exceptions import BackendError, ParseError

logger = logging.getLogger(__name__)


def expand_tags(tags: List[str]) -> List[str]:
    """Add ``:latest`` to the names that do not carry a tag

    Raises:
        BackendError: If a name is not a valid reference
    """
    expanded = []
    for tag in tags:
        try:
            tagged = is_tagged(tag)
        except ParseError as e:
            raise BackendError(f"error parsing tag {tag!r}: {e}") from e
        expanded.append(tag if tagged else f"{tag}:latest")
    return expanded


class CRIOBackend(BaseBackend):
    """Imports images into containers/storage for CRI-O"""

    def __init__(self, podman_cmd: str = "podman"):
        """Initialize CRI-O backend

        Args:
            podman_cmd: podman command to use (default: 'podman')

        Raises:
            BackendError: If podman is not available
        """
        self.podman_cmd = podman_cmd
        self._verify_podman()

    def _verify_podman(self) -> None:
        try:
            subprocess.run(
                [self.podman_cmd, "version"],
                capture_output=True,
                check=True,
                timeout=30,
            )
            logger.info("containers/storage runtime verified")
        except (subprocess.CalledProcessError, OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"podman is not available or not working: {e}")
            raise BackendError(f"could not init CRI-O backend: {e}") from e

    def images(self) -> List[str]:
        return self._list_repotags(
            [self.podman_cmd, "images", "--format", "{{.Repository}}:{{.Tag}}"]
        )

    def load_image(self, archive_path: str) -> str:
        logger.info(f"Loading image from {archive_path}")
        output = self._run([self.podman_cmd, "load", "--quiet", "--input", archive_path])
        loaded = parse_loaded_image(output)
        logger.debug(f"Loaded image(s): {loaded}")
        return loaded

    def tag_image(self, image: str, tags: List[str]) -> None:
        if not tags:
            return
        names = expand_tags(tags)
        logger.debug(f"Tagging {image} as {names}")
        try:
            self._run([self.podman_cmd, "tag", image] + names)
        except BackendError as e:
            raise BackendError(f"error tagging image {image}: {e}") from e
