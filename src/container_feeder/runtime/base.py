"""Abstract base class for container engine backends"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from container_feeder.core.reference import normalize_repotag
from container_feeder.exceptions import BackendError, ParseError

logger = logging.getLogger(__name__)

DANGLING_MARKER = "<none>"


def normalize_repotags(repotags: Iterable[str]) -> List[str]:
    """Normalize repotags reported by an engine

    Dangling entries such as ``<none>:<none>`` carry no name and are dropped.

    Raises:
        ParseError: If a reported repotag is not a valid reference
    """
    normalized = []
    for repotag in repotags:
        repotag = repotag.strip()
        if not repotag or DANGLING_MARKER in repotag:
            continue
        normalized.append(normalize_repotag(repotag))
    return normalized


class BaseBackend(ABC):
    """Abstract base for container engine implementations"""

    def _run(self, cmd: List[str], timeout: Optional[int] = None) -> str:
        """Run an engine command and return its stdout

        Raises:
            BackendError: If the command cannot be run or exits non-zero
        """
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise BackendError(f"could not run {cmd[0]}: {e}") from e

        if result.returncode != 0:
            raise BackendError(
                f"'{' '.join(cmd)}' exited with code {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout

    def _list_repotags(self, cmd: List[str]) -> List[str]:
        output = self._run(cmd)
        try:
            return normalize_repotags(output.splitlines())
        except ParseError as e:
            raise BackendError(f"engine reported an invalid image name: {e}") from e

    @abstractmethod
    def images(self) -> List[str]:
        """List images known to the engine

        Returns:
            Normalized ``<name>:<tag>`` strings

        Raises:
            BackendError: If the engine cannot be queried
        """
        pass

    @abstractmethod
    def load_image(self, archive_path: str) -> str:
        """Load an image archive into the engine's store

        Args:
            archive_path: Path to the image archive

        Returns:
            Name or ID of the loaded image

        Raises:
            BackendError: If the archive cannot be loaded
        """
        pass

    @abstractmethod
    def tag_image(self, image: str, tags: List[str]) -> None:
        """Tag a loaded image

        Args:
            image: Name or ID of the image
            tags: Full repotags to add to the image

        Raises:
            BackendError: If tagging fails
        """
        pass


def parse_loaded_image(output: str) -> str:
    """Extract the loaded image from ``docker load``/``podman load`` output

    Handles ``Loaded image: <ref>``, ``Loaded image ID: <id>`` and
    ``Loaded image(s): <ref>[,<ref>...]``; the first image wins.

    Raises:
        BackendError: If no loaded image is reported
    """
    for line in output.splitlines():
        line = line.strip()
        for prefix in ("Loaded image ID:", "Loaded image(s):", "Loaded image:"):
            if line.startswith(prefix):
                loaded = line[len(prefix):].strip().split(",")[0].strip()
                if loaded:
                    return loaded
    raise BackendError(f"no loaded image reported: {output.strip()}")
