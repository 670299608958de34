"""Docker engine backend"""

import logging
import subprocess
from typing import List

from .base import BaseBackend, parse_loaded_image
from container_feeder.exceptions import BackendError

logger = logging.getLogger(__name__)


class DockerBackend(BaseBackend):
    """Imports images into the local Docker daemon"""

    def __init__(self, docker_cmd: str = "docker"):
        """Initialize Docker backend

        Args:
            docker_cmd: Docker command to use (default: 'docker')

        Raises:
            BackendError: If the Docker daemon is not reachable
        """
        self.docker_cmd = docker_cmd
        self.api_version = self._verify_docker()

    def _verify_docker(self) -> str:
        """Verify the daemon is available and return its API version"""
        try:
            result = subprocess.run(
                [self.docker_cmd, "version", "--format", "{{.Server.APIVersion}}"],
                capture_output=True,
                text=True,
                check=True,
                timeout=30,
            )
        except (subprocess.CalledProcessError, OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Docker is not available or not working: {e}")
            raise BackendError(f"Docker runtime unavailable: {e}") from e

        api_version = result.stdout.strip()
        if not api_version:
            raise BackendError("Could not obtain docker Engine API version")
        logger.info(f"Docker runtime verified (API {api_version})")
        return api_version

    def images(self) -> List[str]:
        return self._list_repotags(
            [self.docker_cmd, "images", "--format", "{{.Repository}}:{{.Tag}}"]
        )

    def load_image(self, archive_path: str) -> str:
        logger.info(f"Loading image from {archive_path}")
        output = self._run([self.docker_cmd, "load", "--quiet", "--input", archive_path])
        loaded = parse_loaded_image(output)
        logger.info(f"Successfully loaded {loaded}")
        return loaded

    def tag_image(self, image: str, tags: List[str]) -> None:
        for tag in tags:
            logger.debug(f"Tagging image {image} with {tag}")
            try:
                self._run([self.docker_cmd, "tag", image, tag])
            except BackendError as e:
                raise BackendError(f"error tagging image {image}: {e}") from e
