"""Main orchestration logic"""

import logging
from typing import List, Optional

from container_feeder.core.config import Config
from container_feeder.core.metadata import METADATA_EXTENSION, ResolvedImage, find_images
from container_feeder.core.models import FailedImport, FeederLoadResponse
from container_feeder.core.reconciler import ReconcileResult, reconcile
from container_feeder.core.verifier import BaseVerifier
from container_feeder.core.walker import Walker
from container_feeder.exceptions import BackendError
from container_feeder.runtime import BaseBackend, create_backend

logger = logging.getLogger(__name__)


class Feeder:
    """Loads the images shipped in a directory that the engine is missing"""

    def __init__(self, config: Config, verify_files: bool = True,
                 verifier: Optional[BaseVerifier] = None, backend: Optional[BaseBackend] = None):
        """Initialize feeder

        Args:
            config: Configuration instance
            verify_files: Verify metadata files against the RPM database
            verifier: Verifier to use when verify_files is set (default: RpmVerifier)
            backend: Engine backend to use instead of the configured one
        """
        self.config = config
        self.verify_files = verify_files
        self.verifier = verifier
        self.backend = backend

    def _init_backend(self) -> BaseBackend:
        """Create the configured backend unless one was injected

        Raises:
            ConfigError: If the feeder-target is missing or unknown
            BackendError: If the engine is not available
        """
        if self.backend is None:
            self.backend = create_backend(self.config.feeder_target, self.config.backend_options)
            logger.info(f"Initialized {self.config.feeder_target} backend")
        return self.backend

    def _existing_images(self, backend: BaseBackend) -> List[str]:
        images = backend.images()
        if images:
            logger.debug("Found the following images in the local storage:")
        for image in images:
            logger.debug(f"  {image}")
        return images

    def _import_image(self, backend: BaseBackend, repotag: str, image: ResolvedImage,
                      response: FeederLoadResponse) -> None:
        """Load and tag a single image, recording the outcome in response"""
        try:
            loaded = backend.load_image(image.archive_path)
        except BackendError as e:
            logger.warning(f"Could not load image {image.archive_path}: {e}")
            response.failed_imports.append(FailedImport(image=repotag, error=e))
            return
        logger.debug(f"Loaded {loaded} from {image.archive_path}")

        try:
            backend.tag_image(repotag, image.additional_tags)
        except BackendError as e:
            logger.warning(f"Could not tag image {image.archive_path}: {e}")
            response.failed_imports.append(FailedImport(image=repotag, error=e))
            return

        response.successful_imports.append(repotag)

    def _reconcile(self, path: str, backend: BaseBackend) -> ReconcileResult:
        whitelist = self.config.parsed_whitelist()
        walker = Walker(path, METADATA_EXTENSION, verify_files=self.verify_files,
                        verifier=self.verifier)
        desired = find_images(path, walker=walker)
        engine_images = self._existing_images(backend)
        return reconcile(desired, whitelist, engine_images)

    def import_images(self, path: str) -> FeederLoadResponse:
        """Import all the images stored inside of path into the engine

        Images are processed one at a time; a failed load or tag is recorded
        and the run goes on with the next image.

        Args:
            path: Directory holding metadata files and image archives

        Returns:
            FeederLoadResponse with successful and failed imports

        Raises:
            FeederError: On configuration, backend, scan or metadata failures
        """
        logger.info("=" * 60)
        logger.info(f"Importing images from {path}")
        logger.info("=" * 60)

        backend = self._init_backend()
        result = self._reconcile(path, backend)

        response = FeederLoadResponse(failed_imports=list(result.failed))
        logger.info(f"{len(result.to_import)} image(s) to import")

        for repotag, image in result.to_import.items():
            self._import_image(backend, repotag, image, response)

        logger.info(
            f"Import completed: {len(response.successful_imports)} succeeded, "
            f"{len(response.failed_imports)} failed"
        )
        return response
