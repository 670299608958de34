"""Directory scanner for image metadata files"""

import logging
import os
from typing import List, Optional

from container_feeder.core.verifier import BaseVerifier, RpmVerifier
from container_feeder.exceptions import ScanError, VerificationError

logger = logging.getLogger(__name__)


class Walker:
    """Lists the files inside of a directory

    The scan is not recursive: subdirectories are skipped. Only files
    matching ``extension`` are listed, remember to add the leading dot
    (e.g. ``.metadata``). An empty extension lists every file.
    """

    def __init__(self, root: str, extension: str = "", verify_files: bool = True,
                 verifier: Optional[BaseVerifier] = None):
        """Initialize walker

        Args:
            root: Directory to scan
            extension: Only list files with this extension (case-insensitive)
            verify_files: Check each candidate against the package database
            verifier: Verifier to use (default: RpmVerifier)
        """
        self.root = root
        self.extension = extension
        self.verify_files = verify_files
        self.verifier = verifier
        if verify_files and verifier is None:
            self.verifier = RpmVerifier()
        self.files: List[str] = []

    def _matches_extension(self, name: str) -> bool:
        if not self.extension:
            return True
        return os.path.splitext(name)[1].lower() == self.extension.lower()

    def _is_verified(self, path: str) -> bool:
        try:
            return self.verifier.verify(path)
        except VerificationError as e:
            logger.warning(f"Ignoring file {path} because verification failed: {e}")
            return False

    def scan(self) -> List[str]:
        """Scan the root directory

        Returns:
            Base names of the matching files

        Raises:
            ScanError: If the root directory cannot be read
        """
        if not os.path.isdir(self.root):
            raise ScanError(f"directory not found: {self.root}")

        files = []
        try:
            with os.scandir(self.root) as entries:
                for entry in entries:
                    if entry.is_dir():
                        logger.debug(f"Skipping directory {entry.path}")
                        continue
                    if not self._matches_extension(entry.name):
                        continue
                    if self.verify_files and not self._is_verified(entry.path):
                        continue
                    files.append(entry.name)
        except OSError as e:
            raise ScanError(f"cannot scan {self.root}: {e}") from e

        self.files = sorted(files)
        logger.debug(f"Found {len(self.files)} file(s) in {self.root}")
        return self.files
