"""File integrity verification against the package database"""

import logging
import subprocess
from abc import ABC, abstractmethod

from container_feeder.exceptions import VerificationError

logger = logging.getLogger(__name__)


class BaseVerifier(ABC):
    """Abstract base for file integrity verifiers"""

    @abstractmethod
    def verify(self, file_path: str) -> bool:
        """Verify a file has not been tampered with

        Args:
            file_path: Path to the file to check

        Returns:
            True if the file is tracked and passes the check

        Raises:
            VerificationError: If the file cannot be verified
        """
        pass


class RpmVerifier(BaseVerifier):
    """Verifies files using the information in the RPM database"""

    def __init__(self, rpm_cmd: str = "rpm", timeout: int = 60):
        """Initialize RPM verifier

        Args:
            rpm_cmd: rpm command to use (default: 'rpm')
            timeout: Timeout in seconds for each rpm invocation
        """
        self.rpm_cmd = rpm_cmd
        self.timeout = timeout

    def _run(self, args: list) -> str:
        try:
            result = subprocess.run(
                [self.rpm_cmd] + args,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise VerificationError(f"could not run {self.rpm_cmd}: {e}") from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            raise VerificationError(
                f"'{self.rpm_cmd} {' '.join(args)}' exited with code {result.returncode}: {output}"
            )
        return result.stdout

    def verify(self, file_path: str) -> bool:
        """Verify the package shipping a file

        rpm exits with an error both when the file is not owned by any
        package and when the owning package fails verification.

        Args:
            file_path: Path to the file to check

        Returns:
            True if the owning package verifies cleanly

        Raises:
            VerificationError: If the file is not packaged or verification fails
        """
        output = self._run(["-qf", file_path]).strip()
        if not output:
            raise VerificationError(f"no package owns {file_path}")
        package = output.splitlines()[0]
        logger.debug(f"{file_path} is shipped by {package}")

        self._run(["--verify", package])
        return True
