"""Import result types"""

from typing import Any, Dict, List, Optional


class FailedImport:
    """An image that could not be imported, with the error that stopped it"""

    def __init__(self, image: str, error: Exception):
        """Initialize failed import

        Args:
            image: Repotag of the image
            error: Error raised while importing it
        """
        self.image = image
        self.error = error

    def __repr__(self) -> str:
        return f"FailedImport(image={self.image!r}, error={self.error!r})"


class FeederLoadResponse:
    """Outcome of an import run"""

    def __init__(self, successful_imports: Optional[List[str]] = None,
                 failed_imports: Optional[List[FailedImport]] = None):
        self.successful_imports = successful_imports or []
        self.failed_imports = failed_imports or []

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_imports)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable summary of the run

        Returns:
            Dict with successful repotags and failed repotags with their errors
        """
        return {
            "successful_imports": list(self.successful_imports),
            "failed_imports": [
                {"image": failed.image, "error": str(failed.error)}
                for failed in self.failed_imports
            ],
        }

    def __repr__(self) -> str:
        return (
            f"FeederLoadResponse(successful_imports={self.successful_imports!r}, "
            f"failed_imports={self.failed_imports!r})"
        )
