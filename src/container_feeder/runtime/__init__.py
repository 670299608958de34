"""Container engine backends"""

import logging
from typing import Any, Dict, Optional

from .base import BaseBackend
from .crio import CRIOBackend
from .docker import DockerBackend
from container_feeder.exceptions import ConfigError

logger = logging.getLogger(__name__)


def create_backend(target: Optional[str], options: Optional[Dict[str, Any]] = None) -> BaseBackend:
    """Create the backend selected by the ``feeder-target`` setting

    Args:
        target: ``docker`` or ``crio``
        options: Backend options (``docker_cmd``, ``podman_cmd``)

    Raises:
        ConfigError: If the target is missing or unknown
        BackendError: If the engine is not available
    """
    options = options or {}

    if target == "docker":
        logger.debug(f"Feeder target '{target}': using DockerBackend")
        return DockerBackend(docker_cmd=options.get("docker_cmd", "docker"))
    if target == "crio":
        logger.debug(f"Feeder target '{target}': using CRIOBackend")
        return CRIOBackend(podman_cmd=options.get("podman_cmd", "podman"))

    if not target:
        raise ConfigError("feeder-target is not specified, expected one of: docker, crio")
    raise ConfigError(f"Unknown feeder type specified: {target}")


__all__ = ["BaseBackend", "DockerBackend", "CRIOBackend", "create_backend"]
