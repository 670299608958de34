"""Configuration management"""

import logging
from typing import Any, Dict, List, Optional

import yaml

from container_feeder.core.whitelist import parse_whitelist
from container_feeder.exceptions import ConfigError, WhitelistFormatError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "/etc/container-feeder.json"
FEEDER_TARGETS = ("docker", "crio")


class Config:
    """Configuration manager for container-feeder

    The file is parsed as YAML, which also accepts the JSON format of
    ``/etc/container-feeder.json``::

        {
          "feeder-target": "crio",
          "whitelist": ["opensuse/salt-api", "registry.suse.com/sles12/foo"]
        }
    """

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE, data: Optional[Dict[str, Any]] = None):
        """Load configuration

        Args:
            config_file: Path to configuration file
            data: Already parsed configuration, skips reading ``config_file``

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        self.config_file = config_file
        self.data: Dict[str, Any] = {}
        if data is not None:
            self.data = data
        else:
            self.load()

    def load(self) -> None:
        """Load configuration from file"""
        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            logger.error(f"Cannot read configuration file {self.config_file}: {e}")
            raise ConfigError(f"cannot read configuration file {self.config_file}: {e}") from e
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse configuration file: {e}")
            raise ConfigError(f"failed to parse configuration file {self.config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"configuration file {self.config_file} must contain a mapping")
        self.data = data
        logger.info(f"Loaded configuration from {self.config_file}")

    @property
    def feeder_target(self) -> Optional[str]:
        """Get the engine backend to feed (``docker`` or ``crio``)"""
        return self.data.get("feeder-target")

    @property
    def whitelist(self) -> List[str]:
        """Get the raw whitelist entries"""
        whitelist = self.data.get("whitelist") or []
        if isinstance(whitelist, str):
            whitelist = [whitelist]
        return whitelist

    @property
    def backend_options(self) -> Dict[str, Any]:
        """Get backend options (``docker_cmd``, ``podman_cmd``)"""
        return self.data.get("options") or {}

    def parsed_whitelist(self) -> List[str]:
        """Get the normalized whitelist

        Raises:
            WhitelistFormatError: If an entry is malformed or carries a tag
        """
        return parse_whitelist(self.whitelist)

    def validate(self) -> bool:
        """Validate configuration

        Returns:
            True if configuration is valid
        """
        valid = True

        if self.feeder_target not in FEEDER_TARGETS:
            logger.error(
                f"Invalid feeder-target {self.feeder_target!r}, expected one of: {', '.join(FEEDER_TARGETS)}"
            )
            valid = False

        if not isinstance(self.whitelist, list) or not all(isinstance(w, str) for w in self.whitelist):
            logger.error("whitelist must be a list of image names")
            return False

        try:
            self.parsed_whitelist()
        except WhitelistFormatError as e:
            logger.error(f"Invalid whitelist: {e}")
            valid = False

        options = self.backend_options
        if not isinstance(options, dict):
            logger.error("options must be a dictionary")
            return False
        for key in ("docker_cmd", "podman_cmd"):
            if key in options and not isinstance(options[key], str):
                logger.error(f"{key} must be a string")
                valid = False

        return valid
