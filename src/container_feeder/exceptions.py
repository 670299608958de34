"""Exceptions raised by container-feeder"""


class FeederError(Exception):
    """Base exception for all container-feeder errors"""

    pass


class ConfigError(FeederError):
    """Raised when the configuration cannot be loaded or is invalid"""

    pass


class ParseError(FeederError):
    """Raised when an image reference is not syntactically valid"""

    pass


class WhitelistFormatError(FeederError):
    """Raised when a whitelist entry is malformed or carries a tag"""

    pass


class ScanError(FeederError):
    """Raised when the image directory cannot be traversed"""

    pass


class VerificationError(FeederError):
    """Raised when a file cannot be verified against the package database"""

    pass


class MetadataParseError(FeederError):
    """Raised when an image metadata file is unreadable or malformed"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid metadata file {path}: {reason}")


class BackendError(FeederError):
    """Raised when the container engine fails to list, load or tag images"""

    pass
