"""Image metadata descriptors shipped alongside image archives

Each archive comes with a ``.metadata`` JSON file::

    {
      "image": {
        "name": "opensuse/salt-api",
        "tags": ["13", "13.0.1", "latest"],
        "file": "salt-api-2017.03-docker-images.x86_64.tar.xz"
      }
    }

The first tag is the primary one, ``file`` is relative to the directory
holding the metadata file.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from container_feeder.core.reference import normalize_name_tag
from container_feeder.core.walker import Walker
from container_feeder.exceptions import MetadataParseError

logger = logging.getLogger(__name__)

METADATA_EXTENSION = ".metadata"


class ImageDescriptor:
    """Image declared by a metadata file"""

    def __init__(self, name: str, tags: List[str], file: str):
        self.name = name
        self.tags = tags
        self.file = file

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "ImageDescriptor":
        """Build a descriptor from parsed metadata

        Args:
            data: Parsed JSON document
            path: Metadata file path, used in error messages

        Raises:
            MetadataParseError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict) or not isinstance(data.get("image"), dict):
            raise MetadataParseError(path, "missing 'image' object")
        image = data["image"]

        name = image.get("name")
        if not isinstance(name, str) or not name:
            raise MetadataParseError(path, "'name' must be a non-empty string")

        tags = image.get("tags")
        if not isinstance(tags, list) or not tags:
            raise MetadataParseError(path, "'tags' must be a non-empty list")
        if not all(isinstance(tag, str) and tag for tag in tags):
            raise MetadataParseError(path, "'tags' must only contain non-empty strings")

        file = image.get("file")
        if not isinstance(file, str) or not file:
            raise MetadataParseError(path, "'file' must be a non-empty string")

        return cls(name=name, tags=list(tags), file=file)


class ResolvedImage:
    """An image whose archive is present and ready to be imported"""

    def __init__(self, repotag: str, additional_tags: List[str], archive_path: str):
        """Initialize resolved image

        Args:
            repotag: ``<normalized-name>:<primary-tag>``
            additional_tags: Repotags for the remaining tags, in declared order
            archive_path: Path to the image archive
        """
        self.repotag = repotag
        self.additional_tags = additional_tags
        self.archive_path = archive_path

    @property
    def all_tags(self) -> List[str]:
        return [self.repotag] + self.additional_tags

    def __repr__(self) -> str:
        return (
            f"ResolvedImage(repotag={self.repotag!r}, additional_tags={self.additional_tags!r}, "
            f"archive_path={self.archive_path!r})"
        )


def load_descriptor(path: str) -> ImageDescriptor:
    """Read and parse a metadata file

    Raises:
        MetadataParseError: If the file is unreadable or not valid metadata
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as e:
        raise MetadataParseError(path, f"cannot read file: {e}") from e
    except json.JSONDecodeError as e:
        raise MetadataParseError(path, f"invalid JSON: {e}") from e

    return ImageDescriptor.from_dict(data, path)


def resolve_descriptor(descriptor: ImageDescriptor, root: str) -> ResolvedImage:
    """Compute the repotags and archive path of a descriptor

    Raises:
        ParseError: If the image name is not a valid reference
    """
    name, _ = normalize_name_tag(descriptor.name)
    return ResolvedImage(
        repotag=f"{name}:{descriptor.tags[0]}",
        additional_tags=[f"{name}:{tag}" for tag in descriptor.tags[1:]],
        archive_path=os.path.join(root, descriptor.file),
    )


def find_images(root: str, walker: Optional[Walker] = None) -> Dict[str, ResolvedImage]:
    """Find all the images shipped inside of a directory

    A malformed metadata file aborts the search, while a metadata file
    whose archive is not on disk is skipped.

    Args:
        root: Directory holding metadata files and archives
        walker: Walker to use (default: verifying walker for ``.metadata`` files)

    Returns:
        Mapping of repotag to resolved image

    Raises:
        ScanError: If the directory cannot be scanned
        MetadataParseError: If a metadata file is invalid
        ParseError: If an image name is not a valid reference
    """
    logger.debug(f"Searching images in {root}")
    if walker is None:
        walker = Walker(root, METADATA_EXTENSION)

    images: Dict[str, ResolvedImage] = {}
    for file_name in walker.scan():
        descriptor = load_descriptor(os.path.join(root, file_name))
        image = resolve_descriptor(descriptor, root)

        if not os.path.exists(image.archive_path):
            logger.debug(f"Image {image.archive_path} does not exist, skipping {file_name}")
            continue

        if image.repotag in images:
            logger.warning(
                f"{file_name} redefines {image.repotag}, replacing {images[image.repotag].archive_path}"
            )
        images[image.repotag] = image

    logger.debug(f"Found the following images: {sorted(images)}")
    return images
