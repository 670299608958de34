"""Pytest configuration and shared fixtures"""

import json
import os
import tempfile
import pytest
from unittest.mock import MagicMock

from container_feeder.core.config import Config
from container_feeder.core.verifier import BaseVerifier
from container_feeder.exceptions import VerificationError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def write_image(temp_dir):
    """Write a metadata file, and optionally its archive, into temp_dir"""

    def _write_image(name, tags, file, metadata_name=None, with_archive=True):
        metadata_name = metadata_name or f"{file}.metadata"
        with open(os.path.join(temp_dir, metadata_name), "w") as f:
            json.dump({"image": {"name": name, "tags": tags, "file": file}}, f)
        if with_archive:
            with open(os.path.join(temp_dir, file), "wb") as f:
                f.write(b"0" * 1024)
        return os.path.join(temp_dir, file)

    return _write_image


@pytest.fixture
def salt_api_image(write_image):
    """The salt-api image shipped with three tags"""
    return write_image("opensuse/salt-api", ["13", "13.0.1", "latest"], "salt-api.tar.xz")


@pytest.fixture
def mock_backend():
    """Mock engine backend with an empty image store"""
    backend = MagicMock()
    backend.images.return_value = []
    backend.load_image.side_effect = lambda path: f"loaded:{os.path.basename(path)}"
    backend.tag_image.return_value = None
    return backend


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing"""
    return {
        "feeder-target": "docker",
        "whitelist": [],
    }


@pytest.fixture
def mock_config(sample_config_data):
    """Config built from sample data, without a file"""
    return Config(data=sample_config_data)


class StubVerifier(BaseVerifier):
    """Verifier accepting only the given file names"""

    def __init__(self, accepted=(), failing=()):
        self.accepted = set(accepted)
        self.failing = set(failing)
        self.calls = []

    def verify(self, file_path):
        self.calls.append(file_path)
        name = os.path.basename(file_path)
        if name in self.failing:
            raise VerificationError(f"{name} is not owned by any package")
        return name in self.accepted


@pytest.fixture
def stub_verifier():
    """Factory for StubVerifier instances"""
    return StubVerifier
