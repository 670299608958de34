"""Tests for the directory walker"""

import os
import pytest
from unittest.mock import patch

from container_feeder.core.verifier import RpmVerifier
from container_feeder.core.walker import Walker
from container_feeder.exceptions import ScanError


def touch(path):
    with open(path, "w"):
        pass


@pytest.fixture
def populated_dir(temp_dir):
    """Directory with matching, non-matching and nested files"""
    for i in range(2):
        touch(os.path.join(temp_dir, f"ignored-{i}"))
        touch(os.path.join(temp_dir, f"expected-{i}.mp3"))

    sub_dir = os.path.join(temp_dir, "sub")
    os.mkdir(sub_dir)
    for i in range(2):
        touch(os.path.join(sub_dir, f"sub-ignored-{i}.mp3"))
    return temp_dir


class TestWalkerScan:
    """Test Walker.scan"""

    def test_lists_matching_top_level_files(self, populated_dir):
        """Test that only top level files with the extension are listed"""
        walker = Walker(populated_dir, ".mp3", verify_files=False)
        assert sorted(walker.scan()) == ["expected-0.mp3", "expected-1.mp3"]

    def test_files_attribute_is_populated(self, populated_dir):
        walker = Walker(populated_dir, ".mp3", verify_files=False)
        walker.scan()
        assert sorted(walker.files) == ["expected-0.mp3", "expected-1.mp3"]

    def test_extension_is_case_insensitive(self, temp_dir):
        touch(os.path.join(temp_dir, "LOUD.MP3"))
        touch(os.path.join(temp_dir, "quiet.mp3"))
        walker = Walker(temp_dir, ".Mp3", verify_files=False)
        assert sorted(walker.scan()) == ["LOUD.MP3", "quiet.mp3"]

    def test_empty_extension_lists_all_files(self, populated_dir):
        """Test that no filter lists every file but no directory"""
        walker = Walker(populated_dir, "", verify_files=False)
        assert sorted(walker.scan()) == [
            "expected-0.mp3", "expected-1.mp3", "ignored-0", "ignored-1",
        ]

    def test_non_existing_directory(self):
        walker = Walker("/boom", ".mp3", verify_files=False)
        with pytest.raises(ScanError):
            walker.scan()

    def test_root_is_a_file(self, temp_dir):
        path = os.path.join(temp_dir, "file.mp3")
        touch(path)
        with pytest.raises(ScanError):
            Walker(path, ".mp3", verify_files=False).scan()


class TestWalkerVerification:
    """Test Walker with file verification enabled"""

    def test_only_verified_files_are_listed(self, populated_dir, stub_verifier):
        verifier = stub_verifier(accepted={"expected-0.mp3"})
        walker = Walker(populated_dir, ".mp3", verifier=verifier)
        assert walker.scan() == ["expected-0.mp3"]

    def test_verification_error_excludes_file(self, populated_dir, stub_verifier):
        """Test that a failing verification skips the file without aborting"""
        verifier = stub_verifier(accepted={"expected-0.mp3"}, failing={"expected-1.mp3"})
        walker = Walker(populated_dir, ".mp3", verifier=verifier)
        assert walker.scan() == ["expected-0.mp3"]

    def test_non_matching_files_are_not_verified(self, populated_dir, stub_verifier):
        verifier = stub_verifier(accepted={"expected-0.mp3", "expected-1.mp3"})
        Walker(populated_dir, ".mp3", verifier=verifier).scan()
        assert sorted(os.path.basename(p) for p in verifier.calls) == [
            "expected-0.mp3", "expected-1.mp3",
        ]

    def test_default_verifier_is_rpm(self, temp_dir):
        walker = Walker(temp_dir, ".metadata")
        assert isinstance(walker.verifier, RpmVerifier)

    @patch("container_feeder.core.verifier.subprocess.run")
    def test_unusable_rpm_excludes_files(self, mock_run, populated_dir):
        """Test that an rpm binary that cannot be executed skips every file"""
        mock_run.side_effect = PermissionError(13, "Permission denied")

        walker = Walker(populated_dir, ".mp3", verifier=RpmVerifier())
        assert walker.scan() == []
        assert mock_run.call_count == 2
