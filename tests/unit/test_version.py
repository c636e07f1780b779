"""
Unit tests for version.py - Version management utilities.

Tests version information retrieval functions.
"""

import subprocess
from importlib import metadata
from unittest.mock import patch

import version
from version import get_version, get_git_hash, get_version_info, get_version_string


class TestVersionInfo:
    """Tests for version information functions."""

    def test_get_version_returns_string(self):
        result = get_version()
        assert isinstance(result, str)
        assert len(result) > 0

    def test_get_git_hash_returns_string(self):
        git_hash = get_git_hash()
        assert isinstance(git_hash, str)
        assert len(git_hash) > 0

    def test_get_version_info_returns_tuple(self):
        result = get_version_info()
        assert isinstance(result, tuple)
        assert len(result) == 2

    def test_get_version_string_format(self):
        version_string = get_version_string()
        assert "(git:" in version_string
        assert version_string.endswith(")")

    @patch("version.metadata.version", side_effect=metadata.PackageNotFoundError)
    def test_falls_back_to_pyproject(self, mock_version):
        """Source checkouts read the version from pyproject.toml."""
        assert get_version() == "1.0.0"

    @patch("version.metadata.version", side_effect=metadata.PackageNotFoundError)
    def test_unknown_without_pyproject(self, mock_version, tmp_path):
        with patch.object(version, "PYPROJECT_PATH", tmp_path / "missing.toml"):
            assert get_version() == "unknown"

    @patch("version.subprocess.run", side_effect=subprocess.CalledProcessError(128, "git"))
    def test_git_hash_unknown_outside_repository(self, mock_run):
        assert get_git_hash() == "unknown"

    @patch("version.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_git_hash_unknown_without_git(self, mock_run):
        assert get_git_hash() == "unknown"
