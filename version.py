"""
Version management for the PAPI proxy.

The version comes from the installed distribution metadata, falling back to
pyproject.toml when running from a source checkout. The git hash is read from
the working tree when available.
"""

import subprocess
import tomllib
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "papi-proxy"
PYPROJECT_PATH = Path(__file__).resolve().parent / "pyproject.toml"


def _read_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass

    try:
        with open(PYPROJECT_PATH, "rb") as f:
            return tomllib.load(f).get("project", {}).get("version", "unknown")
    except (OSError, tomllib.TOMLDecodeError):
        return "unknown"


def _read_git_hash() -> str:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            check=True,
            cwd=PYPROJECT_PATH.parent,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    return result.stdout.strip() or "unknown"


def get_version_info() -> tuple[str, str]:
    """Get version and git hash information.

    Returns:
        tuple: (version: str, git_hash: str)
    """
    return _read_version(), _read_git_hash()


def get_version() -> str:
    """Get version string, or 'unknown' if not found."""
    return _read_version()


def get_git_hash() -> str:
    """Get current git commit hash (short), or 'unknown' if not available."""
    return _read_git_hash()


def get_version_string() -> str:
    """Get full version string in format 'version (git: hash)'."""
    version, git_hash = get_version_info()
    return f"{version} (git: {git_hash})"
