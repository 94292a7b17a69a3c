"""Installed MicroAPI version."""

from importlib.metadata import PackageNotFoundError, version

UNKNOWN_VERSION = "0.0.0"


def get_version() -> str:
    """Version from the installed distribution's metadata."""
    try:
        return version("microapi")
    except PackageNotFoundError:
        # running from a source tree that was never installed
        return UNKNOWN_VERSION
