"""
Core package for the BookGen syllabus-to-book toolkit.

Kept lightweight so the CLI and API can import the version helper without
pulling in FastAPI or the generation stack.
"""

from importlib import metadata


def get_version() -> str:
    """Return the installed project version."""
    try:
        return metadata.version("bookgen")
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["get_version"]
