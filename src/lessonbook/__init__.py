"""lessonbook - Lesson booking and attendance backend for a children's activity center."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
