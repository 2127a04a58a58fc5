"""Version information for SkyFlight.

This module provides version information read from the VERSION file
in the project root, with fallback for packaged distributions.
"""

from pathlib import Path

__version__ = "0.1.0"  # Fallback version
__license__ = "MIT"


def get_version() -> str:
    """Get the current version string.

    Reads from VERSION file in project root or falls back to __version__.

    Returns:
        Version string (e.g., "0.1.0").
    """
    version_paths = [
        Path(__file__).parent.parent.parent / "VERSION",  # src/skyflight -> root
        Path(__file__).parent.parent / "VERSION",  # For packaged apps
    ]

    for version_path in version_paths:
        if version_path.exists():
            try:
                return version_path.read_text(encoding="utf-8").strip()
            except OSError:
                pass

    return __version__


def get_about_info() -> dict[str, str]:
    """Get complete about information.

    Returns:
        Dictionary with name, version, license and description.
    """
    return {
        "name": "SkyFlight",
        "version": get_version(),
        "license": __license__,
        "description": "Flight dynamics and camera core for a spherical-world simulator",
    }
