# Sidebarctl Platform Detection Utilities
# OS and macOS version detection for store file naming

import platform

# Platform name mapping: system name -> sidebarctl platform name
_PLATFORM_MAP: dict[str, str] = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}


def get_current_platform() -> str:
    """
    Get the current platform identifier.

    Returns:
        Platform string: "macos", "linux", or "windows".
    """
    system = platform.system()
    return _PLATFORM_MAP.get(system, system.lower())


def is_macos() -> bool:
    """Check whether we are running on macOS."""
    return get_current_platform() == "macos"


def get_macos_version() -> tuple[int, ...] | None:
    """
    Get the running macOS version.

    Returns:
        Version tuple such as (15, 2), or None when not on macOS or the
        version string cannot be parsed.
    """
    if not is_macos():
        return None
    release = platform.mac_ver()[0]
    if not release:
        return None
    try:
        return tuple(int(part) for part in release.split("."))
    except ValueError:
        return None
