# Sidebarctl Utilities Module
# Helper functions for path handling and platform detection

from sidebarctl.utils.paths import (
    atomic_write,
    ensure_dir,
    expand_path,
    normalize_path,
)
from sidebarctl.utils.platform import (
    get_current_platform,
    get_macos_version,
    is_macos,
)

__all__ = [
    # Platform
    "get_current_platform",
    "get_macos_version",
    "is_macos",
    # Paths
    "expand_path",
    "normalize_path",
    "ensure_dir",
    "atomic_write",
]
