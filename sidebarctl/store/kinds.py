# Sidebarctl Store Kinds
# Store file naming, well-known keys, special item identifiers and defaults

import copy
import os
from enum import Enum
from pathlib import Path
from typing import Any

from sidebarctl.utils.paths import expand_path
from sidebarctl.utils.platform import get_macos_version

SHARED_FILE_LIST_DIRNAME = "com.apple.sharedfilelist"
FILE_PREFIX = "com.apple.LSSharedFileList"

# First macOS release that writes the current format marker
CURRENT_FORMAT_SINCE = (26,)


class StoreKind(str, Enum):
    """Shared file list stores backing the Finder sidebar."""

    FAVORITES = "favorites"
    TOP_SIDEBAR_SECTION = "top-sidebar-section"
    NETWORK_BROWSER = "network-browser"
    FAVORITE_VOLUMES = "favorite-volumes"

    @property
    def file_stem(self) -> str:
        return _FILE_STEMS[self]


class FormatSuffix(str, Enum):
    """On-disk format marker of store files."""

    AUTO = "auto"
    LEGACY = "sfl3"
    CURRENT = "sfl4"


_FILE_STEMS: dict[StoreKind, str] = {
    StoreKind.FAVORITES: "FavoriteItems",
    StoreKind.TOP_SIDEBAR_SECTION: "TopSidebarSection",
    StoreKind.NETWORK_BROWSER: "NetworkBrowser",
    StoreKind.FAVORITE_VOLUMES: "FavoriteVolumes",
}

# Root keys
ITEMS_KEY = "items"
PROPERTIES_KEY = "properties"

# Item keys
UUID_KEY = "uuid"
VISIBILITY_KEY = "visibility"
BOOKMARK_KEY = "Bookmark"
CUSTOM_PROPERTIES_KEY = "CustomItemProperties"

VISIBILITY_VISIBLE = 0
VISIBILITY_HIDDEN = 1

# Custom item property keys
ITEM_IS_HIDDEN = "com.apple.LSSharedFileList.ItemIsHidden"
SPECIAL_ITEM_IDENTIFIER = "com.apple.LSSharedFileList.SpecialItemIdentifier"
DONT_SHOW_ON_REAPPEARANCE = "com.apple.finder.dontshowonreappearance"

# Store-wide property keys
FORCE_TEMPLATE_ICONS = "com.apple.LSSharedFileList.ForceTemplateIcons"
BONJOUR_ENABLED = "com.apple.NetworkBrowser.bonjourEnabled"
CONNECTED_ENABLED = "com.apple.NetworkBrowser.connectedEnabled"
COMPUTER_IS_VISIBLE = "com.apple.LSSharedFileList.FavoriteVolumes.ComputerIsVisible"
SHOW_HARD_DRIVES = "com.apple.LSSharedFileList.FavoriteVolumes.ShowHardDrives"
SHOW_NETWORK_VOLUMES = "com.apple.LSSharedFileList.FavoriteVolumes.ShowNetworkVolumes"
SHOW_CLOUD_SERVICES = "com.apple.finder.showcloudservices"

# Special item identifiers of OS-provided entries
IS_COMPUTER = "com.apple.LSSharedFileList.IsComputer"
IS_HOME = "com.apple.LSSharedFileList.IsHome"
IS_ICLOUD_DRIVE = "com.apple.LSSharedFileList.IsICloudDrive"

SPECIAL_ITEM_ALIASES: dict[str, str] = {
    "is-computer": IS_COMPUTER,
    "is-home": IS_HOME,
    "is-icloud-drive": IS_ICLOUD_DRIVE,
}

# Bookmark path markers of the Recents and Shared entries
RECENTS_SHARED_MARKERS: tuple[str, ...] = (
    "myDocuments.cannedSearch",
    "SharedDocuments.cannedSearch",
)

_DEFAULT_PROPERTIES: dict[StoreKind, dict[str, Any]] = {
    StoreKind.FAVORITES: {FORCE_TEMPLATE_ICONS: 1},
    StoreKind.TOP_SIDEBAR_SECTION: {FORCE_TEMPLATE_ICONS: 1},
    StoreKind.NETWORK_BROWSER: {
        BONJOUR_ENABLED: 0,
        CONNECTED_ENABLED: 1,
    },
    StoreKind.FAVORITE_VOLUMES: {
        FORCE_TEMPLATE_ICONS: 1,
        COMPUTER_IS_VISIBLE: 1,
        SHOW_HARD_DRIVES: 1,
        SHOW_NETWORK_VOLUMES: 1,
        SHOW_CLOUD_SERVICES: 1,
    },
}


def canonical_special_id(special_id: str) -> str:
    """Map a short alias such as ``is-computer`` to the full identifier."""
    return SPECIAL_ITEM_ALIASES.get(special_id, special_id)


def default_structure(kind: StoreKind) -> dict[str, Any]:
    """
    Build the minimal valid root dictionary for a store kind.

    Args:
        kind: Store kind.

    Returns:
        Fresh root dictionary with empty items and the kind's default properties.
    """
    return {
        ITEMS_KEY: [],
        PROPERTIES_KEY: copy.deepcopy(_DEFAULT_PROPERTIES[kind]),
    }


def get_shared_file_list_dir(override: str | Path | None = None) -> Path:
    """
    Get the per-user shared file list directory.

    Args:
        override: Explicit directory (e.g. from configuration).

    Returns:
        Directory path; ``SIDEBARCTL_SFL_DIR`` wins over the default location.
    """
    if override:
        return expand_path(override)
    env_path = os.environ.get("SIDEBARCTL_SFL_DIR")
    if env_path:
        return expand_path(env_path)
    return Path.home() / "Library" / "Application Support" / SHARED_FILE_LIST_DIRNAME


def resolve_format_suffix(fmt: FormatSuffix | str = FormatSuffix.AUTO) -> str:
    """
    Resolve the file suffix for store files.

    ``auto`` picks the current marker on macOS 26 and later (and off macOS),
    the legacy marker on older releases.
    """
    fmt = FormatSuffix(fmt)
    if fmt != FormatSuffix.AUTO:
        return fmt.value
    version = get_macos_version()
    if version is not None and version < CURRENT_FORMAT_SINCE:
        return FormatSuffix.LEGACY.value
    return FormatSuffix.CURRENT.value


def store_filename(kind: StoreKind, fmt: FormatSuffix | str = FormatSuffix.AUTO) -> str:
    """File name of a store, e.g. ``com.apple.LSSharedFileList.FavoriteItems.sfl4``."""
    return f"{FILE_PREFIX}.{kind.file_stem}.{resolve_format_suffix(fmt)}"


def store_path(
    kind: StoreKind,
    directory: str | Path | None = None,
    fmt: FormatSuffix | str = FormatSuffix.AUTO,
) -> Path:
    """Full path of a store file."""
    return get_shared_file_list_dir(directory) / store_filename(kind, fmt)
