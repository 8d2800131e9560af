# Sidebarctl Sidebar Sections
# Named toggles for Recents/Shared, network browsing and the Locations section

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Optional

from sidebarctl import operations
from sidebarctl.store.kinds import (
    BONJOUR_ENABLED,
    COMPUTER_IS_VISIBLE,
    CONNECTED_ENABLED,
    IS_COMPUTER,
    IS_HOME,
    IS_ICLOUD_DRIVE,
    RECENTS_SHARED_MARKERS,
    SHOW_CLOUD_SERVICES,
    SHOW_HARD_DRIVES,
    SHOW_NETWORK_VOLUMES,
    FormatSuffix,
    StoreKind,
)
from sidebarctl.store.model import SFLStore, open_store, save_store


class SectionEditor:
    """
    Applies section toggles against the section stores.

    Each store is opened (and created if missing) on first use and written
    once by ``save``.
    """

    def __init__(self, directory: Optional[str | Path] = None, fmt: FormatSuffix | str = FormatSuffix.AUTO):
        self.directory = directory
        self.fmt = fmt
        self._stores: dict[StoreKind, SFLStore] = {}

    def store(self, kind: StoreKind) -> SFLStore:
        if kind not in self._stores:
            self._stores[kind] = open_store(kind, directory=self.directory, fmt=self.fmt)
        return self._stores[kind]

    def apply(self, name: str) -> list[str]:
        """
        Apply a toggle or composite by name.

        Returns:
            Confirmation messages, one per applied change.

        Raises:
            KeyError: If the name is not a known toggle.
        """
        return [TOGGLES[toggle].apply(self) for toggle in expand_toggle(name)]

    def save(self) -> list[Path]:
        """Write every modified store; returns the written paths."""
        written = []
        for store in self._stores.values():
            if store.dirty:
                save_store(store)
                written.append(store.path)
        return written


@dataclass(frozen=True)
class Toggle:
    """A single named sidebar section change."""

    name: str
    help: str
    apply: Callable[[SectionEditor], str]


def _shown(visible: bool) -> str:
    return "shown" if visible else "hidden"


def _enabled(enabled: bool) -> str:
    return "enabled" if enabled else "disabled"


def _hide_recents_shared(editor: SectionEditor) -> str:
    store = editor.store(StoreKind.TOP_SIDEBAR_SECTION)
    operations.set_visibility_by_bookmark_marker(store, RECENTS_SHARED_MARKERS, False)
    return "Recents and Shared set to hidden in TopSidebarSection"


def _show_recents_shared(editor: SectionEditor) -> str:
    store = editor.store(StoreKind.TOP_SIDEBAR_SECTION)
    operations.set_all_visible(store, True)
    return "Recents and Shared set to visible in TopSidebarSection"


def _remove_recents_shared(editor: SectionEditor) -> str:
    operations.remove_all(editor.store(StoreKind.TOP_SIDEBAR_SECTION))
    return "Removed all items from TopSidebarSection (Recents & Shared removed)"


def _set_bonjour(enabled: bool, editor: SectionEditor) -> str:
    operations.set_property_flag(editor.store(StoreKind.NETWORK_BROWSER), BONJOUR_ENABLED, enabled)
    return f"Bonjour computers {_enabled(enabled)} in NetworkBrowser"


def _set_connected(enabled: bool, editor: SectionEditor) -> str:
    operations.set_property_flag(editor.store(StoreKind.NETWORK_BROWSER), CONNECTED_ENABLED, enabled)
    return f"Connected servers {_enabled(enabled)} in NetworkBrowser"


def _set_computer(visible: bool, editor: SectionEditor) -> str:
    store = editor.store(StoreKind.FAVORITE_VOLUMES)
    operations.set_property_flag(store, COMPUTER_IS_VISIBLE, visible)
    operations.set_visibility_by_identifier(store, IS_COMPUTER, visible)
    return f"Computer {_shown(visible)} in Locations"


def _set_special_item(special_id: str, label: str, visible: bool, editor: SectionEditor) -> str:
    operations.set_visibility_by_identifier(editor.store(StoreKind.FAVORITE_VOLUMES), special_id, visible)
    return f"{label} {_shown(visible)} in Locations"


def _set_volumes_flag(key: str, label: str, visible: bool, editor: SectionEditor) -> str:
    operations.set_property_flag(editor.store(StoreKind.FAVORITE_VOLUMES), key, visible)
    return f"{label} {_shown(visible)} in Locations"


_TOGGLE_LIST: list[Toggle] = [
    # Recents & Shared
    Toggle("hide-recents-shared", "Hide Recents and Shared sections", _hide_recents_shared),
    Toggle("show-recents-shared", "Show Recents and Shared sections", _show_recents_shared),
    Toggle("remove-recents-shared", "Remove Recents and Shared items entirely", _remove_recents_shared),
    # Network
    Toggle("disable-bonjour", "Disable Bonjour computers in sidebar", partial(_set_bonjour, False)),
    Toggle("enable-bonjour", "Enable Bonjour computers in sidebar", partial(_set_bonjour, True)),
    Toggle("disable-connected", "Disable connected servers in Locations", partial(_set_connected, False)),
    Toggle("enable-connected", "Enable connected servers in Locations", partial(_set_connected, True)),
    # Locations
    Toggle("hide-computer", "Hide this Mac in Locations", partial(_set_computer, False)),
    Toggle("show-computer", "Show this Mac in Locations", partial(_set_computer, True)),
    Toggle(
        "hide-home-in-locations",
        "Hide home folder in Locations (keep in Favorites)",
        partial(_set_special_item, IS_HOME, "Home folder", False),
    ),
    Toggle(
        "show-home-in-locations",
        "Show home folder in Locations",
        partial(_set_special_item, IS_HOME, "Home folder", True),
    ),
    Toggle(
        "hide-icloud-drive",
        "Hide iCloud Drive in Locations",
        partial(_set_special_item, IS_ICLOUD_DRIVE, "iCloud Drive", False),
    ),
    Toggle(
        "show-icloud-drive",
        "Show iCloud Drive in Locations",
        partial(_set_special_item, IS_ICLOUD_DRIVE, "iCloud Drive", True),
    ),
    Toggle(
        "hide-cloud-services",
        "Hide cloud services in Locations",
        partial(_set_volumes_flag, SHOW_CLOUD_SERVICES, "Cloud services", False),
    ),
    Toggle(
        "show-cloud-services",
        "Show cloud services in Locations",
        partial(_set_volumes_flag, SHOW_CLOUD_SERVICES, "Cloud services", True),
    ),
    Toggle(
        "hide-hard-drives",
        "Hide hard drives in Locations",
        partial(_set_volumes_flag, SHOW_HARD_DRIVES, "Hard drives", False),
    ),
    Toggle(
        "show-hard-drives",
        "Show hard drives in Locations",
        partial(_set_volumes_flag, SHOW_HARD_DRIVES, "Hard drives", True),
    ),
    Toggle(
        "hide-network-volumes",
        "Hide network volumes in Locations",
        partial(_set_volumes_flag, SHOW_NETWORK_VOLUMES, "Network volumes", False),
    ),
    Toggle(
        "show-network-volumes",
        "Show network volumes in Locations",
        partial(_set_volumes_flag, SHOW_NETWORK_VOLUMES, "Network volumes", True),
    ),
]

TOGGLES: dict[str, Toggle] = {toggle.name: toggle for toggle in _TOGGLE_LIST}

# Fixed bundles applied in one invocation
COMPOSITES: dict[str, list[str]] = {
    "all-hidden": [
        "remove-recents-shared",
        "disable-bonjour",
        "hide-computer",
        "hide-home-in-locations",
        "hide-icloud-drive",
        "hide-cloud-services",
    ],
    "locations-minimal": [
        "hide-computer",
        "hide-cloud-services",
        "hide-network-volumes",
    ],
}

COMPOSITE_HELP: dict[str, str] = {
    "all-hidden": "Hide Recents, Shared, Computer, iCloud Drive, cloud services",
    "locations-minimal": "Hide Computer, cloud services, network volumes (keep hard drives)",
}


def is_known_toggle(name: str) -> bool:
    return name in TOGGLES or name in COMPOSITES


def expand_toggle(name: str) -> list[str]:
    """
    Expand a composite into its toggles; plain toggles expand to themselves.

    Raises:
        KeyError: If the name is unknown.
    """
    if name in COMPOSITES:
        return list(COMPOSITES[name])
    if name in TOGGLES:
        return [name]
    raise KeyError(f"Unknown sidebar section toggle: {name}")
