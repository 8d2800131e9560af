"""sidebarctl - Finder sidebar Shared File List editor.

Reads and writes the keyed-archive stores behind the Finder sidebar
(Favorites, Recents/Shared, network browser and Locations) and signals
the shared file list daemon to pick up the changes.
"""

__version__ = "1.0.0"
__author__ = "sidebarctl contributors"

__all__ = [
    "__version__",
    "StoreKind",
    "SFLStore",
    "SFLItem",
    "open_store",
    "save_store",
    "add_item",
    "remove_all",
    "replace_set",
    "set_visibility_by_identifier",
    "set_property_flag",
    "reload",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("StoreKind", "SFLStore", "SFLItem", "open_store", "save_store"):
        from sidebarctl import store

        return getattr(store, name)
    if name in ("add_item", "remove_all", "replace_set", "set_visibility_by_identifier", "set_property_flag"):
        from sidebarctl import operations

        return getattr(operations, name)
    if name == "reload":
        from sidebarctl.reload import reload

        return reload
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
