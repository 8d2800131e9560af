# Sidebarctl Store Module
# Store kinds, typed items and store load/save

from sidebarctl.store.kinds import (
    SPECIAL_ITEM_ALIASES,
    FormatSuffix,
    StoreKind,
    canonical_special_id,
    default_structure,
    get_shared_file_list_dir,
    store_filename,
    store_path,
)
from sidebarctl.store.model import (
    SFLItem,
    SFLStore,
    load_store,
    open_store,
    save_store,
)

__all__ = [
    # Kinds
    "StoreKind",
    "FormatSuffix",
    "SPECIAL_ITEM_ALIASES",
    "canonical_special_id",
    "default_structure",
    "get_shared_file_list_dir",
    "store_filename",
    "store_path",
    # Model
    "SFLItem",
    "SFLStore",
    "load_store",
    "open_store",
    "save_store",
]
