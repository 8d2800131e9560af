# Sidebarctl Store Model
# Typed view over a decoded shared file list archive, with load and save

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from sidebarctl.archive import codec
from sidebarctl.bookmark import resolver
from sidebarctl.errors import (
    AccessError,
    BookmarkError,
    NotFoundError,
    SidebarError,
    StructureError,
)
from sidebarctl.store.kinds import (
    BOOKMARK_KEY,
    CUSTOM_PROPERTIES_KEY,
    ITEM_IS_HIDDEN,
    ITEMS_KEY,
    PROPERTIES_KEY,
    SPECIAL_ITEM_IDENTIFIER,
    UUID_KEY,
    VISIBILITY_HIDDEN,
    VISIBILITY_KEY,
    VISIBILITY_VISIBLE,
    FormatSuffix,
    StoreKind,
    default_structure,
    store_path,
)
from sidebarctl.utils.paths import atomic_write

FULL_DISK_ACCESS_HINT = "Full Disk Access may be required for your terminal."


@dataclass
class SFLItem:
    """
    One sidebar entry.

    Wraps the item's raw archive dictionary so keys this class does not know
    about survive a read-modify-write cycle.
    """

    raw: dict[str, Any]

    @property
    def uuid(self) -> Optional[str]:
        value = self.raw.get(UUID_KEY)
        return value if isinstance(value, str) else None

    @property
    def visibility(self) -> int:
        value = self.raw.get(VISIBILITY_KEY, VISIBILITY_VISIBLE)
        return int(value) if isinstance(value, (int, float)) else VISIBILITY_VISIBLE

    @property
    def is_visible(self) -> bool:
        return self.visibility == VISIBILITY_VISIBLE

    @property
    def bookmark(self) -> Optional[bytes]:
        value = self.raw.get(BOOKMARK_KEY)
        return value if isinstance(value, bytes) else None

    @property
    def custom_properties(self) -> dict[str, Any]:
        value = self.raw.get(CUSTOM_PROPERTIES_KEY)
        return value if isinstance(value, dict) else {}

    @property
    def special_identifier(self) -> Optional[str]:
        value = self.custom_properties.get(SPECIAL_ITEM_IDENTIFIER)
        return value if isinstance(value, str) else None

    def set_visible(self, visible: bool) -> None:
        """Set visibility and the mirrored hidden flag together."""
        self.raw[VISIBILITY_KEY] = VISIBILITY_VISIBLE if visible else VISIBILITY_HIDDEN
        custom = dict(self.custom_properties)
        custom[ITEM_IS_HIDDEN] = 0 if visible else 1
        self.raw[CUSTOM_PROPERTIES_KEY] = custom

    def resolve(self) -> tuple[str, bool]:
        """
        Resolve the item's bookmark.

        Returns:
            Tuple of (path, is_stale).

        Raises:
            BookmarkError: If the item has no bookmark or it cannot be parsed.
        """
        bookmark = self.bookmark
        if bookmark is None:
            raise BookmarkError(f"Item {self.uuid or '?'} has no bookmark")
        return resolver.resolve(bookmark)


@dataclass
class SFLStore:
    """A loaded shared file list store."""

    kind: StoreKind
    path: Path
    root: dict[str, Any]
    created: bool = False
    dirty: bool = field(default=False, compare=False)

    @classmethod
    def from_graph(cls, kind: StoreKind, path: Path, graph: dict[str, Any], *, created: bool = False) -> "SFLStore":
        """
        Wrap a decoded archive, checking it has the shape of a store.

        Raises:
            StructureError: If ``items`` is missing or ``properties`` is not a mapping.
        """
        if not isinstance(graph.get(ITEMS_KEY), list):
            raise StructureError(f"Missing 'items' array in {kind.file_stem} store", path=str(path))
        if PROPERTIES_KEY in graph and not isinstance(graph[PROPERTIES_KEY], dict):
            raise StructureError(f"'properties' is not a dictionary in {kind.file_stem} store", path=str(path))
        return cls(kind=kind, path=path, root=graph, created=created)

    @property
    def raw_items(self) -> list[Any]:
        return self.root[ITEMS_KEY]

    @property
    def items(self) -> list[SFLItem]:
        """Dictionary items in display order."""
        return [SFLItem(raw) for raw in self.raw_items if isinstance(raw, dict)]

    def __iter__(self) -> Iterator[SFLItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def properties(self) -> dict[str, Any]:
        value = self.root.get(PROPERTIES_KEY)
        return value if isinstance(value, dict) else {}

    def set_items(self, items: list[Any]) -> None:
        self.root[ITEMS_KEY] = items
        self.dirty = True

    def append_item(self, item: SFLItem) -> None:
        self.raw_items.append(item.raw)
        self.dirty = True

    def set_property(self, key: str, value: Any) -> None:
        properties = self.root.get(PROPERTIES_KEY)
        if not isinstance(properties, dict):
            properties = {}
            self.root[PROPERTIES_KEY] = properties
        properties[key] = value
        self.dirty = True


def load_store(kind: StoreKind, path: Path) -> SFLStore:
    """
    Read and decode an existing store file.

    Raises:
        NotFoundError: If the file does not exist.
        AccessError: If the file cannot be read.
        DecodeError: If the archive is malformed.
        StructureError: If the archive is not a store.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise NotFoundError(f"SFL file does not exist at {path}", path=str(path)) from e
    except PermissionError as e:
        raise AccessError(f"Permission denied reading {path}. {FULL_DISK_ACCESS_HINT}", path=str(path)) from e
    except OSError as e:
        raise SidebarError(f"Unable to read SFL file at {path}: {e.strerror}", path=str(path)) from e

    graph = codec.decode(data)
    return SFLStore.from_graph(kind, path, graph)


def open_store(
    kind: StoreKind,
    *,
    directory: str | Path | None = None,
    fmt: FormatSuffix | str = FormatSuffix.AUTO,
    create: bool = True,
) -> SFLStore:
    """
    Open a store, creating its default structure when the file is missing.

    Args:
        kind: Store kind to open.
        directory: Shared file list directory override.
        fmt: File format marker.
        create: Write the default structure when missing (otherwise raise).

    Returns:
        Loaded store; ``created`` is True when the file was just written.

    Raises:
        NotFoundError: If the file is missing and ``create`` is False.
        AccessError: If the file or its directory is not accessible.
    """
    path = store_path(kind, directory, fmt)

    try:
        exists = path.exists()
    except PermissionError as e:
        raise AccessError(f"Permission denied accessing {path}. {FULL_DISK_ACCESS_HINT}", path=str(path)) from e

    if not exists:
        if not create:
            raise NotFoundError(f"SFL file does not exist at {path}", path=str(path))
        store = SFLStore.from_graph(kind, path, default_structure(kind), created=True)
        save_store(store)
        return store

    return load_store(kind, path)


def save_store(store: SFLStore) -> None:
    """
    Encode and atomically write a store.

    Raises:
        AccessError: If the file cannot be written.
    """
    data = codec.encode(store.root)
    try:
        atomic_write(store.path, data)
    except PermissionError as e:
        raise AccessError(
            f"Permission denied writing {store.path}. {FULL_DISK_ACCESS_HINT}", path=str(store.path)
        ) from e
    except OSError as e:
        raise SidebarError(f"Unable to write SFL file at {store.path}: {e.strerror}", path=str(store.path)) from e
    store.dirty = False
