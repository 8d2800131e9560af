# Sidebarctl Mutation Operations
# Idempotent, duplicate-safe edits applied to a loaded store

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from sidebarctl.bookmark import resolver
from sidebarctl.errors import BookmarkError, DuplicateError, SidebarError
from sidebarctl.store.kinds import (
    BOOKMARK_KEY,
    CUSTOM_PROPERTIES_KEY,
    DONT_SHOW_ON_REAPPEARANCE,
    ITEM_IS_HIDDEN,
    UUID_KEY,
    VISIBILITY_KEY,
    VISIBILITY_VISIBLE,
    canonical_special_id,
)
from sidebarctl.store.model import SFLItem, SFLStore
from sidebarctl.utils.paths import normalize_path

BookmarkFactory = Callable[[str], bytes]


class OutcomeStatus(str, Enum):
    """Per-path result of a batch add."""

    ADDED = "added"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class AddOutcome:
    """Result of adding one path."""

    path: str
    status: OutcomeStatus
    error: Optional[SidebarError] = None

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.ADDED


@dataclass
class BatchResult:
    """Aggregate result of a multi-path add or replace."""

    outcomes: list[AddOutcome] = field(default_factory=list)

    @property
    def added(self) -> list[AddOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.ADDED]

    @property
    def failed(self) -> list[AddOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]

    @property
    def skipped(self) -> list[AddOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SKIPPED]

    @property
    def any_succeeded(self) -> bool:
        return bool(self.added)

    @property
    def all_succeeded(self) -> bool:
        return all(o.success for o in self.outcomes)


@dataclass
class ListedItem:
    """A resolved sidebar entry."""

    item: SFLItem
    path: str
    is_stale: bool


@dataclass
class Listing:
    """Resolved entries of a store plus per-item resolution failures."""

    entries: list[ListedItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]


def list_items(store: SFLStore) -> Listing:
    """
    Resolve every bookmarked item of a store.

    Items without a bookmark (OS-provided special entries) are skipped. An
    unresolvable bookmark is recorded in ``errors`` and the listing continues.
    """
    listing = Listing()
    for item in store.items:
        if item.bookmark is None:
            continue
        try:
            path, stale = item.resolve()
        except BookmarkError as e:
            listing.errors.append(f"Skipping item {item.uuid or '?'}: {e.message}")
            continue
        listing.entries.append(ListedItem(item=item, path=path, is_stale=stale))
    return listing


def find_item_by_path(store: SFLStore, path: str | Path) -> Optional[SFLItem]:
    """Find the item whose resolved bookmark matches path after normalization."""
    target = normalize_path(path)
    for item in store.items:
        if item.bookmark is None:
            continue
        try:
            resolved, _ = item.resolve()
        except BookmarkError:
            continue
        if normalize_path(resolved) == target:
            return item
    return None


def _skips_custom_properties(target: str) -> bool:
    # Desktop favorites are written without custom item properties (substring match)
    return "Desktop" in Path(target).name


def add_item(
    store: SFLStore,
    path: str | Path,
    *,
    create_bookmark: BookmarkFactory = resolver.create,
) -> SFLItem:
    """
    Append a favorite for path.

    Args:
        store: Store to modify.
        path: Target path; normalized before comparison and bookmarking.
        create_bookmark: Bookmark factory (injectable for tests).

    Returns:
        The new item.

    Raises:
        DuplicateError: If an item already resolves to the same path.
        BookmarkError: If no bookmark can be created for the path.
    """
    target = normalize_path(path)
    if find_item_by_path(store, target) is not None:
        raise DuplicateError(f"Item already exists: {target}", path=target)

    bookmark = create_bookmark(target)

    raw: dict = {}
    if not _skips_custom_properties(target):
        raw[CUSTOM_PROPERTIES_KEY] = {
            ITEM_IS_HIDDEN: 1,
            DONT_SHOW_ON_REAPPEARANCE: 0,
        }
    raw[UUID_KEY] = str(uuid.uuid4()).upper()
    raw[VISIBILITY_KEY] = VISIBILITY_VISIBLE
    raw[BOOKMARK_KEY] = bookmark

    item = SFLItem(raw)
    store.append_item(item)
    return item


def add_items(
    store: SFLStore,
    paths: Iterable[str | Path],
    *,
    create_bookmark: BookmarkFactory = resolver.create,
) -> BatchResult:
    """Add several paths, continuing past per-path failures."""
    result = BatchResult()
    for path in paths:
        try:
            add_item(store, path, create_bookmark=create_bookmark)
        except SidebarError as e:
            result.outcomes.append(AddOutcome(str(path), OutcomeStatus.FAILED, e))
        else:
            result.outcomes.append(AddOutcome(str(path), OutcomeStatus.ADDED))
    return result


def remove_all(store: SFLStore) -> int:
    """
    Remove every item.

    Returns:
        Number of items removed (0 on an already empty store).
    """
    removed = len(store.raw_items)
    store.set_items([])
    return removed


def replace_set(
    store: SFLStore,
    paths: Iterable[str | Path],
    *,
    create_bookmark: BookmarkFactory = resolver.create,
) -> BatchResult:
    """
    Replace all items with the given paths, in order.

    The first failure stops the remaining adds; items already added stay.
    Paths after the failure are reported as skipped.
    """
    remove_all(store)
    result = BatchResult()
    failed = False
    for path in paths:
        if failed:
            result.outcomes.append(AddOutcome(str(path), OutcomeStatus.SKIPPED))
            continue
        try:
            add_item(store, path, create_bookmark=create_bookmark)
        except SidebarError as e:
            result.outcomes.append(AddOutcome(str(path), OutcomeStatus.FAILED, e))
            failed = True
        else:
            result.outcomes.append(AddOutcome(str(path), OutcomeStatus.ADDED))
    return result


def set_visibility_where(store: SFLStore, predicate: Callable[[SFLItem], bool], visible: bool) -> int:
    """Set visibility on every item matching predicate; returns the match count."""
    matched = 0
    for item in store.items:
        if predicate(item):
            item.set_visible(visible)
            matched += 1
    if matched:
        store.dirty = True
    return matched


def set_visibility_by_identifier(store: SFLStore, special_id: str, visible: bool) -> int:
    """
    Show or hide OS-provided entries by special item identifier.

    Both ``visibility`` and the ``ItemIsHidden`` custom property are updated.
    No matching item is not an error.

    Args:
        store: Store to modify.
        special_id: Full identifier or alias (``is-computer``, ``is-home``, ``is-icloud-drive``).
        visible: Target visibility.

    Returns:
        Number of items changed.
    """
    wanted = canonical_special_id(special_id)
    return set_visibility_where(store, lambda item: item.special_identifier == wanted, visible)


def set_visibility_by_bookmark_marker(store: SFLStore, markers: Iterable[str], visible: bool) -> int:
    """Set visibility on items whose resolved bookmark path contains any marker."""
    markers = tuple(markers)

    def matches(item: SFLItem) -> bool:
        if item.bookmark is None:
            return False
        try:
            path, _ = item.resolve()
        except BookmarkError:
            return False
        return any(marker in path for marker in markers)

    return set_visibility_where(store, matches, visible)


def set_all_visible(store: SFLStore, visible: bool) -> int:
    """Set visibility on every item."""
    return set_visibility_where(store, lambda item: True, visible)


def set_property_flag(store: SFLStore, key: str, value: bool) -> None:
    """Set a store-wide boolean property (stored as 0/1)."""
    store.set_property(key, 1 if value else 0)
