# Sidebarctl Test Fixtures
# Pytest fixtures for sidebarctl tests

import os
import plistlib
import struct
import tempfile
from collections.abc import Callable, Generator
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import pytest

from mac_alias.bookmark import Bookmark, kBookmarkCNIDPath, kBookmarkFileCreationDate, kBookmarkPath
from mac_alias.utils import osx_epoch

from sidebarctl.store import StoreKind, store_path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve /var -> /private/var style symlinks up front
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def sfl_dir(temp_home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the shared file list directory and config file into the temp home."""
    directory = temp_home / "Library" / "Application Support" / "com.apple.sharedfilelist"
    monkeypatch.setenv("SIDEBARCTL_SFL_DIR", str(directory))
    monkeypatch.setenv("SIDEBARCTL_CONFIG", str(temp_home / ".config" / "sidebarctl" / "config.yaml"))
    return directory


@pytest.fixture
def favorites_file(sfl_dir: Path) -> Path:
    """Path of the Favorites store inside the temp shared file list directory."""
    return store_path(StoreKind.FAVORITES)


@pytest.fixture
def targets(temp_dir: Path) -> dict[str, Path]:
    """A few existing directories to link into the sidebar."""
    paths = {}
    for name in ("Projects", "Music", "Work", "Desktop"):
        path = temp_dir / "targets" / name
        path.mkdir(parents=True)
        paths[name] = path
    return paths


def make_bookmark(path: str, cnids: Optional[list[int]] = None) -> bytes:
    """Build a minimal bookmark blob recording path (and optionally file ids)."""
    toc: dict[Any, Any] = {kBookmarkPath: [c for c in path.split("/") if c]}
    if cnids is not None:
        toc[kBookmarkCNIDPath] = cnids
    return Bookmark([(1, toc)]).to_bytes()


def make_bad_date_bookmark(path: str) -> bytes:
    """Build a bookmark whose creation date lies far outside the datetime range."""
    seconds = 12345.5
    toc = {
        kBookmarkPath: [c for c in path.split("/") if c],
        kBookmarkFileCreationDate: osx_epoch + timedelta(seconds=seconds),
    }
    blob = Bookmark([(1, toc)]).to_bytes()
    # Dates are stored as big-endian doubles
    return blob.replace(struct.pack(">d", seconds), struct.pack(">d", 1e300))


def build_os_archive(root: dict[str, Any]) -> bytes:
    """
    Archive a graph the way the OS writes it.

    Uses immutable class names and inline numbers, unlike the encoder under
    test. Only dicts, lists, str, bytes, bool and int are supported.
    """
    objects: list[Any] = ["$null"]
    classes: dict[str, plistlib.UID] = {}

    def class_ref(name: str, chain: list[str]) -> plistlib.UID:
        if name not in classes:
            objects.append({"$classname": name, "$classes": chain})
            classes[name] = plistlib.UID(len(objects) - 1)
        return classes[name]

    def add(value: Any) -> plistlib.UID:
        if isinstance(value, dict):
            objects.append(None)
            index = len(objects) - 1
            keys = [add(k) for k in value]
            values = [add(v) for v in value.values()]
            objects[index] = {
                "NS.keys": keys,
                "NS.objects": values,
                "$class": class_ref("NSDictionary", ["NSDictionary", "NSObject"]),
            }
            return plistlib.UID(index)
        if isinstance(value, list):
            objects.append(None)
            index = len(objects) - 1
            refs = [add(v) for v in value]
            objects[index] = {"NS.objects": refs, "$class": class_ref("NSArray", ["NSArray", "NSObject"])}
            return plistlib.UID(index)
        objects.append(value)
        return plistlib.UID(len(objects) - 1)

    top = add(root)
    container = {
        "$version": 100000,
        "$archiver": "NSKeyedArchiver",
        "$top": {"root": top},
        "$objects": objects,
    }
    return plistlib.dumps(container, fmt=plistlib.FMT_BINARY)


@pytest.fixture
def bookmark_factory() -> Callable[..., bytes]:
    """Factory for minimal bookmark blobs."""
    return make_bookmark


@pytest.fixture
def bad_date_bookmark() -> bytes:
    """Bookmark blob whose creation date cannot be represented."""
    return make_bad_date_bookmark("/Volumes/Archive/Old")


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding store and bookmark files in the on-disk OS layout."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def os_archive() -> Callable[[dict[str, Any]], bytes]:
    """Factory for OS-layout keyed archives."""
    return build_os_archive


@pytest.fixture
def write_store(sfl_dir: Path) -> Callable[[StoreKind, dict[str, Any]], Path]:
    """Write an OS-layout archive for a store kind and return its path."""

    def _write(kind: StoreKind, root: dict[str, Any]) -> Path:
        path = store_path(kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_os_archive(root))
        return path

    return _write
