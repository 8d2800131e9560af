# Sidebarctl Bookmark Resolver
# Resolve bookmark blobs to paths and create blobs for new favorites

import os
import plistlib
import pwd
import shutil
import struct
import subprocess
import uuid
from datetime import datetime, timedelta
from typing import Any, Optional
from urllib.parse import quote

from mac_alias.bookmark import (
    URL,
    Bookmark,
    Data,
    kBookmarkCNIDPath,
    kBookmarkContainingFolder,
    kBookmarkCreationOptions,
    kBookmarkFileCreationDate,
    kBookmarkFileProperties,
    kBookmarkPath,
    kBookmarkUID,
    kBookmarkUserName,
    kBookmarkVolumeCreationDate,
    kBookmarkVolumeIsRoot,
    kBookmarkVolumeName,
    kBookmarkVolumePath,
    kBookmarkVolumeProperties,
    kBookmarkVolumeSize,
    kBookmarkVolumeURL,
    kBookmarkVolumeUUID,
)
from mac_alias.utils import osx_epoch

from sidebarctl.errors import BookmarkError
from sidebarctl.utils.paths import normalize_path
from sidebarctl.utils.platform import is_macos

# NSURLBookmarkCreationSuitableForBookmarkFile
CREATION_OPTIONS = 1 << 10

# Seconds from the Unix epoch to 2001-01-01 UTC
_UNIX_TO_BOOKMARK_EPOCH = 978307200

# Resource property flags: regular file / directory, followed by the valid-bits mask
_FILE_PROPERTY_REGULAR = 0x01
_FILE_PROPERTY_DIRECTORY = 0x02
_FILE_PROPERTY_MASK = 0x0F

# Local internal volume
_VOLUME_PROPERTIES = struct.pack("<QQQ", 0x81, 0x13EF, 0)

DEFAULT_ROOT_VOLUME_NAME = "Macintosh HD"


def parse(blob: bytes) -> Bookmark:
    """
    Parse bookmark data.

    Raises:
        BookmarkError: If the blob is not valid bookmark data.
    """
    if not isinstance(blob, (bytes, bytearray)):
        raise BookmarkError(f"Bookmark data must be bytes, got {type(blob).__name__}")
    try:
        return Bookmark.from_bytes(bytes(blob))
    except Exception as e:
        raise BookmarkError(f"Invalid bookmark data: {e}") from e


def path_components(bookmark: Bookmark) -> Optional[list[str]]:
    """Path components recorded in a bookmark, or None when absent."""
    components = bookmark.get(kBookmarkPath)
    if components is None:
        return None
    if not isinstance(components, list) or not all(isinstance(c, str) for c in components):
        raise BookmarkError("Bookmark path is not a list of strings")
    return components


def cnid_path(bookmark: Bookmark) -> list[int]:
    """File ids recorded for each path component (may be empty)."""
    cnids = bookmark.get(kBookmarkCNIDPath)
    if not isinstance(cnids, list):
        return []
    return [c for c in cnids if isinstance(c, int) and not isinstance(c, bool)]


def volume_path(bookmark: Bookmark) -> Optional[str]:
    value = bookmark.get(kBookmarkVolumePath)
    return value if isinstance(value, str) else None


def resolve(blob: bytes) -> tuple[str, bool]:
    """
    Resolve bookmark data to an absolute path.

    Args:
        blob: Bookmark data stored in a sidebar item.

    Returns:
        Tuple of (path, is_stale). A bookmark is stale when its target no
        longer exists or the target's file id differs from the recorded one.

    Raises:
        BookmarkError: If the blob cannot be parsed or records no path.
    """
    bookmark = parse(blob)
    components = path_components(bookmark)
    if components is None:
        raise BookmarkError("Bookmark does not record a path")
    path = "/" + "/".join(components)
    return path, _is_stale(bookmark, path)


def _is_stale(bookmark: Bookmark, path: str) -> bool:
    try:
        st = os.stat(path)
    except OSError:
        return True
    cnids = cnid_path(bookmark)
    return bool(cnids) and cnids[-1] != st.st_ino


def create(path: str) -> bytes:
    """
    Create bookmark data for a path.

    On macOS the bookmark comes from ``Bookmark.for_file``; elsewhere the same
    table of contents is assembled from ``os.stat`` and the mount table.

    Args:
        path: Path to bookmark; normalized (~, absolute, symlinks) first.

    Returns:
        Bookmark blob resolvable back to the normalized path.

    Raises:
        BookmarkError: If the path does not exist or cannot be inspected.
    """
    target = normalize_path(path)
    try:
        st = os.stat(target)
    except FileNotFoundError as e:
        raise BookmarkError(f"Path does not exist: {target}", path=target) from e
    except OSError as e:
        raise BookmarkError(f"Unable to inspect {target}: {e.strerror}", path=target) from e

    if is_macos():
        try:
            bookmark = Bookmark.for_file(target)
        except OSError as e:
            raise BookmarkError(f"Unable to create bookmark for {target}: {e.strerror}", path=target) from e
    else:
        bookmark = _portable_bookmark(target, st)
    return bookmark.to_bytes()


def _portable_bookmark(target: str, st: os.stat_result) -> Bookmark:
    components = [c for c in target.split("/") if c]
    cnids = []
    for depth in range(1, len(components) + 1):
        ancestor = "/" + "/".join(components[:depth])
        try:
            cnids.append(os.stat(ancestor).st_ino)
        except OSError as e:
            raise BookmarkError(f"Unable to inspect {ancestor}: {e.strerror}", path=target) from e

    flags = _FILE_PROPERTY_DIRECTORY if os.path.isdir(target) else _FILE_PROPERTY_REGULAR
    mount_point = find_mount_point(target)
    volume = volume_info(mount_point)

    toc: dict[Any, Any] = {
        kBookmarkPath: components,
        kBookmarkCNIDPath: cnids,
        kBookmarkFileCreationDate: _creation_date(st),
        kBookmarkFileProperties: Data(struct.pack("<QQQ", flags, _FILE_PROPERTY_MASK, 0)),
        kBookmarkVolumePath: mount_point,
        kBookmarkVolumeIsRoot: mount_point == "/",
        kBookmarkVolumeURL: URL(file_url(mount_point, directory=True)),
        kBookmarkVolumeName: volume["name"],
        kBookmarkVolumeSize: volume["size"],
        kBookmarkVolumeCreationDate: volume["created"],
        kBookmarkVolumeUUID: volume["uuid"],
        kBookmarkVolumeProperties: Data(_VOLUME_PROPERTIES),
        kBookmarkCreationOptions: CREATION_OPTIONS,
        kBookmarkUserName: _user_name(),
        kBookmarkUID: os.getuid(),
    }
    if len(components) >= 2:
        toc[kBookmarkContainingFolder] = len(components) - 2
    return Bookmark([(1, toc)])


def file_url(path: str, *, directory: bool = False) -> str:
    """Build a file:// URL for an absolute path."""
    url = "file://" + quote(path)
    if directory and not url.endswith("/"):
        url += "/"
    return url


def find_mount_point(path: str) -> str:
    """Walk up from path to the mount point of its volume."""
    current = path
    while not os.path.ismount(current):
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return current


def volume_info(mount_point: str) -> dict[str, Any]:
    """
    Collect name, UUID, size and creation date of a volume.

    On macOS the values come from ``diskutil info -plist``; elsewhere (and when
    diskutil gives nothing) they are derived from the mount point.

    Args:
        mount_point: Volume mount point.

    Returns:
        Dict with keys name, uuid, size, created.
    """
    st = os.stat(mount_point)
    info: dict[str, Any] = {
        "name": os.path.basename(mount_point.rstrip("/")) or DEFAULT_ROOT_VOLUME_NAME,
        "uuid": str(uuid.uuid5(uuid.NAMESPACE_URL, f"{file_url(mount_point)}#{st.st_dev}")).upper(),
        "size": shutil.disk_usage(mount_point).total,
        "created": _creation_date(st),
    }

    if is_macos():
        info.update(_diskutil_info(mount_point))
    return info


def _diskutil_info(mount_point: str) -> dict[str, Any]:
    try:
        result = subprocess.run(
            ["diskutil", "info", "-plist", mount_point],
            check=False,
            capture_output=True,
        )
    except OSError:
        return {}
    if result.returncode != 0 or not result.stdout:
        return {}

    try:
        data = plistlib.loads(result.stdout)
    except plistlib.InvalidFileException:
        return {}

    info: dict[str, Any] = {}
    if isinstance(data.get("VolumeName"), str) and data["VolumeName"]:
        info["name"] = data["VolumeName"]
    if isinstance(data.get("VolumeUUID"), str) and data["VolumeUUID"]:
        info["uuid"] = data["VolumeUUID"].upper()
    size = data.get("TotalSize") or data.get("Size")
    if isinstance(size, int):
        info["size"] = size
    return info


def _creation_date(st: os.stat_result) -> datetime:
    # st_birthtime only exists on macOS/BSD
    timestamp = getattr(st, "st_birthtime", st.st_mtime)
    return osx_epoch + timedelta(seconds=timestamp - _UNIX_TO_BOOKMARK_EPOCH)


def _user_name() -> str:
    try:
        return pwd.getpwuid(os.getuid()).pw_name
    except KeyError:
        return "unknown"
