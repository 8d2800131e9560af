# Tests for sidebarctl.bookmark
# Bookmark blob parsing, resolution and creation

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from mac_alias.bookmark import (
    URL,
    Bookmark,
    kBookmarkCNIDPath,
    kBookmarkCreationOptions,
    kBookmarkFileCreationDate,
    kBookmarkPath,
    kBookmarkVolumeName,
    kBookmarkVolumePath,
    kBookmarkVolumeURL,
    kBookmarkVolumeUUID,
)

from sidebarctl.bookmark import create, parse, resolve
from sidebarctl.bookmark.resolver import (
    CREATION_OPTIONS,
    cnid_path,
    file_url,
    find_mount_point,
    path_components,
    volume_path,
)
from sidebarctl.errors import BookmarkError


class TestParse:
    """Tests for parse() and the bookmark accessors."""

    def test_accessors(self):
        blob = Bookmark(
            [(1, {kBookmarkPath: ["Users", "me", "Downloads"], kBookmarkCNIDPath: [1, 2, 3], kBookmarkVolumePath: "/"})]
        ).to_bytes()
        bookmark = parse(blob)
        assert path_components(bookmark) == ["Users", "me", "Downloads"]
        assert cnid_path(bookmark) == [1, 2, 3]
        assert volume_path(bookmark) == "/"

    def test_missing_fields(self):
        bookmark = parse(Bookmark([(1, {kBookmarkCreationOptions: 0})]).to_bytes())
        assert path_components(bookmark) is None
        assert cnid_path(bookmark) == []
        assert volume_path(bookmark) is None

    def test_path_of_wrong_type(self):
        bookmark = parse(Bookmark([(1, {kBookmarkPath: "Users/me"})]).to_bytes())
        with pytest.raises(BookmarkError, match="list of strings"):
            path_components(bookmark)

    def test_rejects_non_bytes(self):
        with pytest.raises(BookmarkError, match="must be bytes"):
            parse("book")

    def test_rejects_bad_magic(self):
        blob = bytearray(Bookmark([(1, {kBookmarkPath: ["x"]})]).to_bytes())
        blob[:4] = b"xxxx"
        with pytest.raises(BookmarkError, match="magic"):
            parse(bytes(blob))

    def test_rejects_short_data(self):
        with pytest.raises(BookmarkError):
            parse(b"book")

    def test_rejects_truncated_blob(self):
        blob = Bookmark([(1, {kBookmarkPath: ["x", "y"]})]).to_bytes()
        with pytest.raises(BookmarkError):
            parse(blob[: len(blob) - 20])

    def test_unrepresentable_date(self, bad_date_bookmark):
        with pytest.raises(BookmarkError, match="Invalid bookmark data"):
            parse(bad_date_bookmark)


class TestResolve:
    """Tests for resolve()."""

    def test_resolves_recorded_path(self, temp_dir, bookmark_factory):
        path, stale = resolve(bookmark_factory(str(temp_dir)))
        assert path == str(temp_dir)
        assert stale is False

    def test_missing_target_is_stale(self, temp_dir, bookmark_factory):
        path, stale = resolve(bookmark_factory(str(temp_dir / "gone")))
        assert path == str(temp_dir / "gone")
        assert stale is True

    def test_file_id_mismatch_is_stale(self, temp_dir, bookmark_factory):
        inode = os.stat(temp_dir).st_ino
        _, stale = resolve(bookmark_factory(str(temp_dir), cnids=[inode + 1]))
        assert stale is True

    def test_matching_file_id_is_fresh(self, temp_dir, bookmark_factory):
        inode = os.stat(temp_dir).st_ino
        _, stale = resolve(bookmark_factory(str(temp_dir), cnids=[inode]))
        assert stale is False

    def test_root_path(self):
        path, _ = resolve(Bookmark([(1, {kBookmarkPath: []})]).to_bytes())
        assert path == "/"

    def test_bookmark_without_path(self):
        blob = Bookmark([(1, {kBookmarkCreationOptions: 0})]).to_bytes()
        with pytest.raises(BookmarkError, match="path"):
            resolve(blob)

    def test_garbage(self):
        with pytest.raises(BookmarkError):
            resolve(b"\x00" * 64)

    def test_unrepresentable_date(self, bad_date_bookmark):
        with pytest.raises(BookmarkError):
            resolve(bad_date_bookmark)

    def test_finder_bookmark_file(self, fixtures_dir: Path):
        """A bookmark in the layout Finder writes for /Applications."""
        blob = (fixtures_dir / "applications.bookmark").read_bytes()
        path, _ = resolve(blob)
        assert path == "/Applications"

        bookmark = parse(blob)
        assert cnid_path(bookmark) == [1088]
        assert volume_path(bookmark) == "/"
        assert bookmark.get(kBookmarkVolumeName) == "Macintosh HD"
        assert bookmark.get(kBookmarkVolumeUUID) == "0A81F3B1-51D9-3335-B3E3-169C3640360D"
        assert bookmark.get(kBookmarkVolumeURL).absolute == "file:///"
        assert bookmark.get(kBookmarkFileCreationDate).year == 2020


class TestCreate:
    """Tests for create()."""

    def test_roundtrip(self, temp_dir):
        target = temp_dir / "Projects"
        target.mkdir()
        path, stale = resolve(create(str(target)))
        assert path == str(target)
        assert stale is False

    @patch("sidebarctl.bookmark.resolver.is_macos", return_value=False)
    def test_records_file_ids_and_options(self, mock_macos, temp_dir):
        target = temp_dir / "notes.txt"
        target.write_text("x", encoding="utf-8")
        bookmark = parse(create(str(target)))
        assert cnid_path(bookmark)[-1] == os.stat(target).st_ino
        assert len(cnid_path(bookmark)) == len(path_components(bookmark))
        assert bookmark.get(kBookmarkCreationOptions) == CREATION_OPTIONS
        assert volume_path(bookmark) == find_mount_point(str(target))

    def test_normalizes_path(self, temp_home):
        (temp_home / "Downloads").mkdir()
        path, _ = resolve(create("~/Downloads/"))
        assert path == str(temp_home / "Downloads")

    def test_resolves_symlinks(self, temp_dir):
        real = temp_dir / "real"
        real.mkdir()
        link = temp_dir / "link"
        link.symlink_to(real)
        path, _ = resolve(create(str(link)))
        assert path == str(real)

    def test_missing_path(self, temp_dir):
        with pytest.raises(BookmarkError, match="does not exist"):
            create(str(temp_dir / "missing"))

    @patch("sidebarctl.bookmark.resolver.is_macos", return_value=False)
    def test_volume_fields_without_diskutil(self, mock_macos, temp_dir):
        bookmark = parse(create(str(temp_dir)))
        assert isinstance(bookmark.get(kBookmarkVolumeName), str)
        assert isinstance(bookmark.get(kBookmarkVolumeUUID), str)
        assert bookmark.get(kBookmarkVolumeUUID) == bookmark.get(kBookmarkVolumeUUID).upper()
        volume_url = bookmark.get(kBookmarkVolumeURL)
        assert isinstance(volume_url, URL)
        assert volume_url.absolute.startswith("file:///")

    @patch("sidebarctl.bookmark.resolver.Bookmark.for_file")
    @patch("sidebarctl.bookmark.resolver.is_macos", return_value=True)
    def test_uses_for_file_on_macos(self, mock_macos, mock_for_file, temp_dir):
        mock_for_file.return_value = Bookmark([(1, {kBookmarkPath: ["tmp", "x"]})])
        path, _ = resolve(create(str(temp_dir)))
        mock_for_file.assert_called_once_with(str(temp_dir))
        assert path == "/tmp/x"

    @patch("sidebarctl.bookmark.resolver.Bookmark.for_file", side_effect=PermissionError(1, "Operation not permitted"))
    @patch("sidebarctl.bookmark.resolver.is_macos", return_value=True)
    def test_for_file_failure(self, mock_macos, mock_for_file, temp_dir):
        with pytest.raises(BookmarkError, match="Operation not permitted"):
            create(str(temp_dir))


class TestHelpers:
    """Tests for resolver helpers."""

    def test_file_url_quotes(self):
        assert file_url("/Users/me/My Files") == "file:///Users/me/My%20Files"

    def test_file_url_directory(self):
        assert file_url("/", directory=True) == "file:///"
        assert file_url("/Volumes/Data", directory=True) == "file:///Volumes/Data/"

    def test_mount_point_of_root(self):
        assert find_mount_point("/") == "/"
