"""Tests for the tree reconciler (remove_previous, copy_all)."""

from unittest.mock import patch

import pytest

from deploy_to_root.errors import FilesystemFailure, UnsafePath
from deploy_to_root.models import EntryType, ManifestEntry
from deploy_to_root.reconciler import copy_all, remove_path, remove_previous
from deploy_to_root.scanner import scan

from conftest import write_tree

pytestmark = pytest.mark.unit


def entry(path, kind="file"):
    return ManifestEntry(path=path, type=EntryType(kind))


@pytest.fixture
def dest(tmp_path):
    root = tmp_path / "dest"
    write_tree(
        root,
        {
            "index.html": "<html>",
            "assets/logo.png": "png",
            "assets/css/site.css": "body {}",
            "keep.txt": "not deployed",
        },
    )
    return root


class TestRemovePath:
    """Tests for remove_path."""

    def test_missing_path_is_not_an_error(self, tmp_path):
        assert remove_path(tmp_path / "nope") is False

    def test_removes_directory_tree(self, dest):
        assert remove_path(dest / "assets") is True
        assert not (dest / "assets").exists()

    def test_symlink_removed_without_following(self, dest, tmp_path):
        target = tmp_path / "shared"
        write_tree(target, {"data.txt": "keep me"})
        (dest / "shared").symlink_to(target, target_is_directory=True)

        assert remove_path(dest / "shared") is True

        assert not (dest / "shared").is_symlink()
        assert (target / "data.txt").read_text() == "keep me"


class TestRemovePrevious:
    """Tests for remove_previous."""

    def test_all_listed_paths_removed(self, dest):
        """None of the manifest's paths exist afterwards."""
        items = [
            entry("index.html"),
            entry("assets", "dir"),
            entry("assets/logo.png"),
            entry("assets/css", "dir"),
            entry("assets/css/site.css"),
        ]

        remove_previous(items, dest)

        for item in items:
            assert not (dest / item.path).exists()
        assert (dest / "keep.txt").read_text() == "not deployed"

    def test_missing_paths_tolerated(self, dest):
        """Paths already gone are skipped and not reported as removed."""
        removed = remove_previous([entry("gone.txt"), entry("index.html")], dest)

        assert removed == ["index.html"]

    def test_child_of_replaced_directory_tolerated(self, tmp_path):
        """A listed file whose parent directory became a file counts as missing."""
        dest = tmp_path / "dest"
        write_tree(dest, {"assets": "now a file"})

        removed = remove_previous([entry("assets/logo.png"), entry("assets", "dir")], dest)

        assert removed == ["assets"]
        assert not (dest / "assets").exists()

    def test_empty_manifest_is_noop(self, dest):
        assert remove_previous([], dest) == []
        assert (dest / "index.html").exists()

    def test_longest_path_first(self, dest):
        """Deeper entries are handled before their parents."""
        order = []

        def record(target):
            order.append(target.relative_to(dest.resolve()).as_posix())
            return True

        items = [entry("assets", "dir"), entry("assets/css/site.css"), entry("assets/css", "dir")]

        with patch("deploy_to_root.reconciler.remove_path", side_effect=record):
            remove_previous(items, dest)

        assert order == ["assets/css/site.css", "assets/css", "assets"]

    def test_traversal_raises_and_deletes_nothing(self, tmp_path, dest):
        """An escaping entry aborts the batch before any deletion."""
        outside = tmp_path / "etc"
        write_tree(outside, {"passwd": "root"})

        with pytest.raises(UnsafePath):
            remove_previous([entry("index.html"), entry("../etc", "dir")], dest)

        assert (outside / "passwd").read_text() == "root"
        assert (dest / "index.html").exists()

    def test_deep_traversal_raises(self, dest):
        with pytest.raises(UnsafePath):
            remove_previous([entry("../../etc", "dir")], dest)

    def test_protected_path_not_removed(self, dest):
        """The build output directory survives a manifest that covers it."""
        build = dest / "app" / "build"
        write_tree(build, {"index.html": "new"})

        with pytest.raises(UnsafePath):
            remove_previous([entry("app", "dir")], dest, protected=[build])

        assert (build / "index.html").read_text() == "new"

    def test_permission_error_wrapped(self, dest):
        with patch("deploy_to_root.reconciler.shutil.rmtree", side_effect=PermissionError("denied")):
            with pytest.raises(FilesystemFailure, match="denied"):
                remove_previous([entry("assets", "dir")], dest)


class TestCopyAll:
    """Tests for copy_all."""

    @pytest.fixture
    def source(self, tmp_path):
        root = tmp_path / "build"
        write_tree(
            root,
            {
                "index.html": "<html>v2",
                "assets/logo.png": "png2",
                "static/js/main.js": "console.log(1)",
            },
        )
        return root

    def test_copies_top_level_entries(self, source, dest):
        names = copy_all(source, dest)

        assert names == ["assets", "index.html", "static"]
        assert (dest / "index.html").read_text() == "<html>v2"
        assert (dest / "static" / "js" / "main.js").read_text() == "console.log(1)"

    def test_directory_replaced_not_merged(self, source, dest):
        """Stale files inside a replaced directory do not survive."""
        copy_all(source, dest)

        assert not (dest / "assets" / "css").exists()
        assert (dest / "assets" / "logo.png").read_text() == "png2"

    def test_file_replaced_by_directory(self, source, dest):
        (dest / "static").write_text("was a file")

        copy_all(source, dest)

        assert (dest / "static").is_dir()

    def test_directory_replaced_by_file(self, tmp_path, dest):
        source = tmp_path / "build"
        write_tree(source, {"assets": "now a file"})

        copy_all(source, dest)

        assert (dest / "assets").read_text() == "now a file"

    def test_symlinks_copied_as_links(self, source, dest):
        (source / "latest.html").symlink_to("index.html")

        copy_all(source, dest)

        assert (dest / "latest.html").is_symlink()
        assert (dest / "latest.html").read_text() == "<html>v2"

    def test_unrelated_entries_untouched(self, source, dest):
        copy_all(source, dest)

        assert (dest / "keep.txt").read_text() == "not deployed"

    def test_protected_destination_rejected(self, tmp_path):
        """A build entry may not overwrite the directory that contains the build."""
        dest = tmp_path / "repo"
        build = dest / "my-app" / "build"
        write_tree(build, {"my-app/index.html": "oops"})

        with pytest.raises(UnsafePath):
            copy_all(build, dest, protected=[build])

        assert (build / "my-app" / "index.html").exists()

    def test_missing_source_raises(self, tmp_path, dest):
        with pytest.raises(FilesystemFailure):
            copy_all(tmp_path / "missing", dest)

    def test_scan_matches_copied_files(self, source, dest):
        """After copy, scanning the copied entries lists exactly what is on disk."""
        names = copy_all(source, dest)

        items = scan(dest, include=names)

        files = {item.path for item in items if item.type == EntryType.FILE}
        dirs = {item.path for item in items if item.type == EntryType.DIR}
        on_disk = {
            p.relative_to(dest).as_posix()
            for name in names
            for p in [dest / name, *(dest / name).rglob("*")]
        }
        assert files | dirs == on_disk
        assert files == {p for p in on_disk if (dest / p).is_file()}
