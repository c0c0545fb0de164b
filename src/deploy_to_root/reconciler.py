"""Tree reconciler: remove the previous deployment, copy the new build.

Provides:
- remove_previous: delete manifest paths, longest first, inside the root only
- copy_all: replace each top-level destination entry with the source's copy
"""

import os
import shutil
from pathlib import Path
from typing import Iterable, Sequence

from deploy_to_root.errors import FilesystemFailure
from deploy_to_root.logging_config import get_logger
from deploy_to_root.models import ManifestEntry
from deploy_to_root.paths import ensure_not_protected, resolve_inside

logger = get_logger(__name__)


def remove_path(target: Path) -> bool:
    """Delete a file, symlink or directory tree.

    Returns:
        True if something was removed, False if ``target`` did not exist

    Raises:
        FilesystemFailure: On any error other than the path being missing
    """
    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
    except (FileNotFoundError, NotADirectoryError):
        # Missing, or a parent component is now a regular file
        return False
    except OSError as e:
        raise FilesystemFailure(f"Failed to remove {target}: {e}") from e
    return True


def copy_path(source: Path, target: Path) -> None:
    """Copy ``source`` to ``target``, recursing into directories.

    Symlinks are recreated as symlinks rather than followed.
    """
    try:
        if source.is_dir() and not source.is_symlink():
            shutil.copytree(source, target, symlinks=True)
        else:
            shutil.copy2(source, target, follow_symlinks=False)
    except OSError as e:
        raise FilesystemFailure(f"Failed to copy {source} to {target}: {e}") from e


def remove_previous(
    items: Sequence[ManifestEntry],
    dest_root: Path,
    protected: Iterable[Path] = (),
) -> list[str]:
    """Delete every path recorded by a previous deployment.

    Entries are handled longest path first. All entries are validated
    before the first deletion, so one unsafe entry aborts the batch with
    nothing deleted.

    Args:
        items: Entries from the previous manifest
        dest_root: Destination root the entries are relative to
        protected: Paths that must survive (e.g. the build output directory)

    Returns:
        Relative paths that existed and were removed

    Raises:
        UnsafePath: If any entry escapes ``dest_root`` or covers a protected path
        FilesystemFailure: If a deletion fails
    """
    if not items:
        return []

    root = Path(dest_root).resolve()
    protected = list(protected)
    ordered = sorted(items, key=lambda entry: len(entry.path), reverse=True)

    targets = []
    for entry in ordered:
        target = resolve_inside(root, entry.path)
        ensure_not_protected(target, protected)
        targets.append((entry.path, target))

    removed = []
    for rel_path, target in targets:
        if remove_path(target):
            removed.append(rel_path)

    logger.info("previous_removed", root=str(root), listed=len(items), removed=len(removed))
    return removed


def copy_all(source_dir: Path, dest_root: Path, protected: Iterable[Path] = ()) -> list[str]:
    """Copy each top-level entry of ``source_dir`` into ``dest_root``.

    An existing destination entry with the same name is removed first, so
    each entry is replaced whole rather than merged.

    Returns:
        Top-level names copied, sorted

    Raises:
        UnsafePath: If a destination entry would cover a protected path
        FilesystemFailure: If listing, deleting or copying fails
    """
    source = Path(source_dir)
    root = Path(dest_root).resolve()
    protected = list(protected)

    try:
        names = sorted(os.listdir(source))
    except OSError as e:
        raise FilesystemFailure(f"Failed to list {source}: {e}") from e

    for name in names:
        target = resolve_inside(root, name)
        ensure_not_protected(target, protected)
        remove_path(target)
        copy_path(source / name, target)
        logger.debug("entry_copied", name=name)

    logger.info("build_copied", source=str(source), root=str(root), entries=len(names))
    return names
