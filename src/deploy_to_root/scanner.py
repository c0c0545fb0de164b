"""Tree scanner producing manifest items for a directory tree."""

import os
from pathlib import Path
from typing import Iterable, Optional

from deploy_to_root.errors import FilesystemFailure
from deploy_to_root.models import EntryType, ManifestEntry


def _walk(current: Path, base: str, include: Optional[set[str]] = None) -> list[ManifestEntry]:
    with os.scandir(current) as it:
        children = sorted(it, key=lambda entry: entry.name)

    items: list[ManifestEntry] = []
    for child in children:
        if include is not None and child.name not in include:
            continue
        rel_path = f"{base}/{child.name}" if base else child.name
        # Symlinks and special files are neither recorded nor followed
        if child.is_dir(follow_symlinks=False):
            items.append(ManifestEntry(path=rel_path, type=EntryType.DIR))
            items.extend(_walk(Path(child.path), rel_path))
        elif child.is_file(follow_symlinks=False):
            items.append(ManifestEntry(path=rel_path, type=EntryType.FILE))
    return items


def scan(root_dir: Path, include: Optional[Iterable[str]] = None) -> list[ManifestEntry]:
    """List every directory and regular file under ``root_dir``.

    Directories are emitted immediately before their descendants and
    siblings are sorted by name, so identical trees always scan identically.

    Args:
        root_dir: Directory to scan
        include: Optional top-level names to restrict the scan to

    Returns:
        Entries with slash-separated paths relative to ``root_dir``

    Raises:
        FilesystemFailure: If a directory cannot be listed
    """
    names = set(include) if include is not None else None
    try:
        return _walk(Path(root_dir), "", names)
    except OSError as e:
        raise FilesystemFailure(f"Failed to scan {root_dir}: {e}") from e
