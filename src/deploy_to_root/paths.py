"""Path guard for everything deleted or written under the destination root.

Manifest entries come from disk and are not trusted. Before any deletion
or copy, the relative path is resolved here and rejected with
``UnsafePath`` unless it lands strictly inside the destination root.
"""

import os
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Iterable

from deploy_to_root.errors import UnsafePath


def split_segments(rel_path: str) -> list[str]:
    """Split a slash-separated manifest path, dropping empty and ``.`` segments."""
    return [segment for segment in rel_path.split("/") if segment not in ("", ".")]


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def resolve_inside(root: Path, rel_path: str) -> Path:
    """Resolve ``rel_path`` against ``root`` and refuse anything that escapes it.

    Args:
        root: Destination root, already resolved (``Path.resolve()``)
        rel_path: Manifest-style relative path

    Returns:
        Absolute path strictly inside ``root``. The final component is not
        resolved, so a symlink entry is returned as the link itself.

    Raises:
        UnsafePath: If the path is absolute, empty, contains ``..``, or
            its parent directory resolves outside ``root``
    """
    if PurePosixPath(rel_path).is_absolute() or PureWindowsPath(rel_path).is_absolute():
        raise UnsafePath(f"Refusing absolute path: {rel_path!r}")

    segments = split_segments(rel_path)
    if not segments:
        raise UnsafePath(f"Refusing path that resolves to the destination root: {rel_path!r}")
    if ".." in segments:
        raise UnsafePath(f"Refusing path outside destination root: {rel_path!r}")

    candidate = root.joinpath(*segments)
    if not _is_within(Path(os.path.normpath(candidate)), root) or candidate == root:
        raise UnsafePath(f"Refusing path outside destination root: {rel_path!r}")

    # Symlinked intermediate directories must not lead out of the root.
    if not _is_within(candidate.parent.resolve(), root):
        raise UnsafePath(f"Refusing path outside destination root: {rel_path!r}")

    return candidate


def ensure_not_protected(target: Path, protected: Iterable[Path]) -> None:
    """Raise ``UnsafePath`` if removing ``target`` would remove a protected path."""
    for path in protected:
        if _is_within(Path(path).resolve(), target):
            raise UnsafePath(f"Refusing to remove {target}: it contains {path}")
