"""ManifestStore - persistence for the record of deployed paths.

Provides:
- Load previous items (missing file means first deployment)
- Recover from malformed content by treating the item list as empty
- Atomic save (temporary sibling file + ``os.replace``)
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from deploy_to_root.errors import FilesystemFailure, ManifestMalformed, ManifestUnreadable
from deploy_to_root.logging_config import get_logger
from deploy_to_root.models import Manifest, ManifestEntry

logger = get_logger(__name__)

_ITEMS_ADAPTER = TypeAdapter(list[ManifestEntry])


def parse_manifest(raw: str) -> list[ManifestEntry]:
    """Parse manifest text into its items.

    Raises:
        ManifestMalformed: If the text is not a JSON object with a valid
            ``items`` list
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestMalformed(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestMalformed("Manifest is not a JSON object")
    items = data.get("items")
    if not isinstance(items, list):
        raise ManifestMalformed("Manifest has no 'items' array")

    try:
        return _ITEMS_ADAPTER.validate_python(items)
    except ValidationError as e:
        raise ManifestMalformed(f"Manifest items are invalid: {e.error_count()} error(s)") from e


class ManifestStore:
    """Reads and writes the manifest file for one destination root."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_text(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise ManifestMalformed(f"Manifest is not UTF-8 text: {e}") from e
        except OSError as e:
            raise ManifestUnreadable(f"Cannot read manifest {self.path}: {e}") from e

    def load(self) -> list[ManifestEntry]:
        """Load previously deployed items.

        Returns:
            Items in manifest order; empty if the manifest does not exist
            or is malformed

        Raises:
            ManifestUnreadable: If the file exists but cannot be read
        """
        try:
            raw = self._read_text()
            if raw is None:
                logger.info("manifest_missing", path=str(self.path))
                return []
            items = parse_manifest(raw)
        except ManifestMalformed as e:
            logger.warning("manifest_malformed", path=str(self.path), error=str(e))
            return []

        logger.info("manifest_loaded", path=str(self.path), items=len(items))
        return items

    def read(self) -> Optional[Manifest]:
        """Load the full manifest document, or None if missing or malformed."""
        try:
            raw = self._read_text()
            if raw is None:
                return None
            items = parse_manifest(raw)
            generated_at = json.loads(raw).get("generatedAt")
            return Manifest(generated_at=generated_at, items=items)
        except (ManifestMalformed, ValidationError) as e:
            logger.warning("manifest_malformed", path=str(self.path), error=str(e))
            return None

    def save(self, items: Iterable[ManifestEntry]) -> Path:
        """Replace the manifest with ``items``.

        The payload is written to a temporary file in the same directory and
        moved over the manifest, so a failed write never corrupts the
        previous manifest.

        Returns:
            Path to the written manifest

        Raises:
            FilesystemFailure: If the manifest cannot be written
        """
        items = list(items)
        payload: dict[str, Any] = {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "items": [item.model_dump(mode="json") for item in items],
        }
        text = json.dumps(payload, indent=2) + "\n"

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as e:
            raise FilesystemFailure(f"Cannot write manifest {self.path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise FilesystemFailure(f"Cannot write manifest {self.path}: {e}") from e

        logger.info("manifest_saved", path=str(self.path), items=len(items))
        return self.path
