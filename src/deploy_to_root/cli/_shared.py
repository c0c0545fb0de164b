"""Shared enums and option helpers for CLI commands."""

from enum import Enum
from typing import Optional

import typer

from deploy_to_root.config import check_manifest_name
from deploy_to_root.models import ManifestEntry

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def manifest_name_callback(value: Optional[str]) -> Optional[str]:
    """Validate ``--manifest-name`` as a bare file name."""
    if value is None:
        return None
    try:
        return check_manifest_name(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def format_items_text(items: list[ManifestEntry]) -> str:
    """Render entries one per line with a type badge."""
    return "\n".join(f"  [{item.type.value:4}] {item.path}" for item in items)
