"""Pydantic models for the deployment manifest.

On disk the manifest looks like::

    {
      "generatedAt": "2026-10-16T09:30:00+00:00",
      "items": [
        {"path": "assets", "type": "dir"},
        {"path": "assets/logo.png", "type": "file"}
      ]
    }
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EntryType(str, Enum):
    """Kind of file-system entry recorded in the manifest."""

    FILE = "file"
    DIR = "dir"


class ManifestEntry(BaseModel):
    """Single deployed path, relative to the destination root."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Slash-separated path relative to the destination root")
    type: EntryType = Field(description="file or dir")


class Manifest(BaseModel):
    """Full manifest document as persisted."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime = Field(alias="generatedAt", description="When the manifest was written")
    items: list[ManifestEntry] = Field(default_factory=list)
