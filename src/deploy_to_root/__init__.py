"""deploy-to-root - promote a build output directory into a repository root.

The previous deployment is recorded in a manifest inside the destination
root, so each run removes exactly its own earlier output before copying
the new build.
"""

from deploy_to_root.errors import (
    DeployError,
    FilesystemFailure,
    ManifestMalformed,
    ManifestUnreadable,
    SourceMissing,
    UnsafePath,
)
from deploy_to_root.manifest import ManifestStore
from deploy_to_root.models import EntryType, Manifest, ManifestEntry
from deploy_to_root.pipeline import DeployConfig, DeployResult, DeployStage, clean, deploy
from deploy_to_root.reconciler import copy_all, remove_previous
from deploy_to_root.scanner import scan

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "DeployConfig",
    "DeployResult",
    "DeployStage",
    "deploy",
    "clean",
    # Components
    "ManifestStore",
    "copy_all",
    "remove_previous",
    "scan",
    # Models
    "EntryType",
    "Manifest",
    "ManifestEntry",
    # Errors
    "DeployError",
    "FilesystemFailure",
    "ManifestMalformed",
    "ManifestUnreadable",
    "SourceMissing",
    "UnsafePath",
]
