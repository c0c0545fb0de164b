"""Custom error types for deploy-to-root.

All errors follow the "fail fast" principle with explicit messages.
Only ``ManifestMalformed`` is recovered locally (by the manifest store);
every other error unwinds to the CLI and ends the run with a non-zero exit.
"""


class DeployError(Exception):
    """Base exception for all deploy-to-root errors."""

    pass


class ManifestUnreadable(DeployError):
    """Manifest exists but could not be read (permissions, I/O)."""

    pass


class ManifestMalformed(DeployError):
    """Manifest parsed but does not have the expected shape.

    The manifest store treats this as "no previous deployment" and
    continues with an empty item list.
    """

    pass


class SourceMissing(DeployError):
    """Build output directory is absent or not a directory."""

    pass


class UnsafePath(DeployError):
    """Path resolves outside the destination root or onto a protected path."""

    pass


class FilesystemFailure(DeployError):
    """Deletion, copy, scan or manifest write failed."""

    pass
