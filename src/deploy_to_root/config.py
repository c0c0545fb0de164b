"""Configuration management.

Settings are read from ``DEPLOY_*`` environment variables (or a ``.env``
file) and only provide defaults for the CLI. The pipeline itself receives
an explicit ``DeployConfig`` so it can run against any pair of directories.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deploy_to_root.logging_config import LOG_FORMATS, LOG_LEVELS
from deploy_to_root.pipeline import DeployConfig


def check_manifest_name(value: str) -> str:
    """Return the stripped manifest file name, rejecting anything path-like."""
    name = value.strip()
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"manifest_name must be a bare file name, got {value!r}")
    return name


class Settings(BaseSettings):
    """Deployment settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_prefix="DEPLOY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    source_dir: Path = Field(
        default=Path("my-app/build"),
        description="Build output directory whose entries are promoted",
    )
    dest_root: Path = Field(
        default=Path("."),
        description="Destination root receiving the build output",
    )
    manifest_name: str = Field(
        default=".deploy-manifest.json",
        description="File name of the manifest inside the destination root",
    )
    build_command: str = Field(
        default="npm run build:app",
        description="Command suggested when the build output is missing",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log renderer: console or json")

    @field_validator("manifest_name")
    @classmethod
    def validate_manifest_name(cls, v: str) -> str:
        return check_manifest_name(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")
        return lower

    def to_deploy_config(
        self,
        source_dir: Optional[Path] = None,
        dest_root: Optional[Path] = None,
        manifest_name: Optional[str] = None,
    ) -> DeployConfig:
        """Build a ``DeployConfig``; explicit arguments win over settings."""
        return DeployConfig(
            source_dir=Path(source_dir or self.source_dir),
            dest_root=Path(dest_root or self.dest_root),
            manifest_name=manifest_name or self.manifest_name,
            build_command=self.build_command,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached)."""
    return Settings()
