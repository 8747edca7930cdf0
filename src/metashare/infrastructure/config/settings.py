"""Pydantic settings for metashare.toml configuration."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .environment import get_env, get_env_bool, get_env_int, load_environment_variables

DEFAULT_CHUNK_SIZE = 1000


class ExportSettings(BaseModel):
    """Export pipeline configuration settings."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    add_local_mappings: bool = False
    persist: bool = True

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable precedence."""
        load_environment_variables()

        # Environment variables take precedence over TOML values
        if get_env("METASHARE_ADD_LOCAL_MAPPINGS") is not None:
            data["add_local_mappings"] = get_env_bool(
                "METASHARE_ADD_LOCAL_MAPPINGS",
                bool(data.get("add_local_mappings", False)),
            )

        env_chunk_size = get_env_int("METASHARE_CHUNK_SIZE")
        if env_chunk_size is not None:
            data["chunk_size"] = env_chunk_size

        super().__init__(**data)

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"chunk_size must be >= 1, got {v}")
        return v


class LocalSourceSettings(BaseModel):
    """Local concept source used when attaching local mappings."""

    name: str = "Local Dictionary"
    uuid: str = "local-concept-source"
    hl7_code: str | None = None
    description: str = "Concepts of this installation"


class PathsSettings(BaseModel):
    """Path configuration settings."""

    catalog: Path = Path("var/catalog.json")
    packages_dir: Path = Path("var/packages")

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable precedence."""
        load_environment_variables()

        env_catalog = get_env("METASHARE_CATALOG")
        if env_catalog:
            data["catalog"] = env_catalog

        env_packages_dir = get_env("METASHARE_PACKAGES_DIR")
        if env_packages_dir:
            data["packages_dir"] = env_packages_dir

        super().__init__(**data)

    @field_validator("catalog", "packages_dir", mode="before")
    @classmethod
    def validate_path(cls, v: Any) -> Path:
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v


class Settings(BaseModel):
    """Main settings loaded from metashare.toml."""

    export: ExportSettings = Field(default_factory=ExportSettings)
    local_source: LocalSourceSettings = Field(default_factory=LocalSourceSettings)
    paths: PathsSettings = Field(default_factory=PathsSettings)

    @classmethod
    def from_toml(cls, toml_path: Path | str = "metashare.toml") -> "Settings":
        """
        Load settings from metashare.toml file with environment variable precedence.

        Environment variables (system env > .env file) override TOML values.

        Args:
            toml_path: Path to metashare.toml file

        Returns:
            Settings instance with loaded configuration
        """
        load_environment_variables()

        toml_path = Path(toml_path)

        if not toml_path.exists():
            # Return defaults if file doesn't exist
            return cls()

        with toml_path.open("rb") as f:
            data = tomllib.load(f)

        return cls(
            export=ExportSettings(**data.get("export", {})),
            local_source=LocalSourceSettings(**data.get("local_source", {})),
            paths=PathsSettings(**data.get("paths", {})),
        )
