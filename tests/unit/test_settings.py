"""Unit tests for metashare.toml settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from metashare.infrastructure.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment overrides out of these tests."""
    for key in (
        "METASHARE_CATALOG",
        "METASHARE_PACKAGES_DIR",
        "METASHARE_ADD_LOCAL_MAPPINGS",
        "METASHARE_CHUNK_SIZE",
    ):
        monkeypatch.delenv(key, raising=False)


def test_missing_file_returns_defaults(tmp_path: Path):
    settings = Settings.from_toml(tmp_path / "missing.toml")

    assert settings.export.chunk_size == 1000
    assert settings.export.add_local_mappings is False
    assert settings.export.persist is True
    assert settings.paths.catalog == Path("var/catalog.json")
    assert settings.paths.packages_dir == Path("var/packages")
    assert settings.local_source.uuid == "local-concept-source"


def test_values_loaded_from_toml(tmp_path: Path):
    config = tmp_path / "metashare.toml"
    config.write_text(
        """
[export]
chunk_size = 250
add_local_mappings = true
persist = false

[local_source]
name = "Site Dictionary"
uuid = "site-source"
hl7_code = "SITE"

[paths]
catalog = "data/catalog.json"
packages_dir = "data/packages"
"""
    )

    settings = Settings.from_toml(config)

    assert settings.export.chunk_size == 250
    assert settings.export.add_local_mappings is True
    assert settings.export.persist is False
    assert settings.local_source.name == "Site Dictionary"
    assert settings.local_source.hl7_code == "SITE"
    assert settings.paths.catalog == Path("data/catalog.json")
    assert settings.paths.packages_dir == Path("data/packages")


def test_environment_overrides_toml(tmp_path: Path, monkeypatch):
    config = tmp_path / "metashare.toml"
    config.write_text('[export]\nchunk_size = 250\n\n[paths]\ncatalog = "data/catalog.json"\n')
    monkeypatch.setenv("METASHARE_CHUNK_SIZE", "50")
    monkeypatch.setenv("METASHARE_ADD_LOCAL_MAPPINGS", "yes")
    monkeypatch.setenv("METASHARE_CATALOG", "/srv/catalog.json")

    settings = Settings.from_toml(config)

    assert settings.export.chunk_size == 50
    assert settings.export.add_local_mappings is True
    assert settings.paths.catalog == Path("/srv/catalog.json")


def test_non_positive_chunk_size_rejected(tmp_path: Path):
    config = tmp_path / "metashare.toml"
    config.write_text("[export]\nchunk_size = 0\n")

    with pytest.raises(ValidationError, match="chunk_size must be >= 1"):
        Settings.from_toml(config)
