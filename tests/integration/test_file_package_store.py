import json
from pathlib import Path

import pytest

from metashare.domain.errors import PackageStoreError
from metashare.domain.models.item import Item
from metashare.domain.models.package import ExportedPackage, SerializedPackage
from metashare.infrastructure.adapters.file_package_store import FilePackageStore, chunk_file_name


def _assembled_package(version: int = 1, bodies: int = 2) -> ExportedPackage:
    package = ExportedPackage(name="Concepts", description="All", group_uuid="group-1", version=version)
    package.add_item(Item("Concept", "c-1"))
    package.related_items.add(Item("ConceptClass", "cc-1"))
    package.serialized_package = SerializedPackage(
        header=f"<package version='{version}'/>",
        metadata=tuple(f"<list n='{i}'/>" for i in range(bodies)),
    )
    return package


def test_chunk_file_names():
    assert chunk_file_name(0) == "metadata-0001.xml"
    assert chunk_file_name(11) == "metadata-0012.xml"


def test_save_writes_layout(tmp_path: Path):
    store = FilePackageStore(tmp_path / "packages")

    store.save(_assembled_package())

    path = tmp_path / "packages" / "group-1" / "v1"
    assert sorted(p.name for p in path.iterdir()) == [
        "header.xml",
        "manifest.json",
        "metadata-0001.xml",
        "metadata-0002.xml",
    ]
    manifest = json.loads((path / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["group_uuid"] == "group-1"
    assert manifest["chunks"] == ["metadata-0001.xml", "metadata-0002.xml"]
    assert manifest["related_items"] == [{"type": "ConceptClass", "uuid": "cc-1"}]


def test_load_round_trips_artifact(tmp_path: Path):
    store = FilePackageStore(tmp_path)
    package = _assembled_package()
    store.save(package)

    assert store.load("group-1", 1) == package.serialized_package


def test_load_latest_version(tmp_path: Path):
    store = FilePackageStore(tmp_path)
    store.save(_assembled_package(version=1))
    store.save(_assembled_package(version=2, bodies=1))

    assert store.list_versions("group-1") == [1, 2]
    latest = store.load("group-1")
    assert latest.header == "<package version='2'/>"
    assert latest.chunk_count == 1


def test_save_replaces_same_version(tmp_path: Path):
    store = FilePackageStore(tmp_path)
    store.save(_assembled_package(bodies=3))
    store.save(_assembled_package(bodies=1))

    path = store.get_package_path("group-1", 1)
    assert not (path / "metadata-0002.xml").exists()
    # No temporary directories left behind
    assert [p.name for p in (tmp_path / "group-1").iterdir()] == ["v1"]


def test_save_requires_artifact(tmp_path: Path):
    store = FilePackageStore(tmp_path)
    with pytest.raises(PackageStoreError, match="no serialized artifact"):
        store.save(ExportedPackage(name="Concepts", group_uuid="group-1"))


def test_load_unknown_package(tmp_path: Path):
    store = FilePackageStore(tmp_path)
    with pytest.raises(PackageStoreError, match="package not found"):
        store.load("missing")
    assert store.list_versions("missing") == []


def test_load_unknown_version(tmp_path: Path):
    store = FilePackageStore(tmp_path)
    store.save(_assembled_package())
    with pytest.raises(PackageStoreError, match="version 5 not found"):
        store.load("group-1", 5)
