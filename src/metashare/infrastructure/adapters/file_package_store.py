"""Package store adapter writing serialized packages to a directory tree."""

from __future__ import annotations

import json
import logging
import re
import shutil
import tempfile
from pathlib import Path

from ...application.ports.package_store import PackageStorePort
from ...domain.errors import PackageStoreError
from ...domain.models.package import ExportedPackage, SerializedPackage

logger = logging.getLogger(__name__)

HEADER_FILE = "header.xml"
MANIFEST_FILE = "manifest.json"
_VERSION_DIR = re.compile(r"^v(\d+)$")


def chunk_file_name(index: int) -> str:
    """File name of the chunk body at ``index`` (0-based)."""
    return f"metadata-{index + 1:04d}.xml"


class FilePackageStore(PackageStorePort):
    """
    Stores each package version under ``<packages_dir>/<group_uuid>/v<version>/``.

    A version directory holds ``header.xml``, one ``metadata-NNNN.xml`` per
    chunk and a ``manifest.json``. Versions are written to a temporary
    directory first and renamed into place, so readers never see a partial
    package.
    """

    def __init__(self, packages_dir: Path | str | None = None) -> None:
        """
        Initialize package store.

        Args:
            packages_dir: Root directory for packages (default: var/packages)
        """
        if packages_dir is None:
            packages_dir = Path("var/packages")

        self.packages_dir = Path(packages_dir)
        self.packages_dir.mkdir(parents=True, exist_ok=True)

    def get_package_path(self, group_uuid: str, version: int) -> Path:
        return self.packages_dir / group_uuid / f"v{version}"

    def save(self, package: ExportedPackage) -> None:
        """
        Save the package artifact atomically (write to temp dir, then rename).

        An existing directory for the same group and version is replaced.

        Raises:
            PackageStoreError: If the package has no artifact or the write fails
        """
        target = self.get_package_path(package.group_uuid, package.version)
        serialized = package.serialized_package
        if serialized is None:
            raise PackageStoreError(
                str(target),
                "package has no serialized artifact",
                hint="Assemble the package before saving it",
            )

        target.parent.mkdir(parents=True, exist_ok=True)
        temp_dir = Path(tempfile.mkdtemp(dir=target.parent, prefix=f".{target.name}.tmp."))
        try:
            (temp_dir / HEADER_FILE).write_text(serialized.header, encoding="utf-8")
            chunk_files = []
            for index, body in enumerate(serialized.metadata):
                name = chunk_file_name(index)
                (temp_dir / name).write_text(body, encoding="utf-8")
                chunk_files.append(name)

            manifest = package.to_dict()
            manifest["chunks"] = chunk_files
            with (temp_dir / MANIFEST_FILE).open("w", encoding="utf-8") as f:
                json.dump(manifest, f, indent=2, ensure_ascii=False)

            if target.exists():
                shutil.rmtree(target)
            temp_dir.rename(target)

            logger.debug(f"Package saved: {target}", extra={"group_uuid": package.group_uuid, "path": str(target)})
        except OSError as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            error_msg = f"Failed to save package: {e}"
            logger.error(error_msg, extra={"group_uuid": package.group_uuid}, exc_info=True)
            raise PackageStoreError(str(target), error_msg) from e

    def list_versions(self, group_uuid: str) -> list[int]:
        """Saved versions of a package group, ascending."""
        group_dir = self.packages_dir / group_uuid
        if not group_dir.is_dir():
            return []
        versions = []
        for child in group_dir.iterdir():
            match = _VERSION_DIR.match(child.name)
            if match and child.is_dir():
                versions.append(int(match.group(1)))
        return sorted(versions)

    def load_manifest(self, group_uuid: str, version: int | None = None) -> dict:
        """
        Load the manifest of a saved package version (latest when version is None).

        Raises:
            PackageStoreError: If the package or manifest cannot be read
        """
        path = self._resolve_version_path(group_uuid, version)
        manifest_path = path / MANIFEST_FILE
        try:
            with manifest_path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise PackageStoreError(str(manifest_path), "manifest not found") from e
        except json.JSONDecodeError as e:
            raise PackageStoreError(str(manifest_path), f"invalid JSON in manifest: {e}") from e

    def load(self, group_uuid: str, version: int | None = None) -> SerializedPackage:
        """
        Load a saved artifact (latest version when version is None).

        Raises:
            PackageStoreError: If the package does not exist or cannot be read
        """
        path = self._resolve_version_path(group_uuid, version)
        manifest = self.load_manifest(group_uuid, version)
        try:
            header = (path / HEADER_FILE).read_text(encoding="utf-8")
            bodies = [(path / name).read_text(encoding="utf-8") for name in manifest.get("chunks", [])]
        except OSError as e:
            raise PackageStoreError(str(path), f"Failed to read package: {e}") from e
        return SerializedPackage(header=header, metadata=tuple(bodies))

    def _resolve_version_path(self, group_uuid: str, version: int | None) -> Path:
        if version is None:
            versions = self.list_versions(group_uuid)
            if not versions:
                raise PackageStoreError(
                    str(self.packages_dir / group_uuid),
                    "package not found",
                    hint="Check the group uuid printed by 'metashare export run'",
                )
            version = versions[-1]
        path = self.get_package_path(group_uuid, version)
        if not path.is_dir():
            raise PackageStoreError(str(path), f"version {version} not found")
        return path
