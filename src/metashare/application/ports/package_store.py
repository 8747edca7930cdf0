"""Port interface for persisting exported packages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.models.package import ExportedPackage, SerializedPackage


class PackageStorePort(ABC):
    """Port for saving and loading serialized packages."""

    @abstractmethod
    def save(self, package: ExportedPackage) -> None:
        """
        Persist a package together with its serialized artifact.
        
        Args:
            package: ExportedPackage whose ``serialized_package`` is set
        
        Raises:
            PackageStoreError: If the package has no artifact or the write fails
        """
        pass

    @abstractmethod
    def load(self, group_uuid: str, version: int | None = None) -> SerializedPackage:
        """
        Load a previously saved artifact.
        
        Args:
            group_uuid: Package group identifier
            version: Package version (latest when None)
        
        Returns:
            SerializedPackage with header and chunk bodies in order
        
        Raises:
            PackageStoreError: If the package does not exist or cannot be read
        """
        pass
