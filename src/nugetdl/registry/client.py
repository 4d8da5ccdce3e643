from abc import ABC, abstractmethod

from ..domain.models import PackageDigest

class RegistryClient(ABC):
    @abstractmethod
    def get_package_hash(self, package_name: str, version: str) -> PackageDigest:
        """Get the content digest the registry reports for a package version."""
        pass

    @abstractmethod
    def download_package_bytes(self, package_name: str, version: str, progress=None, task_id=None) -> bytes:
        """Download the full package archive into memory."""
        pass
