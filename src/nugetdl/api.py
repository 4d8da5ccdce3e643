"""
module-level entry points.

each call opens a registry client from the user configuration and closes
it again before returning. nothing is written to the terminal.
"""
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .config import get_packages_dir, get_registry_url, get_timeout
from .domain.models import LocalArtifact, PackageDigest
from .registry.nuget import NuGetRegistry
from .services.bulk import BulkDownloadService
from .services.download import DownloadService, VerificationPolicy
from .ui.progress import PackageProgress

def _registry(registry_url: Optional[str] = None) -> NuGetRegistry:
    return NuGetRegistry(registry_url or get_registry_url(), timeout=get_timeout())

def get_package_hash(package_name: str, version: str, registry_url: Optional[str] = None) -> PackageDigest:
    with _registry(registry_url) as registry:
        return registry.get_package_hash(package_name, version)

def download_package_bytes(package_name: str, version: str, registry_url: Optional[str] = None) -> bytes:
    with _registry(registry_url) as registry:
        return registry.download_package_bytes(package_name, version)

def download_package(
    package_name: str,
    version: str,
    target_dir: Union[str, Path],
    policy: VerificationPolicy = VerificationPolicy.REDOWNLOAD,
    registry_url: Optional[str] = None,
) -> LocalArtifact:
    with _registry(registry_url) as registry:
        service = DownloadService(registry, PackageProgress(quiet=True), policy=policy)
        return service.download_package(package_name, version, target_dir)

def download_packages(
    packages: Iterable[Tuple[str, str]],
    target_dir: Optional[Union[str, Path]] = None,
    registry_url: Optional[str] = None,
) -> List[LocalArtifact]:
    """download (name, version) pairs into target_dir, stopping at the first error."""
    with _registry(registry_url) as registry:
        bulk = BulkDownloadService(DownloadService(registry, PackageProgress(quiet=True)))
        return bulk.download_packages(packages, target_dir or get_packages_dir())

def process_config(config_path: Union[str, Path], registry_url: Optional[str] = None) -> List[LocalArtifact]:
    with _registry(registry_url) as registry:
        return BulkDownloadService(DownloadService(registry, PackageProgress(quiet=True))).process_config(config_path)
