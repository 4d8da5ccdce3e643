import logging
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .download import DownloadService
from ..domain.manifest import load_manifest
from ..domain.models import LocalArtifact
from ..ui.progress import PackageProgress

logger = logging.getLogger(__name__)

class BulkDownloadService:
    """downloads several packages, one after the other."""

    def __init__(self, download_service: DownloadService, progress: PackageProgress = None):
        self.download_service = download_service
        self.progress = progress or download_service.progress

    def download_packages(
        self,
        packages: Iterable[Tuple[str, str]],
        target_dir: Union[str, Path],
    ) -> List[LocalArtifact]:
        """
        resolve every (name, version) pair in order.

        stops at the first failure; the error propagates and archives
        already written stay on disk.
        """
        artifacts = []
        for name, version in packages:
            artifact = self.download_service.download_package(name, version, target_dir)
            self.progress.finished(artifact)
            artifacts.append(artifact)
        return artifacts

    def process_config(self, config_path: Union[str, Path]) -> List[LocalArtifact]:
        """download every dependency listed in a nuget.toml file."""
        config_path = Path(config_path)
        manifest = load_manifest(config_path)
        packages_dir = manifest.resolve_packages_dir(config_path.resolve().parent)
        logger.debug(f"{config_path}: {len(manifest.dependencies)} packages into {packages_dir}")
        return self.download_packages(manifest.dependencies.items(), packages_dir)
