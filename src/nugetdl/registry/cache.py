import logging
from pathlib import Path
from typing import List

from ..domain.models import ARCHIVE_EXTENSION, PackageIdentity

logger = logging.getLogger(__name__)

class LocalCache:
    """flat directory of downloaded package archives."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def get_artifact_path(self, package_name: str, version: str) -> Path:
        return self.cache_dir / PackageIdentity(name=package_name, version=version).file_name

    def has_artifact(self, package_name: str, version: str) -> bool:
        return self.get_artifact_path(package_name, version).is_file()

    def write_artifact(self, package_name: str, version: str, data: bytes) -> Path:
        """
        create (or truncate) the artifact file and write all bytes to it.

        the cache directory is created if it does not exist yet.
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.get_artifact_path(package_name, version)
        with open(path, "wb") as f:
            f.write(data)
        logger.debug(f"wrote {len(data)} bytes to {path}")
        return path

    def list_artifacts(self) -> List[Path]:
        if not self.cache_dir.is_dir():
            return []
        return sorted(self.cache_dir.glob(f"*.{ARCHIVE_EXTENSION}"))

    def clear(self) -> int:
        """remove cached archives, leaving any other files alone."""
        removed = 0
        for path in self.list_artifacts():
            path.unlink()
            removed += 1
        return removed
