import logging
from enum import Enum
from pathlib import Path
from typing import Union

from ..domain.errors import NugetDlError
from ..domain.models import LocalArtifact, PackageIdentity
from ..registry.cache import LocalCache
from ..registry.client import RegistryClient
from ..ui.progress import PackageProgress
from ..utils.hash import compute_file_digest, digests_match

logger = logging.getLogger(__name__)

class VerificationPolicy(str, Enum):
    """what to do when checking a cached archive fails with an error."""
    REDOWNLOAD = "redownload"  # treat the error as a mismatch
    STRICT = "strict"  # propagate the error

class DownloadService:
    """
    resolves a package version to a verified archive on local disk.

    an existing archive is reused only when its sha512 digest equals the one
    the registry reports for that exact name and version. otherwise the
    archive is downloaded again and written over the old file.
    """

    def __init__(
        self,
        registry_client: RegistryClient,
        progress: PackageProgress = None,
        policy: VerificationPolicy = VerificationPolicy.REDOWNLOAD,
    ):
        self.registry_client = registry_client
        # silent unless the caller asks for terminal output
        self.progress = progress or PackageProgress(quiet=True)
        self.policy = policy

    def download_package(self, package_name: str, version: str, target_dir: Union[str, Path]) -> LocalArtifact:
        """
        make sure a verified copy of the package exists in target_dir.

        args:
            package_name: exact package id, not normalized
            version: exact version string, not normalized
            target_dir: directory holding the archives, created if missing

        returns:
            the local artifact; `downloaded` tells whether content was fetched
        """
        identity = PackageIdentity(name=package_name, version=version)
        cache = LocalCache(Path(target_dir))
        path = cache.get_artifact_path(package_name, version)

        if path.exists():
            if self._check(identity, path):
                logger.debug(f"cached archive {path} matches registry digest")
                return LocalArtifact(identity=identity, path=path, downloaded=False)
            logger.info(f"cached archive {path} is stale, downloading {identity} again")
        else:
            logger.debug(f"no cached archive for {identity} in {cache.cache_dir}")

        return self._download_overwrite(identity, cache)

    def verify_package(self, package_name: str, version: str, target_dir: Union[str, Path]) -> bool:
        """check a cached archive against the registry without downloading."""
        identity = PackageIdentity(name=package_name, version=version)
        path = LocalCache(Path(target_dir)).get_artifact_path(package_name, version)
        if not path.exists():
            return False
        return self._check(identity, path)

    def package_matches_hash(self, identity: PackageIdentity, path: Path) -> bool:
        """
        compare the file at path with the registry digest.

        errors from the registry, digest decoding, or reading the file
        propagate to the caller.
        """
        with self.progress.verifying(identity):
            digest = self.registry_client.get_package_hash(identity.name, identity.version)

        if not digest.algorithm.is_known:
            logger.debug(
                f"registry reports unsupported hash algorithm {digest.algorithm.raw_name!r} "
                f"for {identity}, treating as mismatch"
            )
            return False

        reference = digest.decode()
        actual = compute_file_digest(path, digest.algorithm)
        return digests_match(reference, actual)

    def _check(self, identity: PackageIdentity, path: Path) -> bool:
        if self.policy == VerificationPolicy.STRICT:
            return self.package_matches_hash(identity, path)
        try:
            return self.package_matches_hash(identity, path)
        except (NugetDlError, ValueError, OSError) as e:
            logger.warning(f"could not verify {path}, downloading again: {e}")
            return False

    def _download_overwrite(self, identity: PackageIdentity, cache: LocalCache) -> LocalArtifact:
        # fetch everything before touching the file so a failed
        # request never leaves a truncated archive behind
        with self.progress.downloading(identity) as (progress, task_id):
            data = self.registry_client.download_package_bytes(
                identity.name, identity.version, progress=progress, task_id=task_id
            )
        path = cache.write_artifact(identity.name, identity.version, data)
        return LocalArtifact(identity=identity, path=path, downloaded=True)
