"""package list files (nuget.toml)."""
import tomllib
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

DEFAULT_MANIFEST_NAME = "nuget.toml"
DEFAULT_PACKAGES_SUBDIR = "packages"

class PackageManifest(BaseModel):
    """
    a list of packages to download.

    packages-dir is optional; dependencies maps package name to version.
    other top-level keys are ignored.
    """
    model_config = ConfigDict(populate_by_name=True)

    packages_dir: Optional[Path] = Field(default=None, alias="packages-dir")
    dependencies: Dict[str, str] = Field(default_factory=dict)

    def resolve_packages_dir(self, base_dir: Path) -> Path:
        """packages-dir relative to base_dir, or base_dir/packages when unset."""
        if self.packages_dir is None:
            return base_dir / DEFAULT_PACKAGES_SUBDIR
        if self.packages_dir.is_absolute():
            return self.packages_dir
        return base_dir / self.packages_dir

def load_manifest(path: Path) -> PackageManifest:
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(path, e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, str(e)) from e

    try:
        return PackageManifest.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(path, errors) from e
