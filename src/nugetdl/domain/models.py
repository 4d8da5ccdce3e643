import base64
import hashlib
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional

from pydantic import BaseModel, ConfigDict

ARCHIVE_EXTENSION = "nupkg"

class PackageIdentity(BaseModel):
    """a (name, version) pair, compared exactly as given."""
    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    @property
    def file_name(self) -> str:
        return f"{self.name}.{self.version}.{ARCHIVE_EXTENSION}"

    def __str__(self) -> str:
        return f"{self.name} {self.version}"

class HashAlgorithmKind(str, Enum):
    SHA512 = "sha512"
    UNKNOWN = "unknown"

class HashAlgorithm(BaseModel):
    """
    hash algorithm reported by the registry.

    anything other than a recognised algorithm is kept as UNKNOWN together
    with the raw name, and never produces a hasher.
    """
    model_config = ConfigDict(frozen=True)

    kind: HashAlgorithmKind
    raw_name: str

    @classmethod
    def from_string(cls, raw_name: str) -> "HashAlgorithm":
        if raw_name.lower() == HashAlgorithmKind.SHA512.value:
            return cls(kind=HashAlgorithmKind.SHA512, raw_name=raw_name)
        return cls(kind=HashAlgorithmKind.UNKNOWN, raw_name=raw_name)

    @property
    def is_known(self) -> bool:
        return self.kind != HashAlgorithmKind.UNKNOWN

    def new_hasher(self):
        """return a fresh hashlib object, or None for unknown algorithms."""
        if self.kind == HashAlgorithmKind.SHA512:
            return hashlib.sha512()
        return None

class PackageDigest(BaseModel):
    """content digest as reported by the registry (base64 encoded)."""
    model_config = ConfigDict(frozen=True)

    hash: str
    algorithm: HashAlgorithm

    def decode(self) -> bytes:
        # raises binascii.Error on malformed input
        return base64.b64decode(self.hash, validate=True)

class LocalArtifact(BaseModel):
    """a package archive available on local disk."""
    identity: PackageIdentity
    path: Path
    downloaded: bool = False  # true when this call fetched fresh content

    def open(self) -> BinaryIO:
        """open the artifact for reading. the caller owns the handle."""
        return open(self.path, "rb")

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    @property
    def size(self) -> Optional[int]:
        if not self.path.exists():
            return None
        return self.path.stat().st_size
