import hmac
from pathlib import Path
from typing import Optional

from ..domain.models import HashAlgorithm

def compute_file_digest(path: Path, algorithm: HashAlgorithm) -> Optional[bytes]:
    """
    hash the full contents of a file with the given algorithm.

    returns None without touching the file when the algorithm is unknown.
    """
    hasher = algorithm.new_hasher()
    if hasher is None:
        return None
    with open(path, "rb") as f:
        hasher.update(f.read())
    return hasher.digest()

def digests_match(reference: bytes, actual: Optional[bytes]) -> bool:
    """
    compare two digests over their full length.

    a missing digest or any length difference is a mismatch.
    """
    if actual is None:
        return False
    if len(reference) != len(actual):
        return False
    return hmac.compare_digest(reference, actual)
