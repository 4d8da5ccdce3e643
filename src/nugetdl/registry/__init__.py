"""registry access and the local package cache."""
from .client import RegistryClient
from .nuget import NuGetRegistry, DEFAULT_REGISTRY_URL
from .cache import LocalCache

__all__ = [
    "RegistryClient",
    "NuGetRegistry",
    "DEFAULT_REGISTRY_URL",
    "LocalCache",
]
