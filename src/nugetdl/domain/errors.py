from pathlib import Path
from typing import Optional

class NugetDlError(Exception):
    """base class for exceptions in nugetdl."""
    pass

class RegistryTransportError(NugetDlError):
    """raised when a registry request fails or returns a non-success status."""
    def __init__(self, package_name: str, version: str, url: str, reason: str):
        self.package_name = package_name
        self.version = version
        self.url = url
        self.reason = reason
        super().__init__(f"Request for '{package_name}' {version} failed ({url}): {reason}")

class MetadataParseError(NugetDlError):
    """raised when the metadata response is not a parseable xml document."""
    def __init__(self, package_name: str, version: str, reason: str):
        self.package_name = package_name
        self.version = version
        super().__init__(f"Could not parse metadata for '{package_name}' {version}: {reason}")

class MissingFieldError(NugetDlError):
    """raised when a well-formed metadata document lacks a required field."""
    def __init__(self, package_name: str, version: str, field: str):
        self.package_name = package_name
        self.version = version
        self.field = field
        super().__init__(f"Metadata for '{package_name}' {version} has no '{field}' field")

class ConfigError(NugetDlError):
    """raised when a package config file cannot be loaded."""
    def __init__(self, path: Path, reason: Optional[str] = None):
        self.path = path
        message = f"Invalid package config '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
