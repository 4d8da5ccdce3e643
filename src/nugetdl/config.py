import os
from pathlib import Path
from typing import Dict, Optional

from .registry.nuget import DEFAULT_REGISTRY_URL

CONFIG_DIR = Path.home() / ".nugetdl"
CONFIG_FILE = CONFIG_DIR / "config"

REGISTRY_URL_KEY = "NUGETDL_REGISTRY_URL"
PACKAGES_DIR_KEY = "NUGETDL_PACKAGES_DIR"
TIMEOUT_KEY = "NUGETDL_TIMEOUT"

DEFAULT_PACKAGES_DIR = Path("packages")

def _read_config(config_file: Path) -> Dict[str, str]:
    config = {}
    if not config_file.exists():
        return config
    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                config[key.strip()] = value.strip()
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def get_value(key: str, config_file: Optional[Path] = None) -> Optional[str]:
    """look up a setting. environment variables win over the config file."""
    if os.environ.get(key):
        return os.environ[key]
    return _read_config(config_file or CONFIG_FILE).get(key)

def set_value(key: str, value: str, config_file: Optional[Path] = None):
    """set a value in the config file, preserving other config values."""
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    config = _read_config(config_file)
    config[key] = value

    try:
        with open(config_file, "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e

def get_registry_url(config_file: Optional[Path] = None) -> str:
    return get_value(REGISTRY_URL_KEY, config_file) or DEFAULT_REGISTRY_URL

def set_registry_url(url: str, config_file: Optional[Path] = None):
    set_value(REGISTRY_URL_KEY, url.rstrip("/"), config_file)

def get_packages_dir(config_file: Optional[Path] = None) -> Path:
    value = get_value(PACKAGES_DIR_KEY, config_file)
    return Path(value) if value else DEFAULT_PACKAGES_DIR

def get_timeout(config_file: Optional[Path] = None) -> Optional[float]:
    """request timeout in seconds, or None to wait indefinitely."""
    value = get_value(TIMEOUT_KEY, config_file)
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise RuntimeError(f"invalid {TIMEOUT_KEY} value: {value!r}") from e
