from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..domain.models import PackageDigest
from ..registry.cache import LocalCache
from ..registry.client import RegistryClient

class InfoService:
    """fetches and displays what the registry reports for a package version."""

    def __init__(self, registry_client: RegistryClient, console: Optional[Console] = None):
        self.registry_client = registry_client
        self.console = console or Console()

    def show_hash(self, package_name: str, version: str, target_dir: Optional[Path] = None) -> PackageDigest:
        """
        print the registry digest for a package version.

        args:
            package_name: name of the package
            version: exact version
            target_dir: optional cache directory; the cached path is shown when present
        """
        digest = self.registry_client.get_package_hash(package_name, version)

        grid = Table.grid(expand=True)
        grid.add_column(style="bold cyan", justify="right")
        grid.add_column(style="white")

        grid.add_row("Name:", package_name)
        grid.add_row("Version:", version)

        if digest.algorithm.is_known:
            grid.add_row("Algorithm:", digest.algorithm.raw_name)
        else:
            grid.add_row("Algorithm:", f"{digest.algorithm.raw_name} [yellow](unsupported)[/yellow]")
        grid.add_row("Hash:", digest.hash)

        if target_dir is not None:
            cache = LocalCache(target_dir)
            if cache.has_artifact(package_name, version):
                grid.add_row("Cached:", str(cache.get_artifact_path(package_name, version)))
            else:
                grid.add_row("Cached:", "No")

        self.console.print(Panel(grid, title=f"📦 {package_name} {version}", border_style="cyan"))
        return digest
