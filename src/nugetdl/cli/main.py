import logging
import typer
from contextlib import contextmanager
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import get_packages_dir, get_registry_url, get_timeout
from ..domain.errors import NugetDlError
from ..domain.manifest import DEFAULT_MANIFEST_NAME
from ..registry.cache import LocalCache
from ..registry.nuget import NuGetRegistry
from ..services.bulk import BulkDownloadService
from ..services.download import DownloadService, VerificationPolicy
from ..services.info import InfoService
from ..ui.progress import PackageProgress
from .config_commands import app as config_app

app = typer.Typer()
console = Console()

app.add_typer(config_app, name="config", help="Show or change nugetdl settings")

TARGET_DIR_HELP = "Directory holding downloaded packages (default: configured packages dir)"

def get_registry_client() -> NuGetRegistry:
    return NuGetRegistry(get_registry_url(), timeout=get_timeout())

@contextmanager
def registry_session():
    """open a registry client and turn library errors into a clean exit."""
    try:
        registry_client = get_registry_client()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    try:
        yield registry_client
    except (NugetDlError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    finally:
        registry_client.close()

@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """download NuGet packages and keep a verified local copy."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )

@app.command()
def fetch(
    package_name: str,
    version: str,
    target_dir: Optional[Path] = typer.Option(None, "--target-dir", "-d", help=TARGET_DIR_HELP),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of re-downloading when verification errors"),
):
    """
    download a package unless a verified copy is already cached.
    """
    target_dir = target_dir or get_packages_dir()
    policy = VerificationPolicy.STRICT if strict else VerificationPolicy.REDOWNLOAD

    with registry_session() as registry_client:
        service = DownloadService(registry_client, PackageProgress(console), policy=policy)
        artifact = service.download_package(package_name, version, target_dir)

    if artifact.downloaded:
        console.print(f"[green]✓ Downloaded[/green] {artifact.path} ({artifact.size} bytes)")
    else:
        console.print(f"[green]✓ Up to date[/green] {artifact.path}")

@app.command()
def sync(
    config_path: Path = typer.Argument(Path(DEFAULT_MANIFEST_NAME), help="Package list to process"),
):
    """
    download every package listed in a nuget.toml file.

    the file has a [dependencies] table mapping package names to versions
    and an optional packages-dir entry.
    """
    with registry_session() as registry_client:
        progress = PackageProgress(console)
        bulk = BulkDownloadService(DownloadService(registry_client, progress), progress)
        artifacts = bulk.process_config(config_path)

    downloaded = sum(1 for a in artifacts if a.downloaded)
    console.print(
        f"[bold green]{len(artifacts)} packages ready[/bold green] "
        f"({downloaded} downloaded, {len(artifacts) - downloaded} up to date)"
    )

@app.command(name="hash")
def show_hash(
    package_name: str,
    version: str,
    target_dir: Optional[Path] = typer.Option(None, "--target-dir", "-d", help=TARGET_DIR_HELP),
):
    """
    show the digest the registry reports for a package version.
    """
    with registry_session() as registry_client:
        InfoService(registry_client, console).show_hash(package_name, version, target_dir)

@app.command()
def verify(
    package_name: str,
    version: str,
    target_dir: Optional[Path] = typer.Option(None, "--target-dir", "-d", help=TARGET_DIR_HELP),
):
    """
    check a cached package against the registry digest without downloading.
    """
    target_dir = target_dir or get_packages_dir()
    cache = LocalCache(target_dir)
    if not cache.has_artifact(package_name, version):
        console.print(f"[yellow]{package_name} {version} is not cached in {target_dir}[/yellow]")
        raise typer.Exit(code=1)

    with registry_session() as registry_client:
        service = DownloadService(registry_client, PackageProgress(console), policy=VerificationPolicy.STRICT)
        matches = service.verify_package(package_name, version, target_dir)

    if not matches:
        console.print(f"[red]✗ {package_name} {version} does not match the registry digest[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ {package_name} {version} matches the registry digest[/green]")

@app.command()
def cache(
    action: str = typer.Argument(..., help="Action to perform: 'list' or 'clear'"),
    target_dir: Optional[Path] = typer.Option(None, "--target-dir", "-d", help=TARGET_DIR_HELP),
):
    """
    inspect or clear the downloaded packages.

    actions:
      list  - show cached archives
      clear - delete cached archives
    """
    cache_obj = LocalCache(target_dir or get_packages_dir())

    if action == "list":
        artifacts = cache_obj.list_artifacts()
        if not artifacts:
            console.print(f"[dim]No cached packages in {cache_obj.cache_dir}[/dim]")
            return
        table = Table(title=f"Cached packages ({cache_obj.cache_dir})")
        table.add_column("File", style="cyan")
        table.add_column("Size", justify="right")
        for path in artifacts:
            table.add_row(path.name, str(path.stat().st_size))
        console.print(table)

    elif action == "clear":
        try:
            removed = cache_obj.clear()
        except OSError as e:
            console.print(f"[red]Error clearing cache:[/red] {e}")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ Removed {removed} cached packages[/green]")

    else:
        console.print(f"[red]Invalid action '{action}'. Use 'list' or 'clear'.[/red]")
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
