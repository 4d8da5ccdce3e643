import typer
from rich.console import Console
from rich.table import Table
from pathlib import Path

from ..config import (
    CONFIG_FILE,
    PACKAGES_DIR_KEY,
    get_packages_dir,
    get_registry_url,
    get_timeout,
    set_registry_url,
    set_value,
)

app = typer.Typer()
console = Console()


@app.command("show")
def show_config():
    """show the effective settings."""
    try:
        timeout = get_timeout()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Settings ({CONFIG_FILE})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("registry url", get_registry_url())
    table.add_row("packages dir", str(get_packages_dir()))
    table.add_row("timeout", "none" if timeout is None else f"{timeout}s")
    console.print(table)


@app.command("set-registry")
def set_registry(url: str):
    """use a different registry (e.g. a local mirror)."""
    try:
        set_registry_url(url)
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓ Registry set to[/green] {url.rstrip('/')}")


@app.command("set-packages-dir")
def set_packages_dir(path: Path):
    """change the default download directory."""
    try:
        set_value(PACKAGES_DIR_KEY, str(path))
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓ Packages dir set to[/green] {path}")
