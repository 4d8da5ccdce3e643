"""terminal feedback while packages are verified and downloaded."""

import sys
from contextlib import contextmanager
from typing import Optional
from rich.console import Console
from rich.progress import (
    Progress,
    TextColumn,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
)

from ..domain.models import LocalArtifact, PackageIdentity


class PackageProgress:
    """
    reports each step the resolver takes for a package.

    with quiet=True nothing is written at all, which is what library callers
    get by default. without a terminal, live displays are replaced by a single
    plain line per step.
    """

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet
        self.live = not quiet and sys.stdout.isatty() and not sys.stdout.closed

    @contextmanager
    def verifying(self, identity: PackageIdentity):
        """status line shown while the registry digest is fetched and compared."""
        if self.quiet:
            yield
            return
        if not self.live:
            self.console.print(f"verifying {identity}...")
            yield
            return
        with self.console.status(f"verifying {identity}"):
            yield

    @contextmanager
    def downloading(self, identity: PackageIdentity):
        """
        byte-count bar for an archive download.

        yields (progress, task_id) for the registry client to update, or
        (None, None) when there is nothing to draw.
        """
        if self.quiet:
            yield None, None
            return
        if not self.live:
            self.console.print(f"downloading {identity}...")
            yield None, None
            return

        with Progress(
            TextColumn(f"[cyan]{identity.file_name}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            yield progress, progress.add_task("download", total=None)

    def finished(self, artifact: LocalArtifact):
        if self.quiet:
            return
        status = "downloaded" if artifact.downloaded else "up to date"
        self.console.print(f"[green]✓[/green] {artifact.identity} [dim]({status})[/dim]")
