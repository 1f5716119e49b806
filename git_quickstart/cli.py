"""CLI entry point for git-quickstart."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

import git_quickstart
from git_quickstart.core.errors import PreflightError

app = typer.Typer(
    name="git-quickstart",
    help="Prepare this machine for cloning private GitHub repositories over HTTPS.",
)
console = Console()


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Run `install` when no command is given."""
    if ctx.invoked_subcommand is None:
        install(log_dir=None, host=None)


@app.command()
def install(
    log_dir: Optional[str] = typer.Option(
        None, "--log-dir", help="Directory for install.log (default: fresh temp dir)"
    ),
    host: Optional[str] = typer.Option(
        None, "--host", help="Git host to store the credential for"
    ),
) -> None:
    """Install git, configure it and store the access token."""
    from git_quickstart.core.config import resolve_settings
    from git_quickstart.core.orchestrator import Orchestrator

    settings = resolve_settings(host=host, log_dir=log_dir)
    orchestrator = Orchestrator(settings=settings, console=console)
    try:
        report = orchestrator.run()
    except PreflightError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/]")
        raise typer.Exit(130)

    raise typer.Exit(0 if report.success else 1)


@app.command()
def detect() -> None:
    """Show what git-quickstart detects about this machine."""
    from git_quickstart.core.environment import probe

    try:
        profile = probe()
    except PreflightError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    table = Table(title="System Profile")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("OS", f"{profile.os_name.value} {profile.os_version}")
    table.add_row("Kernel", profile.kernel_family.value)
    table.add_row("Machine", profile.machine)
    table.add_row("Virtualized guest", "yes" if profile.is_virtualized_guest else "no")
    table.add_row("Shell", profile.shell_kind.value)
    table.add_row("Profile", profile.profile_path)
    console.print(table)


@app.command()
def version() -> None:
    """Print version."""
    console.print(f"git-quickstart {git_quickstart.__version__}")


if __name__ == "__main__":
    app()
