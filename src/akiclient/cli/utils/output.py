"""Rich console output formatting utilities."""

from rich.console import Console
from rich.table import Table

from akiclient.models import EndpointGroup

console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def create_catalog_table(groups: list[EndpointGroup]) -> Table:
    """Create a rich table listing endpoint groups.

    Args:
        groups: Groups to list, one row each.

    Returns:
        Rich Table instance
    """
    table = Table(title="Known Servers")

    table.add_column("Language", style="cyan", no_wrap=True)
    table.add_column("Category", style="magenta")
    table.add_column("Servers", justify="right")
    table.add_column("Hosts (in probing order)")

    for group in groups:
        table.add_row(
            f"{group.language.name.title()} ({group.language.value})",
            group.category.value,
            str(len(group)),
            "\n".join(endpoint.host for endpoint in group),
        )

    return table


def create_probe_table(results: list[tuple[str, bool]]) -> Table:
    """Create a rich table of probe outcomes.

    Args:
        results: (host, reachable) pairs in probing order.

    Returns:
        Rich Table instance
    """
    table = Table(title="Probe Results")

    table.add_column("#", justify="right")
    table.add_column("Host", style="cyan", no_wrap=True)
    table.add_column("Status")

    for index, (host, reachable) in enumerate(results, start=1):
        status = "[green]up[/green]" if reachable else "[red]down[/red]"
        table.add_row(str(index), host, status)

    return table
