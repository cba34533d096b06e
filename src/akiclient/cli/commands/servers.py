"""Servers subcommands for inspecting and probing the endpoint catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from akiclient.catalog import DEFAULT_CATALOG, EndpointCatalog
from akiclient.cli.utils.output import (
    console,
    create_catalog_table,
    create_probe_table,
    print_error,
    print_success,
    print_warning,
)
from akiclient.config import DEFAULT_PROBE_TIMEOUT
from akiclient.credentials import (
    CredentialProvider,
    ScrapingCredentialProvider,
    StaticCredentials,
)
from akiclient.exceptions import (
    CredentialError,
    GroupUnavailableError,
    UnsupportedCombinationError,
)
from akiclient.models import Category, Language
from akiclient.selection import EndpointProber, ServerGroupSelector
from akiclient.transport import ApiTransport

app = typer.Typer(no_args_is_help=True)

CatalogOption = Annotated[
    Path | None,
    typer.Option(
        "--catalog",
        help="YAML catalog to use instead of the built-in server list",
        exists=True,
        dir_okay=False,
    ),
]


def _load_catalog(path: Path | None) -> EndpointCatalog:
    if path is None:
        return DEFAULT_CATALOG
    try:
        return EndpointCatalog.from_yaml(path)
    except ValueError as e:
        print_error(f"Invalid catalog file: {e}")
        raise typer.Exit(1)


@app.command("list")
def list_servers(
    catalog_path: CatalogOption = None,
    language: Annotated[
        Language | None,
        typer.Option("--language", "-l", help="Only show this language"),
    ] = None,
) -> None:
    """List known servers grouped by language and category.

    Examples:
        akiclient servers list
        akiclient servers list --language fr
    """
    catalog = _load_catalog(catalog_path)
    groups = [
        group
        for group in catalog.groups()
        if language is None or group.language is language
    ]
    if not groups:
        console.print("No servers registered.")
        return
    console.print(create_catalog_table(groups))


@app.command("probe")
def probe_servers(
    language: Annotated[
        Language,
        typer.Option("--language", "-l", help="Language of the group to probe"),
    ] = Language.ENGLISH,
    category: Annotated[
        Category,
        typer.Option("--category", "-c", help="Category of the group to probe"),
    ] = Category.CHARACTER,
    timeout: Annotated[
        float,
        typer.Option("--timeout", "-t", min=0.1, help="Probe connection timeout"),
    ] = DEFAULT_PROBE_TIMEOUT,
    probe_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Probe every server instead of stopping"),
    ] = False,
    credential: Annotated[
        str | None,
        typer.Option("--credential", help="API credential; scraped when omitted"),
    ] = None,
    catalog_path: CatalogOption = None,
) -> None:
    """Find the first reachable server of a group.

    Servers are probed one at a time, in catalog order.

    Examples:
        akiclient servers probe --language en
        akiclient servers probe -l fr --all
    """
    catalog = _load_catalog(catalog_path)
    try:
        group = catalog.lookup(language, category)
    except UnsupportedCombinationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    with ApiTransport() as transport:
        credentials: CredentialProvider = (
            StaticCredentials(credential)
            if credential
            else ScrapingCredentialProvider(transport.http_client)
        )
        prober = EndpointProber(transport, credentials, timeout=timeout)

        try:
            if probe_all:
                results = [(e.host, prober.probe(e)) for e in group]
                console.print(create_probe_table(results))
                reachable = [host for host, up in results if up]
                if not reachable:
                    print_error(f"All {len(group)} servers are down")
                    raise typer.Exit(1)
                if len(reachable) < len(results):
                    print_warning(
                        f"{len(results) - len(reachable)} of {len(results)} "
                        "servers are down"
                    )
                print_success(f"First available server: {reachable[0]}")
                return

            endpoint = ServerGroupSelector(prober).select_first_available(group)
        except CredentialError as e:
            print_error(str(e))
            raise typer.Exit(1)
        except GroupUnavailableError as e:
            print_error(str(e))
            raise typer.Exit(1)

    print_success(f"First available server: {endpoint.host}")
