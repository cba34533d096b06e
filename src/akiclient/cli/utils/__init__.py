"""CLI utility modules."""

from akiclient.cli.utils.output import (
    console,
    create_catalog_table,
    create_probe_table,
    print_error,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_catalog_table",
    "create_probe_table",
    "print_error",
    "print_success",
    "print_warning",
]
