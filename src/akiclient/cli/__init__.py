"""Command-line tools for the guessing game client.

Usage:
    akiclient --help
    akiclient servers list
    akiclient servers probe --language en --category character
"""

from akiclient.cli.main import app

__all__ = ["app"]
