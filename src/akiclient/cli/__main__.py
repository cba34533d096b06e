"""Entry point for running the CLI as a module.

Usage:
    python -m akiclient.cli --help
"""

from akiclient.cli.main import app

if __name__ == "__main__":
    app()
