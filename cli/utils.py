import sys

import click


def error_exit(message: str, code: int = 1):
    """Print an error message in red to stderr and exit with ``code``."""
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(code)
