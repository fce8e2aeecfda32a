import click

from cli import __version__
from cli.commands.run_cmd import run


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(
    __version__, "-v", "--version", help="Show the CLI version and exit."
)
def cli():
    """Concurrent UI load-testing harness."""
    pass


cli.add_command(run)


def main():
    cli()


if __name__ == "__main__":
    main()
