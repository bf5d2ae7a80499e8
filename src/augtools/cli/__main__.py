"""Command-line interface for the med-augtools package.

Commands:

- ``augtools domain``: print the reference domain spanning a set of images
- ``augtools spatial``: resample onto the reference domain and augment spatially
- ``augtools intensity``: apply intensity filters
"""

import click

from augtools import __version__

from . import set_log_verbosity
from .domain import domain
from .intensity import intensity
from .spatial import spatial


@click.group(no_args_is_help=True)
@set_log_verbosity()
@click.version_option(
    version=__version__,
    package_name="med-augtools",
    prog_name="augtools",
    message="%(package)s:%(prog)s:%(version)s",
)
@click.help_option("-h", "--help")
def cli(verbose: int, quiet: bool) -> None:
    """Data augmentation for medical images on a common reference domain."""
    pass


cli.add_command(domain)
cli.add_command(spatial)
cli.add_command(intensity)


if __name__ == "__main__":
    cli()
