import pathlib

import click

from augtools.loggers import logger

from .common import (
    RUN_ERRORS,
    config_option,
    domain_options,
    domain_override,
    image_paths_argument,
    load_settings,
)


@click.command()
@image_paths_argument
@domain_options
@config_option
@click.help_option("-h", "--help")
def domain(
    images: tuple[pathlib.Path, ...],
    size: int | None,
    isotropic_axis: int | None,
    isotropic_size: int | None,
    config_path: pathlib.Path | None,
) -> None:
    """Print the reference domain spanning IMAGES.

    One row per axis with the reference size, spacing, physical size and
    the physical position of the reference centre.
    """
    from rich import print
    from rich.table import Table

    from augtools.domain import build_reference_domain
    from augtools.io import read_image

    settings = load_settings(
        config_path,
        domain=domain_override(size, isotropic_axis, isotropic_size),
    )
    try:
        reference = build_reference_domain(
            [read_image(path) for path in images],
            **settings.domain.build_kwargs(),
        )
    except RUN_ERRORS as e:
        logger.exception("Failed to build the reference domain")
        raise click.Abort() from e

    table = Table(title="Reference domain", box=None)
    table.add_column("Axis", justify="left", style="cyan", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Spacing", justify="right", style="magenta")
    table.add_column("Physical size", justify="right")
    table.add_column("Center", justify="right")
    for axis, (n_pixels, spacing, extent, center) in enumerate(
        zip(
            reference.size,
            reference.spacing,
            reference.physical_size,
            reference.reference_center,
        )
    ):
        table.add_row(
            "xyz"[axis] if axis < 3 else str(axis),
            str(n_pixels),
            f"{spacing:.4f}",
            f"{extent:.4f}",
            f"{center:.4f}",
        )
    print(table)
