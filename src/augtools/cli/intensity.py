from __future__ import annotations

import pathlib
from typing import TYPE_CHECKING

import click

from augtools.exceptions import AugToolsError
from augtools.loggers import logger

from .common import (
    RUN_ERRORS,
    config_option,
    image_paths_argument,
    load_settings,
    parse_key_values,
)

if TYPE_CHECKING:
    from augtools.transforms import IntensityFilter


def parse_filter(text: str) -> IntensityFilter:
    """Parse ``kind`` or ``kind:param=value,...`` into an IntensityFilter."""
    from augtools.transforms import IntensityFilter

    kind, _, params = text.partition(":")
    try:
        return IntensityFilter(kind.strip(), parse_key_values(params))
    except (AugToolsError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="--filter") from e


@click.command()
@image_paths_argument
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False, writable=True, path_type=pathlib.Path),
    default=None,
    help="Directory for the filtered images [default: from settings].",
)
@click.option(
    "--filter",
    "-f",
    "filter_specs",
    multiple=True,
    metavar="KIND[:PARAM=VALUE,...]",
    help="Intensity filter to apply, repeatable. Defaults to the full filter bank.",
)
@click.option(
    "--list-filters",
    is_flag=True,
    help="List the available filter kinds and exit.",
)
@config_option
@click.help_option("-h", "--help")
def intensity(
    images: tuple[pathlib.Path, ...],
    output_dir: pathlib.Path | None,
    filter_specs: tuple[str, ...],
    list_filters: bool,
    config_path: pathlib.Path | None,
) -> None:
    """Apply intensity filters (blur, noise, equalization, bias fields) to IMAGES."""
    from augtools.augment import augment_images_intensity
    from augtools.io import read_images
    from augtools.transforms import DEFAULT_FILTERS, FilterKind

    if list_filters:
        for kind in FilterKind:
            click.echo(kind.value)
        return

    settings = load_settings(config_path, **{"output.directory": output_dir})
    filters = tuple(parse_filter(spec) for spec in filter_specs) or DEFAULT_FILTERS

    try:
        paths = augment_images_intensity(
            read_images(images), settings.output.writer(), filters
        )
    except RUN_ERRORS as e:
        logger.exception("Intensity augmentation failed")
        raise click.Abort() from e

    click.echo(f"Wrote {len(paths)} images to {settings.output.directory}")
