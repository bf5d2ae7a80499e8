import pathlib

import click
import numpy as np

from augtools.loggers import logger

from .common import (
    RUN_ERRORS,
    config_option,
    domain_options,
    domain_override,
    image_paths_argument,
    load_settings,
)


def parse_range(text: str) -> list[float]:
    """Values from ``"v1,v2,..."`` or a linspace written ``"start:stop:num"``."""
    try:
        if ":" in text:
            start, stop, num = text.split(":")
            return list(np.linspace(float(start), float(stop), int(num)))
        return [float(v) for v in text.split(",")]
    except ValueError as e:
        msg = f"Invalid range {text!r}: use 'v1,v2,...' or 'start:stop:num'."
        raise click.BadParameter(msg) from e


@click.command()
@image_paths_argument
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False, writable=True, path_type=pathlib.Path),
    default=None,
    help="Directory for the augmented images [default: from settings].",
)
@click.option(
    "--family",
    "-f",
    type=click.Choice(["similarity", "reflection"], case_sensitive=False),
    default="similarity",
    show_default=True,
    help="Augmentation transform family.",
)
@click.option(
    "--range",
    "-r",
    "ranges",
    type=(str, str),
    multiple=True,
    metavar="NAME VALUES",
    help=(
        "Values for one family parameter, as 'v1,v2,...' or 'start:stop:num'. "
        "Unset parameters keep their identity value."
    ),
)
@click.option(
    "--random",
    "n_random",
    type=click.IntRange(min=1),
    default=None,
    help="Draw this many random samples within each range's min/max instead of the full grid.",
)
@click.option("--seed", type=int, default=None, help="Seed for --random.")
@click.option(
    "--interpolation",
    "-i",
    type=click.Choice(["linear", "nearest", "bspline"]),
    default=None,
    help="Interpolator; use nearest for label images [default: linear].",
)
@click.option(
    "--max-samples",
    type=click.IntRange(min=1),
    default=None,
    help="Refuse to generate more samples per image than this [default: 1000].",
)
@click.option(
    "-n",
    "--dry-run",
    is_flag=True,
    help="Only report how many samples would be generated.",
)
@domain_options
@config_option
@click.help_option("-h", "--help")
def spatial(
    images: tuple[pathlib.Path, ...],
    output_dir: pathlib.Path | None,
    family: str,
    ranges: tuple[tuple[str, str], ...],
    n_random: int | None,
    seed: int | None,
    interpolation: str | None,
    max_samples: int | None,
    dry_run: bool,
    size: int | None,
    isotropic_axis: int | None,
    isotropic_size: int | None,
    config_path: pathlib.Path | None,
) -> None:
    """Resample IMAGES onto a common reference domain and augment them spatially.

    Every combination of the given parameter values is generated for every
    image, e.g.

        augtools spatial ct.mha mr.mha -o out -r angle -0.1,0,0.1 -r scale 0.9:1.1:3
    """
    from augtools.augment import (
        RandomParameterSpace,
        augment_images_spatial,
        make_family,
        regular_space_from_mapping,
    )
    from augtools.domain import build_centered_transform, build_reference_domain
    from augtools.io import read_images

    settings = load_settings(
        config_path,
        domain=domain_override(size, isotropic_axis, isotropic_size),
        **{
            "output.directory": output_dir,
            "resample.interpolation": interpolation,
            "max_samples": max_samples,
            "seed": seed,
        },
    )
    logger.debug("Spatial augmentation settings", settings=settings.model_dump())

    named_images = read_images(images)
    dimensions = {img.GetDimension() for img in named_images.values()}
    if len(dimensions) != 1:
        raise click.UsageError(
            f"All images must share one dimension, got {sorted(dimensions)}."
        )
    augmentation = make_family(family, dimensions.pop())

    values: dict[str, list[float]] = {
        name: [value]
        for name, value in zip(
            augmentation.parameter_names, augmentation.identity_parameters
        )
    }
    for name, text in ranges:
        if name not in values:
            msg = f"Unknown parameter {name!r} for {augmentation!r}."
            raise click.BadParameter(msg, param_hint="--range")
        values[name] = parse_range(text)

    if n_random is not None:
        space = RandomParameterSpace(
            tuple(
                (min(values[name]), max(values[name]))
                for name in augmentation.parameter_names
            ),
            n=n_random,
            seed=settings.seed,
        )
    else:
        space = regular_space_from_mapping(augmentation.parameter_names, values)

    if dry_run:
        click.echo(
            f"{len(space)} samples per image, {len(space) * len(named_images)} in total."
        )
        return

    try:
        reference = build_reference_domain(
            list(named_images.values()), **settings.domain.build_kwargs()
        )
        writer = settings.output.writer()
        for name, image in named_images.items():
            augment_images_spatial(
                image,
                reference,
                build_centered_transform(image, reference),
                augmentation,
                space,
                writer,
                name=name,
                interpolation=settings.resample.interpolation,
                default_value=settings.resample.default_value,
                max_samples=settings.max_samples,
            )
    except RUN_ERRORS as e:
        logger.exception("Spatial augmentation failed")
        raise click.Abort() from e

    click.echo(f"Wrote {len(writer.written)} images to {writer.root_directory}")
