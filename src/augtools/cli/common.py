"""Shared click options and helpers for the augtools commands."""

from __future__ import annotations

import pathlib
from typing import Any, Callable

import click
from click.decorators import FC
from pydantic import ValidationError

from augtools.config import AugmentationSettings
from augtools.exceptions import AugToolsError
from augtools.io import ImageWriterError

# Failures reported through the log and a non-zero exit instead of a traceback.
RUN_ERRORS = (AugToolsError, ImageWriterError, OSError)

image_paths_argument = click.argument(
    "images",
    nargs=-1,
    required=True,
    type=click.Path(
        exists=True,
        dir_okay=False,
        readable=True,
        path_type=pathlib.Path,
    ),
)


def domain_options(func: FC) -> FC:
    """Reference domain sizing options."""
    func = click.option(
        "--isotropic-size",
        type=click.IntRange(min=2),
        default=None,
        help="Pixels along --isotropic-axis; other axes get the same spacing.",
    )(func)
    func = click.option(
        "--isotropic-axis",
        type=click.IntRange(min=0),
        default=None,
        help="Axis driving isotropic spacing.",
    )(func)
    func = click.option(
        "--size",
        "-s",
        type=click.IntRange(min=2),
        default=None,
        help="Pixels per axis of the reference domain [default: 128].",
    )(func)
    return func


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
    default=None,
    help="YAML settings file. Command-line options take precedence.",
)


def domain_override(
    size: int | None,
    isotropic_axis: int | None,
    isotropic_size: int | None,
) -> dict[str, Any] | None:
    """Domain section built from command-line options, None if none were given."""
    if isotropic_axis is not None or isotropic_size is not None:
        if size is not None:
            raise click.UsageError(
                "--size cannot be combined with the isotropic options."
            )
        return {
            "isotropic_axis": isotropic_axis,
            "isotropic_size": isotropic_size,
        }
    if size is not None:
        return {"size": size}
    return None


def load_settings(
    config_path: pathlib.Path | None,
    domain: dict[str, Any] | None = None,
    **overrides: Any,  # noqa: ANN401
) -> AugmentationSettings:
    """Load settings from YAML (or defaults) and apply command-line overrides.

    `domain` replaces the whole domain section. Other override keys are
    dotted paths such as ``"resample.interpolation"``; None values are
    ignored.
    """
    try:
        settings = (
            AugmentationSettings.from_user_yaml(config_path)
            if config_path is not None
            else AugmentationSettings()
        )
        data = settings.model_dump()
        if domain is not None:
            data["domain"] = domain
        for dotted, value in overrides.items():
            if value is None:
                continue
            section, _, key = dotted.rpartition(".")
            target = data[section] if section else data
            target[key] = value
        return AugmentationSettings(**data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(map(str, err['loc'])) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise click.UsageError(f"Invalid settings: {errors}") from e


def parse_key_values(
    text: str, convert: Callable[[str], Any] = float
) -> dict[str, Any]:
    """Parse ``"a=1,b=2"`` into ``{"a": convert("1"), "b": convert("2")}``."""
    result: dict[str, Any] = {}
    if not text:
        return result
    for item in text.split(","):
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            msg = f"Expected key=value, got {item!r}."
            raise click.BadParameter(msg)
        result[key.strip()] = convert(value.strip())
    return result
