"""Command-line interface for augtools; the entry point is `augtools.cli.__main__.cli`."""

from logging import ERROR, getLevelName, getLogger
from typing import Any, Callable

import click
from click.decorators import FC

# -v count -> level; counts above the table mean DEBUG
VERBOSITY_LEVELS = ("ERROR", "WARNING", "INFO", "DEBUG")


def set_log_verbosity(
    *param_decls: str,
    logger_name: str = "augtools",
    quiet_decl: tuple = ("--quiet", "-q"),
    **kwargs: Any,  # noqa
) -> Callable[[FC], FC]:
    """
    Add ``-v/--verbose`` (counted) and ``-q/--quiet`` options that set the
    level of `logger_name`.

    Without ``-v`` the level from ``AUGTOOLS_LOG_LEVEL`` is kept unless it is
    quieter than ERROR. Each ``-v`` lowers the threshold one step and takes
    precedence over the environment, with a warning. ``--quiet`` is eager and
    wins over any ``-v``.

    Parameters
    ----------
    *param_decls : str
        Names for the verbosity flag, ``("--verbose", "-v")`` by default.
    logger_name : str
        Logger whose level is adjusted.
    quiet_decl : tuple
        Names for the quiet flag.
    **kwargs : Any
        Extra keyword arguments for the verbosity ``click.option``.
    """

    def callback(ctx: click.Context, param: click.Parameter, value: int) -> None:
        logger = getLogger(logger_name)
        if ctx.params.get("quiet", False):
            logger.setLevel(ERROR)
            return

        requested = getLevelName(
            VERBOSITY_LEVELS[min(value, len(VERBOSITY_LEVELS) - 1)]
        )
        current = logger.level
        if value and requested > current:
            logger.warning(
                f"Environment variable {logger.name.upper()}_LOG_LEVEL is "
                f"{getLevelName(current)} but -v sets {getLevelName(requested)}"
            )
            logger.setLevel(requested)
        else:
            logger.setLevel(min(requested, current))

    kwargs.setdefault("count", True)
    kwargs.setdefault(
        "help",
        "Increase logging verbosity, overriding AUGTOOLS_LOG_LEVEL "
        "(0-3: ERROR, WARNING, INFO, DEBUG).",
    )
    kwargs["callback"] = callback

    def decorator(func: FC) -> FC:
        func = click.option(*(param_decls or ("--verbose", "-v")), **kwargs)(func)
        return click.option(
            *quiet_decl,
            is_flag=True,
            is_eager=True,
            help="Only log errors; overrides --verbose.",
        )(func)

    return decorator
