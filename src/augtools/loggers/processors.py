"""structlog processors shared by the console and JSON renderers."""

import contextlib
import datetime
from pathlib import Path
from typing import Any, Optional

import numpy as np
import pytz
import SimpleITK as sitk
from structlog.types import EventDict


def _check_event_dict(event_dict: EventDict) -> None:
    if not isinstance(event_dict, dict):
        msg = "event_dict must be a dictionary"
        raise TypeError(msg)


class PathPrettifier:
    """
    Render paths relative to a base directory when they lie below it.

    Single paths and lists/tuples of paths are converted to strings.

    Args:
            base_dir (Optional[Path]): Directory paths are made relative to. Defaults to the current working directory.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.base_dir = base_dir or Path.cwd()

    def _render(self, path: Path) -> str:
        with contextlib.suppress(ValueError):
            return str(path.relative_to(self.base_dir))
        return str(path)

    def __call__(
        self, _: object, __: object, event_dict: EventDict
    ) -> EventDict:
        _check_event_dict(event_dict)
        for key, value in event_dict.items():
            if isinstance(value, Path):
                event_dict[key] = self._render(value)
            elif (
                isinstance(value, (list, tuple))
                and value
                and all(isinstance(v, Path) for v in value)
            ):
                event_dict[key] = [self._render(v) for v in value]
        return event_dict


class GeometryPrettifier:
    """
    Summarize images, transforms and arrays so they can be logged directly.

    ``sitk.Image`` values become ``Image(size=..., spacing=..., pixel=...)``,
    transforms their SimpleITK name and numpy arrays rounded lists.

    Args:
            decimals (int): Digits kept for floating point values.
    """

    def __init__(self, decimals: int = 4) -> None:
        self.decimals = decimals

    def _round(self, values: Any) -> Any:  # noqa: ANN401
        return np.round(np.asarray(values, dtype=np.float64), self.decimals).tolist()

    def __call__(
        self, _: object, __: object, event_dict: EventDict
    ) -> EventDict:
        _check_event_dict(event_dict)
        for key, value in event_dict.items():
            if isinstance(value, sitk.Image):
                event_dict[key] = (
                    f"Image(size={value.GetSize()}, "
                    f"spacing={tuple(self._round(value.GetSpacing()))}, "
                    f"pixel={value.GetPixelIDTypeAsString()})"
                )
            elif isinstance(value, sitk.Transform):
                event_dict[key] = value.GetName()
            elif isinstance(value, np.ndarray):
                event_dict[key] = (
                    self._round(value)
                    if np.issubdtype(value.dtype, np.floating)
                    else value.tolist()
                )
        return event_dict


class CallPrettifier:
    """
    Collapse the callsite parameters into one ``call`` entry.

    Args:
            concise (bool): Render ``module.func:lineno`` when True, a dict otherwise.
    """

    def __init__(self, concise: bool = True) -> None:
        self.concise = concise

    def __call__(
        self, _: object, __: object, event_dict: EventDict
    ) -> EventDict:
        _check_event_dict(event_dict)
        module = event_dict.pop("module", "")
        func_name = event_dict.pop("func_name", "")
        lineno = event_dict.pop("lineno", "")
        if self.concise:
            event_dict["call"] = f"{module}.{func_name}:{lineno}"
        else:
            event_dict["call"] = {
                "module": module,
                "func_name": func_name,
                "lineno": lineno,
            }
        return event_dict


class ZonedTimeStamper:
    """
    Add a ``timestamp`` in a fixed time zone.

    Args:
            fmt (str): strftime format. Defaults to ISO 8601 with offset.
            timezone (str): pytz time zone name. Defaults to US/Eastern.
    """

    def __init__(
        self,
        fmt: str = "%Y-%m-%dT%H:%M:%S%z",
        timezone: str = "US/Eastern",
    ) -> None:
        self.fmt = fmt
        self.tz = pytz.timezone(timezone)

    def __call__(
        self, _: object, __: object, event_dict: EventDict
    ) -> EventDict:
        _check_event_dict(event_dict)
        event_dict["timestamp"] = datetime.datetime.now(self.tz).strftime(
            self.fmt
        )
        return event_dict
