from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

import SimpleITK as sitk

from augtools.loggers import logger

__all__ = [
    "ExistingFileMode",
    "ImageWriter",
    "ImageWriterError",
    "ImageWriterValidationError",
]


class ImageWriterError(Exception):
    """Base exception for ImageWriter errors."""

    pass


class ImageWriterValidationError(ImageWriterError):
    """Raised when validation of writer configuration fails."""

    pass


class ExistingFileMode(str, Enum):
    """
    Enum to specify handling behavior for existing files.

    Attributes
    ----------
    OVERWRITE: str
        Overwrite the existing file. Logs as debug and continues.
    FAIL: str
        Fail the operation if the file exists, raising FileExistsError.
    SKIP: str
        Leave the existing file untouched and return its path.
    """

    OVERWRITE = "overwrite"
    SKIP = "skip"
    FAIL = "fail"


@dataclass
class ImageWriter:
    """Write augmented images under a root directory with patterned names.

    Attributes
    ----------
    root_directory : Path
        Directory files are written under. Created if missing and
        `create_dirs` is True.
    filename_format : str
        ``str.format`` pattern, relative to `root_directory`, filled from the
        keyword arguments passed to `save`. Must end in a valid extension.
        Example: ``'{name}/{kind}_{index:03d}.nii.gz'``
    existing_file_mode : ExistingFileMode, default=ExistingFileMode.FAIL
        Behavior when a file already exists.
    create_dirs : bool, default=True
        Creates necessary directories if they don't exist.
    use_compression : bool, default=True
        Ask SimpleITK to compress the output where the format allows it.
    """

    root_directory: Path
    filename_format: str = "{name}_{kind}_{index:03d}.mha"
    existing_file_mode: ExistingFileMode = ExistingFileMode.FAIL
    create_dirs: bool = True
    use_compression: bool = True

    written: list[Path] = field(default_factory=list, init=False, repr=False)

    VALID_EXTENSIONS: ClassVar[tuple[str, ...]] = (
        ".mha",
        ".mhd",
        ".nrrd",
        ".nii",
        ".nii.gz",
    )

    def __post_init__(self) -> None:
        self.root_directory = Path(self.root_directory)
        self.existing_file_mode = ExistingFileMode(self.existing_file_mode)

        if not self.filename_format.endswith(self.VALID_EXTENSIONS):
            msg = (
                f"Invalid filename format {self.filename_format}. "
                f"Must end with one of {list(self.VALID_EXTENSIONS)}."
            )
            raise ImageWriterValidationError(msg)

        if not self.root_directory.exists():
            if not self.create_dirs:
                msg = f"Root directory {self.root_directory} does not exist."
                raise ImageWriterValidationError(msg)
            self.root_directory.mkdir(parents=True, exist_ok=True)

    def resolve_path(self, **context: Any) -> Path:  # noqa: ANN401
        """Fill the filename pattern from `context`."""
        try:
            filename = self.filename_format.format(**context)
        except KeyError as ke:
            msg = (
                f"Missing value for placeholder {ke} in "
                f"'{self.filename_format}'. Got {sorted(context)}."
            )
            raise ImageWriterValidationError(msg) from ke
        return self.root_directory / filename

    def save(self, image: sitk.Image, **context: Any) -> Path:  # noqa: ANN401
        """Write `image` to the path resolved from `context`.

        Returns
        -------
        Path
            Path of the file, whether written or skipped.

        Raises
        ------
        FileExistsError
            If the file exists and the mode is FAIL.
        """
        path = self.resolve_path(**context)
        if path.exists():
            match self.existing_file_mode:
                case ExistingFileMode.FAIL:
                    msg = f"File {path} already exists."
                    raise FileExistsError(msg)
                case ExistingFileMode.SKIP:
                    logger.debug("File exists, skipping.", path=path)
                    return path
                case ExistingFileMode.OVERWRITE:
                    logger.debug("File exists, overwriting.", path=path)

        if self.create_dirs:
            path.parent.mkdir(parents=True, exist_ok=True)
        sitk.WriteImage(image, str(path), self.use_compression)
        self.written.append(path)
        logger.debug("Saved image", path=path)
        return path
