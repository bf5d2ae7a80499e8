from pathlib import Path
from typing import Sequence

import SimpleITK as sitk

from augtools.loggers import logger

__all__ = ["read_image", "read_images"]


def read_image(path: str | Path, pixel_type: int = sitk.sitkUnknown) -> sitk.Image:
    """Read an image file with SimpleITK.

    Parameters
    ----------
    path : str | Path
        Any format SimpleITK can read (.mha, .nrrd, .nii.gz, ...).
    pixel_type : int, optional
        Requested output pixel type; the file's own type by default.

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Image file not found: {path}"
        raise FileNotFoundError(msg)
    image = sitk.ReadImage(str(path), pixel_type)
    logger.debug(
        "Read image",
        path=path,
        size=image.GetSize(),
        spacing=image.GetSpacing(),
    )
    return image


def read_images(paths: Sequence[str | Path]) -> dict[str, sitk.Image]:
    """Read several images, keyed by file name without extension."""
    images: dict[str, sitk.Image] = {}
    for path in paths:
        path = Path(path)
        name = path.name.split(".")[0]
        if name in images:
            msg = f"Duplicate image name {name!r} for {path}"
            raise ValueError(msg)
        images[name] = read_image(path)
    return images
