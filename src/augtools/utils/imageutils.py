from typing import Sequence, Tuple

import numpy as np
import SimpleITK as sitk

ImageArrayMetadata = Tuple[
    np.ndarray, Tuple[float, ...], Tuple[float, ...], Tuple[float, ...]
]


def array_to_image(
    array: np.ndarray,
    origin: Sequence[float] | None = None,
    direction: Sequence[float] | None = None,
    spacing: Sequence[float] | None = None,
    reference_image: sitk.Image | None = None,
    is_vector: bool = False,
) -> sitk.Image:
    """Convert a numpy array to a SimpleITK image with optional metadata.

    Arrays are in numpy ``[z,] y, x`` order, as returned by
    ``sitk.GetArrayFromImage``. Unset metadata keeps the SimpleITK defaults
    (zero origin, unit spacing, identity direction).

    Parameters
    ----------
    array : np.ndarray
        The numpy array to convert.
    origin : Sequence[float] | None, optional
        The origin of the image.
    direction : Sequence[float] | None, optional
        The row-major direction cosines of the image.
    spacing : Sequence[float] | None, optional
        The pixel spacing of the image.
    reference_image : sitk.Image | None, optional
        A reference SimpleITK image to copy metadata from. Takes precedence
        over the individual metadata arguments.
    is_vector : bool, optional
        Treat the last array axis as the pixel components.

    Returns
    -------
    sitk.Image
        The resulting SimpleITK image.
    """
    image = sitk.GetImageFromArray(array, isVector=is_vector)
    if reference_image is not None:
        image.CopyInformation(reference_image)
        return image

    if origin is not None:
        image.SetOrigin(tuple(float(o) for o in origin))
    if direction is not None:
        image.SetDirection(tuple(float(d) for d in direction))
    if spacing is not None:
        image.SetSpacing(tuple(float(s) for s in spacing))
    return image


def image_to_array(image: sitk.Image) -> ImageArrayMetadata:
    """Convert a SimpleITK image to a numpy array along with its metadata.

    Parameters
    ----------
    image : sitk.Image
        The SimpleITK image to convert.

    Returns
    -------
    ImageArrayMetadata
        A tuple containing the array, origin, direction and spacing.
    """
    array: np.ndarray = sitk.GetArrayFromImage(image)
    return array, image.GetOrigin(), image.GetDirection(), image.GetSpacing()


def cast_like(image: sitk.Image, reference: sitk.Image) -> sitk.Image:
    """Cast `image` to the pixel type of `reference`.

    Integer targets are clamped to their representable range first, so
    values outside it saturate instead of wrapping around.
    """
    pixel_id = reference.GetPixelID()
    dtype = sitk.GetArrayViewFromImage(reference).dtype
    if not np.issubdtype(dtype, np.integer):
        return sitk.Cast(image, pixel_id)
    bounds = np.iinfo(dtype)
    return sitk.Clamp(image, pixel_id, float(bounds.min), float(bounds.max))
