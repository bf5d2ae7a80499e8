from abc import ABC, abstractmethod
from typing import Any

from SimpleITK import Image


class BaseTransform(ABC):
    """Base class for image-to-image augmentation operations.

    Subclasses implement `__call__`, taking a SimpleITK image and returning
    the augmented image. Instances are plain configuration objects and can be
    reused across images.
    """

    @property
    def name(self) -> str:
        """Label used in logs and output file names."""
        return self.__class__.__name__

    @abstractmethod
    def __call__(self, image: Image, *args: Any, **kwargs: Any) -> Image:  # noqa
        """Apply the operation to `image` and return the result."""
        pass

    def __str__(self) -> str:
        return self.name
