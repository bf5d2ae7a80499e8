from .settings import (
    AugmentationSettings,
    DomainSettings,
    OutputSettings,
    ResampleSettings,
)

__all__ = [
    "AugmentationSettings",
    "DomainSettings",
    "OutputSettings",
    "ResampleSettings",
]
