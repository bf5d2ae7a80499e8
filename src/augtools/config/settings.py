from __future__ import annotations

from pathlib import Path
from typing import Literal, Type

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from augtools.io import ExistingFileMode, ImageWriter

__all__ = [
    "DomainSettings",
    "ResampleSettings",
    "OutputSettings",
    "AugmentationSettings",
]


class DomainSettings(BaseModel):
    """How the reference domain is sized.

    Either a fixed `size` for every axis, or isotropic spacing driven by
    `isotropic_size` pixels along `isotropic_axis`.
    """

    size: int | list[int] = Field(
        default=128,
        description="Pixels per axis of the reference domain.",
    )
    isotropic_axis: int | None = Field(
        default=None,
        ge=0,
        description="Axis whose pixel count sets an isotropic spacing.",
    )
    isotropic_size: int | None = Field(
        default=None,
        ge=2,
        description="Pixel count along `isotropic_axis`.",
    )

    @field_validator("size")
    @classmethod
    def _size_at_least_two(cls, value: int | list[int]) -> int | list[int]:
        sizes = [value] if isinstance(value, int) else value
        if any(s < 2 for s in sizes):
            msg = f"Reference size must be at least 2 on every axis, got {value}."
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _isotropic_pair(self) -> DomainSettings:
        if (self.isotropic_axis is None) != (self.isotropic_size is None):
            msg = "isotropic_axis and isotropic_size must be set together."
            raise ValueError(msg)
        return self

    @property
    def isotropic(self) -> bool:
        return self.isotropic_axis is not None

    def build_kwargs(self) -> dict:
        """Keyword arguments for `build_reference_domain`."""
        if self.isotropic:
            return {
                "isotropic_axis": self.isotropic_axis,
                "isotropic_size": self.isotropic_size,
            }
        return {"size": self.size}


class ResampleSettings(BaseModel):
    interpolation: Literal["linear", "nearest", "bspline"] = Field(
        default="linear",
        description="Interpolator; use 'nearest' for label images.",
    )
    default_value: float = Field(
        default=0.0,
        description="Fill value for points outside the input image.",
    )


class OutputSettings(BaseModel):
    directory: Path = Field(
        default=Path("augmented"),
        description="Root directory for generated images.",
    )
    filename_format: str = Field(
        default="{name}_{kind}_{index:03d}.mha",
        description="Pattern filled with name, kind and index.",
    )
    existing_file_mode: ExistingFileMode = Field(
        default=ExistingFileMode.FAIL,
        description="What to do when an output file already exists.",
    )

    def writer(self) -> ImageWriter:
        return ImageWriter(
            root_directory=self.directory,
            filename_format=self.filename_format,
            existing_file_mode=self.existing_file_mode,
        )


class AugmentationSettings(BaseSettings):
    """
    Central configuration for augmentation runs.

    Values come from keyword arguments first, then from ``augtools.yaml``
    in the current working directory.
    """

    domain: DomainSettings = Field(default_factory=DomainSettings)
    resample: ResampleSettings = Field(default_factory=ResampleSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    max_samples: int | None = Field(
        default=1000,
        ge=1,
        description="Refuse parameter spaces larger than this. None disables the guard.",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for random parameter sampling and noise filters.",
    )

    model_config = SettingsConfigDict(
        yaml_file=(Path().cwd() / "augtools.yaml",),
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def from_user_yaml(cls, path: Path) -> AugmentationSettings:
        """Load settings from a YAML file."""
        source = YamlConfigSettingsSource(cls, yaml_file=path)
        settings = source()
        return cls(**settings)

    def to_yaml(self, path: Path) -> None:
        """Write the settings to a YAML file."""
        import yaml

        model = self.model_dump(mode="json")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w") as f:
                yaml.dump(model, f, sort_keys=False)
        except OSError as e:
            msg = f"Failed to save settings to {path}: {e}"
            raise ValueError(msg) from e
