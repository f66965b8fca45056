from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from webshot.errors import ConfigurationError

RGB = tuple[int, int, int]

DEFAULT_THRESHOLD = 0.1
DEFAULT_DIFF_COLOR: RGB = (255, 0, 0)


class ComparisonAlgorithm(str, enum.Enum):
    PIXEL_DIFF = "pixel-diff"
    SSIM = "ssim"
    MSE = "mse"
    PSNR = "psnr"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, name: str) -> ComparisonAlgorithm:
        normalized = name.strip().lower()
        if normalized == "pixel":
            return cls.PIXEL_DIFF
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(a.value for a in cls)
            raise ConfigurationError(
                f"Unknown algorithm: {name}. Supported: {supported}"
            ) from None


_DISPLAY_NAMES = {
    ComparisonAlgorithm.PIXEL_DIFF: "PixelDiff",
    ComparisonAlgorithm.SSIM: "SSIM",
    ComparisonAlgorithm.MSE: "MSE",
    ComparisonAlgorithm.PSNR: "PSNR",
}


@dataclass(frozen=True)
class ComparisonOptions:
    """Settings for a single comparison.

    ``threshold`` is the largest tolerated dissimilarity: a pair is similar
    when ``similarity >= 1 - threshold``. ``diff_output_path`` is only
    consulted when ``generate_diff_image`` is set.
    """

    algorithm: ComparisonAlgorithm = ComparisonAlgorithm.PIXEL_DIFF
    threshold: float = DEFAULT_THRESHOLD
    generate_diff_image: bool = False
    diff_output_path: Path | None = None
    ignore_antialiasing: bool = False
    diff_color: RGB = DEFAULT_DIFF_COLOR

    def validate(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(
                f"Threshold must be between 0.0 and 1.0, got: {self.threshold}"
            )
        if self.generate_diff_image and self.diff_output_path is None:
            raise ConfigurationError(
                "Diff output path must be specified when generating diff image"
            )
        if len(self.diff_color) != 3 or any(not 0 <= c <= 255 for c in self.diff_color):
            raise ConfigurationError(
                f"Diff color must be three channels in 0-255, got: {self.diff_color}"
            )


class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    similar: bool
    similarity: float = Field(ge=0.0, le=1.0)
    different_pixels: int | None = None
    total_pixels: int
    algorithm: ComparisonAlgorithm
    threshold: float
    diff_image_path: Path | None = None

    @property
    def different_ratio(self) -> float | None:
        if self.different_pixels is None or not self.total_pixels:
            return None
        return self.different_pixels / self.total_pixels
