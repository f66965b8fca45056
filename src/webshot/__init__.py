from __future__ import annotations

from webshot.comparison.compare import compare_files, compare_images
from webshot.comparison.types import ComparisonAlgorithm, ComparisonOptions, ComparisonResult
from webshot.errors import (
    ConfigurationError,
    DiffImageWriteError,
    DimensionMismatchError,
    EmptyImageError,
    ImageLoadError,
    OutputWriteError,
    WebshotError,
)

__all__ = [
    "ComparisonAlgorithm",
    "ComparisonOptions",
    "ComparisonResult",
    "ConfigurationError",
    "DiffImageWriteError",
    "DimensionMismatchError",
    "EmptyImageError",
    "ImageLoadError",
    "OutputWriteError",
    "WebshotError",
    "compare_files",
    "compare_images",
]
