from __future__ import annotations

from pathlib import Path
from typing import Literal

ImagePosition = Literal["first", "second"]


class WebshotError(Exception):
    pass


class ConfigurationError(WebshotError):
    """Invalid comparison options or configuration file contents."""


class ImageLoadError(WebshotError):
    def __init__(self, position: ImagePosition, source: str | Path | None, reason: str) -> None:
        self.position = position
        self.source = source
        self.reason = reason
        where = f" ({source})" if source is not None else ""
        super().__init__(f"Failed to load {position} image{where}: {reason}")


class DimensionMismatchError(WebshotError):
    def __init__(self, first: tuple[int, int], second: tuple[int, int]) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"Image dimensions don't match: {first[0]}x{first[1]} vs {second[0]}x{second[1]}"
        )


class EmptyImageError(WebshotError):
    def __init__(self, size: tuple[int, int]) -> None:
        self.size = size
        super().__init__(f"Cannot compare empty images ({size[0]}x{size[1]})")


class DiffImageWriteError(WebshotError):
    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save diff image to {path}: {reason}")


class OutputWriteError(WebshotError):
    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write results to {path}: {reason}")
