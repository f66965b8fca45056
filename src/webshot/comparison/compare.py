from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image, UnidentifiedImageError

from webshot.errors import DimensionMismatchError, EmptyImageError, ImageLoadError, ImagePosition

from . import algorithms
from .diff_image import write_diff_image
from .types import ComparisonAlgorithm, ComparisonOptions, ComparisonResult

logger = logging.getLogger(__name__)

ImageSource = bytes | Image.Image

LOAD_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError)


def _as_image(source: ImageSource, position: ImagePosition) -> Image.Image:
    if isinstance(source, bytes):
        try:
            img = Image.open(io.BytesIO(source))
        except LOAD_ERRORS as e:
            raise ImageLoadError(position, None, str(e)) from e
        try:
            img.load()
        except LOAD_ERRORS as e:
            img.close()
            raise ImageLoadError(position, None, str(e)) from e
        return img
    return source


def _open_image(path: str | Path, position: ImagePosition) -> Image.Image:
    try:
        img = Image.open(path)
    except LOAD_ERRORS as e:
        raise ImageLoadError(position, path, str(e)) from e
    try:
        img.load()
    except LOAD_ERRORS as e:
        img.close()
        raise ImageLoadError(position, path, str(e)) from e
    return img


def _as_rgb_array(img: Image.Image) -> npt.NDArray[np.uint8]:
    if img.mode == "RGB":
        return np.asarray(img, dtype=np.uint8)
    with img.convert("RGB") as rgb:
        return np.asarray(rgb, dtype=np.uint8)


def compare_images(
    image1: ImageSource,
    image2: ImageSource,
    options: ComparisonOptions,
) -> ComparisonResult:
    options.validate()

    img1 = _as_image(image1, "first")
    try:
        img2 = _as_image(image2, "second")
    except ImageLoadError:
        if isinstance(image1, bytes):
            img1.close()
        raise
    try:
        if img1.size != img2.size:
            raise DimensionMismatchError(img1.size, img2.size)
        width, height = img1.size
        if width == 0 or height == 0:
            raise EmptyImageError(img1.size)
        rgb1 = _as_rgb_array(img1)
        rgb2 = _as_rgb_array(img2)
    finally:
        if isinstance(image1, bytes):
            img1.close()
        if isinstance(image2, bytes):
            img2.close()

    total_pixels = width * height
    logger.info(
        "Comparing images",
        extra={
            "algorithm": options.algorithm.value,
            "width": width,
            "height": height,
        },
    )

    different_pixels: int | None = None
    match options.algorithm:
        case ComparisonAlgorithm.PIXEL_DIFF:
            similarity, different_pixels = algorithms.pixel_diff(
                rgb1, rgb2, options.ignore_antialiasing
            )
        case ComparisonAlgorithm.SSIM:
            similarity = algorithms.ssim(rgb1, rgb2)
        case ComparisonAlgorithm.MSE:
            similarity = algorithms.mse(rgb1, rgb2)
        case ComparisonAlgorithm.PSNR:
            similarity = algorithms.psnr(rgb1, rgb2)

    similar = similarity >= 1.0 - options.threshold

    diff_image_path: Path | None = None
    if options.generate_diff_image and options.diff_output_path is not None:
        diff_image_path = write_diff_image(
            rgb1,
            rgb2,
            Path(options.diff_output_path),
            options.ignore_antialiasing,
            options.diff_color,
        )

    logger.info(
        "Comparison finished",
        extra={
            "algorithm": options.algorithm.value,
            "similarity": similarity,
            "similar": similar,
            "different_pixels": different_pixels,
        },
    )

    return ComparisonResult(
        similar=similar,
        similarity=similarity,
        different_pixels=different_pixels,
        total_pixels=total_pixels,
        algorithm=options.algorithm,
        threshold=options.threshold,
        diff_image_path=diff_image_path,
    )


def compare_files(
    image1_path: str | Path,
    image2_path: str | Path,
    options: ComparisonOptions,
) -> ComparisonResult:
    options.validate()

    logger.info(
        "Loading images for comparison",
        extra={"image1": str(image1_path), "image2": str(image2_path)},
    )
    with _open_image(image1_path, "first") as img1, _open_image(image2_path, "second") as img2:
        return compare_images(img1, img2, options)


def compare_files_batch(
    pairs: Sequence[tuple[str | Path, str | Path]],
    options: ComparisonOptions,
) -> list[ComparisonResult | None]:
    """Compare each pair independently; a pair that fails yields ``None``.

    Diff output paths must be distinct per pair, so ``options`` is usually
    built without diff generation here.
    """
    return [
        _compare_single_pair(idx, image1_path, image2_path, options)
        for idx, (image1_path, image2_path) in enumerate(pairs)
    ]


def _compare_single_pair(
    idx: int,
    image1_path: str | Path,
    image2_path: str | Path,
    options: ComparisonOptions,
) -> ComparisonResult | None:
    try:
        return compare_files(image1_path, image2_path, options)
    except Exception:
        logger.exception(
            "Failed to compare image pair %d",
            idx,
            extra={"image1": str(image1_path), "image2": str(image2_path)},
        )
        return None
