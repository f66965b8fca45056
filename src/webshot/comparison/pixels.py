from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

STRICT_TOLERANCE = 2
ANTIALIASING_TOLERANCE = 10

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def channel_tolerance(ignore_antialiasing: bool) -> int:
    return ANTIALIASING_TOLERANCE if ignore_antialiasing else STRICT_TOLERANCE


def pixels_similar(pixel1: Sequence[int], pixel2: Sequence[int], ignore_antialiasing: bool) -> bool:
    if tuple(pixel1) == tuple(pixel2):
        return True
    tolerance = channel_tolerance(ignore_antialiasing)
    return all(abs(int(a) - int(b)) <= tolerance for a, b in zip(pixel1[:3], pixel2[:3]))


def similar_mask(
    rgb1: npt.NDArray[np.uint8],
    rgb2: npt.NDArray[np.uint8],
    ignore_antialiasing: bool,
) -> npt.NDArray[np.bool_]:
    """Per-position equality for two ``(H, W, 3)`` arrays.

    Same rule as :func:`pixels_similar`: a position is similar when every
    channel differs by at most the tolerance. Identical pixels always pass
    since their difference is zero.
    """
    delta = np.abs(rgb1.astype(np.int16) - rgb2.astype(np.int16))
    return np.all(delta <= channel_tolerance(ignore_antialiasing), axis=2)


def to_grayscale(rgb: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    # Truncated, not rounded.
    r = rgb[..., 0].astype(np.float64)
    g = rgb[..., 1].astype(np.float64)
    b = rgb[..., 2].astype(np.float64)
    luma = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    return np.clip(luma, 0, 255).astype(np.uint8)
