"""Similarity scoring for two equally sized RGB arrays.

Every scorer takes ``(H, W, 3)`` uint8 arrays and returns a similarity in
``[0, 1]`` where 1.0 means identical. Callers are responsible for checking
dimensions beforehand.

The MSE and PSNR mappings are fixed rescalings kept stable so that
threshold-based pass/fail results stay reproducible:

- MSE: ``1 / (1 + mse / 255)``
- PSNR: ``clamp(psnr_db / 100, 0, 1)``, a coarse linear scale rather than a
  perceptual one. Identical images (``mse == 0``) score exactly 1.0.
"""

from __future__ import annotations

import logging
import math

import numpy as np
import numpy.typing as npt

from .pixels import similar_mask, to_grayscale

logger = logging.getLogger(__name__)

SSIM_K1 = 0.01
SSIM_K2 = 0.03
DYNAMIC_RANGE = 255.0
SSIM_C1 = (SSIM_K1 * DYNAMIC_RANGE) ** 2
SSIM_C2 = (SSIM_K2 * DYNAMIC_RANGE) ** 2

RGBArray = npt.NDArray[np.uint8]


def pixel_diff(rgb1: RGBArray, rgb2: RGBArray, ignore_antialiasing: bool) -> tuple[float, int]:
    total_pixels = rgb1.shape[0] * rgb1.shape[1]
    mask = similar_mask(rgb1, rgb2, ignore_antialiasing)
    different_pixels = total_pixels - int(np.count_nonzero(mask))
    similarity = 1.0 - different_pixels / total_pixels
    logger.debug("Pixel diff: %d/%d different pixels", different_pixels, total_pixels)
    return similarity, different_pixels


def ssim(rgb1: RGBArray, rgb2: RGBArray) -> float:
    """Global SSIM over the grayscale projection of both images.

    Statistics are taken over the whole image in one window, with the
    unbiased (n - 1) estimator for variance and covariance.
    """
    gray1 = to_grayscale(rgb1).astype(np.float64)
    gray2 = to_grayscale(rgb2).astype(np.float64)
    total_pixels = gray1.size

    mean1 = float(gray1.mean())
    mean2 = float(gray2.mean())

    dev1 = gray1 - mean1
    dev2 = gray2 - mean2
    if total_pixels > 1:
        variance1 = float((dev1 * dev1).sum()) / (total_pixels - 1)
        variance2 = float((dev2 * dev2).sum()) / (total_pixels - 1)
        covariance = float((dev1 * dev2).sum()) / (total_pixels - 1)
    else:
        variance1 = variance2 = covariance = 0.0

    numerator = (2 * mean1 * mean2 + SSIM_C1) * (2 * covariance + SSIM_C2)
    denominator = (mean1**2 + mean2**2 + SSIM_C1) * (variance1 + variance2 + SSIM_C2)
    score = numerator / denominator
    logger.debug(
        "SSIM: mean=(%.3f, %.3f) var=(%.3f, %.3f) cov=%.3f score=%.6f",
        mean1,
        mean2,
        variance1,
        variance2,
        covariance,
        score,
    )
    return min(max(score, 0.0), 1.0)


def mean_squared_error(rgb1: RGBArray, rgb2: RGBArray) -> float:
    delta = rgb1.astype(np.int64) - rgb2.astype(np.int64)
    # Integer sum keeps mse exactly 0.0 for identical inputs.
    return int((delta * delta).sum()) / delta.size


def mse(rgb1: RGBArray, rgb2: RGBArray) -> float:
    error = mean_squared_error(rgb1, rgb2)
    logger.debug("MSE: %.6f", error)
    return 1.0 / (1.0 + error / DYNAMIC_RANGE)


def psnr(rgb1: RGBArray, rgb2: RGBArray) -> float:
    error = mean_squared_error(rgb1, rgb2)
    if error == 0:
        return 1.0
    psnr_db = 20.0 * math.log10(DYNAMIC_RANGE) - 10.0 * math.log10(error)
    logger.debug("PSNR: %.3f dB (mse=%.6f)", psnr_db, error)
    if psnr_db < 0.0:
        return 0.0
    return min(psnr_db / 100.0, 1.0)
