from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image

from webshot.errors import DiffImageWriteError

from .pixels import similar_mask
from .types import RGB

logger = logging.getLogger(__name__)


def render_diff_image(
    rgb1: npt.NDArray[np.uint8],
    rgb2: npt.NDArray[np.uint8],
    ignore_antialiasing: bool,
    diff_color: RGB,
) -> Image.Image:
    """Copy of the first image with every differing position painted ``diff_color``.

    Always classifies with the pixel tolerance rule, independent of the
    algorithm used for scoring.
    """
    mask = similar_mask(rgb1, rgb2, ignore_antialiasing)
    color = np.array(diff_color, dtype=np.uint8)
    diff = np.where(mask[..., np.newaxis], rgb1, color).astype(np.uint8)
    return Image.fromarray(diff)


def write_diff_image(
    rgb1: npt.NDArray[np.uint8],
    rgb2: npt.NDArray[np.uint8],
    output_path: Path,
    ignore_antialiasing: bool,
    diff_color: RGB,
) -> Path:
    diff = render_diff_image(rgb1, rgb2, ignore_antialiasing, diff_color)
    try:
        diff.save(output_path)
    except (OSError, ValueError, KeyError) as e:
        raise DiffImageWriteError(output_path, str(e)) from e
    finally:
        diff.close()

    logger.info("Difference image saved", extra={"diff_image_path": str(output_path)})
    return output_path
