# =============================================================================
# CropHealth Monitor Backend
# services/features.py - Image Feature Extraction
#
# Reduces a decoded image to a small colour/brightness feature vector by
# sampling pixels on a fixed stride and bucketing them into green, brown
# and yellow classes.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# Only pixels whose x and y are both multiples of the stride are sampled
SAMPLE_STRIDE = 10


@dataclass(frozen=True)
class ImageFeatures:
    """
    Colour statistics of one image.

    Ratios are percentages (0-100) of sampled pixels in each colour
    bucket; averages are taken over sampled pixels only.
    """
    green_ratio: float
    brown_ratio: float
    yellow_ratio: float
    avg_brightness: float
    avg_red: float
    avg_green: float
    avg_blue: float
    width: int
    height: int
    sample_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'green_ratio': round(self.green_ratio, 2),
            'brown_ratio': round(self.brown_ratio, 2),
            'yellow_ratio': round(self.yellow_ratio, 2),
            'avg_brightness': round(self.avg_brightness, 2),
            'avg_red': round(self.avg_red, 2),
            'avg_green': round(self.avg_green, 2),
            'avg_blue': round(self.avg_blue, 2),
            'image_size': {'width': self.width, 'height': self.height},
            'sample_count': self.sample_count
        }


def default_features() -> ImageFeatures:
    """
    Feature vector substituted when an image cannot be decoded or
    extraction fails.
    """
    return ImageFeatures(
        green_ratio=45.0,
        brown_ratio=10.0,
        yellow_ratio=15.0,
        avg_brightness=120.0,
        avg_red=100.0,
        avg_green=130.0,
        avg_blue=90.0,
        width=224,
        height=224,
        sample_count=50176
    )


def _sample_pixels(image: Union[Image.Image, np.ndarray]) -> Tuple[int, int, np.ndarray]:
    """
    Take the stride-grid pixels of a decoded image.

    Args:
        image: Pillow image in any mode, or an (H, W), (H, W, 3) or
               (H, W, 4) array

    Returns:
        (width, height, samples) where samples is an int32 array of
        shape (N, 3) holding the sampled RGB values
    """
    if isinstance(image, Image.Image):
        if image.mode != 'RGB':
            image = image.convert('RGB')
        pixels = np.asarray(image)
    else:
        pixels = np.asarray(image)

    if pixels.ndim not in (2, 3) or (pixels.ndim == 3 and pixels.shape[2] < 3):
        raise ValueError(f"Expected an RGB image, got array of shape {pixels.shape}")

    height, width = pixels.shape[:2]

    # Slice before copying so only the sampled grid is materialized
    sampled = pixels[::SAMPLE_STRIDE, ::SAMPLE_STRIDE]
    if sampled.ndim == 2:
        sampled = np.stack([sampled] * 3, axis=-1)

    # Widen so uint8 channel sums don't overflow
    return int(width), int(height), sampled[:, :, :3].astype(np.int32).reshape(-1, 3)


def extract_features(image: Union[Image.Image, np.ndarray]) -> ImageFeatures:
    """
    Extract colour features from a decoded image.

    Samples every pixel on the SAMPLE_STRIDE grid (about 1% of a large
    image) and assigns it to the first matching bucket:

        green  : G > R and G > B and G > 100
        brown  : R > 120 and G > 80 and B < 80
        yellow : R > 150 and G > 150 and B < 100

    Pixels matching none of them still count towards the averages.

    Args:
        image: Decoded Pillow image or pixel array

    Returns:
        ImageFeatures for the sampled pixels

    Raises:
        ValueError: If the input cannot be interpreted as an RGB raster
    """
    width, height, sampled = _sample_pixels(image)
    red, green, blue = sampled[:, 0], sampled[:, 1], sampled[:, 2]

    is_green = (green > red) & (green > blue) & (green > 100)
    is_brown = ~is_green & (red > 120) & (green > 80) & (blue < 80)
    is_yellow = ~is_green & ~is_brown & (red > 150) & (green > 150) & (blue < 100)

    # A zero-area image has nothing to sample
    total = len(sampled) or 1

    features = ImageFeatures(
        green_ratio=float(is_green.sum()) / total * 100,
        brown_ratio=float(is_brown.sum()) / total * 100,
        yellow_ratio=float(is_yellow.sum()) / total * 100,
        avg_brightness=float(((red + green + blue) / 3).sum()) / total,
        avg_red=float(red.sum()) / total,
        avg_green=float(green.sum()) / total,
        avg_blue=float(blue.sum()) / total,
        width=width,
        height=height,
        sample_count=total
    )

    logger.debug(f"Extracted image features: {features}")

    return features
