"""
ent — Image Utilities
Checks rendered PNGs and summarizes their pixel statistics.
"""

from PIL import Image
import numpy as np


def verify_image(image_path):
    """
    Check that a file is a readable image.

    Args:
        image_path: Path to the rendered file

    Returns:
        (width, height) tuple

    Raises:
        ValueError if the file is missing or not a valid image
    """
    try:
        with Image.open(image_path) as img:
            img.verify()
        # verify() leaves the image unusable, reopen for the size
        with Image.open(image_path) as img:
            return img.size
    except (OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise ValueError(f"Cannot read image file: {image_path} ({e})") from e


def image_stats(image_path):
    """
    Per-channel mean and standard deviation of an image.

    Returns:
        dict with 'mean' and 'std' lists (R, G, B order) and 'size'
    """
    with Image.open(image_path) as img:
        rgb = img.convert("RGB")
        size = rgb.size
        pixels = np.asarray(rgb, dtype=np.float32)

    flat = pixels.reshape(-1, 3)
    return {
        "size": size,
        "mean": [round(float(v), 2) for v in flat.mean(axis=0)],
        "std": [round(float(v), 2) for v in flat.std(axis=0)],
    }
