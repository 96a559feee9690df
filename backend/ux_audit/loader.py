"""
Screenshot decoding and downsampling.

Decoding sits behind the ``ImageDecoder`` capability so the engine can be
driven with synthetic pixel buffers in tests.
"""

import io
import logging
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from ux_audit.models import RasterImage

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
)

DEFAULT_MAX_ANALYSIS_SIZE = 400


class ImageDecoder:
    """Capability that turns encoded image bytes into an RGBA pixel array."""

    def decode(self, data: bytes, mime_type: str) -> Optional[np.ndarray]:
        """
        Decode image bytes.

        Args:
            data: Encoded image bytes
            mime_type: Declared MIME type of the upload

        Returns:
            ``(height, width, 4)`` uint8 array, or None if the image cannot be decoded
        """
        raise NotImplementedError


class PillowDecoder(ImageDecoder):
    """Decodes PNG, JPEG, WEBP and GIF (first frame) uploads with Pillow."""

    def decode(self, data: bytes, mime_type: str) -> Optional[np.ndarray]:
        if not data:
            logger.warning("Cannot decode empty image data")
            return None

        if (mime_type or "").lower() not in SUPPORTED_MIME_TYPES:
            logger.warning(f"Unsupported image type: {mime_type}")
            return None

        try:
            with io.BytesIO(data) as buffer, Image.open(buffer) as image:
                image.load()
                with image.convert("RGBA") as rgba:
                    pixels = np.array(rgba, dtype=np.uint8)
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            logger.warning(f"Failed to decode image: {e}")
            return None

        if pixels.ndim != 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            logger.warning(f"Decoded image has unusable shape {pixels.shape}")
            return None

        return pixels


def analysis_size(width: int, height: int, max_size: int = DEFAULT_MAX_ANALYSIS_SIZE):
    """
    Compute the analysis resolution for an image, never upscaling.

    Returns:
        Tuple of (analysis_width, analysis_height)
    """
    scale = min(max_size / width, max_size / height, 1)
    return max(1, int(width * scale)), max(1, int(height * scale))


def downsample(pixels: np.ndarray, max_size: int = DEFAULT_MAX_ANALYSIS_SIZE) -> np.ndarray:
    """
    Resize an RGBA array so its longer side is at most ``max_size`` pixels.

    Args:
        pixels: ``(height, width, 4)`` uint8 array
        max_size: Longest side of the analysis bitmap

    Returns:
        Resized array (the input itself when no resize is needed)
    """
    height, width = pixels.shape[:2]
    new_width, new_height = analysis_size(width, height, max_size)

    if (new_width, new_height) == (width, height):
        return pixels

    return cv2.resize(
        np.ascontiguousarray(pixels),
        (new_width, new_height),
        interpolation=cv2.INTER_AREA,
    )


def load_raster(
    data: bytes,
    mime_type: str,
    decoder: Optional[ImageDecoder] = None,
    max_size: int = DEFAULT_MAX_ANALYSIS_SIZE,
) -> Optional[RasterImage]:
    """
    Decode an upload and produce the downsampled analysis bitmap.

    Args:
        data: Encoded image bytes
        mime_type: Declared MIME type
        decoder: Decoder to use (Pillow by default)
        max_size: Longest side of the analysis bitmap

    Returns:
        RasterImage carrying the original dimensions, or None on decode failure
    """
    decoder = decoder or PillowDecoder()
    pixels = decoder.decode(data, mime_type)
    if pixels is None:
        return None

    original_height, original_width = pixels.shape[:2]
    analysis_pixels = downsample(pixels, max_size)

    logger.debug(
        f"Loaded {original_width}x{original_height} image, "
        f"analysing at {analysis_pixels.shape[1]}x{analysis_pixels.shape[0]}"
    )
    return RasterImage(analysis_pixels, original_width, original_height)
