"""WCAG 2.x relative luminance and contrast ratio."""

from typing import Sequence, Tuple

import numpy as np

# Ratio reported when a region yields fewer than two colours to compare
MAX_CONTRAST_RATIO = 21.0


def relative_luminance(colors: np.ndarray) -> np.ndarray:
    """
    Calculate WCAG relative luminance.

    Args:
        colors: Array of shape (..., 3) with 0-255 RGB values

    Returns:
        Array of luminance values in 0-1
    """
    srgb = np.asarray(colors, dtype=np.float64) / 255.0
    linear = np.where(srgb <= 0.03928, srgb / 12.92, ((srgb + 0.055) / 1.055) ** 2.4)
    return 0.2126 * linear[..., 0] + 0.7152 * linear[..., 1] + 0.0722 * linear[..., 2]


def contrast_ratio(color1: Tuple[int, int, int], color2: Tuple[int, int, int]) -> float:
    """WCAG contrast ratio between two colours, always >= 1."""
    l1, l2 = relative_luminance(np.array([color1, color2]))
    lighter, darker = max(l1, l2), min(l1, l2)
    return float((lighter + 0.05) / (darker + 0.05))


def region_contrast_ratio(colors: Sequence[Tuple[int, int, int]]) -> float:
    """Contrast between the lightest and darkest colour of a sampled region."""
    if len(colors) < 2:
        return MAX_CONTRAST_RATIO

    luminances = relative_luminance(np.array(colors))
    return float((luminances.max() + 0.05) / (luminances.min() + 0.05))
