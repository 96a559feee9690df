#!/usr/bin/env python3
"""
Simple script to analyze screenshots and debug the UX audit heuristics.

Usage: python debug_audit.py screenshot.png [more.png ...]
"""

import mimetypes
import sys
from pathlib import Path

import cv2
import numpy as np

# Add this directory to the path when run from elsewhere
sys.path.append(str(Path(__file__).parent))

from ux_audit.config import AnalysisConfig
from ux_audit.engine import UXAuditor
from ux_audit.loader import load_raster
from ux_audit.samplers import detect_edges, find_color_clusters, find_gaps, information_density


def describe_image(image_path: Path):
    """Print basic characteristics of an image and of its analysis bitmap."""
    print(f"\n=== Analyzing {image_path.name} ===")

    image = cv2.imread(str(image_path))
    if image is None:
        print(f"Failed to load: {image_path}")
        return None

    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    h, w = gray.shape

    print(f"Dimensions: {w}x{h} ({w*h} pixels)")
    print(f"Mean intensity: {np.mean(gray):.1f}")
    print(f"Intensity range: {np.min(gray)} - {np.max(gray)}")

    edges = cv2.Canny(gray, 50, 150)
    print(f"Canny edge density: {np.sum(edges > 0) / edges.size:.4f}")

    mime_type = mimetypes.guess_type(image_path.name)[0] or "image/png"
    raster = load_raster(image_path.read_bytes(), mime_type)
    if raster is None:
        print("Audit loader could not decode the image")
        return None

    config = AnalysisConfig()
    sampled_edges = detect_edges(raster, config.edge_stride, config.edge_threshold)
    print(f"Analysis bitmap: {raster.width}x{raster.height} "
          f"(scale {raster.scale_x:.2f} x {raster.scale_y:.2f})")
    print(f"Sampled edges: {len(sampled_edges)}")
    print(f"Spacing gaps: {len(find_gaps(sampled_edges, raster.width))}")
    print(f"Colour clusters: {len(find_color_clusters(raster))}")
    print(f"Information density: {information_density(raster):.3f}")

    return raster


def run_audit(image_path: Path):
    """Run the full audit on an image and print the report."""
    print(f"\n=== Auditing {image_path.name} ===")

    mime_type = mimetypes.guess_type(image_path.name)[0] or "image/png"
    result = UXAuditor().analyze_bytes(image_path.read_bytes(), mime_type, image_path.stem)

    print(f"Decoded: {result.decoded}")
    for name, value in result.scores.to_dict().items():
        print(f"  {name}: {value}")

    print(f"{len(result.issues)} issues:")
    for i, issue in enumerate(result.issues, start=1):
        print(f"  {i}. [{issue.severity.value}/{issue.category.value}] {issue.problem} "
              f"at ({issue.x}, {issue.y})")


def main():
    """Main analysis function."""
    paths = [Path(arg) for arg in sys.argv[1:]]
    if not paths:
        print(__doc__)
        return 1

    for image_path in paths:
        if not image_path.exists():
            print(f"Image not found: {image_path}")
            continue
        describe_image(image_path)
        run_audit(image_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
