"""
Pixel-region samplers.

Pure functions over a RasterImage. Strides and thresholds are part of the
detection contract: the same pixel buffer and constants always yield the
same regions, in the same order.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ux_audit.models import RasterImage, Region

# Colour-cluster seed criteria
SEED_MIN_SATURATION = 0.3
SEED_MIN_BRIGHTNESS = 50
SEED_MAX_BRIGHTNESS = 220

# Accepted cluster sizes (exclusive bounds, analysis pixels)
CLUSTER_MIN_WIDTH = 15
CLUSTER_MAX_WIDTH = 200
CLUSTER_MIN_HEIGHT = 10
CLUSTER_MAX_HEIGHT = 100

BUTTON_MIN_WIDTH = 60
BUTTON_MIN_HEIGHT = 30


@dataclass(frozen=True)
class EdgePoint:
    x: int
    y: int
    strength: int


@dataclass(frozen=True)
class Gap:
    x: int
    y: int
    size: int


@dataclass(frozen=True)
class Cluster:
    """Bounding box of a uniformly coloured, saturated region."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class UIElement:
    cluster: Cluster
    kind: str  # "button" or "text"


@dataclass(frozen=True)
class TextBand:
    x: int
    y: int
    width: int
    height: int
    size: float  # rough font-size proxy


@dataclass(frozen=True)
class VerticalEdge:
    x: int
    y: int


def sample_grid_regions(width: int, height: int, count: int = 12, ratio: float = 0.5) -> List[Region]:
    """
    Partition the bitmap into an approximately square grid of ``count`` cells.

    Each region is centred in its cell with a side of ``ratio`` times the
    smaller cell dimension. Regions are returned row by row.
    """
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    cell_width = width / cols
    cell_height = height / rows
    size = min(cell_width, cell_height) * ratio

    regions = []
    for row in range(rows):
        for col in range(cols):
            regions.append(Region(
                x=(col + 0.5) * cell_width - size / 2,
                y=(row + 0.5) * cell_height - size / 2,
                size=size,
            ))
    return regions


def region_colors(raster: RasterImage, region: Region) -> List[Tuple[int, int, int]]:
    """Sample roughly 10x10 RGB colours across a grid region."""
    step = max(1, int(region.size // 10))
    extent = math.ceil(region.size)
    flat = raster.channels.reshape(-1, 3)
    pixel_count = flat.shape[0]

    colors = []
    for dy in range(0, extent, step):
        for dx in range(0, extent, step):
            x = math.floor(region.x + dx)
            y = math.floor(region.y + dy)
            index = y * raster.width + x
            if 0 <= index < pixel_count:
                r, g, b = flat[index]
                colors.append((int(r), int(g), int(b)))
    return colors


def detect_edges(raster: RasterImage, stride: int = 4, threshold: int = 30) -> List[EdgePoint]:
    """
    Find edge points on a sparse grid.

    Strength is the RGB-sum difference to the pixel on the left plus the
    RGB-sum difference to the pixel above. Points are row-major.
    """
    ys = np.arange(1, raster.height - 1, stride)
    xs = np.arange(1, raster.width - 1, stride)
    if ys.size == 0 or xs.size == 0:
        return []

    channels = raster.channels
    current = channels[np.ix_(ys, xs)]
    left = channels[np.ix_(ys, xs - 1)]
    above = channels[np.ix_(ys - 1, xs)]

    strength = np.abs(current - left).sum(axis=-1) + np.abs(current - above).sum(axis=-1)
    row_idx, col_idx = np.nonzero(strength > threshold)

    return [
        EdgePoint(int(xs[j]), int(ys[i]), int(strength[i, j]))
        for i, j in zip(row_idx, col_idx)
    ]


def _band_positions(edges: Sequence[EdgePoint], band_height: int) -> Dict[int, List[int]]:
    """Bucket edge x positions into horizontal bands, in first-seen order."""
    bands: Dict[int, List[int]] = {}
    for edge in edges:
        key = (edge.y // band_height) * band_height
        bands.setdefault(key, []).append(edge.x)
    return bands


def find_gaps(
    edges: Sequence[EdgePoint],
    width: int,
    band_height: int = 10,
    min_gap: int = 10,
) -> List[Gap]:
    """Report horizontal gaps between consecutive edges within each band."""
    gaps = []
    for y, positions in _band_positions(edges, band_height).items():
        ordered = sorted(set(positions))
        for previous, current in zip(ordered, ordered[1:]):
            size = current - previous
            if min_gap < size < width / 2:
                gaps.append(Gap(previous, y, size))
    return gaps


def _color_distance(a: np.ndarray, b: np.ndarray) -> int:
    return int(np.abs(a - b).sum())


def find_color_clusters(
    raster: RasterImage,
    stride: int = 8,
    tolerance: int = 50,
    limit: int = 10,
) -> List[Cluster]:
    """
    Find saturated, uniformly coloured blocks that look like UI components.

    Seeds are scanned on a ``stride`` grid. A seed grows rightward and then
    downward while neighbouring samples stay within ``tolerance`` (sum of
    absolute channel differences). Only clusters within the accepted size
    window are kept, and every seed inside an accepted cluster is skipped.
    """
    channels = raster.channels
    width, height = raster.width, raster.height
    visited = set()
    clusters = []

    for y in range(0, height, stride):
        for x in range(0, width, stride):
            if (x, y) in visited:
                continue

            seed = channels[y, x]
            r, g, b = (int(c) for c in seed)
            brightest = max(r, g, b)
            darkest = min(r, g, b)
            saturation = (brightest - darkest) / brightest if brightest > 0 else 0
            brightness = (r + g + b) / 3

            if (saturation > SEED_MIN_SATURATION
                    and SEED_MIN_BRIGHTNESS < brightness < SEED_MAX_BRIGHTNESS):
                cluster_width = stride
                cluster_height = stride

                dx = stride
                while x + dx < width:
                    if _color_distance(channels[y, x + dx], seed) >= tolerance:
                        break
                    cluster_width = dx + stride
                    visited.add((x + dx, y))
                    dx += stride

                dy = stride
                while y + dy < height:
                    if _color_distance(channels[y + dy, x], seed) >= tolerance:
                        break
                    cluster_height = dy + stride
                    dy += stride

                if (CLUSTER_MIN_WIDTH < cluster_width < CLUSTER_MAX_WIDTH
                        and CLUSTER_MIN_HEIGHT < cluster_height < CLUSTER_MAX_HEIGHT):
                    clusters.append(Cluster(x, y, cluster_width, cluster_height))
                    # Seeds inside an accepted cluster belong to it
                    for cy in range(y, y + cluster_height, stride):
                        for cx in range(x, x + cluster_width, stride):
                            visited.add((cx, cy))

            visited.add((x, y))

    return clusters[:limit]


def classify_elements(clusters: Sequence[Cluster]) -> List[UIElement]:
    """Label large clusters as buttons and everything else as text."""
    return [
        UIElement(
            cluster=cluster,
            kind="button" if cluster.width > BUTTON_MIN_WIDTH and cluster.height > BUTTON_MIN_HEIGHT else "text",
        )
        for cluster in clusters
    ]


def detect_text_bands(
    edges: Sequence[EdgePoint],
    band_height: int = 10,
    min_points: int = 4,
    min_width: int = 20,
    limit: int = 10,
) -> List[TextBand]:
    """
    Treat edge-dense horizontal bands as lines of text.

    The band width divided by ten stands in for the font size.
    """
    bands = []
    for y, positions in _band_positions(edges, band_height).items():
        if len(positions) < min_points:
            continue
        ordered = sorted(set(positions))
        band_width = ordered[-1] - ordered[0]
        if band_width > min_width:
            bands.append(TextBand(
                x=ordered[0],
                y=y,
                width=band_width,
                height=20,
                size=band_width / 10,
            ))
    return bands[:limit]


def information_density(raster: RasterImage, stride: int = 4, threshold: int = 50) -> float:
    """Fraction of sampled horizontal neighbour pairs that differ noticeably."""
    width, height = raster.width, raster.height
    ys = np.arange(0, height, stride)
    xs = np.arange(1, width, stride)

    transitions = 0
    if ys.size and xs.size:
        channels = raster.channels
        diff = np.abs(channels[np.ix_(ys, xs)] - channels[np.ix_(ys, xs - 1)]).sum(axis=-1)
        transitions = int(np.count_nonzero(diff > threshold))

    return transitions / ((width / stride) * (height / stride))


def detect_vertical_edges(raster: RasterImage, stride: int = 4, threshold: int = 50) -> List[VerticalEdge]:
    """
    Find vertical edges using the horizontal gradient only.

    Columns are scanned every ``stride`` pixels and rows every ``2 * stride``;
    points come out column by column.
    """
    xs = np.arange(1, raster.width - 1, stride)
    ys = np.arange(0, raster.height, stride * 2)
    if xs.size == 0 or ys.size == 0:
        return []

    channels = raster.channels
    diff = np.abs(channels[np.ix_(ys, xs)] - channels[np.ix_(ys, xs - 1)]).sum(axis=-1)
    col_idx, row_idx = np.nonzero((diff > threshold).T)

    return [VerticalEdge(int(xs[j]), int(ys[i])) for j, i in zip(col_idx, row_idx)]
