"""
Heuristic UX rules.

Each rule reads the analysis bitmap and returns raw issues in discovery
order, located in analysis-bitmap coordinates. Rules are independent and
share no state.

Sources of the heuristics:
- WCAG 2.2 AA: contrast (1.4.3) and target size (2.5.5)
- Nielsen heuristic #4: consistency and standards
- Gestalt principles: proximity (spacing), continuity (alignment), similarity (hierarchy)
- Miller's and Hick's laws: cognitive load
"""

from collections import Counter
from typing import Callable, List, Sequence, Tuple

from ux_audit.config import AnalysisConfig
from ux_audit.contrast import region_contrast_ratio
from ux_audit.models import RasterImage, RawIssue, RuleType, round_half_up
from ux_audit.samplers import (
    UIElement,
    classify_elements,
    detect_edges,
    detect_text_bands,
    detect_vertical_edges,
    find_color_clusters,
    find_gaps,
    information_density,
    region_colors,
    sample_grid_regions,
)

Rule = Callable[[RasterImage, AnalysisConfig], List[RawIssue]]

# (upper bound on the contrast ratio, severity tier), checked in order
CONTRAST_SEVERITY_STEPS: Tuple[Tuple[float, int], ...] = (
    (2.0, 4),
    (3.0, 3),
    (3.5, 2),
    (4.0, 1),
)


def contrast_severity(ratio: float) -> int:
    for upper, tier in CONTRAST_SEVERITY_STEPS:
        if ratio < upper:
            return tier
    return 0


def analyze_contrast(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """WCAG 2.2 AA contrast ratio (1.4.3) over grid-sampled regions."""
    issues = []
    regions = sample_grid_regions(
        raster.width, raster.height, config.contrast_sample_count, config.contrast_region_ratio
    )

    for region in regions:
        ratio = region_contrast_ratio(region_colors(raster, region))
        if ratio >= config.min_contrast_ratio:
            continue

        issues.append(RawIssue(
            rule_type=RuleType.CONTRAST,
            severity_tier=contrast_severity(ratio),
            bounding_box=(region.x, region.y, region.x + region.size, region.y + region.size),
            description=(
                f"WCAG 2.2 AA violation: Contrast ratio {ratio:.1f}:1 is below "
                f"required {config.min_contrast_ratio}:1 for normal text"
            ),
            recommendation=(
                "Increase contrast to at least 4.5:1 (WCAG 2.2 AA). For large text (18pt+), "
                "minimum is 3:1. Use tools like WebAIM Contrast Checker to verify."
            ),
            key=f"contrast-{int(region.x)}-{int(region.y)}",
        ))

    return issues[:config.max_contrast_issues]


def analyze_touch_targets(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """WCAG 2.2 target size (2.5.5), measured in original-image pixels."""
    issues = []
    clusters = find_color_clusters(
        raster, config.cluster_stride, config.cluster_color_tolerance, config.max_clusters
    )

    for cluster in clusters:
        target_width = cluster.width * raster.scale_x
        target_height = cluster.height * raster.scale_y
        if target_width >= config.min_touch_target and target_height >= config.min_touch_target:
            continue

        too_small = (target_width < config.critical_touch_target
                     or target_height < config.critical_touch_target)
        issues.append(RawIssue(
            rule_type=RuleType.TOUCH_TARGET,
            severity_tier=4 if too_small else 3,
            bounding_box=(cluster.x, cluster.y, cluster.x + cluster.width, cluster.y + cluster.height),
            description=(
                f"WCAG 2.2 AA violation (2.5.5): Touch target "
                f"{round_half_up(target_width)}x{round_half_up(target_height)}px is below "
                f"{config.min_touch_target}x{config.min_touch_target}px minimum"
            ),
            recommendation=(
                "Increase touch target to at least 44x44 pixels. WCAG 2.5.5 requires minimum "
                "24x24 CSS pixels, but 44x44 provides better usability."
            ),
            key=f"touch-{cluster.x}-{cluster.y}",
        ))

    return issues[:config.max_touch_target_issues]


def group_by_style(elements: Sequence[UIElement], bucket: int = 5) -> Counter:
    """Count elements per (width, height) bucket."""
    return Counter(
        (round_half_up(e.cluster.width / bucket) * bucket, round_half_up(e.cluster.height / bucket) * bucket)
        for e in elements
    )


def _element_box(element: UIElement):
    c = element.cluster
    return (c.x, c.y, c.x + c.width, c.y + c.height)


def analyze_consistency(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """Nielsen heuristic #4: too many button or text style variants."""
    issues = []
    elements = classify_elements(find_color_clusters(
        raster, config.cluster_stride, config.cluster_color_tolerance, config.max_clusters
    ))
    buttons = [e for e in elements if e.kind == "button"]
    texts = [e for e in elements if e.kind == "text"]

    button_styles = group_by_style(buttons, config.style_bucket)
    if len(button_styles) > config.max_button_styles:
        issues.append(RawIssue(
            rule_type=RuleType.CONSISTENCY,
            severity_tier=2,
            bounding_box=_element_box(buttons[0]),
            description=(
                f"Nielsen Heuristic #4 violation: {len(button_styles)} different button styles "
                f"detected, violating consistency principle"
            ),
            recommendation=(
                "Standardize button styles. Use a design system with consistent colors, sizes, "
                "and spacing. Follow platform conventions (Material Design, iOS HIG)."
            ),
            key="consistency-buttons",
        ))

    text_styles = group_by_style(texts, config.style_bucket)
    if len(text_styles) > config.max_text_styles:
        issues.append(RawIssue(
            rule_type=RuleType.CONSISTENCY,
            severity_tier=1,
            bounding_box=_element_box(texts[0]),
            description=(
                f"Nielsen Heuristic #4 violation: Too many text style variations "
                f"({len(text_styles)}) create inconsistency"
            ),
            recommendation=(
                "Limit to 3-4 text styles (heading, subheading, body, caption). Use a typography "
                "scale (e.g., 12, 14, 16, 20, 24px) for consistency."
            ),
            key="consistency-text",
        ))

    return issues


def analyze_hierarchy(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """Text sizes too similar to separate importance levels."""
    edges = detect_edges(raster, config.edge_stride, config.edge_threshold)
    bands = detect_text_bands(edges, config.gap_band_height)
    if len(bands) < config.min_text_bands:
        return []

    bucket = config.font_size_bucket
    distinct_sizes = {round_half_up(band.size / bucket) * bucket for band in bands}
    if len(distinct_sizes) >= 2:
        return []

    first = bands[0]
    return [RawIssue(
        rule_type=RuleType.HIERARCHY,
        severity_tier=2,
        bounding_box=(first.x, first.y, first.x + first.width, first.y + first.height),
        description=(
            "Gestalt Principle violation: Insufficient visual hierarchy. Text sizes are too "
            "similar, making it hard to distinguish importance"
        ),
        recommendation=(
            "Establish clear hierarchy using size contrast (e.g., 24px headings, 16px body, "
            "12px captions). Use 1.5-2x size difference between levels."
        ),
        key="hierarchy-size",
    )]


def analyze_spacing(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """Gestalt proximity: gap sizes that stray far from the mean gap."""
    edges = detect_edges(raster, config.edge_stride, config.edge_threshold)
    gaps = find_gaps(edges, raster.width, config.gap_band_height, config.min_gap)
    if len(gaps) <= 3:
        return []

    mean_gap = sum(g.size for g in gaps) / len(gaps)
    inconsistent = [g for g in gaps if abs(g.size - mean_gap) > mean_gap * config.spacing_variance_ratio]
    if len(inconsistent) < config.min_inconsistent_gaps:
        return []

    first = inconsistent[0]
    return [RawIssue(
        rule_type=RuleType.SPACING,
        severity_tier=2,
        bounding_box=(first.x, first.y, first.x + first.size, first.y + 20),
        description=(
            f"Gestalt Principle of Proximity violation: Inconsistent spacing "
            f"({len(inconsistent)} variations) breaks visual grouping"
        ),
        recommendation=(
            "Apply consistent spacing using 8px grid system. Related items should be closer "
            "(8-16px), unrelated items further (24-32px). Use spacing scale: 4, 8, 12, 16, 24, 32, 48px."
        ),
        key=f"spacing-{first.x}-{first.y}",
    )]


def analyze_cognitive_load(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """Miller's law on interactive element count, plus information density."""
    issues = []
    width, height = raster.width, raster.height

    elements = classify_elements(find_color_clusters(
        raster, config.cluster_stride, config.cluster_color_tolerance, config.max_clusters
    ))
    interactive = sum(1 for e in elements if e.kind in ("button", "link"))

    if interactive > config.max_interactive_elements:
        issues.append(RawIssue(
            rule_type=RuleType.COGNITIVE_LOAD,
            severity_tier=3,
            bounding_box=(width * 0.1, height * 0.1, width * 0.9, height * 0.5),
            description=(
                f"Miller's Law violation: {interactive} interactive elements exceed the 7±2 "
                f"cognitive limit, increasing decision time"
            ),
            recommendation=(
                "Reduce to 5-7 primary actions. Group related items, use progressive disclosure, "
                "and prioritize actions by frequency. Apply Hick's Law: fewer choices = faster decisions."
            ),
            key="cognitive-load-count",
        ))

    density = information_density(raster, config.density_stride, config.density_pixel_threshold)
    if density > config.density_threshold:
        issues.append(RawIssue(
            rule_type=RuleType.COGNITIVE_LOAD,
            severity_tier=2,
            bounding_box=(width * 0.2, height * 0.2, width * 0.8, height * 0.8),
            description=(
                "High information density detected. Too many visual elements compete for "
                "attention, violating Gestalt Principle of Figure-Ground"
            ),
            recommendation=(
                "Increase whitespace, use visual grouping (cards, sections), and apply progressive "
                "disclosure. Follow 60-30-10 rule: 60% whitespace, 30% secondary, 10% accent."
            ),
            key="cognitive-load-density",
        ))

    return issues


def analyze_alignment(raster: RasterImage, config: AnalysisConfig) -> List[RawIssue]:
    """Gestalt continuity: edges sitting just off the horizontal centre."""
    edges = detect_vertical_edges(raster, config.edge_stride, config.vertical_edge_threshold)
    center_x = raster.width / 2

    near_center = [
        e for e in edges
        if config.alignment_min_offset < abs(e.x - center_x) < center_x * config.alignment_center_ratio
    ]
    if len(near_center) < config.min_alignment_points:
        return []

    first = near_center[0]
    # 10 original pixels either side of the edge
    pad = 10 / raster.scale_x
    return [RawIssue(
        rule_type=RuleType.ALIGNMENT,
        severity_tier=1,
        bounding_box=(first.x - pad, first.y, first.x + pad, first.y + 100),
        description=(
            f"Gestalt Principle of Continuity violation: {len(near_center)} elements are "
            f"near-center but misaligned, breaking visual flow"
        ),
        recommendation=(
            "Align elements to a consistent grid. Use 8px or 12px grid system. Center-aligned "
            "content should be perfectly centered (±1px tolerance)."
        ),
        key=f"alignment-{first.x}",
    )]


# Evaluation order; issue order in reports follows it
RULES: Tuple[Tuple[RuleType, Rule], ...] = (
    (RuleType.CONTRAST, analyze_contrast),
    (RuleType.TOUCH_TARGET, analyze_touch_targets),
    (RuleType.CONSISTENCY, analyze_consistency),
    (RuleType.HIERARCHY, analyze_hierarchy),
    (RuleType.SPACING, analyze_spacing),
    (RuleType.COGNITIVE_LOAD, analyze_cognitive_load),
    (RuleType.ALIGNMENT, analyze_alignment),
)
