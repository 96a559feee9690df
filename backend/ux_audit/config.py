"""Tuning constants for the heuristic analysis."""

from typing import Any, Dict


class AnalysisConfig:
    """Configuration for screenshot analysis."""

    def __init__(
        self,
        max_analysis_size: int = 400,        # longest side of the analysis bitmap
        contrast_sample_count: int = 12,     # grid cells sampled for contrast
        contrast_region_ratio: float = 0.5,  # region side relative to the cell
        min_contrast_ratio: float = 4.5,     # WCAG AA, normal text
        max_contrast_issues: int = 3,
        edge_stride: int = 4,
        edge_threshold: int = 30,            # RGB-sum gradient per axis
        gap_band_height: int = 10,
        min_gap: int = 10,
        cluster_stride: int = 8,
        cluster_color_tolerance: int = 50,
        max_clusters: int = 10,
        min_touch_target: int = 44,          # original-image pixels
        critical_touch_target: int = 24,     # WCAG 2.5.5 minimum
        max_touch_target_issues: int = 2,
        style_bucket: int = 5,
        max_button_styles: int = 3,
        max_text_styles: int = 4,
        font_size_bucket: int = 4,
        min_text_bands: int = 4,
        spacing_variance_ratio: float = 0.4,
        min_inconsistent_gaps: int = 3,
        max_interactive_elements: int = 9,   # Miller's Law, 7 +/- 2
        density_stride: int = 4,
        density_pixel_threshold: int = 50,
        density_threshold: float = 0.5,
        vertical_edge_threshold: int = 50,
        alignment_center_ratio: float = 0.15,
        alignment_min_offset: int = 3,
        min_alignment_points: int = 4,
    ):
        self.max_analysis_size = max_analysis_size
        self.contrast_sample_count = contrast_sample_count
        self.contrast_region_ratio = contrast_region_ratio
        self.min_contrast_ratio = min_contrast_ratio
        self.max_contrast_issues = max_contrast_issues
        self.edge_stride = edge_stride
        self.edge_threshold = edge_threshold
        self.gap_band_height = gap_band_height
        self.min_gap = min_gap
        self.cluster_stride = cluster_stride
        self.cluster_color_tolerance = cluster_color_tolerance
        self.max_clusters = max_clusters
        self.min_touch_target = min_touch_target
        self.critical_touch_target = critical_touch_target
        self.max_touch_target_issues = max_touch_target_issues
        self.style_bucket = style_bucket
        self.max_button_styles = max_button_styles
        self.max_text_styles = max_text_styles
        self.font_size_bucket = font_size_bucket
        self.min_text_bands = min_text_bands
        self.spacing_variance_ratio = spacing_variance_ratio
        self.min_inconsistent_gaps = min_inconsistent_gaps
        self.max_interactive_elements = max_interactive_elements
        self.density_stride = density_stride
        self.density_pixel_threshold = density_pixel_threshold
        self.density_threshold = density_threshold
        self.vertical_edge_threshold = vertical_edge_threshold
        self.alignment_center_ratio = alignment_center_ratio
        self.alignment_min_offset = alignment_min_offset
        self.min_alignment_points = min_alignment_points

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))
