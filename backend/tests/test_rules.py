"""
Tests for the heuristic UX rules.
"""

from unittest.mock import patch

import numpy as np
import pytest

from ux_audit.config import AnalysisConfig
from ux_audit.models import RasterImage, RuleType
from ux_audit.rules import (
    RULES,
    analyze_alignment,
    analyze_cognitive_load,
    analyze_consistency,
    analyze_contrast,
    analyze_hierarchy,
    analyze_spacing,
    analyze_touch_targets,
    contrast_severity,
    group_by_style,
)
from ux_audit.samplers import Cluster, Gap, TextBand, UIElement


@pytest.fixture
def config():
    return AnalysisConfig()


@pytest.fixture
def blank_raster():
    """Flat white 40x40 raster on which no sampler finds anything."""
    return RasterImage.from_array(np.full((40, 40, 3), 255, dtype=np.uint8))


def _bands(*sizes):
    return [TextBand(x=0, y=i * 10, width=int(size * 10), height=20, size=size) for i, size in enumerate(sizes)]


class TestContrastRule:
    """Test cases for the WCAG contrast rule."""

    @pytest.mark.parametrize("ratio,tier", [(1.0, 4), (2.5, 3), (3.2, 2), (3.8, 1), (4.2, 0)])
    def test_contrast_severity(self, ratio, tier):
        """Lower ratios map to higher severity tiers."""
        assert contrast_severity(ratio) == tier

    def test_uniform_regions_flagged(self, half_planes, config):
        """Every uniform region fails, but only three issues are kept."""
        issues = analyze_contrast(RasterImage.from_array(half_planes), config)

        assert len(issues) == 3
        assert all(issue.rule_type == RuleType.CONTRAST for issue in issues)
        assert all(issue.severity_tier == 4 for issue in issues)
        assert issues[0].key == "contrast-25-41"
        assert issues[0].bounding_box[0] == pytest.approx(25)
        assert issues[0].bounding_box[2] == pytest.approx(75)
        assert "1.0:1" in issues[0].description

    def test_two_close_greys_are_critical(self, config):
        """Two colours with a ratio under 2:1 give a critical contrast issue."""
        array = np.full((400, 400, 3), 120, dtype=np.uint8)
        array[::2] = 150

        issues = analyze_contrast(RasterImage.from_array(array), config)

        assert len(issues) == 3
        assert all(issue.severity_tier == 4 for issue in issues)
        assert "1.4:1" in issues[0].description

    def test_high_contrast_regions_pass(self, config):
        """Regions containing both black and white pixels are fine."""
        array = np.zeros((400, 400, 3), dtype=np.uint8)
        array[::2] = 255

        assert analyze_contrast(RasterImage.from_array(array), config) == []

    def test_max_issues_configurable(self, half_planes):
        """The cap on contrast issues follows the configuration."""
        config = AnalysisConfig(max_contrast_issues=5)

        assert len(analyze_contrast(RasterImage.from_array(half_planes), config)) == 5


class TestTouchTargetRule:
    """Test cases for the touch target rule."""

    def test_tiny_target_is_critical(self, small_square, config):
        """A 16px target is below the 24px WCAG minimum."""
        issues = analyze_touch_targets(RasterImage.from_array(small_square), config)

        assert len(issues) == 1
        assert issues[0].severity_tier == 4
        assert issues[0].key == "touch-104-104"
        assert issues[0].bounding_box == (104, 104, 120, 120)
        assert "16x16px" in issues[0].description

    def test_undersized_target_is_major(self, config):
        """A target between 24px and 44px is flagged one tier lower."""
        array = np.full((200, 200, 3), 200, dtype=np.uint8)
        array[100:136, 100:136] = (30, 90, 220)
        issues = analyze_touch_targets(RasterImage.from_array(array), config)

        assert len(issues) == 1
        assert issues[0].severity_tier == 3
        assert issues[0].bounding_box == (104, 104, 136, 136)
        assert "32x32px" in issues[0].description

    @pytest.mark.parametrize("offset", [96, 100, 104])
    def test_isolated_square_flagged_once(self, offset, config):
        """A lone 20x20 square gives exactly one issue wherever it sits."""
        array = np.full((200, 200, 3), 200, dtype=np.uint8)
        array[offset:offset + 20, offset:offset + 20] = (30, 90, 220)

        issues = analyze_touch_targets(RasterImage.from_array(array), config)

        assert len(issues) == 1
        assert issues[0].severity_tier >= 3

    def test_measured_in_original_pixels(self, small_square, config):
        """Downsampled targets are scaled back before being measured."""
        raster = RasterImage.from_array(small_square, original_width=800, original_height=800)

        assert analyze_touch_targets(raster, config) == []


class TestConsistencyRule:
    """Test cases for the consistency rule."""

    def test_group_by_style(self):
        """Element sizes are bucketed to the nearest 5px."""
        elements = [
            UIElement(Cluster(0, 0, 81, 41), "button"),
            UIElement(Cluster(0, 0, 79, 39), "button"),
            UIElement(Cluster(0, 0, 88, 40), "button"),
        ]

        assert group_by_style(elements, 5) == {(80, 40): 2, (90, 40): 1}

    @patch("ux_audit.rules.find_color_clusters")
    def test_too_many_button_styles(self, mock_clusters, blank_raster, config):
        """Four button styles exceed the limit of three."""
        mock_clusters.return_value = [Cluster(10, 10, w, 40) for w in (80, 100, 120, 140)]

        issues = analyze_consistency(blank_raster, config)

        assert len(issues) == 1
        assert issues[0].key == "consistency-buttons"
        assert issues[0].severity_tier == 2
        assert issues[0].bounding_box == (10, 10, 90, 50)

    @patch("ux_audit.rules.find_color_clusters")
    def test_too_many_text_styles(self, mock_clusters, blank_raster, config):
        """Five text styles exceed the limit of four."""
        mock_clusters.return_value = [Cluster(0, 0, w, 12) for w in (20, 30, 40, 50, 55)]

        issues = analyze_consistency(blank_raster, config)

        assert [issue.key for issue in issues] == ["consistency-text"]
        assert issues[0].severity_tier == 1

    @patch("ux_audit.rules.find_color_clusters")
    def test_consistent_styles(self, mock_clusters, blank_raster, config):
        """Repeated styles are not flagged."""
        mock_clusters.return_value = [Cluster(0, i * 50, 80, 40) for i in range(6)]

        assert analyze_consistency(blank_raster, config) == []


class TestHierarchyRule:
    """Test cases for the visual hierarchy rule."""

    @patch("ux_audit.rules.detect_text_bands")
    def test_similar_sizes_flagged(self, mock_bands, blank_raster, config):
        """Four lines that all round to the same size lack hierarchy."""
        mock_bands.return_value = _bands(3.0, 3.1, 3.2, 3.0)

        issues = analyze_hierarchy(blank_raster, config)

        assert len(issues) == 1
        assert issues[0].key == "hierarchy-size"
        assert issues[0].severity_tier == 2
        assert issues[0].bounding_box == (0, 0, 30, 20)

    @patch("ux_audit.rules.detect_text_bands")
    def test_distinct_sizes_pass(self, mock_bands, blank_raster, config):
        """Two size levels are enough."""
        mock_bands.return_value = _bands(3.0, 10.0, 3.0, 3.0)

        assert analyze_hierarchy(blank_raster, config) == []

    @patch("ux_audit.rules.detect_text_bands")
    def test_too_few_lines(self, mock_bands, blank_raster, config):
        """Fewer than four text lines are not judged."""
        mock_bands.return_value = _bands(3.0, 3.0, 3.0)

        assert analyze_hierarchy(blank_raster, config) == []


class TestSpacingRule:
    """Test cases for the spacing rule."""

    @patch("ux_audit.rules.find_gaps")
    def test_inconsistent_gaps(self, mock_gaps, blank_raster, config):
        """Gaps far from the mean are reported at the first offender."""
        mock_gaps.return_value = [Gap(i * 5, 0, size) for i, size in enumerate([20, 20, 20, 20, 50, 60, 80])]

        issues = analyze_spacing(blank_raster, config)

        assert len(issues) == 1
        assert issues[0].key == "spacing-0-0"
        assert issues[0].bounding_box == (0, 0, 20, 20)
        assert "(6 variations)" in issues[0].description

    @patch("ux_audit.rules.find_gaps")
    def test_uniform_gaps(self, mock_gaps, blank_raster, config):
        """Even spacing passes."""
        mock_gaps.return_value = [Gap(i * 30, 0, 24) for i in range(8)]

        assert analyze_spacing(blank_raster, config) == []

    @patch("ux_audit.rules.find_gaps")
    def test_needs_more_than_three_gaps(self, mock_gaps, blank_raster, config):
        """Three gaps are too few to judge."""
        mock_gaps.return_value = [Gap(0, 0, 12), Gap(20, 0, 40), Gap(70, 0, 90)]

        assert analyze_spacing(blank_raster, config) == []


class TestCognitiveLoadRule:
    """Test cases for the cognitive load rule."""

    @patch("ux_audit.rules.find_color_clusters")
    def test_too_many_interactive_elements(self, mock_clusters, blank_raster, config):
        """Ten buttons exceed Miller's 7 +/- 2."""
        mock_clusters.return_value = [Cluster(0, i * 4, 80, 40) for i in range(10)]

        issues = analyze_cognitive_load(blank_raster, config)

        assert [issue.key for issue in issues] == ["cognitive-load-count"]
        assert issues[0].severity_tier == 3
        assert issues[0].bounding_box == pytest.approx((4, 4, 36, 20))

    @patch("ux_audit.rules.find_color_clusters")
    def test_nine_elements_allowed(self, mock_clusters, blank_raster, config):
        mock_clusters.return_value = [Cluster(0, i * 4, 80, 40) for i in range(9)]

        assert analyze_cognitive_load(blank_raster, config) == []

    def test_dense_screen(self, config):
        """Alternating columns make the screen maximally dense."""
        array = np.zeros((40, 40, 3), dtype=np.uint8)
        array[:, ::2] = 255

        issues = analyze_cognitive_load(RasterImage.from_array(array), config)

        assert [issue.key for issue in issues] == ["cognitive-load-density"]
        assert issues[0].severity_tier == 2
        assert issues[0].bounding_box == pytest.approx((8, 8, 32, 32))


class TestAlignmentRule:
    """Test cases for the alignment rule."""

    def test_off_center_edge(self, config):
        """A vertical edge 7px left of centre is reported."""
        array = np.full((200, 200, 3), 255, dtype=np.uint8)
        array[:, 93:100] = 0

        issues = analyze_alignment(RasterImage.from_array(array), config)

        assert len(issues) == 1
        assert issues[0].key == "alignment-93"
        assert issues[0].severity_tier == 1
        assert issues[0].bounding_box == pytest.approx((83, 0, 103, 100))
        assert "25 elements" in issues[0].description

    def test_short_edge_ignored(self, config):
        """Three near-centre points are below the threshold."""
        array = np.full((200, 200, 3), 255, dtype=np.uint8)
        array[0:24, 93:100] = 0

        assert analyze_alignment(RasterImage.from_array(array), config) == []

    def test_centered_edge_ignored(self, config):
        """Edges within 3px of the centre count as aligned."""
        array = np.full((200, 200, 3), 255, dtype=np.uint8)
        array[:, 97:120] = 0

        assert analyze_alignment(RasterImage.from_array(array), config) == []


class TestRuleRegistry:
    """Test cases for the rule evaluation order."""

    def test_rule_order(self):
        """Rules run in a fixed order covering every rule type."""
        assert [rule_type for rule_type, _ in RULES] == [
            RuleType.CONTRAST,
            RuleType.TOUCH_TARGET,
            RuleType.CONSISTENCY,
            RuleType.HIERARCHY,
            RuleType.SPACING,
            RuleType.COGNITIVE_LOAD,
            RuleType.ALIGNMENT,
        ]

    def test_blank_screen_has_no_findings(self, blank_raster, config):
        """A flat white screen triggers nothing except contrast."""
        for rule_type, rule in RULES:
            if rule_type == RuleType.CONTRAST:
                continue
            assert rule(blank_raster, config) == []
