"""
Turn raw rule findings into external UX issues.

Bounding boxes are mapped from analysis-bitmap space back to the original
image, collapsed to a single hotspot point, and annotated with severity,
category and cause text.
"""

import math
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from ux_audit.models import (
    BoundingBox,
    Category,
    RasterImage,
    RawIssue,
    RuleType,
    Severity,
    UXIssue,
    category_for_rule,
    severity_for_tier,
)

CAUSES: Dict[RuleType, str] = {
    RuleType.CONTRAST: "WCAG 2.2 AA (1.4.3) requires minimum 4.5:1 contrast ratio for normal text",
    RuleType.SPACING: "Gestalt Principle of Proximity: Inconsistent spacing breaks visual grouping",
    RuleType.ALIGNMENT: "Gestalt Principle of Continuity: Misalignment disrupts visual flow",
    RuleType.HIERARCHY: "Insufficient visual hierarchy makes it difficult to distinguish importance levels",
    RuleType.TOUCH_TARGET: "WCAG 2.2 AA accessibility requirement not met",
    RuleType.COGNITIVE_LOAD: "Miller's Law: Too many elements exceed the 7±2 cognitive limit",
    RuleType.CONSISTENCY: "Nielsen Heuristic #4: Inconsistent design patterns violate user expectations",
}

NO_ISSUES_PROBLEM = "No critical UX issues detected"
NO_ISSUES_CAUSE = "The screen follows WCAG 2.2 AA standards and UX best practices"
NO_ISSUES_FIX = "Continue following accessibility guidelines and consider user testing for edge cases"


def rescale_box(box: BoundingBox, scale_x: float, scale_y: float) -> Tuple[int, int, int, int]:
    """Map an analysis-space box to original-image pixels."""
    x1, y1, x2, y2 = box
    return (
        math.floor(x1 * scale_x),
        math.floor(y1 * scale_y),
        math.floor(x2 * scale_x),
        math.floor(y2 * scale_y),
    )


def box_center(box: Tuple[int, int, int, int]) -> Tuple[int, int]:
    x1, y1, x2, y2 = box
    return math.floor((x1 + x2) / 2), math.floor((y1 + y2) / 2)


def clamp_point(x: int, y: int, width: int, height: int) -> Tuple[int, int]:
    """Keep a hotspot inside the original image."""
    return min(max(x, 0), width), min(max(y, 0), height)


def format_issue(raw: RawIssue, raster: RasterImage, screenshot_id: str) -> UXIssue:
    """
    Convert a raw issue into its external representation.

    Args:
        raw: Issue produced by a rule, in analysis-bitmap space
        raster: The analysed image (provides scale and original size)
        screenshot_id: Namespace for the issue id

    Returns:
        UXIssue located at the centre of the rescaled bounding box
    """
    box = rescale_box(raw.bounding_box, raster.scale_x, raster.scale_y)
    x, y = clamp_point(*box_center(box), raster.original_width, raster.original_height)

    return UXIssue(
        id=f"{screenshot_id}-{raw.key}",
        screenshot_id=screenshot_id,
        problem=raw.description,
        cause=CAUSES.get(raw.rule_type, raw.description),
        fix=raw.recommendation,
        severity=severity_for_tier(raw.severity_tier),
        category=category_for_rule(raw.rule_type),
        x=x,
        y=y,
    )


def format_issues(
    raw_issues: Sequence[RawIssue],
    raster: RasterImage,
    screenshot_id: str,
    taken_ids: Optional[Dict[str, int]] = None,
) -> List[UXIssue]:
    """
    Format issues in order, keeping ids unique.

    ``taken_ids`` tracks ids already handed out for this screenshot so that
    colliding location keys get a numeric suffix.
    """
    taken_ids = {} if taken_ids is None else taken_ids
    issues = []
    for raw in raw_issues:
        issue = format_issue(raw, raster, screenshot_id)
        seen = taken_ids.get(issue.id, 0)
        taken_ids[issue.id] = seen + 1
        if seen:
            unique_id = f"{issue.id}-{seen + 1}"
            taken_ids[unique_id] = 1
            issue = replace(issue, id=unique_id)
        issues.append(issue)
    return issues


def positive_feedback_issue(screenshot_id: str, width: int, height: int) -> UXIssue:
    """Entry reported when no rule finds anything, placed at the image centre."""
    return UXIssue(
        id=f"{screenshot_id}-no-issues",
        screenshot_id=screenshot_id,
        problem=NO_ISSUES_PROBLEM,
        cause=NO_ISSUES_CAUSE,
        fix=NO_ISSUES_FIX,
        severity=Severity.MINOR,
        category=Category.VISUAL,
        x=width // 2,
        y=height // 2,
    )
