"""
Data models for the UX audit engine.

Raw issues live in analysis-bitmap space and are produced by the heuristic
rules; UX issues are the externally visible records in original-image space.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


BoundingBox = Tuple[float, float, float, float]  # (x1, y1, x2, y2)


class RuleType(str, Enum):
    """The seven heuristic rule kinds."""

    CONTRAST = "contrast"
    TOUCH_TARGET = "touch_target"
    CONSISTENCY = "consistency"
    HIERARCHY = "hierarchy"
    SPACING = "spacing"
    COGNITIVE_LOAD = "cognitive_load"
    ALIGNMENT = "alignment"


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class Category(str, Enum):
    VISUAL = "visual"
    ACCESSIBILITY = "accessibility"
    LOGIC = "logic"


MIN_SEVERITY_TIER = 0
MAX_SEVERITY_TIER = 4

_CATEGORY_BY_RULE: Dict[str, Category] = {
    "spacing": Category.VISUAL,
    "alignment": Category.VISUAL,
    "hierarchy": Category.VISUAL,
    "consistency": Category.VISUAL,
    "cognitive_load": Category.VISUAL,
    "contrast": Category.ACCESSIBILITY,
    "touch_target": Category.ACCESSIBILITY,
    "accessibility": Category.ACCESSIBILITY,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def severity_for_tier(tier: int) -> Severity:
    """
    Map an integer severity tier (0-4, 4 = worst) to its external label.

    Raises:
        ValueError: If the tier is outside 0-4
    """
    if not MIN_SEVERITY_TIER <= tier <= MAX_SEVERITY_TIER:
        raise ValueError(f"Severity tier out of range: {tier}")
    if tier >= 4:
        return Severity.CRITICAL
    if tier >= 2:
        return Severity.MAJOR
    return Severity.MINOR


def category_for_rule(rule_type: Any) -> Category:
    """Map a rule type to its issue category; anything unclassified is logic."""
    key = rule_type.value if isinstance(rule_type, RuleType) else str(rule_type)
    return _CATEGORY_BY_RULE.get(key, Category.LOGIC)


class RasterImage:
    """
    Decoded screenshot at analysis resolution.

    ``pixels`` is a row-major ``(height, width, 4)`` uint8 RGBA array. The
    original dimensions are kept for rescaling issue coordinates.
    """

    def __init__(self, pixels: np.ndarray, original_width: int, original_height: int):
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected an (h, w, 4) RGBA array, got shape {pixels.shape}")
        self.pixels = pixels
        self.original_width = int(original_width)
        self.original_height = int(original_height)
        # Signed copy so neighbour differences never wrap around
        self.channels = pixels[:, :, :3].astype(np.int32)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        original_width: Optional[int] = None,
        original_height: Optional[int] = None,
    ) -> "RasterImage":
        """
        Wrap a grayscale, RGB or RGBA array that is already at analysis resolution.

        The original size defaults to the array size (1:1 scale).
        """
        array = np.asarray(array, dtype=np.uint8)
        if array.ndim == 2:
            array = np.stack([array, array, array], axis=-1)
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        height, width = array.shape[:2]
        return cls(
            array,
            original_width if original_width is not None else width,
            original_height if original_height is not None else height,
        )

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def scale_x(self) -> float:
        return self.original_width / self.width

    @property
    def scale_y(self) -> float:
        return self.original_height / self.height


@dataclass(frozen=True)
class Region:
    """Square sample region in analysis-bitmap space."""

    x: float
    y: float
    size: float


@dataclass(frozen=True)
class RawIssue:
    """An issue found by one rule, located in analysis-bitmap space."""

    rule_type: RuleType
    severity_tier: int
    bounding_box: BoundingBox
    description: str
    recommendation: str
    key: str  # location token, unique within one rule's output


@dataclass(frozen=True)
class UXIssue:
    """Externally visible issue located in original-image pixel space."""

    id: str
    screenshot_id: str
    problem: str
    cause: str
    fix: str
    severity: Severity
    category: Category
    x: int
    y: int

    @property
    def coordinates(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format consumed by the review UI."""
        return {
            "id": self.id,
            "screenshotId": self.screenshot_id,
            "problem": self.problem,
            "cause": self.cause,
            "fix": self.fix,
            "severity": self.severity.value,
            "category": self.category.value,
            "coordinates": self.coordinates,
        }


@dataclass(frozen=True)
class ScoreSet:
    """Aggregate quality scores, each an integer in 0-100."""

    accessibility: int
    hierarchy: int
    consistency: int
    cognitive_load: int

    @classmethod
    def zero(cls) -> "ScoreSet":
        return cls(accessibility=0, hierarchy=0, consistency=0, cognitive_load=0)

    def to_dict(self) -> Dict[str, int]:
        return {
            "accessibility": self.accessibility,
            "hierarchy": self.hierarchy,
            "consistency": self.consistency,
            "cognitive_load": self.cognitive_load,
        }


@dataclass
class AnalysisResult:
    """Engine output for a single screenshot."""

    screenshot_id: str
    issues: List[UXIssue]
    scores: ScoreSet
    width: int = 0
    height: int = 0
    decoded: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "screenshotId": self.screenshot_id,
            "width": self.width,
            "height": self.height,
            "decoded": self.decoded,
            "issues": [issue.to_dict() for issue in self.issues],
            "scores": self.scores.to_dict(),
        }


@dataclass
class ScreenshotReport:
    """Outcome of one screenshot inside a batch run."""

    screenshot_id: str
    status: str  # "complete" or "failed"
    issues: List[UXIssue] = field(default_factory=list)
    scores: ScoreSet = field(default_factory=ScoreSet.zero)
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "screenshotId": self.screenshot_id,
            "status": self.status,
            "issues": [issue.to_dict() for issue in self.issues],
            "scores": self.scores.to_dict(),
            "error": self.error,
        }
