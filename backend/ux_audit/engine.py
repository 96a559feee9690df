"""
UX audit engine.

Runs the heuristic rules over a screenshot and assembles located issues and
category scores. The engine is a pure function of its pixel input: no
network, disk or environment access, and no state kept between calls.
"""

import base64
import binascii
import logging
from typing import Callable, Dict, List, Optional

from ux_audit.config import AnalysisConfig
from ux_audit.formatter import format_issues, positive_feedback_issue
from ux_audit.loader import ImageDecoder, PillowDecoder, load_raster
from ux_audit.models import AnalysisResult, RasterImage, RawIssue, ScoreSet, UXIssue
from ux_audit.rules import RULES
from ux_audit.scoring import aggregate_scores

logger = logging.getLogger(__name__)

IssueCallback = Callable[[List[UXIssue]], None]


class UXAuditError(Exception):
    """Raised when the caller hands the engine malformed input."""
    pass


def parse_data_url(data_url: str):
    """
    Split a base64 image data URL.

    Returns:
        Tuple of (mime_type, image_bytes)

    Raises:
        UXAuditError: If the URL is not a base64 image data URL
    """
    if not data_url.startswith("data:image/"):
        raise UXAuditError("Invalid image data URL format")

    header, _, payload = data_url.partition(",")
    if not payload or ";base64" not in header:
        raise UXAuditError("Invalid image data URL format")

    mime_type = header[len("data:"):].split(";")[0].lower()
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UXAuditError(f"Malformed base64 image data: {str(e)}")

    return mime_type, image_bytes


class UXAuditor:
    """Main analysis class combining the heuristic rules."""

    def __init__(self, config: Optional[AnalysisConfig] = None, decoder: Optional[ImageDecoder] = None):
        self.config = config or AnalysisConfig()
        self.decoder = decoder or PillowDecoder()

    def analyze_data_url(
        self,
        image_data_url: str,
        screenshot_id: str,
        on_issues: Optional[IssueCallback] = None,
    ) -> AnalysisResult:
        """
        Analyze a screenshot sent as a base64 data URL.

        Raises:
            UXAuditError: If the data URL itself is malformed
        """
        mime_type, image_bytes = parse_data_url(image_data_url)
        return self.analyze_bytes(image_bytes, mime_type, screenshot_id, on_issues)

    def analyze_bytes(
        self,
        image_bytes: bytes,
        mime_type: str,
        screenshot_id: str,
        on_issues: Optional[IssueCallback] = None,
    ) -> AnalysisResult:
        """
        Analyze encoded screenshot bytes.

        A screenshot that cannot be decoded yields no issues and all-zero
        scores instead of an error.

        Args:
            image_bytes: Encoded image
            mime_type: Declared MIME type
            screenshot_id: Id used to namespace issue ids
            on_issues: Optional callback receiving each rule's issues as they are found

        Returns:
            AnalysisResult for the screenshot
        """
        raster = load_raster(image_bytes, mime_type, self.decoder, self.config.max_analysis_size)
        if raster is None:
            logger.warning(f"Could not decode screenshot {screenshot_id}, returning empty result")
            return AnalysisResult(
                screenshot_id=screenshot_id,
                issues=[],
                scores=ScoreSet.zero(),
                decoded=False,
            )

        return self.analyze_raster(raster, screenshot_id, on_issues)

    def analyze_raster(
        self,
        raster: RasterImage,
        screenshot_id: str,
        on_issues: Optional[IssueCallback] = None,
    ) -> AnalysisResult:
        """
        Run every rule over an already decoded analysis bitmap.

        A rule that raises contributes no issues; the remaining rules still run.
        """
        raw_issues: List[RawIssue] = []
        issues: List[UXIssue] = []
        taken_ids: Dict[str, int] = {}

        for rule_type, rule in RULES:
            try:
                found = rule(raster, self.config)
            except Exception:
                logger.exception(f"Rule {rule_type.value} failed on screenshot {screenshot_id}")
                continue

            formatted = format_issues(found, raster, screenshot_id, taken_ids)
            raw_issues.extend(found)
            issues.extend(formatted)
            if on_issues is not None and formatted:
                on_issues(formatted)

        scores = aggregate_scores(raw_issues)

        if not issues:
            positive = positive_feedback_issue(screenshot_id, raster.original_width, raster.original_height)
            issues.append(positive)
            if on_issues is not None:
                on_issues([positive])

        logger.info(f"Screenshot {screenshot_id}: {len(raw_issues)} issues found")

        return AnalysisResult(
            screenshot_id=screenshot_id,
            issues=issues,
            scores=scores,
            width=raster.original_width,
            height=raster.original_height,
        )
