"""
UX audit API routes.

This module provides endpoints for analysing screenshots for UX issues.
"""

import asyncio
import importlib
import logging
from collections import Counter
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

import settings
from ux_audit.batch import audit_screenshots
from ux_audit.config import AnalysisConfig
from ux_audit.engine import UXAuditError, UXAuditor, parse_data_url
from ux_audit.loader import SUPPORTED_MIME_TYPES
from ux_audit.models import AnalysisResult, RuleType

logger = logging.getLogger(__name__)

router = APIRouter()

CONFIG_DESCRIPTIONS = {
    "max_analysis_size": "Longest side in pixels of the downsampled analysis bitmap",
    "contrast_sample_count": "Number of grid regions sampled for contrast",
    "contrast_region_ratio": "Sample region side relative to its grid cell",
    "min_contrast_ratio": "WCAG contrast ratio below which a region is flagged",
    "max_contrast_issues": "Maximum contrast issues reported per screenshot",
    "edge_stride": "Sampling stride in pixels for edge detection",
    "edge_threshold": "RGB-sum gradient above which a pixel counts as an edge",
    "gap_band_height": "Height in pixels of the horizontal bands used for gaps and text lines",
    "min_gap": "Smallest horizontal gap in pixels counted as spacing",
    "cluster_stride": "Sampling stride in pixels for colour clusters",
    "cluster_color_tolerance": "Maximum RGB-sum difference inside one colour cluster",
    "max_clusters": "Maximum colour clusters considered as UI elements",
    "min_touch_target": "Recommended minimum touch target side in original pixels",
    "critical_touch_target": "Touch target side in original pixels below which the issue is critical",
    "max_touch_target_issues": "Maximum touch target issues reported per screenshot",
    "style_bucket": "Size bucket in pixels used to group element styles",
    "max_button_styles": "Button style variants allowed before flagging inconsistency",
    "max_text_styles": "Text style variants allowed before flagging inconsistency",
    "font_size_bucket": "Rounding step in pixels for estimated font sizes",
    "min_text_bands": "Text lines required before judging hierarchy",
    "spacing_variance_ratio": "Deviation from the mean gap, as a fraction, that counts as inconsistent",
    "min_inconsistent_gaps": "Inconsistent gaps required before flagging spacing",
    "max_interactive_elements": "Interactive elements allowed before flagging cognitive load",
    "density_stride": "Sampling stride in pixels for information density",
    "density_pixel_threshold": "RGB-sum difference counted as a visual transition",
    "density_threshold": "Information density above which cognitive load is flagged",
    "vertical_edge_threshold": "RGB-sum horizontal gradient counted as a vertical edge",
    "alignment_center_ratio": "Fraction of the half-width treated as near the centre",
    "alignment_min_offset": "Offset in pixels from the centre that counts as misaligned",
    "min_alignment_points": "Misaligned edge points required before flagging alignment",
}


class AuditRequest(BaseModel):
    """Request model for a single screenshot audit."""

    screenshot_data_url: str = Field(..., description="Base64 encoded screenshot data URL")
    screenshot_id: str = Field("screen-1", description="Id used to namespace returned issue ids")
    include_scores: bool = Field(True, description="Whether to return category scores")
    config: Optional[Dict] = Field(None, description="Optional analysis configuration parameters")


class AuditResponse(BaseModel):
    """Response model for a single screenshot audit."""

    success: bool = Field(..., description="Whether the screenshot could be analysed")
    message: str = Field(..., description="Status message")
    issues: List[Dict] = Field(default_factory=list, description="Detected UX issues")
    scores: Optional[Dict] = Field(None, description="Category scores (0-100)")
    stats: Dict = Field(default_factory=dict, description="Analysis statistics")


class ScreenshotPayload(BaseModel):
    screenshot_data_url: str = Field(..., description="Base64 encoded screenshot data URL")
    screenshot_id: str = Field(..., description="Unique id of the screenshot within the batch")


class BatchAuditRequest(BaseModel):
    """Request model for auditing several screenshots at once."""

    screenshots: List[ScreenshotPayload] = Field(..., description="Screenshots to analyse")
    config: Optional[Dict] = Field(None, description="Optional analysis configuration parameters")


class BatchAuditResponse(BaseModel):
    success: bool = Field(..., description="Whether every screenshot completed")
    message: str = Field(..., description="Status message")
    reports: List[Dict] = Field(default_factory=list, description="One report per screenshot, in request order")


def _build_config(overrides: Optional[Dict]) -> AnalysisConfig:
    """Apply per-request overrides, rejecting values of the wrong type."""
    config = AnalysisConfig()
    if overrides:
        for key, value in overrides.items():
            if hasattr(config, key):
                current = getattr(config, key)
                expected = (int, float) if isinstance(current, float) else type(current)
                if isinstance(value, bool) or not isinstance(value, expected):
                    raise HTTPException(
                        status_code=400,
                        detail=f"Invalid value for config parameter {key}: {value!r}",
                    )
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown config parameter: {key}")
    return config


def _decode_upload(data_url: str):
    """Parse and validate an uploaded data URL, raising HTTP errors for bad input."""
    try:
        mime_type, image_bytes = parse_data_url(data_url)
    except UXAuditError as e:
        raise HTTPException(status_code=400, detail=f"Invalid screenshot: {str(e)}")

    if mime_type not in SUPPORTED_MIME_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported image type: {mime_type}")

    if len(image_bytes) > settings.MAX_UPLOAD_BYTES:
        size_mb = len(image_bytes) / 1024 / 1024
        limit_mb = settings.MAX_UPLOAD_BYTES / 1024 / 1024
        raise HTTPException(
            status_code=413,
            detail=f"File size ({size_mb:.2f}MB) exceeds {limit_mb:.0f}MB limit",
        )

    return mime_type, image_bytes


def _summarize(result: AnalysisResult) -> Dict:
    return {
        "total_issues": len(result.issues),
        "severity_counts": dict(Counter(issue.severity.value for issue in result.issues)),
        "category_counts": dict(Counter(issue.category.value for issue in result.issues)),
        "decoded": result.decoded,
        "width": result.width,
        "height": result.height,
    }


@router.post("/audit", response_model=AuditResponse)
async def audit_screenshot(request: AuditRequest) -> AuditResponse:
    """
    Analyze a screenshot for UX issues.

    Args:
        request: Audit request containing screenshot data and optional config

    Returns:
        AuditResponse with located issues, scores and statistics

    Raises:
        HTTPException: If the upload or a config override is malformed, or the upload is too large
    """
    mime_type, image_bytes = _decode_upload(request.screenshot_data_url)
    auditor = UXAuditor(_build_config(request.config))

    try:
        logger.info(f"Starting UX audit of screenshot {request.screenshot_id}")
        result = await asyncio.to_thread(
            auditor.analyze_bytes, image_bytes, mime_type, request.screenshot_id
        )

    except Exception as e:
        logger.error(f"Unexpected error during UX audit: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error during UX audit")

    if result.decoded:
        message = f"Found {len(result.issues)} issues"
    else:
        message = "Screenshot could not be decoded"

    return AuditResponse(
        success=result.decoded,
        message=message,
        issues=[issue.to_dict() for issue in result.issues],
        scores=result.scores.to_dict() if request.include_scores else None,
        stats=_summarize(result),
    )


@router.post("/audit/batch", response_model=BatchAuditResponse)
async def audit_batch(request: BatchAuditRequest) -> BatchAuditResponse:
    """
    Analyze several screenshots concurrently.

    Each screenshot runs under the configured timeout; a screenshot that
    times out is reported as failed together with any partial issues.
    """
    if not request.screenshots:
        raise HTTPException(status_code=400, detail="No screenshots provided")

    inputs = []
    for screenshot in request.screenshots:
        mime_type, image_bytes = _decode_upload(screenshot.screenshot_data_url)
        inputs.append((screenshot.screenshot_id, image_bytes, mime_type))
    auditor = UXAuditor(_build_config(request.config))

    try:
        reports = await audit_screenshots(auditor, inputs, settings.ANALYSIS_TIMEOUT_SECONDS)

    except UXAuditError as e:
        logger.error(f"Batch audit rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=f"UX audit failed: {str(e)}")

    except Exception as e:
        logger.error(f"Unexpected error during batch UX audit: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error during UX audit")

    failed = [report for report in reports if report.status != "complete"]
    return BatchAuditResponse(
        success=not failed,
        message=f"Analysed {len(reports) - len(failed)} of {len(reports)} screenshots",
        reports=[report.to_dict() for report in reports],
    )


@router.get("/config/defaults")
async def get_default_config() -> Dict:
    """
    Get the default analysis configuration parameters.

    Returns:
        Dictionary containing default configuration values and descriptions
    """
    config = AnalysisConfig()

    return {
        "config": {
            key: {
                "value": value,
                "description": CONFIG_DESCRIPTIONS.get(key, ""),
                "type": "float" if isinstance(value, float) else "integer",
            }
            for key, value in config.to_dict().items()
        },
        "rule_types": [rule_type.value for rule_type in RuleType],
        "supported_formats": list(SUPPORTED_MIME_TYPES),
        "max_upload_bytes": settings.MAX_UPLOAD_BYTES,
    }


@router.get("/health")
async def health_check() -> Dict:
    """
    Check if the image-processing dependencies are available.

    Returns:
        Health status and library versions
    """
    dependencies = {}
    for name in ("numpy", "cv2", "PIL"):
        try:
            module = importlib.import_module(name)
            dependencies[name] = getattr(module, "__version__", "unknown")
        except ImportError:
            dependencies[name] = None

    healthy = all(version is not None for version in dependencies.values())
    return {
        "status": "healthy" if healthy else "unhealthy",
        "message": "UX audit service is ready" if healthy else "Image libraries missing",
        "dependencies": dependencies,
    }
