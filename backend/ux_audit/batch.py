"""
Concurrent analysis of several screenshots.

Each screenshot is analysed in a worker thread under its own timeout.
Screenshots share no state, so they run in parallel; reports come back in
input order. A screenshot that times out or fails unexpectedly is reported as failed
on its own and keeps whatever issues its rules had already produced.
"""

import asyncio
import logging
from typing import List, Sequence, Tuple

from ux_audit.engine import UXAuditor, UXAuditError
from ux_audit.models import ScreenshotReport, UXIssue

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# (screenshot_id, image_bytes, mime_type)
ScreenshotInput = Tuple[str, bytes, str]


async def audit_screenshot(
    auditor: UXAuditor,
    screenshot_id: str,
    image_bytes: bytes,
    mime_type: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> ScreenshotReport:
    """Analyze one screenshot in a worker thread, giving up after ``timeout`` seconds."""
    partial: List[UXIssue] = []

    try:
        result = await asyncio.wait_for(
            asyncio.to_thread(auditor.analyze_bytes, image_bytes, mime_type, screenshot_id, partial.extend),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Analysis of {screenshot_id} timed out after {timeout}s with {len(partial)} partial issues"
        )
        return ScreenshotReport(
            screenshot_id=screenshot_id,
            status="failed",
            issues=list(partial),
            error="timeout",
        )
    except Exception:
        logger.exception(f"Analysis of {screenshot_id} failed with {len(partial)} partial issues")
        return ScreenshotReport(
            screenshot_id=screenshot_id,
            status="failed",
            issues=list(partial),
            error="internal_error",
        )

    if not result.decoded:
        return ScreenshotReport(
            screenshot_id=screenshot_id,
            status="failed",
            issues=result.issues,
            scores=result.scores,
            error="decode_failed",
        )

    return ScreenshotReport(
        screenshot_id=screenshot_id,
        status="complete",
        issues=result.issues,
        scores=result.scores,
    )


async def audit_screenshots(
    auditor: UXAuditor,
    screenshots: Sequence[ScreenshotInput],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> List[ScreenshotReport]:
    """
    Analyze screenshots concurrently.

    Args:
        auditor: Engine instance shared by every screenshot
        screenshots: (screenshot_id, image_bytes, mime_type) tuples
        timeout: Per-screenshot timeout in seconds

    Returns:
        One report per screenshot, in input order
    """
    ids = [screenshot_id for screenshot_id, _, _ in screenshots]
    if len(set(ids)) != len(ids):
        raise UXAuditError("Screenshot ids must be unique within a batch")

    logger.info(f"Auditing {len(screenshots)} screenshots (timeout {timeout}s each)")
    return list(await asyncio.gather(*(
        audit_screenshot(auditor, screenshot_id, image_bytes, mime_type, timeout)
        for screenshot_id, image_bytes, mime_type in screenshots
    )))
