"""
UX audit module for screenshot analysis.

This module provides functionality to automatically detect UX issues
(contrast, touch targets, consistency, hierarchy, spacing, cognitive load and
alignment) in uploaded screenshots using pixel-level heuristics.
"""

from ux_audit.config import AnalysisConfig
from ux_audit.engine import UXAuditError, UXAuditor
from ux_audit.models import AnalysisResult, RasterImage, ScoreSet, UXIssue

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "RasterImage",
    "ScoreSet",
    "UXAuditError",
    "UXAuditor",
    "UXIssue",
]
