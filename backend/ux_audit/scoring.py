"""Aggregate 0-100 category scores from rule findings."""

from collections import Counter
from typing import Dict, Iterable, Tuple

from ux_audit.models import RawIssue, RuleType, ScoreSet, round_half_up

MAX_SCORE = 100

# Points deducted per issue, by rule, from each affected score category
PENALTIES: Dict[RuleType, Tuple[Tuple[str, int], ...]] = {
    RuleType.CONTRAST: (("accessibility", 15), ("hierarchy", 10)),
    RuleType.TOUCH_TARGET: (("accessibility", 12),),
    RuleType.CONSISTENCY: (("consistency", 15),),
    RuleType.HIERARCHY: (("hierarchy", 12),),
    RuleType.SPACING: (("consistency", 10), ("cognitive_load", 8)),
    RuleType.COGNITIVE_LOAD: (("cognitive_load", 15),),
    RuleType.ALIGNMENT: (("hierarchy", 8),),
}


def aggregate_scores(issues: Iterable[RawIssue]) -> ScoreSet:
    """
    Combine raw issues into category scores.

    Every score starts at 100 and loses a fixed penalty per related issue,
    floored at 0.
    """
    counts = Counter(issue.rule_type for issue in issues)
    scores = {
        "accessibility": MAX_SCORE,
        "hierarchy": MAX_SCORE,
        "consistency": MAX_SCORE,
        "cognitive_load": MAX_SCORE,
    }

    for rule_type, count in counts.items():
        for category, penalty in PENALTIES.get(rule_type, ()):
            scores[category] -= count * penalty

    return ScoreSet(**{name: round_half_up(max(0, value)) for name, value in scores.items()})
