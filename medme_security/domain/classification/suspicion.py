"""Suspicion scoring for client-side activity beacons."""

from typing import Optional

SCORE_MIN = 0
SCORE_MAX = 100
ESCALATION_THRESHOLD = 75

RAPID_CLICKING_POINTS_PER_CLICK = 2
RAPID_CLICKING_CAP = 60
UNUSUAL_NAVIGATION_SCORE = 30
AUTOMATED_BEHAVIOR_SCORE = 80
DEFAULT_SCORE = 20


def suspicion_score(activity_type: Optional[str], count: int = 0) -> int:
    """Bounded score in [0, 100]. Rapid clicking grows with count up to its cap."""
    tag = (activity_type or "").strip().upper()
    if tag == "RAPID_CLICKING":
        score = min(count * RAPID_CLICKING_POINTS_PER_CLICK, RAPID_CLICKING_CAP)
    elif tag == "UNUSUAL_NAVIGATION":
        score = UNUSUAL_NAVIGATION_SCORE
    elif tag == "AUTOMATED_BEHAVIOR":
        score = AUTOMATED_BEHAVIOR_SCORE
    else:
        score = DEFAULT_SCORE
    return max(SCORE_MIN, min(int(score), SCORE_MAX))


def requires_escalation(score: int) -> bool:
    return score > ESCALATION_THRESHOLD
