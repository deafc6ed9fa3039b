"""
Pending Rules — terms the engine cannot judge.

Rules:
  PEND-001: No clicks or no spend on the term itself
  PEND-999: Fallback, always fires (keeps classification total)
"""
from __future__ import annotations

from typing import Optional

from ..models import Classification, RuleContext, Suggestion

PENDING_CONFIDENCE = 0.3


def pend_001_no_activity(ctx: RuleContext) -> Optional[Classification]:
    """
    Trigger: clicks == 0 or spend == 0
    Action:  Pending; rationale says whether the words convert elsewhere.
    """
    rec = ctx.record
    if rec.clicks > 0 and rec.spend > 0:
        return None

    if ctx.signals.min_cvr is not None:
        action = (
            "Feature words convert in other search terms but this term has no clicks or spend. "
            "Judge it from similar search terms."
        )
    else:
        action = "No click or spend data. Review relevance manually."

    return Classification(
        rule_id="PEND-001",
        suggestion=Suggestion.PENDING,
        suggested_action=action,
        confidence=PENDING_CONFIDENCE,
    )


def pend_999_insufficient_data(ctx: RuleContext) -> Optional[Classification]:
    return Classification(
        rule_id="PEND-999",
        suggestion=Suggestion.PENDING,
        suggested_action="Insufficient data. Review relevance manually.",
        confidence=PENDING_CONFIDENCE,
    )


# Registry
PENDING_RULES = [
    pend_001_no_activity,
    pend_999_insufficient_data,
]
