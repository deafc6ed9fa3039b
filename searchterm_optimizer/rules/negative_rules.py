"""
Negative Rules — zero-conversion feature words.

Rules:
  NEG-001: A word in the search term has clicks across the batch but no orders.
           Phrase negative, exact negative, or pending depending on click volume.

Runs before every bid rule: a word that never converts makes the term's own
conversion data suspect even when its ACOS looks fine.
"""
from __future__ import annotations

from typing import Optional

from ..models import Classification, RuleContext, Suggestion

PHRASE_NEGATIVE_CONFIDENCE = 0.8
EXACT_NEGATIVE_CONFIDENCE = 0.7
PENDING_CONFIDENCE = 0.3


# ─────────────────────────────────────────────────────────────
# NEG-001: Zero-Conversion Feature Word
# ─────────────────────────────────────────────────────────────
def neg_001_zero_conversion_word(ctx: RuleContext) -> Optional[Classification]:
    """
    Trigger: some word of the term has clicks > 0 and orders == 0 (batch-wide)
    Action:  clicks >= phrase threshold -> Phrase_Negative (0.8)
             clicks >= exact threshold  -> Exact_Negative (0.7)
             otherwise                  -> Pending (0.3)
    The word with the most clicks is reported as problem_keyword.
    """
    word = ctx.signals.zero_cvr_word
    if word is None:
        return None

    clicks = ctx.signals.zero_cvr_clicks
    phrase_threshold = ctx.baseline.phrase_negative_click_threshold
    exact_threshold = ctx.baseline.exact_negative_click_threshold

    if clicks >= phrase_threshold:
        return Classification(
            rule_id="NEG-001",
            suggestion=Suggestion.PHRASE_NEGATIVE,
            suggested_action=(
                f"Feature word '{word}' has {clicks:.0f} clicks with 0 orders "
                f"(phrase threshold {phrase_threshold:.0f}). Add as phrase negative."
            ),
            confidence=PHRASE_NEGATIVE_CONFIDENCE,
            problem_keyword=word,
        )

    if clicks >= exact_threshold:
        return Classification(
            rule_id="NEG-001",
            suggestion=Suggestion.EXACT_NEGATIVE,
            suggested_action=(
                f"Feature word '{word}' has {clicks:.0f} clicks with 0 orders "
                f"(exact threshold {exact_threshold:.0f}). Add search term as exact negative."
            ),
            confidence=EXACT_NEGATIVE_CONFIDENCE,
            problem_keyword=word,
        )

    return Classification(
        rule_id="NEG-001",
        suggestion=Suggestion.PENDING,
        suggested_action=(
            f"Feature word '{word}' has {clicks:.0f} clicks with 0 orders, "
            f"below the {exact_threshold:.0f} clicks needed to justify a negative. "
            f"Review relevance manually."
        ),
        confidence=PENDING_CONFIDENCE,
        problem_keyword=word,
    )


# Registry
NEGATIVE_RULES = [
    neg_001_zero_conversion_word,
]
