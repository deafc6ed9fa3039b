"""
Bid Rules — ACOS band test against the batch target.

Rules:
  BID-001: Term has its own orders; compare its actual ACOS to the band
  BID-002: Term has no orders but its words convert; estimate ACOS from the
           weakest converting word and compare that to the band

Band (target = baseline.target_acos):
  acos <  target * increase_bid_lv  -> Increase_Bid
  acos >  target * decrease_bid_lv  -> Decrease_Bid
  otherwise                         -> Reasonable
"""
from __future__ import annotations

import math
from typing import Optional

from ..models import Classification, RuleContext, Suggestion

ESTIMATE_BID_CONFIDENCE = 0.6
ESTIMATE_REASONABLE_CONFIDENCE = 0.5
PENDING_CONFIDENCE = 0.3


# ─────────────────────────────────────────────────────────────
# BID-001: Actual ACOS (term has orders)
# ─────────────────────────────────────────────────────────────
def bid_001_actual_acos(ctx: RuleContext) -> Optional[Classification]:
    """
    Trigger: orders > 0
    Action:  band test on the term's own ACOS
    Confidence grows with orders: min(0.99, 0.5 + 0.05/order) for bid changes,
    min(0.85, 0.4 + 0.05/order) for Reasonable.
    """
    rec = ctx.record
    if rec.orders <= 0:
        return None

    acos = rec.acos
    low = ctx.baseline.increase_bid_acos
    high = ctx.baseline.decrease_bid_acos
    bid_confidence = min(0.99, 0.5 + rec.orders * 0.05)

    if acos < low:
        return Classification(
            rule_id="BID-001",
            suggestion=Suggestion.INCREASE_BID,
            suggested_action=(
                f"ACOS {acos:.2f}% is below the {low:.2f}% increase threshold "
                f"({rec.orders:.0f} orders). Raise bid to capture more traffic."
            ),
            confidence=bid_confidence,
            estimated_acos=acos,
        )

    if acos > high:
        return Classification(
            rule_id="BID-001",
            suggestion=Suggestion.DECREASE_BID,
            suggested_action=(
                f"ACOS {acos:.2f}% is above the {high:.2f}% decrease threshold "
                f"({rec.orders:.0f} orders). Lower bid to protect margin."
            ),
            confidence=bid_confidence,
            estimated_acos=acos,
        )

    return Classification(
        rule_id="BID-001",
        suggestion=Suggestion.REASONABLE,
        suggested_action=(
            f"ACOS {acos:.2f}% is within the {low:.2f}%-{high:.2f}% band. Keep current bid."
        ),
        confidence=min(0.85, 0.4 + rec.orders * 0.05),
        estimated_acos=acos,
    )


# ─────────────────────────────────────────────────────────────
# BID-002: Estimated ACOS (no orders, converting words)
# ─────────────────────────────────────────────────────────────
def bid_002_estimated_acos(ctx: RuleContext) -> Optional[Classification]:
    """
    Trigger: orders == 0, at least one word with positive CVR, clicks > 0, cpc > 0
    Action:  Pending if the thinnest word has fewer clicks than the reliability
             threshold; otherwise band test on
               estimated_acos = cpc / (min_cvr/100 * average_order_value) * 100
             (inf when average_order_value is 0)
    """
    rec = ctx.record
    signals = ctx.signals
    if rec.orders > 0:
        return None
    if signals.min_cvr is None or rec.clicks <= 0 or rec.cpc <= 0:
        return None

    reliability = ctx.baseline.reliability_click_threshold
    if signals.min_clicks < reliability:
        return Classification(
            rule_id="BID-002",
            suggestion=Suggestion.PENDING,
            suggested_action=(
                f"Feature word '{signals.min_clicks_word}' has only {signals.min_clicks:.0f} clicks, "
                f"below the {reliability:.0f} needed for a reliable estimate. Review manually."
            ),
            confidence=PENDING_CONFIDENCE,
            problem_keyword=signals.min_clicks_word,
        )

    sales_per_click = (signals.min_cvr / 100) * ctx.baseline.average_order_value
    estimated = (rec.cpc / sales_per_click) * 100 if sales_per_click > 0 else math.inf
    low = ctx.baseline.increase_bid_acos
    high = ctx.baseline.decrease_bid_acos

    if estimated < low:
        return Classification(
            rule_id="BID-002",
            suggestion=Suggestion.INCREASE_BID,
            suggested_action=(
                f"Estimated ACOS {estimated:.2f}% (from feature word CVR {signals.min_cvr:.2f}%) "
                f"is below the {low:.2f}% increase threshold. Raise bid."
            ),
            confidence=ESTIMATE_BID_CONFIDENCE,
            estimated_acos=estimated,
        )

    if estimated > high:
        return Classification(
            rule_id="BID-002",
            suggestion=Suggestion.DECREASE_BID,
            suggested_action=(
                f"Estimated ACOS {estimated:.2f}% (from feature word CVR {signals.min_cvr:.2f}%) "
                f"is above the {high:.2f}% decrease threshold. Lower bid."
            ),
            confidence=ESTIMATE_BID_CONFIDENCE,
            estimated_acos=estimated,
        )

    return Classification(
        rule_id="BID-002",
        suggestion=Suggestion.REASONABLE,
        suggested_action=(
            f"Estimated ACOS {estimated:.2f}% is within the {low:.2f}%-{high:.2f}% band. Keep current bid."
        ),
        confidence=ESTIMATE_REASONABLE_CONFIDENCE,
        estimated_acos=estimated,
    )


# Registry
BID_RULES = [
    bid_001_actual_acos,
    bid_002_estimated_acos,
]
