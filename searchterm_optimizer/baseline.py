"""
Baseline calculator — batch totals and the thresholds the rules compare against.

Formulas:
  target_acos                      = MAX(20, overall_acos / target_acos_index)
  exact_negative_click_threshold   = MAX(5,  CEIL(exact_negative_lv  / overall_cvr))
  phrase_negative_click_threshold  = MAX(50, CEIL(phrase_negative_lv / overall_cvr))
  reliability_click_threshold      = MAX(5,  reliability / overall_cvr)

overall_cvr is a fraction here (4% -> 0.04). The click thresholds read as
"how many clicks it takes to expect N orders at the account's conversion
rate". With no conversions in the batch they are unbounded (math.inf), which
routes every zero-conversion branch to Pending.
"""
from __future__ import annotations

import math
from typing import Sequence

from .config import AnalysisConfig
from .models import Baseline, SearchTermRecord, _ratio

MIN_TARGET_ACOS = 20.0
MIN_EXACT_NEGATIVE_CLICKS = 5
MIN_PHRASE_NEGATIVE_CLICKS = 50
MIN_RELIABILITY_CLICKS = 5


def compute_baseline(records: Sequence[SearchTermRecord], config: AnalysisConfig) -> Baseline:
    total_spend = sum(r.spend for r in records)
    total_sales = sum(r.sales for r in records)
    total_orders = sum(r.orders for r in records)
    total_clicks = sum(r.clicks for r in records)

    overall_acos = _ratio(total_spend, total_sales) * 100
    overall_cvr = _ratio(total_orders, total_clicks) * 100

    target_acos = max(MIN_TARGET_ACOS, overall_acos / config.target_acos_index)

    if overall_cvr > 0:
        cvr_fraction = total_orders / total_clicks
        exact_threshold = max(MIN_EXACT_NEGATIVE_CLICKS, math.ceil(config.exact_negative_lv / cvr_fraction))
        phrase_threshold = max(MIN_PHRASE_NEGATIVE_CLICKS, math.ceil(config.phrase_negative_lv / cvr_fraction))
        reliability_threshold = max(MIN_RELIABILITY_CLICKS, config.reliability / cvr_fraction)
    else:
        exact_threshold = math.inf
        phrase_threshold = math.inf
        reliability_threshold = math.inf

    return Baseline(
        total_spend=total_spend,
        total_sales=total_sales,
        total_orders=total_orders,
        total_clicks=total_clicks,
        overall_acos=overall_acos,
        overall_conversion_rate=overall_cvr,
        average_cpc=_ratio(total_spend, total_clicks),
        average_order_value=_ratio(total_sales, total_orders),
        target_acos=target_acos,
        increase_bid_lv=config.increase_bid_lv,
        decrease_bid_lv=config.decrease_bid_lv,
        exact_negative_click_threshold=exact_threshold,
        phrase_negative_click_threshold=phrase_threshold,
        reliability_click_threshold=reliability_threshold,
    )
