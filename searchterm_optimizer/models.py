"""
Search term optimizer data models — records, feature-word stats, baseline, results.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from .config import AnalysisConfig


class Suggestion(str, Enum):
    """Terminal classification for one search term."""
    INCREASE_BID = "Increase_Bid"
    DECREASE_BID = "Decrease_Bid"
    EXACT_NEGATIVE = "Exact_Negative"
    PHRASE_NEGATIVE = "Phrase_Negative"
    REASONABLE = "Reasonable"
    PENDING = "Pending"


@dataclass(frozen=True)
class SearchTermRecord:
    """One row of a search term report, with derived ratios fixed at ingestion."""
    search_term: str
    impressions: float
    clicks: float
    spend: float
    sales: float
    orders: float
    acos: float                         # spend / sales * 100
    ctr: float                          # clicks / impressions * 100
    cvr: float                          # orders / clicks * 100
    cpc: float                          # spend / clicks
    campaign: Optional[str] = None
    ad_group: Optional[str] = None
    match_type: Optional[str] = None

    @classmethod
    def from_metrics(
        cls,
        search_term: Any,
        impressions: Any = 0,
        clicks: Any = 0,
        spend: Any = 0,
        sales: Any = 0,
        orders: Any = 0,
        campaign: Optional[str] = None,
        ad_group: Optional[str] = None,
        match_type: Optional[str] = None,
    ) -> "SearchTermRecord":
        impressions = _safe_metric(impressions)
        clicks = _safe_metric(clicks)
        spend = _safe_metric(spend)
        sales = _safe_metric(sales)
        orders = _safe_metric(orders)

        return cls(
            search_term="" if search_term is None else str(search_term),
            impressions=impressions,
            clicks=clicks,
            spend=spend,
            sales=sales,
            orders=orders,
            acos=_ratio(spend, sales) * 100,
            ctr=_ratio(clicks, impressions) * 100,
            cvr=_ratio(orders, clicks) * 100,
            cpc=_ratio(spend, clicks),
            campaign=campaign or None,
            ad_group=ad_group or None,
            match_type=match_type or None,
        )


@dataclass
class FeatureWordStat:
    """Batch-wide totals for one feature word. Mutable only while a batch is aggregated."""
    word: str
    count: int = 0                      # records containing the word
    impressions: float = 0.0
    clicks: float = 0.0
    orders: float = 0.0
    spend: float = 0.0
    sales: float = 0.0
    conversion_rate: float = 0.0        # orders / clicks * 100

    @property
    def acos(self) -> float:
        return _ratio(self.spend, self.sales) * 100

    @property
    def avg_cpc(self) -> float:
        return _ratio(self.spend, self.clicks)

    @property
    def is_zero_conversion(self) -> bool:
        return self.clicks > 0 and self.orders == 0


@dataclass(frozen=True)
class Baseline:
    """Batch totals and the dynamic thresholds derived from them."""
    total_spend: float
    total_sales: float
    total_orders: float
    total_clicks: float
    overall_acos: float
    overall_conversion_rate: float
    average_cpc: float
    average_order_value: float
    target_acos: float
    increase_bid_lv: float
    decrease_bid_lv: float
    # math.inf when the batch has no conversions
    exact_negative_click_threshold: float
    phrase_negative_click_threshold: float
    reliability_click_threshold: float

    @property
    def increase_bid_acos(self) -> float:
        return self.target_acos * self.increase_bid_lv

    @property
    def decrease_bid_acos(self) -> float:
        return self.target_acos * self.decrease_bid_lv


@dataclass(frozen=True)
class TokenSignals:
    """Feature-word evidence for one search term (see features.scan_feature_words)."""
    zero_cvr_word: Optional[str]
    zero_cvr_clicks: float
    min_cvr: Optional[float]            # lowest positive CVR, None if no word converts
    min_clicks_word: Optional[str]
    min_clicks: float                   # math.inf when no word has stats


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule needs to classify one record."""
    config: "AnalysisConfig"
    record: SearchTermRecord
    words: Tuple[str, ...]
    signals: TokenSignals
    baseline: Baseline
    # Batch-wide stats, shared read-only by every record of the batch
    feature_stats: Mapping[str, FeatureWordStat]


@dataclass(frozen=True)
class Classification:
    """What a rule decided for one record."""
    rule_id: str
    suggestion: Suggestion
    suggested_action: str               # human-readable rationale
    confidence: float                   # 0-1
    estimated_acos: Optional[float] = None   # None = no estimate computed
    problem_keyword: Optional[str] = None


@dataclass(frozen=True)
class ClassificationResult:
    """Input record plus its classification."""
    record: SearchTermRecord
    rule_id: str
    suggestion: Suggestion
    suggested_action: str
    confidence: float
    estimated_acos: Optional[float] = None
    problem_keyword: Optional[str] = None

    @property
    def search_term(self) -> str:
        return self.record.search_term

    def to_dict(self) -> dict:
        r = self.record
        return {
            "search_term": r.search_term,
            "campaign": r.campaign,
            "ad_group": r.ad_group,
            "match_type": r.match_type,
            "impressions": r.impressions,
            "clicks": r.clicks,
            "spend": r.spend,
            "sales": r.sales,
            "orders": r.orders,
            "acos": r.acos,
            "ctr": r.ctr,
            "cvr": r.cvr,
            "cpc": r.cpc,
            "suggestion": self.suggestion.value,
            "suggested_action": self.suggested_action,
            "confidence": round(self.confidence, 4),
            "estimated_acos": _json_number(self.estimated_acos),
            "problem_keyword": self.problem_keyword,
            "rule_id": self.rule_id,
        }


@dataclass(frozen=True)
class AnalysisSummary:
    """Per-batch output: category counts, totals and the ordered results."""
    total_keywords: int
    increase_bid_count: int
    decrease_bid_count: int
    exact_negative_count: int
    phrase_negative_count: int
    reasonable_count: int
    pending_count: int
    total_impressions: float
    total_clicks: float
    total_spend: float
    total_sales: float
    total_orders: float
    overall_acos: float
    overall_conversion_rate: float
    average_cpc: float
    average_order_value: float
    baseline: Baseline
    results: Tuple[ClassificationResult, ...]

    @property
    def negative_count(self) -> int:
        return self.exact_negative_count + self.phrase_negative_count

    def count_for(self, suggestion: Suggestion) -> int:
        return {
            Suggestion.INCREASE_BID: self.increase_bid_count,
            Suggestion.DECREASE_BID: self.decrease_bid_count,
            Suggestion.EXACT_NEGATIVE: self.exact_negative_count,
            Suggestion.PHRASE_NEGATIVE: self.phrase_negative_count,
            Suggestion.REASONABLE: self.reasonable_count,
            Suggestion.PENDING: self.pending_count,
        }[suggestion]


def _safe_float(x: Any, default: float = 0.0) -> float:
    if x is None:
        return default
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def _safe_metric(x: Any) -> float:
    """Non-negative finite metric; anything else collapses to 0."""
    v = _safe_float(x)
    if math.isnan(v) or math.isinf(v) or v < 0:
        return 0.0
    return v


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _json_number(x: Optional[float]) -> Any:
    """JSON has no infinity; an unbounded estimate is written as the string "inf"."""
    if x is None or math.isnan(x):
        return None
    if math.isinf(x):
        return "inf"
    return x
