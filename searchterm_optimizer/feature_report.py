"""
Feature-word report — which words carry conversions and which only burn clicks.

Built on the same aggregation the classifier uses. Deterministic: the same
batch always gives the same lists in the same order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from .features import build_feature_word_stats
from .models import FeatureWordStat, SearchTermRecord, _ratio

HIGH_PERFORMER_MIN_CLICKS = 10
HIGH_PERFORMER_MAX_ACOS = 50.0
PROBLEM_MIN_CLICKS = 10
MAX_PROBLEM_SUGGESTIONS = 10
COMBINATION_POOL = 5


@dataclass(frozen=True)
class FeatureWordReport:
    total_search_terms: int
    feature_words: Tuple[FeatureWordStat, ...]   # most clicked first

    @property
    def total_feature_words(self) -> int:
        return len(self.feature_words)


@dataclass(frozen=True)
class KeywordSuggestion:
    keyword: str
    kind: str                           # high_performer | problem | combination
    clicks: float
    orders: float
    acos: float
    conversion_rate: float
    suggestion: str


def analyze_feature_words(records: Iterable[SearchTermRecord]) -> FeatureWordReport:
    batch = list(records)
    stats = build_feature_word_stats(batch)
    ordered = sorted(stats.values(), key=lambda s: (-s.clicks, s.word))
    return FeatureWordReport(total_search_terms=len(batch), feature_words=tuple(ordered))


def high_performing_words(
    report: FeatureWordReport,
    min_clicks: float = HIGH_PERFORMER_MIN_CLICKS,
    max_acos: float = HIGH_PERFORMER_MAX_ACOS,
) -> List[FeatureWordStat]:
    """Words with enough clicks, some orders and ACOS in (0, max_acos]; best ACOS first."""
    words = [
        fw for fw in report.feature_words
        if fw.clicks >= min_clicks and fw.orders > 0 and 0 < fw.acos <= max_acos
    ]
    return sorted(words, key=lambda fw: (fw.acos, fw.word))


def problem_words(report: FeatureWordReport, min_clicks: float = PROBLEM_MIN_CLICKS) -> List[FeatureWordStat]:
    """Words with at least min_clicks and no orders; most clicked first."""
    words = [fw for fw in report.feature_words if fw.clicks >= min_clicks and fw.orders == 0]
    return sorted(words, key=lambda fw: (-fw.clicks, fw.word))


def keyword_suggestions(
    report: FeatureWordReport,
    top_n: int = 20,
    min_clicks: float = HIGH_PERFORMER_MIN_CLICKS,
    max_acos: float = HIGH_PERFORMER_MAX_ACOS,
) -> List[KeywordSuggestion]:
    """
    Keyword ideas from the report:
      - high_performer: top_n best-ACOS words, to target directly
      - problem: up to 10 zero-order words, to negate or check relevance
      - combination: pairs of the top 5 performers, to test as phrases
    min_clicks and max_acos are the same cutoffs as high_performing_words / problem_words.
    """
    suggestions: List[KeywordSuggestion] = []
    performers = high_performing_words(report, min_clicks, max_acos)

    for fw in performers[:top_n]:
        suggestions.append(KeywordSuggestion(
            keyword=fw.word,
            kind="high_performer",
            clicks=fw.clicks,
            orders=fw.orders,
            acos=fw.acos,
            conversion_rate=fw.conversion_rate,
            suggestion=f"High-converting feature word, ACOS {fw.acos:.1f}%. Target as a core keyword.",
        ))

    for fw in problem_words(report, min_clicks)[:MAX_PROBLEM_SUGGESTIONS]:
        suggestions.append(KeywordSuggestion(
            keyword=fw.word,
            kind="problem",
            clicks=fw.clicks,
            orders=0.0,
            acos=0.0,
            conversion_rate=0.0,
            suggestion=f"{fw.clicks:.0f} clicks with 0 orders. Negate or check relevance.",
        ))

    pool = performers[:COMBINATION_POOL]
    for i, first in enumerate(pool):
        for second in pool[i + 1:]:
            avg_acos = (first.acos + second.acos) / 2
            clicks = first.clicks + second.clicks
            orders = first.orders + second.orders
            suggestions.append(KeywordSuggestion(
                keyword=f"{first.word} {second.word}",
                kind="combination",
                clicks=clicks,
                orders=orders,
                acos=avg_acos,
                conversion_rate=_ratio(orders, clicks) * 100,
                suggestion=f"Combination of high-converting words, estimated ACOS {avg_acos:.1f}%. Test as a new keyword.",
            ))

    return suggestions


def feature_report_to_dict(
    report: FeatureWordReport,
    min_clicks: float = HIGH_PERFORMER_MIN_CLICKS,
    max_acos: float = HIGH_PERFORMER_MAX_ACOS,
) -> Dict[str, Any]:
    def _word(fw: FeatureWordStat) -> Dict[str, Any]:
        return {
            "word": fw.word,
            "count": fw.count,
            "impressions": fw.impressions,
            "clicks": fw.clicks,
            "orders": fw.orders,
            "spend": round(fw.spend, 2),
            "sales": round(fw.sales, 2),
            "conversion_rate": round(fw.conversion_rate, 4),
            "acos": round(fw.acos, 4),
            "avg_cpc": round(fw.avg_cpc, 4),
        }

    return {
        "total_search_terms": report.total_search_terms,
        "total_feature_words": report.total_feature_words,
        "feature_words": [_word(fw) for fw in report.feature_words],
        "high_performers": [fw.word for fw in high_performing_words(report, min_clicks, max_acos)],
        "problem_words": [fw.word for fw in problem_words(report, min_clicks)],
        "suggestions": [
            {
                "keyword": s.keyword,
                "type": s.kind,
                "clicks": s.clicks,
                "orders": s.orders,
                "acos": round(s.acos, 4),
                "conversion_rate": round(s.conversion_rate, 4),
                "suggestion": s.suggestion,
            }
            for s in keyword_suggestions(report, min_clicks=min_clicks, max_acos=max_acos)
        ],
    }
