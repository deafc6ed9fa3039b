"""
Classification Engine — one pass over an uploaded batch of search terms.

Flow:
  1. Build feature-word stats for the whole batch
  2. Compute the baseline (totals + thresholds) from the batch and config
  3. Build a RuleContext per record
  4. Run rules in priority order (negative -> bid -> pending); first hit wins
  5. Reduce the classifications into an AnalysisSummary

Nothing survives between calls: stats and baseline are built per batch, so
separate batches can be analyzed concurrently.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .baseline import compute_baseline
from .config import AnalysisConfig
from .features import build_feature_word_stats, scan_feature_words
from .logging_config import setup_logging
from .models import (
    AnalysisSummary,
    Baseline,
    Classification,
    ClassificationResult,
    FeatureWordStat,
    RuleContext,
    SearchTermRecord,
    Suggestion,
    _json_number,
    _ratio,
)
from .rules.bid_rules import BID_RULES
from .rules.negative_rules import NEGATIVE_RULES
from .rules.pending_rules import PENDING_RULES
from .tokenizer import split_to_feature_words

logger = setup_logging(__name__)

# Priority order; first rule returning a Classification wins
ALL_RULES = NEGATIVE_RULES + BID_RULES + PENDING_RULES


def classify_record(
    record: SearchTermRecord,
    feature_stats: Mapping[str, FeatureWordStat],
    baseline: Baseline,
    config: AnalysisConfig,
) -> ClassificationResult:
    """Run the rule cascade for one record."""
    words = tuple(split_to_feature_words(record.search_term))
    ctx = RuleContext(
        config=config,
        record=record,
        words=words,
        signals=scan_feature_words(words, feature_stats),
        baseline=baseline,
        feature_stats=feature_stats,
    )

    decision: Optional[Classification] = None
    for rule_fn in ALL_RULES:
        try:
            decision = rule_fn(ctx)
        except Exception as e:
            # One broken rule shouldn't kill the batch; later rules still classify the record
            logger.warning(f"Rule {rule_fn.__name__} failed on '{record.search_term}': {e}")
            continue
        if decision is not None:
            break

    if decision is None:
        raise RuntimeError(f"No rule classified '{record.search_term}'; fallback rule missing from registry")

    logger.debug(f"[{decision.rule_id}] '{record.search_term}' -> {decision.suggestion.value}")

    return ClassificationResult(
        record=record,
        rule_id=decision.rule_id,
        suggestion=decision.suggestion,
        suggested_action=decision.suggested_action,
        confidence=decision.confidence,
        estimated_acos=decision.estimated_acos,
        problem_keyword=decision.problem_keyword,
    )


def run_analysis(records: Iterable[SearchTermRecord], config: AnalysisConfig) -> AnalysisSummary:
    """
    Classify every record of a batch. Results keep input order.
    """
    if not isinstance(config, AnalysisConfig):
        raise TypeError(f"config must be an AnalysisConfig, got {type(config).__name__}")

    batch = list(records)
    feature_stats = build_feature_word_stats(batch)
    baseline = compute_baseline(batch, config)

    results = [classify_record(rec, feature_stats, baseline, config) for rec in batch]
    summary = summarize(results, baseline)

    logger.info(
        f"Analyzed {summary.total_keywords} search terms ({len(feature_stats)} feature words): "
        f"increase={summary.increase_bid_count} decrease={summary.decrease_bid_count} "
        f"exact_neg={summary.exact_negative_count} phrase_neg={summary.phrase_negative_count} "
        f"reasonable={summary.reasonable_count} pending={summary.pending_count}"
    )
    return summary


def summarize(results: Sequence[ClassificationResult], baseline: Baseline) -> AnalysisSummary:
    """Fold classifications into counts and batch-level metrics."""
    counts = Counter(r.suggestion for r in results)

    total_clicks = sum(r.record.clicks for r in results)
    total_spend = sum(r.record.spend for r in results)
    total_sales = sum(r.record.sales for r in results)
    total_orders = sum(r.record.orders for r in results)

    return AnalysisSummary(
        total_keywords=len(results),
        increase_bid_count=counts[Suggestion.INCREASE_BID],
        decrease_bid_count=counts[Suggestion.DECREASE_BID],
        exact_negative_count=counts[Suggestion.EXACT_NEGATIVE],
        phrase_negative_count=counts[Suggestion.PHRASE_NEGATIVE],
        reasonable_count=counts[Suggestion.REASONABLE],
        pending_count=counts[Suggestion.PENDING],
        total_impressions=sum(r.record.impressions for r in results),
        total_clicks=total_clicks,
        total_spend=total_spend,
        total_sales=total_sales,
        total_orders=total_orders,
        overall_acos=_ratio(total_spend, total_sales) * 100,
        overall_conversion_rate=_ratio(total_orders, total_clicks) * 100,
        average_cpc=_ratio(total_spend, total_clicks),
        average_order_value=_ratio(total_sales, total_orders),
        baseline=baseline,
        results=tuple(results),
    )


def generate_analysis_report(
    summary: AnalysisSummary,
    config: AnalysisConfig,
    source: Optional[str] = None,
) -> Dict[str, Any]:
    """Generate the JSON-ready analysis report."""
    b = summary.baseline
    return {
        "source": source,
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "config": config.as_dict(),
        "total_keywords": summary.total_keywords,
        "counts": {s.value: summary.count_for(s) for s in Suggestion},
        "negative_count": summary.negative_count,
        "totals": {
            "impressions": summary.total_impressions,
            "clicks": summary.total_clicks,
            "spend": round(summary.total_spend, 2),
            "sales": round(summary.total_sales, 2),
            "orders": summary.total_orders,
        },
        "overall": {
            "acos": round(summary.overall_acos, 4),
            "conversion_rate": round(summary.overall_conversion_rate, 4),
            "average_cpc": round(summary.average_cpc, 4),
            "average_order_value": round(summary.average_order_value, 4),
        },
        "thresholds": {
            "target_acos": round(b.target_acos, 4),
            "increase_bid_acos": round(b.increase_bid_acos, 4),
            "decrease_bid_acos": round(b.decrease_bid_acos, 4),
            "exact_negative_clicks": _json_number(b.exact_negative_click_threshold),
            "phrase_negative_clicks": _json_number(b.phrase_negative_click_threshold),
            "reliability_clicks": _json_number(b.reliability_click_threshold),
        },
        "results": [r.to_dict() for r in summary.results],
    }


def results_by_suggestion(summary: AnalysisSummary) -> Dict[Suggestion, List[ClassificationResult]]:
    """Group results per suggestion, each group keeping batch order."""
    groups: Dict[Suggestion, List[ClassificationResult]] = {s: [] for s in Suggestion}
    for r in summary.results:
        groups[r.suggestion].append(r)
    return groups
