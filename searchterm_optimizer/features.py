"""
Feature-word aggregation — batch-wide totals per token.

A word that shows up in many search terms pools the clicks/orders/spend/sales
of all of them, which gives an estimate of how the word performs regardless of
the exact phrase around it.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, Mapping, Optional, Sequence

from .models import FeatureWordStat, SearchTermRecord, TokenSignals, _ratio
from .tokenizer import split_to_feature_words


def build_feature_word_stats(records: Iterable[SearchTermRecord]) -> Dict[str, FeatureWordStat]:
    """Build a fresh word -> FeatureWordStat mapping for one batch."""
    stats: Dict[str, FeatureWordStat] = {}

    for rec in records:
        for word in split_to_feature_words(rec.search_term):
            stat = stats.get(word)
            if stat is None:
                stat = FeatureWordStat(word=word)
                stats[word] = stat
            stat.count += 1
            stat.impressions += rec.impressions
            stat.clicks += rec.clicks
            stat.orders += rec.orders
            stat.spend += rec.spend
            stat.sales += rec.sales

    for stat in stats.values():
        stat.conversion_rate = _ratio(stat.orders, stat.clicks) * 100

    return stats


def scan_feature_words(words: Sequence[str], stats: Mapping[str, FeatureWordStat]) -> TokenSignals:
    """
    Summarize what a search term's own words say about it.

    - zero_cvr_word: the most-clicked word with clicks but no orders
    - min_cvr: lowest positive conversion rate among the words (None if none convert)
    - min_clicks_word: the word with the fewest clicks, i.e. the thinnest evidence

    Ties keep the word that appears first in the search term.
    """
    zero_cvr: Optional[FeatureWordStat] = None
    thinnest: Optional[FeatureWordStat] = None
    min_cvr: Optional[float] = None

    for word in words:
        stat = stats.get(word)
        if stat is None:
            continue

        if thinnest is None or stat.clicks < thinnest.clicks:
            thinnest = stat

        if stat.is_zero_conversion and (zero_cvr is None or stat.clicks > zero_cvr.clicks):
            zero_cvr = stat

        if stat.conversion_rate > 0 and (min_cvr is None or stat.conversion_rate < min_cvr):
            min_cvr = stat.conversion_rate

    return TokenSignals(
        zero_cvr_word=zero_cvr.word if zero_cvr else None,
        zero_cvr_clicks=zero_cvr.clicks if zero_cvr else 0.0,
        min_cvr=min_cvr,
        min_clicks_word=thinnest.word if thinnest else None,
        min_clicks=thinnest.clicks if thinnest else math.inf,
    )
