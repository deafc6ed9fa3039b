"""
Search term report ingestion — turn uploaded rows into SearchTermRecords.

Accepts the English column names of the Amazon search term report export
and the Chinese ones of the localized Seller Central export. Numbers
may arrive as text with currency symbols and thousands separators
("$1,234.50", "¥100.00", "12%").
"""
from __future__ import annotations

import re
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import duckdb

from .logging_config import setup_logging
from .models import SearchTermRecord

logger = setup_logging(__name__)


# First alias present with a non-empty value wins
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "search_term": ("搜索词", "Search Term", "客户搜索词", "Customer Search Term"),
    "impressions": ("展示量", "Impressions", "展示次数", "展现量"),
    "clicks": ("点击量", "Clicks", "点击次数"),
    "spend": ("花费", "Spend", "支出", "Cost"),
    "sales": ("销售额", "Sales", "7天总销售额", "7天总销售额(￥)", "7 Day Total Sales"),
    "orders": (
        "订单", "Orders", "7天总订单数", "7天总订单数(#)",
        "7 Day Total Orders (#)", "7 Day Total Orders",
    ),
    "campaign": ("广告活动名称", "Campaign Name"),
    "ad_group": ("广告组名称", "Ad Group Name"),
    "match_type": ("匹配类型", "Match Type"),
}

_STRIP_CHARS = re.compile(r"[$¥,，%]")
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float:
    """Lenient number parsing; anything unparseable is 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        cleaned = _STRIP_CHARS.sub("", value).strip()
        m = _LEADING_NUMBER.match(cleaned)
        return float(m.group(0)) if m else 0.0
    return 0.0


def _lookup(row: Mapping[str, Any], field: str) -> Any:
    for alias in COLUMN_ALIASES[field]:
        value = row.get(alias)
        if value is not None and value != "" and value != 0:
            return value
    return None


def _normalize_headers(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Exact header names first, then case/whitespace-insensitive English ones."""
    out: Dict[str, Any] = {}
    canonical = {a.lower(): a for aliases in COLUMN_ALIASES.values() for a in aliases}
    for key, value in row.items():
        k = str(key).strip()
        out.setdefault(canonical.get(k.lower(), k), value)
    return out


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def parse_rows(rows: Iterable[Mapping[str, Any]]) -> List[SearchTermRecord]:
    """Map raw report rows to records. Rows without a search term are skipped."""
    records: List[SearchTermRecord] = []
    skipped = 0

    for row in rows:
        row = _normalize_headers(row)
        search_term = _text(_lookup(row, "search_term"))
        if not search_term:
            skipped += 1
            continue

        records.append(
            SearchTermRecord.from_metrics(
                search_term=search_term,
                impressions=parse_number(_lookup(row, "impressions")),
                clicks=parse_number(_lookup(row, "clicks")),
                spend=parse_number(_lookup(row, "spend")),
                sales=parse_number(_lookup(row, "sales")),
                orders=parse_number(_lookup(row, "orders")),
                campaign=_text(_lookup(row, "campaign")),
                ad_group=_text(_lookup(row, "ad_group")),
                match_type=_text(_lookup(row, "match_type")),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} rows without a search term")

    return records


def _rows_from_relation(rel: duckdb.DuckDBPyRelation) -> List[Dict[str, Any]]:
    cols = list(rel.columns)
    return [dict(zip(cols, r)) for r in rel.fetchall()]


def load_search_term_file(path: str | Path) -> List[SearchTermRecord]:
    """Read a CSV or Parquet search term report through DuckDB."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Search term report not found: {p}")

    con = duckdb.connect()
    try:
        if p.suffix.lower() == ".parquet":
            rel = con.read_parquet(str(p))
        else:
            rel = con.read_csv(str(p), header=True, all_varchar=True)
        rows = _rows_from_relation(rel)
    finally:
        con.close()

    records = parse_rows(rows)
    logger.info(f"Loaded {len(records)} search terms from {p} ({len(rows)} rows)")
    return records
