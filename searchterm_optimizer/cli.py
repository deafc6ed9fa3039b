"""
Search Term Optimizer CLI – classify an uploaded search term report.

Usage:
    python -m searchterm_optimizer.cli analyze reports/search_terms.csv --config configs/analysis.yaml
    python -m searchterm_optimizer.cli analyze reports/search_terms.csv --output out.json --store
    python -m searchterm_optimizer.cli features reports/search_terms.csv --min-clicks 20
    python -m searchterm_optimizer.cli reports --limit 5
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict

from .config import AnalysisConfig, ConfigError, load_analysis_config
from .engine import generate_analysis_report, results_by_suggestion, run_analysis
from .feature_report import analyze_feature_words, feature_report_to_dict
from .ingest import load_search_term_file
from .logging_config import setup_logging
from .models import Suggestion
from .report_store import ReportStore
from .settings import get_settings

logger = setup_logging(__name__)


def _write_json(payload: Dict[str, Any], out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    print(f"[Optimizer] Report saved: {out_path}")


def cmd_analyze(args: argparse.Namespace) -> int:
    try:
        config = load_analysis_config(args.config) if args.config else AnalysisConfig()
    except FileNotFoundError as e:
        print(f"[Optimizer] ERROR: {e}")
        return 1
    except (ConfigError, ValueError) as e:
        print(f"[Optimizer] ERROR: {e}")
        return 2

    input_path = Path(args.input)
    try:
        records = load_search_term_file(input_path)
    except FileNotFoundError as e:
        print(f"[Optimizer] ERROR: {e}")
        return 1

    print(f"[Optimizer] Loaded {len(records)} search terms from {input_path}")
    if not records:
        print("[Optimizer] ERROR: No search terms found. Check the report's column headers.")
        return 1

    summary = run_analysis(records, config)
    b = summary.baseline

    print(f"[Optimizer]   overall ACOS:  {summary.overall_acos:.2f}%")
    print(f"[Optimizer]   overall CVR:   {summary.overall_conversion_rate:.2f}%")
    print(f"[Optimizer]   target ACOS:   {b.target_acos:.2f}% (band {b.increase_bid_acos:.2f}%-{b.decrease_bid_acos:.2f}%)")
    print(f"[Optimizer]   negatives at:  exact {b.exact_negative_click_threshold:.0f} / phrase {b.phrase_negative_click_threshold:.0f} clicks")
    for s in Suggestion:
        print(f"[Optimizer]   {s.value:<16} {summary.count_for(s)}")

    report = generate_analysis_report(summary, config, source=str(input_path))

    out_path = Path(args.output) if args.output else Path("reports") / f"{input_path.stem}_analysis.json"
    _write_json(report, out_path)

    if args.store:
        store = ReportStore(args.db or get_settings().reports_db_path)
        report_id = store.save_summary(summary, report, file_name=input_path.name)
        print(f"[Optimizer] Stored as report {report_id}")

    groups = results_by_suggestion(summary)
    for s in (Suggestion.PHRASE_NEGATIVE, Suggestion.EXACT_NEGATIVE, Suggestion.INCREASE_BID, Suggestion.DECREASE_BID):
        top = sorted(groups[s], key=lambda r: -r.record.spend)[: args.top]
        if not top:
            continue
        print(f"\n  {s.value} (top {len(top)} by spend)")
        for r in top:
            print(f"    - {r.search_term} | conf {r.confidence:.2f} | {r.suggested_action[:100]}")

    return 0


def cmd_features(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        records = load_search_term_file(input_path)
    except FileNotFoundError as e:
        print(f"[Optimizer] ERROR: {e}")
        return 1

    report = analyze_feature_words(records)
    payload = feature_report_to_dict(report, min_clicks=args.min_clicks, max_acos=args.max_acos)

    print(f"[Optimizer] {report.total_feature_words} feature words across {report.total_search_terms} search terms")
    print(f"[Optimizer]   high performers: {len(payload['high_performers'])}")
    print(f"[Optimizer]   problem words:   {len(payload['problem_words'])}")

    out_path = Path(args.output) if args.output else Path("reports") / f"{input_path.stem}_features.json"
    _write_json(payload, out_path)
    return 0


def cmd_reports(args: argparse.Namespace) -> int:
    store = ReportStore(args.db or get_settings().reports_db_path)
    rows = store.list_reports(limit=args.limit)
    if not rows:
        print("[Optimizer] No stored reports.")
        return 0
    for row in rows:
        print(
            f"  {row['report_id']}  {row['created_at']}  {row['file_name']}  "
            f"terms={row['total_keywords']} +bid={row['increase_bid_count']} -bid={row['decrease_bid_count']} "
            f"neg={row['exact_negative_count'] + row['phrase_negative_count']} pending={row['pending_count']}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="searchterm_optimizer")
    sub = p.add_subparsers(dest="command", required=True)

    p_an = sub.add_parser("analyze", help="Classify a search term report")
    p_an.add_argument("input", help="CSV or Parquet search term report")
    p_an.add_argument("--config", default=None, help="Analysis config YAML (defaults if omitted)")
    p_an.add_argument("--output", default=None, help="Where to write the JSON report")
    p_an.add_argument("--store", action="store_true", help="Also save the report to DuckDB")
    p_an.add_argument("--db", default=None, help="DuckDB path (default: STO_REPORTS_DB)")
    p_an.add_argument("--top", type=int, default=5, help="Terms to print per action")
    p_an.set_defaults(func=cmd_analyze)

    p_fw = sub.add_parser("features", help="Feature-word report for a search term report")
    p_fw.add_argument("input", help="CSV or Parquet search term report")
    p_fw.add_argument("--min-clicks", type=float, default=10, help="Min clicks for high/problem words")
    p_fw.add_argument("--max-acos", type=float, default=50.0, help="Max ACOS for high performers")
    p_fw.add_argument("--output", default=None, help="Where to write the JSON report")
    p_fw.set_defaults(func=cmd_features)

    p_ls = sub.add_parser("reports", help="List stored analysis reports")
    p_ls.add_argument("--db", default=None, help="DuckDB path (default: STO_REPORTS_DB)")
    p_ls.add_argument("--limit", type=int, default=20)
    p_ls.set_defaults(func=cmd_reports)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
