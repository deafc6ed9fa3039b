"""
Test search term report ingestion: header aliases, number parsing, CSV and Parquet loading.

Run: python tools/testing/test_ingest.py
"""

import csv
import sys
import tempfile
from decimal import Decimal
from pathlib import Path

import duckdb

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from searchterm_optimizer.ingest import load_search_term_file, parse_number, parse_rows


def test_parse_number_variants():
    assert parse_number("$1,234.50") == 1234.5
    assert parse_number("¥100.00") == 100.0
    assert parse_number("1，200") == 1200.0
    assert parse_number("12.5%") == 12.5
    assert parse_number(" 42 ") == 42.0
    assert parse_number(7) == 7.0
    assert parse_number(Decimal("5.25")) == 5.25
    assert parse_number(None) == 0.0
    assert parse_number("") == 0.0
    assert parse_number("n/a") == 0.0
    assert parse_number("-") == 0.0


def test_chinese_headers():
    records = parse_rows([{
        "搜索词": "magnesium gummies",
        "展示量": "10,000",
        "点击量": "120",
        "花费": "¥60.00",
        "销售额": "¥240.00",
        "订单": "6",
        "广告活动名称": "SP - Magnesium",
    }])

    assert len(records) == 1
    rec = records[0]
    assert rec.search_term == "magnesium gummies"
    assert rec.impressions == 10000
    assert rec.clicks == 120
    assert rec.spend == 60
    assert rec.sales == 240
    assert rec.orders == 6
    assert rec.campaign == "SP - Magnesium"
    assert abs(rec.acos - 25.0) < 1e-9
    assert abs(rec.cvr - 5.0) < 1e-9
    assert abs(rec.cpc - 0.5) < 1e-9
    assert abs(rec.ctr - 1.2) < 1e-9


def test_amazon_export_headers():
    rec = parse_rows([{
        "Customer Search Term": "vitamin d3",
        "Impressions": "500",
        "Clicks": "10",
        "Spend": "$5.00",
        "7 Day Total Sales": "$0.00",
        "7 Day Total Orders (#)": "0",
        "Match Type": "BROAD",
    }])[0]

    assert rec.search_term == "vitamin d3"
    assert rec.clicks == 10
    assert rec.sales == 0
    assert rec.acos == 0
    assert rec.match_type == "BROAD"


def test_headers_case_insensitive():
    rec = parse_rows([{"search term": "tea", " clicks ": "4", "SPEND": "2"}])[0]
    assert rec.search_term == "tea"
    assert rec.clicks == 4
    assert rec.spend == 2


def test_rows_without_search_term_skipped():
    records = parse_rows([
        {"Search Term": "", "Clicks": "5"},
        {"Clicks": "5"},
        {"Search Term": "   ", "Clicks": "5"},
        {"Search Term": "kept", "Clicks": "5"},
    ])
    assert [r.search_term for r in records] == ["kept"]


def test_bad_metrics_become_zero():
    rec = parse_rows([{"Search Term": "odd", "Clicks": "lots", "Spend": "-3", "Orders": None}])[0]
    assert rec.clicks == 0
    assert rec.spend == 0
    assert rec.orders == 0
    assert rec.cpc == 0


def test_load_csv():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "search_terms.csv"
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Search Term", "Impressions", "Clicks", "Spend", "Sales", "Orders"])
            writer.writerow(["magnesium gummies", "1,000", "100", "$50.00", "$200.00", "10"])
            writer.writerow(["free sample", "3,000", "300", "$30.00", "", "0"])
            writer.writerow(["", "10", "1", "$0.10", "", ""])

        records = load_search_term_file(path)

    assert [r.search_term for r in records] == ["magnesium gummies", "free sample"]
    assert records[0].impressions == 1000
    assert records[0].spend == 50
    assert records[1].sales == 0


def test_load_parquet_decimal_money():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "search_terms.parquet"
        con = duckdb.connect()
        try:
            con.execute(
                f"""
                COPY (
                    SELECT 'good kw' AS "Search Term",
                           100 AS "Clicks",
                           CAST(5.25 AS DECIMAL(10,2)) AS "Spend",
                           CAST(100.00 AS DECIMAL(10,2)) AS "Sales",
                           5 AS "Orders"
                ) TO '{path.as_posix()}' (FORMAT PARQUET)
                """
            )
        finally:
            con.close()

        records = load_search_term_file(path)

    assert len(records) == 1
    rec = records[0]
    assert rec.spend == 5.25
    assert rec.sales == 100.0
    assert abs(rec.acos - 5.25) < 1e-9
    assert abs(rec.cpc - 0.0525) < 1e-9


def test_load_missing_file():
    try:
        load_search_term_file("/nonexistent/search_terms.csv")
    except FileNotFoundError:
        return
    raise AssertionError("missing report should raise FileNotFoundError")


if __name__ == "__main__":
    tests = [v for k, v in list(globals().items()) if k.startswith("test_") and callable(v)]
    failed = 0
    for t in tests:
        try:
            t()
            print(f"✅ PASS: {t.__name__}")
        except AssertionError as e:
            failed += 1
            print(f"❌ FAIL: {t.__name__}: {e}")
    print("=" * 60)
    print("✅ ALL TESTS PASSED" if failed == 0 else f"❌ {failed} TESTS FAILED")
    raise SystemExit(1 if failed else 0)
