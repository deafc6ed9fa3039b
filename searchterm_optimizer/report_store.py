"""
Report store - saved analysis reports in DuckDB.

One row per analyzed upload: counts and overall metrics as columns, the full
JSON report alongside for re-display.
"""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import duckdb

from .logging_config import setup_logging
from .models import AnalysisSummary

logger = setup_logging(__name__)


class ReportStore:
    """Manages analysis report persistence in DuckDB"""

    def __init__(self, db_path: str = "reports.duckdb"):
        self.db_path = Path(db_path)

    def _get_connection(self):
        """Get DuckDB connection"""
        return duckdb.connect(str(self.db_path))

    def ensure_schema(self) -> None:
        conn = self._get_connection()
        try:
            conn.execute("CREATE SCHEMA IF NOT EXISTS analytics;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS analytics.analysis_reports (
                    report_id TEXT PRIMARY KEY,
                    file_name TEXT NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    total_keywords INTEGER NOT NULL,
                    increase_bid_count INTEGER NOT NULL,
                    decrease_bid_count INTEGER NOT NULL,
                    exact_negative_count INTEGER NOT NULL,
                    phrase_negative_count INTEGER NOT NULL,
                    reasonable_count INTEGER NOT NULL,
                    pending_count INTEGER NOT NULL,
                    overall_acos DOUBLE,
                    overall_conversion_rate DOUBLE,
                    average_cpc DOUBLE,
                    report_json TEXT NOT NULL
                );
                """
            )
        finally:
            conn.close()

    def save_summary(
        self,
        summary: AnalysisSummary,
        report: Dict[str, Any],
        file_name: str,
        created_at: Optional[datetime] = None,
    ) -> str:
        """
        Save one analyzed batch.

        Args:
            summary: Engine output (counts and metrics become columns)
            report: JSON-ready report from generate_analysis_report
            file_name: Name of the uploaded file
            created_at: When analyzed (UTC), defaults to now

        Returns: report_id
        """
        self.ensure_schema()

        report_id = uuid.uuid4().hex[:12]
        if created_at is None:
            created_at = datetime.now(timezone.utc).replace(tzinfo=None)

        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO analytics.analysis_reports (
                    report_id, file_name, created_at, total_keywords,
                    increase_bid_count, decrease_bid_count,
                    exact_negative_count, phrase_negative_count,
                    reasonable_count, pending_count,
                    overall_acos, overall_conversion_rate, average_cpc,
                    report_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    report_id,
                    file_name,
                    created_at,
                    summary.total_keywords,
                    summary.increase_bid_count,
                    summary.decrease_bid_count,
                    summary.exact_negative_count,
                    summary.phrase_negative_count,
                    summary.reasonable_count,
                    summary.pending_count,
                    summary.overall_acos,
                    summary.overall_conversion_rate,
                    summary.average_cpc,
                    json.dumps(report, ensure_ascii=False, default=str),
                ],
            )
        finally:
            conn.close()

        logger.info(f"Saved report {report_id} ({file_name}, {summary.total_keywords} search terms)")
        return report_id

    def get_report(self, report_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored JSON report, or None if the id is unknown"""
        self.ensure_schema()
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT report_json FROM analytics.analysis_reports WHERE report_id = ?",
                [report_id],
            ).fetchone()
        finally:
            conn.close()

        return json.loads(row[0]) if row else None

    def list_reports(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent reports first, without the JSON payload"""
        self.ensure_schema()
        conn = self._get_connection()
        try:
            cur = conn.execute(
                """
                SELECT report_id, file_name, created_at, total_keywords,
                       increase_bid_count, decrease_bid_count,
                       exact_negative_count, phrase_negative_count,
                       reasonable_count, pending_count,
                       overall_acos, overall_conversion_rate, average_cpc
                FROM analytics.analysis_reports
                ORDER BY created_at DESC, report_id
                LIMIT ?
                """,
                [limit],
            )
            cols = [c[0] for c in cur.description]
            rows = cur.fetchall()
        finally:
            conn.close()

        return [dict(zip(cols, r)) for r in rows]
