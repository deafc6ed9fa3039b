import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    # Logging
    log_level: str
    log_dir: str

    # DuckDB file holding saved analysis reports
    reports_db_path: str


def get_settings() -> Settings:
    load_dotenv()  # reads .env if present

    return Settings(
        log_level=os.getenv("STO_LOG_LEVEL", "INFO").strip().upper(),
        log_dir=os.getenv("STO_LOG_DIR", "logs").strip() or "logs",
        reports_db_path=os.getenv("STO_REPORTS_DB", "./reports.duckdb"),
    )
