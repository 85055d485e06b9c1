"""
Export module: persist report tables, the KPI summary and report definitions.
Every run writes under its own run id so earlier outputs are never overwritten.
"""

import json
import os
from datetime import datetime

import pandas as pd

from kpi import KPISummary
from logging_config import get_logger
from report_definitions import REPORT_DEFINITIONS

logger = get_logger(__name__)

REPORT_TABLES_SUBDIR = "report_tables"
KPI_SUBDIR = "kpi"
SUMMARY_SUBDIR = "summaries"
DEFINITIONS_SUBDIR = "definitions"


def get_run_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def ensure_output_dirs(output_dir: str) -> None:
    for d in [REPORT_TABLES_SUBDIR, KPI_SUBDIR, SUMMARY_SUBDIR, DEFINITIONS_SUBDIR]:
        os.makedirs(os.path.join(output_dir, d), exist_ok=True)


def _metadata_header(run_id: str, dataset_name: str, rows_used: int) -> str:
    return f"""---
run_id: {run_id}
dataset_name: {dataset_name}
rows_used: {rows_used}
---

"""


def save_report_tables(run_id: str, tables: dict[str, pd.DataFrame], output_dir: str) -> list[str]:
    """Write each report table to <output_dir>/report_tables/<name>_<run_id>.csv."""
    ensure_output_dirs(output_dir)
    paths = []
    for name, table in tables.items():
        path = os.path.join(output_dir, REPORT_TABLES_SUBDIR, f"{name}_{run_id}.csv")
        table.to_csv(path, index=False)
        paths.append(path)
    logger.info("Saved %d report table(s) to %s", len(paths), os.path.join(output_dir, REPORT_TABLES_SUBDIR))
    return paths


def save_kpi_summary(
    run_id: str,
    summary: KPISummary,
    output_dir: str,
    dataset_name: str = "",
    unparseable_dates: dict[str, int] | None = None,
) -> str:
    """Write the KPI summary to <output_dir>/kpi/kpi_summary_<run_id>.json. Undefined values are null."""
    ensure_output_dirs(output_dir)
    payload = {
        "run_id": run_id,
        "dataset_name": dataset_name,
        "kpis": summary.to_dict(),
        "unparseable_dates": unparseable_dates or {},
    }
    path = os.path.join(output_dir, KPI_SUBDIR, f"kpi_summary_{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return path


def save_summary_report(run_id: str, text: str, output_dir: str, dataset_name: str, rows_used: int) -> str:
    ensure_output_dirs(output_dir)
    path = os.path.join(output_dir, SUMMARY_SUBDIR, f"summary_{run_id}.md")
    with open(path, "w", encoding="utf-8") as f:
        f.write(_metadata_header(run_id, dataset_name, rows_used))
        f.write(text)
    return path


def save_definitions(output_dir: str) -> str:
    ensure_output_dirs(output_dir)
    path = os.path.join(output_dir, DEFINITIONS_SUBDIR, "report_definitions.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(REPORT_DEFINITIONS, f, indent=2, ensure_ascii=False)
    return path
