"""Runtime settings, read from the environment and an optional .env file."""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent


def _load_env_from_project() -> None:
    for d in [Path.cwd(), BASE_DIR]:
        env_file = d / ".env"
        if env_file.exists():
            load_dotenv(env_file)
            return


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("true", "1", "t", "yes")


_load_env_from_project()

SALES_DATA_PATH: str = os.getenv("SALES_DATA_PATH", os.path.join("data", "superstore.csv"))
REPORTS_OUTPUT_DIR: str = os.getenv("REPORTS_OUTPUT_DIR", "outputs")

# Superstore exports write dates as dd/mm/yyyy unless DATE_FORMAT says otherwise.
DATE_DAYFIRST: bool = _env_bool("DATE_DAYFIRST", True)
DATE_FORMAT: str | None = os.getenv("DATE_FORMAT") or None

TOP_N_CUSTOMERS: int = int(os.getenv("TOP_N_CUSTOMERS", "10"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
