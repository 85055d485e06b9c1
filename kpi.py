import pandas as pd
from dataclasses import asdict, dataclass
from typing import Any

from logging_config import get_logger
from reports import (
    date_coverage,
    distinct_customers,
    repeat_customers,
    shipping_delays,
    yearly_order_trend,
)

logger = get_logger(__name__)


@dataclass
class KPISummary:
    total_sales: float = 0.0
    avg_sales_per_order: float | None = None
    total_units_sold: int = 0
    total_profit: float = 0.0
    profit_margin_pct: float | None = None
    total_customers: int = 0
    repeat_customers: int = 0
    avg_delay_days: float | None = None
    min_delay_days: int | None = None
    max_delay_days: int | None = None
    same_day_orders: int = 0
    latest_year: int | None = None
    latest_year_orders: int | None = None
    latest_year_yoy_growth_pct: float | None = None
    date_range: tuple[str | None, str | None] = (None, None)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["date_range"] = list(self.date_range)
        return out


def _none_if_nan(value: Any) -> Any:
    if value is None or pd.isna(value):
        return None
    return value


def compute_kpi_summary(df: pd.DataFrame) -> KPISummary:
    """
    One-row summary of the whole order table.

    Undefined ratios (zero sales, no prior year) and statistics over an empty
    set of delays are reported as None.
    """
    total_sales = float(df["Sales"].sum())
    total_profit = float(df["Profit"].sum())
    total_units = int(df["Quantity"].sum())
    order_count = int(df["Order_ID"].dropna().nunique())

    avg_sales_per_order = round(total_sales / order_count, 2) if order_count else None
    profit_margin_pct = round(total_profit * 100 / total_sales, 2) if total_sales != 0 else None

    delays = shipping_delays(df)["Delay_Days"]
    if delays.empty:
        avg_delay, min_delay, max_delay = None, None, None
    else:
        avg_delay = round(float(delays.mean()), 2)
        min_delay = int(delays.min())
        max_delay = int(delays.max())
    same_day = int((delays == 0).sum())

    latest_year, latest_orders, latest_growth = None, None, None
    yearly = yearly_order_trend(df)
    if not yearly.empty:
        latest = yearly.iloc[-1]
        latest_year = int(latest["Year"])
        latest_orders = int(latest["Orders"])
        latest_growth = _none_if_nan(latest["YoY_Growth_Pct"])
        if latest_growth is not None:
            latest_growth = float(latest_growth)

    summary = KPISummary(
        total_sales=round(total_sales, 2),
        avg_sales_per_order=avg_sales_per_order,
        total_units_sold=total_units,
        total_profit=round(total_profit, 2),
        profit_margin_pct=profit_margin_pct,
        total_customers=distinct_customers(df),
        repeat_customers=len(repeat_customers(df)),
        avg_delay_days=avg_delay,
        min_delay_days=min_delay,
        max_delay_days=max_delay,
        same_day_orders=same_day,
        latest_year=latest_year,
        latest_year_orders=latest_orders,
        latest_year_yoy_growth_pct=latest_growth,
        date_range=date_coverage(df),
    )
    logger.debug("KPI summary computed over %d rows", len(df))
    return summary
