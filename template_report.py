"""
Template-based summary report.
"""

import pandas as pd

from kpi import KPISummary


def _fmt(value, suffix: str = "") -> str:
    if value is None:
        return "n/a"
    if isinstance(value, float):
        return f"{value:,.2f}{suffix}"
    return f"{value:,}{suffix}" if isinstance(value, int) else f"{value}{suffix}"


def generate_summary_report(
    kpis: KPISummary,
    categories: pd.DataFrame | None = None,
    top_customers: pd.DataFrame | None = None,
    delivery: pd.DataFrame | None = None,
) -> str:
    sections = []

    sections.append("## 1. Overview")
    start, end = kpis.date_range
    if start and end:
        sections.append(f"Orders run from {start} to {end}.")
    sections.append(
        f"Total sales amount to {_fmt(kpis.total_sales)} with a total profit of "
        f"{_fmt(kpis.total_profit)} (margin {_fmt(kpis.profit_margin_pct, '%')})."
    )
    sections.append(
        f"Units sold: {_fmt(kpis.total_units_sold)}. "
        f"Average sales per order: {_fmt(kpis.avg_sales_per_order)}."
    )
    sections.append("")

    sections.append("## 2. Order Trend")
    if kpis.latest_year is not None:
        growth = kpis.latest_year_yoy_growth_pct
        growth_text = f"{growth:+.2f}% year over year" if growth is not None else "no prior year to compare"
        sections.append(f"{kpis.latest_year}: {_fmt(kpis.latest_year_orders)} orders ({growth_text}).")
    else:
        sections.append("No orders with a valid order date.")
    sections.append("")

    sections.append("## 3. Customers")
    sections.append(
        f"Distinct customers: {_fmt(kpis.total_customers)}, of which "
        f"{_fmt(kpis.repeat_customers)} ordered in more than one year."
    )
    if top_customers is not None and not top_customers.empty:
        top = top_customers.iloc[0]
        sections.append(
            f"Most profitable customer: {top['Customer_Name']} ({top['Customer_ID']}) "
            f"with {_fmt(float(top['Total_Profit']))} profit."
        )
    sections.append("")

    sections.append("## 4. Shipping")
    if kpis.avg_delay_days is not None:
        sections.append(
            f"Days to ship: average {_fmt(kpis.avg_delay_days)}, "
            f"min {kpis.min_delay_days}, max {kpis.max_delay_days}. "
            f"Same-day orders: {_fmt(kpis.same_day_orders)}."
        )
    else:
        sections.append("No rows with both an order and a ship date.")
    if delivery is not None and not delivery.empty:
        slowest = delivery.iloc[0]
        sections.append(
            f"Slowest destination: {slowest['State']} "
            f"({_fmt(float(slowest['AvgDaysToShip']))} days on average)."
        )
    sections.append("")

    sections.append("## 5. Profitability by Category")
    if categories is not None and not categories.empty:
        for _, row in categories.iterrows():
            margin = None if pd.isna(row["Profit_Margin_Pct"]) else float(row["Profit_Margin_Pct"])
            sections.append(
                f"- {row['Category']}: sales {_fmt(float(row['Total_Sales']))}, "
                f"profit {_fmt(float(row['Total_Profit']))}, margin {_fmt(margin, '%')}"
            )
    else:
        sections.append("No category data available.")

    return "\n".join(sections)
