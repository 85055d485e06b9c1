"""
Report Definitions — source columns, formula, and business question per report.

Each report is defined with:
- required_columns: canonical order columns it reads
- formula: short text describing the computation
- business_question: what the report answers
- output_type: scalar | table | mapping

run_all_reports() executes every table/mapping report against one frame.
"""

from typing import Any, Callable

import pandas as pd

import reports
from exceptions import UnknownReportError
from kpi import compute_kpi_summary

REPORT_DEFINITIONS = {
    "null_audit": {
        "name": "null_audit",
        "required_columns": [],
        "formula": "count(isna(column)) for each known order column",
        "business_question": "How complete is the order table? How many dates could not be parsed?",
        "output_type": "mapping",
    },
    "shipping_delays": {
        "name": "shipping_delays",
        "required_columns": ["Order_ID", "Order_Date", "Ship_Date", "State"],
        "formula": "Ship_Date - Order_Date in days, per row",
        "business_question": "How long does each order line take to ship?",
        "output_type": "table",
    },
    "same_day_orders": {
        "name": "same_day_orders",
        "required_columns": ["Order_ID", "Order_Date", "Ship_Date", "State"],
        "formula": "shipping_delays where Delay_Days == 0",
        "business_question": "Which orders ship on the day they are placed?",
        "output_type": "table",
    },
    "delivery_trends_by_state": {
        "name": "delivery_trends_by_state",
        "required_columns": ["Order_Date", "Ship_Date", "State"],
        "formula": "groupby(State).agg(min, max, mean, count)(Delay_Days)",
        "business_question": "Which destinations wait longest for delivery?",
        "output_type": "table",
    },
    "yearly_order_trend": {
        "name": "yearly_order_trend",
        "required_columns": ["Order_ID", "Order_Date"],
        "formula": "nunique(Order_ID) per year; 100 * (orders[y] - orders[y-1]) / orders[y-1]",
        "business_question": "Is order volume growing year over year?",
        "output_type": "table",
    },
    "quarterly_order_trend": {
        "name": "quarterly_order_trend",
        "required_columns": ["Order_ID", "Order_Date"],
        "formula": "nunique(Order_ID) per (year, quarter)",
        "business_question": "How does order volume move across quarters?",
        "output_type": "table",
    },
    "monthly_order_trend": {
        "name": "monthly_order_trend",
        "required_columns": ["Order_ID", "Order_Date"],
        "formula": "nunique(Order_ID) per (year, month)",
        "business_question": "Which months are seasonal peaks?",
        "output_type": "table",
    },
    "sales_by_category": {
        "name": "sales_by_category",
        "required_columns": ["Category", "Sales", "Profit", "Discount", "Order_ID"],
        "formula": "groupby(Category): sum(Sales), sum(Profit), 100 * sum(Profit) / sum(Sales), mean(Discount)",
        "business_question": "Which categories earn the most, and at what margin?",
        "output_type": "table",
    },
    "sales_by_sub_category": {
        "name": "sales_by_sub_category",
        "required_columns": ["Category", "Sub_Category", "Sales", "Profit", "Discount", "Order_ID"],
        "formula": "groupby(Category, Sub_Category): sum(Sales), sum(Profit), margin %, mean(Discount)",
        "business_question": "Which sub-categories drive or drain profit?",
        "output_type": "table",
    },
    "sales_by_state": {
        "name": "sales_by_state",
        "required_columns": ["State", "Sales", "Profit", "Discount", "Order_ID"],
        "formula": "groupby(State): sum(Sales), sum(Profit), margin %",
        "business_question": "Where is revenue and profit concentrated geographically?",
        "output_type": "table",
    },
    "loss_making_sub_categories": {
        "name": "loss_making_sub_categories",
        "required_columns": ["Category", "Sub_Category", "Sales", "Profit"],
        "formula": "sales_by_sub_category where Total_Profit < 0",
        "business_question": "Which sub-categories lose money overall?",
        "output_type": "table",
    },
    "discount_impact": {
        "name": "discount_impact",
        "required_columns": ["Discount", "Sales", "Profit"],
        "formula": "bucket(Discount) -> count, sum(Sales), sum(Profit), margin %",
        "business_question": "At what discount level do sales stop being profitable?",
        "output_type": "table",
    },
    "repeat_customers": {
        "name": "repeat_customers",
        "required_columns": ["Customer_ID", "Customer_Name", "Order_Date"],
        "formula": "customers with nunique(year(Order_Date)) > 1",
        "business_question": "Which customers come back across years?",
        "output_type": "table",
    },
    "top_customers_by_profit": {
        "name": "top_customers_by_profit",
        "required_columns": ["Customer_ID", "Customer_Name", "Profit", "Sales", "Order_ID"],
        "formula": "groupby(Customer_ID).sum(Profit), sort desc, ties by Customer_ID asc, head(n)",
        "business_question": "Who are the most profitable customers?",
        "output_type": "table",
    },
    "distinct_customers": {
        "name": "distinct_customers",
        "required_columns": ["Customer_ID"],
        "formula": "nunique(Customer_ID)",
        "business_question": "How large is the customer base?",
        "output_type": "scalar",
    },
    "date_coverage": {
        "name": "date_coverage",
        "required_columns": ["Order_Date"],
        "formula": "min(Order_Date), max(Order_Date)",
        "business_question": "Over what time span does the data run?",
        "output_type": "scalar",
    },
    "kpi_summary": {
        "name": "kpi_summary",
        "required_columns": [
            "Order_ID", "Order_Date", "Ship_Date", "Customer_ID", "Customer_Name",
            "Sales", "Profit", "Quantity",
        ],
        "formula": "totals, margin %, customer counts, delay stats, latest-year orders and YoY growth",
        "business_question": "How is the business doing at a glance?",
        "output_type": "scalar",
    },
}


REPORT_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "null_audit": reports.null_audit,
    "shipping_delays": reports.shipping_delays,
    "same_day_orders": reports.same_day_orders,
    "delivery_trends_by_state": reports.delivery_trends_by_state,
    "yearly_order_trend": reports.yearly_order_trend,
    "quarterly_order_trend": reports.quarterly_order_trend,
    "monthly_order_trend": reports.monthly_order_trend,
    "sales_by_category": reports.sales_by_category,
    "sales_by_sub_category": reports.sales_by_sub_category,
    "sales_by_state": reports.sales_by_state,
    "loss_making_sub_categories": reports.loss_making_sub_categories,
    "discount_impact": reports.discount_impact,
    "repeat_customers": reports.repeat_customers,
    "top_customers_by_profit": reports.top_customers_by_profit,
    "distinct_customers": reports.distinct_customers,
    "date_coverage": reports.date_coverage,
    "kpi_summary": compute_kpi_summary,
}


def get_all_required_columns() -> list[str]:
    """Union of all required columns across reports. Documents what each report reads."""
    seen: set[str] = set()
    for defn in REPORT_DEFINITIONS.values():
        for col in defn["required_columns"]:
            seen.add(col)
    return sorted(seen)


def run_report(df: pd.DataFrame, name: str, top_n: int = 10) -> Any:
    if name not in REPORT_FUNCTIONS:
        raise UnknownReportError(name, sorted(REPORT_FUNCTIONS))
    if name == "top_customers_by_profit":
        return reports.top_customers_by_profit(df, n=top_n)
    return REPORT_FUNCTIONS[name](df)


def audit_to_frame(audit: dict[str, int]) -> pd.DataFrame:
    return pd.DataFrame({"Column": list(audit), "Null_Count": list(audit.values())})


def run_all_reports(df: pd.DataFrame, top_n: int = 10) -> dict[str, pd.DataFrame]:
    """Every table and mapping report, keyed by report name, as DataFrames."""
    tables: dict[str, pd.DataFrame] = {}
    for name, defn in REPORT_DEFINITIONS.items():
        if defn["output_type"] == "table":
            tables[name] = run_report(df, name, top_n=top_n)
        elif defn["output_type"] == "mapping":
            tables[name] = audit_to_frame(run_report(df, name))
    return tables
