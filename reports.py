"""
Reporting engine: descriptive aggregates over the prepared order table.

Every function is a pure read of the frame it is given. Rows with a null
grouping key are left out of that report only. Ratios whose denominator is
zero come back as NaN, never as 0.
"""

import numpy as np
import pandas as pd

from data_source import ORDER_COLUMNS
from logging_config import get_logger

logger = get_logger(__name__)

DISCOUNT_BANDS = ["No discount", "1-20%", "21-40%", "41-60%", ">60%"]


def _empty(columns: list[str]) -> pd.DataFrame:
    return pd.DataFrame(columns=columns)


def _safe_pct(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    den = denominator.astype(float)
    with np.errstate(divide="ignore", invalid="ignore"):
        pct = np.where(den != 0, numerator.astype(float) * 100 / den, np.nan)
    return pd.Series(pct, index=numerator.index).round(2)


# -----------------------------------------------------------------------------
# Data quality
# -----------------------------------------------------------------------------

def null_audit(df: pd.DataFrame) -> dict[str, int]:
    """Missing-value count for each known order column present in the frame."""
    audit: dict[str, int] = {}
    for col in ORDER_COLUMNS:
        if col not in df.columns:
            continue
        audit[col] = int(df[col].isna().sum())
    return audit


def date_coverage(df: pd.DataFrame) -> tuple[str | None, str | None]:
    dates = df["Order_Date"].dropna()
    if dates.empty:
        return None, None
    return dates.min().strftime("%Y-%m-%d"), dates.max().strftime("%Y-%m-%d")


# -----------------------------------------------------------------------------
# Delivery
# -----------------------------------------------------------------------------

def shipping_delays(df: pd.DataFrame) -> pd.DataFrame:
    """
    Days between order and shipment for every row with both dates.

    Rows sharing an Order ID are kept as separate rows.
    """
    columns = ["Order_ID", "Order_Date", "Ship_Date", "State", "Delay_Days"]
    d = df.dropna(subset=["Order_Date", "Ship_Date"])
    if d.empty:
        return _empty(columns)

    out = d[["Order_ID", "Order_Date", "Ship_Date", "State"]].copy()
    out["Delay_Days"] = (d["Ship_Date"].dt.normalize() - d["Order_Date"].dt.normalize()).dt.days.astype("int64")

    negative = int((out["Delay_Days"] < 0).sum())
    if negative:
        logger.warning("%d row(s) ship before they are ordered", negative)
    return out.reset_index(drop=True)


def same_day_orders(df: pd.DataFrame) -> pd.DataFrame:
    delays = shipping_delays(df)
    return delays[delays["Delay_Days"] == 0].reset_index(drop=True)


def delivery_trends_by_state(df: pd.DataFrame) -> pd.DataFrame:
    columns = ["State", "MinDaysToShip", "MaxDaysToShip", "AvgDaysToShip", "Orders"]
    delays = shipping_delays(df)
    delays = delays.dropna(subset=["State"])
    if delays.empty:
        return _empty(columns)

    by_state = (
        delays.groupby("State")["Delay_Days"]
        .agg(MinDaysToShip="min", MaxDaysToShip="max", AvgDaysToShip="mean", Orders="count")
        .reset_index()
    )
    by_state["AvgDaysToShip"] = by_state["AvgDaysToShip"].round(2)
    return by_state.sort_values(
        ["AvgDaysToShip", "State"], ascending=[False, True]
    ).reset_index(drop=True)[columns]


# -----------------------------------------------------------------------------
# Order trends
# -----------------------------------------------------------------------------

def yearly_order_trend(df: pd.DataFrame) -> pd.DataFrame:
    """
    Distinct orders per order year with year-over-year growth.

    Growth compares against the previous calendar year. When that year has
    no orders (the first year, or a gap) growth is NaN.
    """
    columns = ["Year", "Orders", "YoY_Growth_Pct"]
    d = df.dropna(subset=["Order_Date", "Order_ID"])
    if d.empty:
        return _empty(columns)

    years = d["Order_Date"].dt.year.rename("Year")
    orders = d.groupby(years)["Order_ID"].nunique().sort_index()
    prev = orders.reindex(orders.index - 1)
    prev.index = orders.index
    growth = ((orders - prev) / prev * 100).round(2)

    return pd.DataFrame({
        "Year": orders.index.astype(int),
        "Orders": orders.to_numpy().astype(int),
        "YoY_Growth_Pct": growth.to_numpy(dtype=float),
    })


def _period_order_trend(df: pd.DataFrame, period: str) -> pd.DataFrame:
    columns = ["Year", period, "Orders"]
    d = df.dropna(subset=["Order_Date", "Order_ID"])
    if d.empty:
        return _empty(columns)

    dates = d["Order_Date"].dt
    part = dates.quarter if period == "Quarter" else dates.month
    keys = [dates.year.rename("Year"), part.rename(period)]
    trend = d.groupby(keys)["Order_ID"].nunique().rename("Orders").reset_index()
    return trend.sort_values(["Year", period]).reset_index(drop=True)[columns]


def quarterly_order_trend(df: pd.DataFrame) -> pd.DataFrame:
    return _period_order_trend(df, "Quarter")


def monthly_order_trend(df: pd.DataFrame) -> pd.DataFrame:
    return _period_order_trend(df, "Month")


# -----------------------------------------------------------------------------
# Profitability
# -----------------------------------------------------------------------------

def _profitability(df: pd.DataFrame, keys: list[str]) -> pd.DataFrame:
    columns = keys + ["Total_Sales", "Total_Profit", "Profit_Margin_Pct", "Avg_Discount", "Orders"]
    d = df.dropna(subset=keys)
    if d.empty:
        return _empty(columns)

    grouped = d.groupby(keys).agg(
        Total_Sales=("Sales", "sum"),
        Total_Profit=("Profit", "sum"),
        Avg_Discount=("Discount", "mean"),
        Orders=("Order_ID", "nunique"),
    ).reset_index()

    zero_sales = grouped["Total_Sales"] == 0
    if zero_sales.any():
        logger.debug("Profit margin undefined for %d group(s) with zero sales", int(zero_sales.sum()))
    grouped["Profit_Margin_Pct"] = _safe_pct(grouped["Total_Profit"], grouped["Total_Sales"])
    grouped["Avg_Discount"] = grouped["Avg_Discount"].round(4)

    return grouped.sort_values(
        ["Total_Sales"] + keys, ascending=[False] + [True] * len(keys)
    ).reset_index(drop=True)[columns]


def sales_by_category(df: pd.DataFrame) -> pd.DataFrame:
    return _profitability(df, ["Category"])


def sales_by_sub_category(df: pd.DataFrame) -> pd.DataFrame:
    return _profitability(df, ["Category", "Sub_Category"])


def sales_by_state(df: pd.DataFrame) -> pd.DataFrame:
    return _profitability(df, ["State"])


def loss_making_sub_categories(df: pd.DataFrame) -> pd.DataFrame:
    sub = sales_by_sub_category(df)
    losses = sub[sub["Total_Profit"] < 0]
    return losses.sort_values(["Total_Profit", "Sub_Category"]).reset_index(drop=True)


def discount_impact(df: pd.DataFrame) -> pd.DataFrame:
    """Sales and margin per discount band; bands with no rows are omitted."""
    columns = ["Discount_Band", "Orders", "Total_Sales", "Total_Profit", "Profit_Margin_Pct"]
    d = df.dropna(subset=["Discount"])
    if d.empty:
        return _empty(columns)

    discount = d["Discount"]
    band = np.select(
        [discount <= 0, discount <= 0.2, discount <= 0.4, discount <= 0.6],
        DISCOUNT_BANDS[:-1],
        default=DISCOUNT_BANDS[-1],
    )
    grouped = d.assign(Discount_Band=band).groupby("Discount_Band").agg(
        Orders=("Sales", "size"),
        Total_Sales=("Sales", "sum"),
        Total_Profit=("Profit", "sum"),
    )
    grouped = (
        grouped.reindex([b for b in DISCOUNT_BANDS if b in grouped.index])
        .rename_axis("Discount_Band")
        .reset_index()
    )
    grouped["Profit_Margin_Pct"] = _safe_pct(grouped["Total_Profit"], grouped["Total_Sales"])
    return grouped[columns]


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------

def distinct_customers(df: pd.DataFrame) -> int:
    return int(df["Customer_ID"].dropna().nunique())


def repeat_customers(df: pd.DataFrame) -> pd.DataFrame:
    """Customers whose orders fall in more than one calendar year."""
    columns = ["Customer_ID", "Customer_Name", "Active_Years"]
    d = df.dropna(subset=["Customer_ID", "Order_Date"])
    if d.empty:
        return _empty(columns)

    active = d.assign(_year=d["Order_Date"].dt.year).groupby("Customer_ID").agg(
        Customer_Name=("Customer_Name", "first"),
        Active_Years=("_year", "nunique"),
    ).reset_index()
    active = active[active["Active_Years"] > 1]
    return active.sort_values(
        ["Active_Years", "Customer_ID"], ascending=[False, True]
    ).reset_index(drop=True)[columns]


def top_customers_by_profit(df: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """Top ``n`` customers by total profit; ties go to the lower Customer ID."""
    columns = ["Customer_ID", "Customer_Name", "Total_Profit", "Total_Sales", "Orders"]
    d = df.dropna(subset=["Customer_ID"])
    if d.empty or n <= 0:
        return _empty(columns)

    totals = d.groupby("Customer_ID").agg(
        Customer_Name=("Customer_Name", "first"),
        Total_Profit=("Profit", "sum"),
        Total_Sales=("Sales", "sum"),
        Orders=("Order_ID", "nunique"),
    ).reset_index()
    ranked = totals.sort_values(["Total_Profit", "Customer_ID"], ascending=[False, True])
    return ranked.head(n).reset_index(drop=True)[columns]
