import math

import pandas as pd
import pytest

from reports import (
    date_coverage,
    delivery_trends_by_state,
    discount_impact,
    distinct_customers,
    loss_making_sub_categories,
    monthly_order_trend,
    null_audit,
    quarterly_order_trend,
    repeat_customers,
    sales_by_category,
    sales_by_state,
    sales_by_sub_category,
    same_day_orders,
    shipping_delays,
    top_customers_by_profit,
    yearly_order_trend,
)


# -----------------------------------------------------------------------------
# Data quality
# -----------------------------------------------------------------------------

def test_null_audit_counts_unparseable_dates(orders):
    audit = null_audit(orders)
    assert audit["Order_Date"] == 1
    assert audit["Ship_Date"] == 0
    assert audit["Sales"] == 0
    assert list(audit) == [
        "Order_ID", "Order_Date", "Ship_Date", "Customer_ID", "Customer_Name",
        "Category", "Sub_Category", "State", "Sales", "Profit", "Discount", "Quantity",
    ]


def test_null_audit_skips_absent_columns(orders):
    audit = null_audit(orders.drop(columns=["Discount"]))
    assert "Discount" not in audit
    assert len(audit) == 11


def test_date_coverage(orders):
    assert date_coverage(orders) == ("2022-01-05", "2023-11-11")
    assert date_coverage(orders.iloc[[7]]) == (None, None)


# -----------------------------------------------------------------------------
# Delivery
# -----------------------------------------------------------------------------

def test_shipping_delays_per_row(orders):
    delays = shipping_delays(orders)
    assert len(delays) == 7  # CA-7 has no order date
    assert delays["Delay_Days"].tolist() == [3, 0, 5, 2, 2, 0, 4]
    # both CA-4 line items are kept
    assert (delays["Order_ID"] == "CA-4").sum() == 2


def test_same_day_order_has_zero_delay(orders):
    same_day = same_day_orders(orders)
    assert same_day["Order_ID"].tolist() == ["CA-2", "CA-5"]
    assert (same_day["Delay_Days"] == 0).all()


def test_negative_delay_is_kept(orders):
    df = orders.copy()
    df.loc[0, "Ship_Date"] = pd.Timestamp("2022-01-01")
    assert shipping_delays(df).loc[0, "Delay_Days"] == -4


def test_delivery_trends_by_state(orders):
    trends = delivery_trends_by_state(orders)
    assert trends["State"].tolist() == ["California", "New York", "Texas"]

    california = trends.iloc[0]
    assert california["MinDaysToShip"] == 3
    assert california["MaxDaysToShip"] == 5
    assert california["AvgDaysToShip"] == pytest.approx(4.0)
    assert california["Orders"] == 2

    texas = trends.iloc[2]
    assert texas["AvgDaysToShip"] == pytest.approx(1.33)
    assert texas["Orders"] == 3


def test_delivery_trend_bounds_hold_for_every_state(orders):
    trends = delivery_trends_by_state(orders)
    assert ((trends["MinDaysToShip"] <= trends["AvgDaysToShip"]) & (trends["AvgDaysToShip"] <= trends["MaxDaysToShip"])).all()


def test_single_row_group_reports_equal_min_max_avg(orders):
    trends = delivery_trends_by_state(orders.iloc[[0]])
    row = trends.iloc[0]
    assert row["MinDaysToShip"] == row["MaxDaysToShip"] == row["AvgDaysToShip"] == 3


# -----------------------------------------------------------------------------
# Order trends
# -----------------------------------------------------------------------------

def test_yearly_trend_first_year_growth_is_missing(orders):
    yearly = yearly_order_trend(orders)
    assert yearly["Year"].tolist() == [2022, 2023]
    assert yearly["Orders"].tolist() == [3, 3]
    assert math.isnan(yearly.loc[0, "YoY_Growth_Pct"])
    assert yearly.loc[1, "YoY_Growth_Pct"] == pytest.approx(0.0)


def test_yearly_growth_doubling_is_one_hundred_percent(orders_factory):
    rows = [(f"A-{i}", "2022-06-01", "C1", 1.0) for i in range(3)]
    rows += [(f"B-{i}", "2023-06-01", "C1", 1.0) for i in range(6)]
    yearly = yearly_order_trend(orders_factory(rows))
    assert yearly.loc[1, "YoY_Growth_Pct"] == pytest.approx(100.00)


def test_yearly_growth_rounds_to_two_decimals(orders_factory):
    rows = [(f"A-{i}", "2022-06-01", "C1", 1.0) for i in range(3)]
    rows += [(f"B-{i}", "2023-06-01", "C1", 1.0) for i in range(4)]
    yearly = yearly_order_trend(orders_factory(rows))
    assert yearly.loc[1, "YoY_Growth_Pct"] == pytest.approx(33.33)


def test_yearly_growth_after_gap_year_is_missing(orders_factory):
    rows = [("A-1", "2020-06-01", "C1", 1.0), ("B-1", "2022-06-01", "C1", 1.0)]
    yearly = yearly_order_trend(orders_factory(rows))
    assert yearly["YoY_Growth_Pct"].isna().all()


def test_quarterly_and_monthly_trends_are_chronological(orders):
    quarterly = quarterly_order_trend(orders)
    assert list(zip(quarterly["Year"], quarterly["Quarter"], quarterly["Orders"])) == [
        (2022, 1, 2), (2022, 3, 1), (2023, 1, 1), (2023, 2, 1), (2023, 4, 1),
    ]
    monthly = monthly_order_trend(orders)
    assert list(zip(monthly["Year"], monthly["Month"])) == [
        (2022, 1), (2022, 3), (2022, 7), (2023, 2), (2023, 5), (2023, 11),
    ]
    assert monthly["Orders"].sum() == 6


# -----------------------------------------------------------------------------
# Profitability
# -----------------------------------------------------------------------------

def test_sales_by_category(orders):
    categories = sales_by_category(orders)
    assert categories["Category"].tolist() == ["Furniture", "Technology", "Office Supplies"]

    furniture = categories.iloc[0]
    assert furniture["Total_Sales"] == pytest.approx(650.0)
    assert furniture["Total_Profit"] == pytest.approx(-30.0)
    assert furniture["Profit_Margin_Pct"] == pytest.approx(-4.62)
    assert furniture["Avg_Discount"] == pytest.approx(0.1833)


def test_category_profit_adds_up_to_total_profit(orders):
    assert sales_by_category(orders)["Total_Profit"].sum() == pytest.approx(orders["Profit"].sum())
    assert sales_by_sub_category(orders)["Total_Profit"].sum() == pytest.approx(orders["Profit"].sum())


def test_margin_is_missing_when_sales_are_zero(orders_factory):
    df = orders_factory([("A-1", "2022-06-01", "C1", -5.0)], sales=0.0)
    categories = sales_by_category(df)
    assert categories.loc[0, "Total_Sales"] == 0
    assert pd.isna(categories.loc[0, "Profit_Margin_Pct"])


def test_loss_making_sub_categories(orders):
    losses = loss_making_sub_categories(orders)
    assert losses["Sub_Category"].tolist() == ["Tables", "Binders"]
    assert (losses["Total_Profit"] < 0).all()


def test_sales_by_state(orders):
    states = sales_by_state(orders)
    assert states["State"].tolist() == ["Texas", "New York", "California"]
    assert states.loc[0, "Profit_Margin_Pct"] == pytest.approx(0.0)
    assert states.loc[1, "Orders"] == 2


def test_discount_impact_bands(orders):
    impact = discount_impact(orders)
    assert impact["Discount_Band"].tolist() == ["No discount", "1-20%", "41-60%"]
    assert impact["Orders"].tolist() == [4, 2, 2]
    assert impact.loc[2, "Total_Profit"] == pytest.approx(-90.0)
    assert impact.loc[2, "Profit_Margin_Pct"] == pytest.approx(-20.0)


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------

def test_distinct_and_repeat_customers(orders):
    assert distinct_customers(orders) == 5
    repeat = repeat_customers(orders)
    assert repeat["Customer_ID"].tolist() == ["C1", "C2"]
    assert repeat["Active_Years"].tolist() == [2, 2]
    assert len(repeat) <= distinct_customers(orders)


def test_top_customers_ranked_by_profit(orders):
    top = top_customers_by_profit(orders, n=3)
    assert top["Customer_ID"].tolist() == ["C1", "C4", "C5"]
    assert top.loc[0, "Total_Profit"] == pytest.approx(115.0)
    assert top.loc[0, "Orders"] == 2


def test_top_customer_aggregates_orders(orders_factory):
    df = orders_factory([
        ("O-1", "2022-06-01", "A", 500.0),
        ("O-2", "2022-06-02", "B", 700.0),
        ("O-3", "2023-06-03", "B", 100.0),
    ])
    top = top_customers_by_profit(df, n=1)
    assert top["Customer_ID"].tolist() == ["B"]
    assert top.loc[0, "Total_Profit"] == pytest.approx(800.0)


def test_top_customer_ties_break_on_customer_id(orders_factory):
    df = orders_factory([
        ("O-1", "2022-06-01", "C9", 50.0),
        ("O-2", "2022-06-01", "C2", 50.0),
        ("O-3", "2022-06-01", "C5", 50.0),
    ])
    assert top_customers_by_profit(df, n=3)["Customer_ID"].tolist() == ["C2", "C5", "C9"]


def test_reports_on_empty_frame(orders):
    empty = orders.iloc[0:0]
    assert shipping_delays(empty).empty
    assert delivery_trends_by_state(empty).empty
    assert yearly_order_trend(empty).empty
    assert sales_by_category(empty).empty
    assert top_customers_by_profit(empty).empty
    assert distinct_customers(empty) == 0
