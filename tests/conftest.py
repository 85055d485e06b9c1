"""
Shared fixtures for the reporting tests.

`raw_orders` mimics a Superstore export: source headers with spaces and
dd/mm/yyyy dates, one unparseable order date, one order (CA-4) spread over
two line items, and two same-day shipments.
"""

import logging

import pandas as pd
import pytest

from data_source import prepare_orders
from logging_config import APP_LOGGER_NAME


def make_raw(rows: list[tuple]) -> pd.DataFrame:
    columns = [
        "Order ID", "Order Date", "Ship Date", "Customer ID", "Customer Name",
        "Category", "Sub-Category", "State", "Sales", "Profit", "Discount", "Quantity",
    ]
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def raw_orders() -> pd.DataFrame:
    return make_raw([
        ("CA-1", "05/01/2022", "08/01/2022", "C1", "Alice", "Furniture", "Chairs", "California", 100.0, 20.0, 0.0, 2),
        ("CA-2", "10/03/2022", "10/03/2022", "C2", "Bob", "Technology", "Phones", "Texas", 200.0, 50.0, 0.2, 1),
        ("CA-3", "15/07/2022", "20/07/2022", "C3", "Cara", "Office Supplies", "Binders", "California", 50.0, -10.0, 0.5, 5),
        ("CA-4", "02/02/2023", "04/02/2023", "C1", "Alice", "Technology", "Phones", "New York", 300.0, 90.0, 0.0, 3),
        ("CA-4", "02/02/2023", "04/02/2023", "C1", "Alice", "Office Supplies", "Paper", "New York", 20.0, 5.0, 0.0, 4),
        ("CA-5", "20/05/2023", "20/05/2023", "C2", "Bob", "Furniture", "Tables", "Texas", 400.0, -80.0, 0.45, 2),
        ("CA-6", "11/11/2023", "15/11/2023", "C4", "Dan", "Furniture", "Chairs", "Texas", 150.0, 30.0, 0.1, 1),
        ("CA-7", "not a date", "01/12/2023", "C5", "Eve", "Office Supplies", "Paper", "New York", 30.0, 6.0, 0.0, 2),
    ])


@pytest.fixture
def orders(raw_orders: pd.DataFrame) -> pd.DataFrame:
    return prepare_orders(raw_orders, dayfirst=True)


@pytest.fixture
def orders_factory():
    """Build a prepared frame from compact (order_id, order_date, customer_id, profit) tuples."""

    def _factory(rows: list[tuple], sales: float = 100.0) -> pd.DataFrame:
        raw = make_raw([
            (order_id, order_date, order_date, customer_id, f"Customer {customer_id}",
             "Furniture", "Chairs", "Texas", sales, profit, 0.0, 1)
            for order_id, order_date, customer_id, profit in rows
        ])
        return prepare_orders(raw, date_format="%Y-%m-%d")

    return _factory


@pytest.fixture(autouse=True)
def reset_app_logger():
    """CLI commands attach a console handler; drop it so later tests start clean."""
    yield
    logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
