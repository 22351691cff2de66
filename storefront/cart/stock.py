"""Reconcile cart quantities against live stock from the catalog.

The store never validates stock; the cart page fetches current levels and
uses these helpers to flag lines and to disable the "+" button.
"""
from typing import Mapping

from .models import CartLineItem

StockLevels = Mapping[str, int]


def is_out_of_stock(item: CartLineItem, stock: StockLevels) -> bool:
    """A line is out of stock when the catalog has fewer units than it asks for.

    Products the catalog did not return are assumed to be in stock.
    """
    if item.id not in stock:
        return False
    return stock[item.id] < (item.quantity or 1)


def find_stock_issues(items: list[CartLineItem], stock: StockLevels) -> list[CartLineItem]:
    return [item for item in items if is_out_of_stock(item, stock)]


def can_increment(item: CartLineItem, stock: StockLevels) -> bool:
    """Whether one more unit of this line is available.

    Unlike `is_out_of_stock`, an unknown product counts as zero available.
    """
    return (item.quantity or 1) < stock.get(item.id, 0)
