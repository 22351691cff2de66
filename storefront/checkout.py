"""Checkout helpers: cart totals before payment, cleanup after it."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from storefront.cart import CartLineItem, CartStore, find_stock_issues
from storefront.cart.stock import StockLevels
from storefront.logging import get_logger
from storefront.money import format_inr, to_json_number

logger = get_logger(__name__)


@dataclass
class CheckoutSummary:
    """What the cart sidebar shows and the payment step charges."""
    item_count: int
    subtotal: Decimal
    out_of_stock: list[CartLineItem] = field(default_factory=list)

    @property
    def has_stock_issue(self) -> bool:
        return bool(self.out_of_stock)

    @property
    def total(self) -> Decimal:
        # No shipping or tax lines yet; promo discounts are applied by the payment step
        return self.subtotal

    def to_dict(self) -> dict:
        return {
            "item_count": self.item_count,
            "subtotal": to_json_number(self.subtotal),
            "total": to_json_number(self.total),
            "has_stock_issue": self.has_stock_issue,
            "out_of_stock": [item.id for item in self.out_of_stock],
        }


def summarize(items: list[CartLineItem], stock: Optional[StockLevels] = None) -> CheckoutSummary:
    """
    Totals for a cart snapshot.

    Args:
        items: Cart line items (usually `CartStore.get_cart()`)
        stock: Live stock levels; omit to skip the stock check
    """
    return CheckoutSummary(
        item_count=sum(item.quantity or 1 for item in items),
        subtotal=sum((item.total_price for item in items), Decimal("0")),
        out_of_stock=find_stock_issues(items, stock) if stock is not None else [],
    )


def complete_checkout(cart: CartStore) -> CheckoutSummary:
    """
    Called once the payment gateway confirms the order.

    Returns:
        Summary of the cart that was paid for
    """
    summary = summarize(cart.get_cart())
    cart.clear_cart()
    logger.info(f"Checkout completed: {summary.item_count} items, subtotal {format_inr(summary.subtotal)}")
    return summary
