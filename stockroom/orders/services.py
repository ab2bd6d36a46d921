"""
Order placement.

An order is written in three steps:

1. the order row, carrying totals computed from the validated lines;
2. all detail rows in one insert; if that fails the order row is deleted
   again (a compensating delete, not a transaction: if the delete fails
   too, the order is left without details);
3. stock is decremented per line after commit. Failures here are logged
   and never reach the caller, and nothing prevents a second run from
   decrementing twice.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import List

from django.db import transaction
from django.utils import timezone

from stockroom.core.errors import flatten_errors
from .exceptions import OrderValidationError, OrderWriteError
from .serializers import OrderCreateSerializer
from .store import DjangoOrderStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    quantity: int
    unit_price_excl_tax: Decimal
    unit_price_incl_tax: Decimal

    @property
    def subtotal_excl_tax(self) -> Decimal:
        return self.quantity * self.unit_price_excl_tax

    @property
    def subtotal_incl_tax(self) -> Decimal:
        return self.quantity * self.unit_price_incl_tax


@dataclass(frozen=True)
class OrderPlacement:
    order_id: int
    total_quantity: int
    total_excl_tax: Decimal
    total_incl_tax: Decimal
    item_count: int
    created_at: datetime


def validate_order_items(items) -> List[OrderLine]:
    """Check bounds on every line, raising OrderValidationError with one message per bad field"""
    serializer = OrderCreateSerializer(data={'items': items})
    if not serializer.is_valid():
        raise OrderValidationError(flatten_errors(serializer.errors))
    return [
        OrderLine(
            product_id=item['productId'],
            quantity=item['quantity'],
            unit_price_excl_tax=item['unitPriceExclTax'],
            unit_price_incl_tax=item['unitPriceInclTax'],
        )
        for item in serializer.validated_data['items']
    ]


def order_totals(lines):
    """Return ``(total_quantity, total_excl_tax, total_incl_tax)`` for the lines"""
    total_quantity = sum(line.quantity for line in lines)
    total_excl_tax = sum((line.subtotal_excl_tax for line in lines), Decimal('0'))
    total_incl_tax = sum((line.subtotal_incl_tax for line in lines), Decimal('0'))
    return total_quantity, total_excl_tax, total_incl_tax


def create_order(lines, store, user=None):
    total_quantity, total_excl_tax, total_incl_tax = order_totals(lines)
    try:
        return store.insert_order(
            item_count=total_quantity,
            total_excl_tax=total_excl_tax,
            total_incl_tax=total_incl_tax,
            order_date=timezone.now(),
            created_by=user if user is not None and user.is_authenticated else None,
        )
    except Exception as e:
        raise OrderWriteError(f'Failed to create order: {e}') from e


def write_order_details(order, lines, store):
    """Insert the detail rows, deleting ``order`` again if the insert fails"""
    try:
        return store.insert_details(order, lines)
    except Exception as e:
        logger.warning(f"Detail insert failed for order {order.id}, deleting the order: {e}")
        try:
            store.delete_order(order.id)
        except Exception:
            logger.exception(f"Compensating delete failed: order {order.id} remains without details")
        raise OrderWriteError(f'Failed to create order details: {e}', order_id=order.id) from e


def adjust_stock_for_order(order_id, lines, store, user=None):
    """
    Decrement stock for each line, one at a time.

    A product without a stock row is skipped. An error on one line is logged
    and the remaining lines are still processed. Returns the number of lines
    whose stock was decremented.
    """
    adjusted = 0
    for line in lines:
        try:
            stock = store.get_stock(line.product_id)
            if stock is None:
                logger.debug(f"No stock row for product {line.product_id}, skipping (order {order_id})")
                continue
            previous, new = store.decrement_stock(stock, line.quantity, order_id=order_id, user=user)
            logger.info(f"Stock decremented for order {order_id}: product_id={line.product_id}, {previous} -> {new}")
            adjusted += 1
        except Exception:
            logger.exception(f"Stock update failed for product {line.product_id} (order {order_id})")
    return adjusted


def place_order(items, store=None, user=None) -> OrderPlacement:
    """
    Validate ``items``, store the order and its details, and schedule the
    stock decrement to run once the surrounding transaction commits.

    Raises OrderValidationError before any write, or OrderWriteError when the
    order or detail insert fails.
    """
    if store is None:
        store = DjangoOrderStore()

    lines = validate_order_items(items)
    order = create_order(lines, store, user=user)
    write_order_details(order, lines, store)

    transaction.on_commit(partial(adjust_stock_for_order, order.id, lines, store, user=user))

    total_quantity, total_excl_tax, total_incl_tax = order_totals(lines)
    logger.info(f"Order {order.id} placed: lines={len(lines)}, quantity={total_quantity}, total_incl_tax={total_incl_tax}")
    return OrderPlacement(
        order_id=order.id,
        total_quantity=total_quantity,
        total_excl_tax=total_excl_tax,
        total_incl_tax=total_incl_tax,
        item_count=len(lines),
        created_at=order.order_date,
    )
