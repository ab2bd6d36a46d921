"""
Stock mutations.

Quantities are changed with a single ``UPDATE ... SET quantity = quantity + n``
so concurrent writers never overwrite each other's result.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .models import Stock, StockMovement

logger = logging.getLogger(__name__)

MAX_STOCK_QUANTITY = 100000


class StockError(Exception):
    """Base class for manual stock update failures"""


class StockNotFound(StockError):
    pass


class InvalidStockQuantity(StockError):
    pass


@dataclass
class StockChange:
    product_id: int
    previous_quantity: int
    new_quantity: int
    updated_at: datetime


def validate_stock_quantity(quantity):
    if quantity < 0:
        raise InvalidStockQuantity('Stock quantity must be 0 or greater.')
    if quantity > MAX_STOCK_QUANTITY:
        raise InvalidStockQuantity('Stock quantity is unreasonably large.')


def apply_stock_delta(stock, delta):
    """
    Add ``delta`` (may be negative) to a stock row in the database.

    Refreshes ``stock`` in place and returns ``(previous_quantity, new_quantity)``.
    There is no floor: the result can be negative.
    """
    now = timezone.now()
    fields = {'quantity': F('quantity') + delta, 'updated_at': now}
    if delta > 0:
        fields['last_stocked_date'] = now

    with transaction.atomic():
        Stock.objects.filter(pk=stock.pk).update(**fields)
        # the row stays locked by the UPDATE until commit, so this read is ours
        stock.refresh_from_db(fields=['quantity', 'last_stocked_date', 'updated_at'])

    return stock.quantity - delta, stock.quantity


def record_stock_movement(product_id, movement_type, quantity, previous_quantity, new_quantity,
                          user=None, reason=None, order_id=None):
    """Write a stock history row. Returns False instead of raising on failure."""
    try:
        with transaction.atomic():
            StockMovement.objects.create(
                product_id=product_id,
                user=user if user is not None and user.is_authenticated else None,
                movement_type=movement_type,
                quantity=quantity,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                reason=reason or None,
                order_id=order_id,
            )
    except Exception as e:
        logger.error(f"Failed to record stock movement for product {product_id}: {str(e)}")
        return False
    return True


def update_stock(product_id, quantity, mode='set', user=None, reason=None):
    """
    Manually set (``mode='set'``) or shift (``mode='add'``) a product's stock.

    Raises StockNotFound when the product has no stock row and
    InvalidStockQuantity when the result would leave 0..100000.
    """
    with transaction.atomic():
        stock = Stock.objects.select_for_update().filter(product_id=product_id).first()
        if stock is None:
            raise StockNotFound(f'No stock record for product {product_id}')

        delta = quantity if mode == 'add' else quantity - stock.quantity
        validate_stock_quantity(stock.quantity + delta)
        previous, new = apply_stock_delta(stock, delta)

    if mode == 'set':
        movement_type = 'adjust'
    else:
        movement_type = 'in' if delta > 0 else 'out'
    record_stock_movement(
        product_id=product_id,
        movement_type=movement_type,
        quantity=delta,
        previous_quantity=previous,
        new_quantity=new,
        user=user,
        reason=reason,
    )
    logger.info(f"Stock updated: product_id={product_id}, mode={mode}, {previous} -> {new}")
    return StockChange(product_id=product_id, previous_quantity=previous,
                       new_quantity=new, updated_at=stock.updated_at)
