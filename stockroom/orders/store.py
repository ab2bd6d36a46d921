"""
Persistence primitives used by order placement.

Placement only talks to the database through an OrderStore so the sequence
of writes can be observed and failures injected in tests.
"""
from django.db import transaction

from stockroom.inventory.models import Stock
from stockroom.inventory.services import apply_stock_delta, record_stock_movement
from .models import Order, OrderDetail


class DjangoOrderStore:
    """OrderStore backed by the Django ORM"""

    def insert_order(self, item_count, total_excl_tax, total_incl_tax, order_date, created_by=None):
        return Order.objects.create(
            item_count=item_count,
            total_excl_tax=total_excl_tax,
            total_incl_tax=total_incl_tax,
            order_date=order_date,
            created_by=created_by,
        )

    def insert_details(self, order, lines):
        """Insert all detail rows in one call; either every row is stored or none is"""
        details = [
            OrderDetail(
                order=order,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price_excl_tax=line.unit_price_excl_tax,
                unit_price_incl_tax=line.unit_price_incl_tax,
                subtotal_excl_tax=line.subtotal_excl_tax,
                subtotal_incl_tax=line.subtotal_incl_tax,
            )
            for line in lines
        ]
        with transaction.atomic():
            return OrderDetail.objects.bulk_create(details)

    def delete_order(self, order_id):
        deleted, _ = Order.objects.filter(pk=order_id).delete()
        return deleted

    def get_stock(self, product_id):
        return Stock.objects.filter(product_id=product_id).first()

    def decrement_stock(self, stock, quantity, order_id=None, user=None):
        """Subtract ``quantity`` in the database and record an ``order`` movement"""
        previous, new = apply_stock_delta(stock, -quantity)
        record_stock_movement(
            product_id=stock.product_id,
            movement_type='order',
            quantity=-quantity,
            previous_quantity=previous,
            new_quantity=new,
            user=user,
            reason=f'Order #{order_id}' if order_id is not None else None,
            order_id=order_id,
        )
        return previous, new
