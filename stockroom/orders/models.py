from django.db import models
from decimal import Decimal


class Order(models.Model):
    """
    A single checkout. Totals are computed once from the lines at creation
    and never recomputed.
    """
    # total quantity across all lines
    item_count = models.IntegerField(default=0)
    total_excl_tax = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    total_incl_tax = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0.00'))
    order_date = models.DateTimeField()
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')

    def __str__(self):
        return f"Order-{self.pk}"

    class Meta:
        db_table = 'orders'
        ordering = ['-order_date', '-id']


class OrderDetail(models.Model):
    """Order line. product_id is not a foreign key: products are not checked at order time."""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='details')
    product_id = models.BigIntegerField(db_index=True)
    quantity = models.IntegerField()
    unit_price_excl_tax = models.DecimalField(max_digits=12, decimal_places=2)
    unit_price_incl_tax = models.DecimalField(max_digits=12, decimal_places=2)
    subtotal_excl_tax = models.DecimalField(max_digits=18, decimal_places=2)
    subtotal_incl_tax = models.DecimalField(max_digits=18, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_details'
        ordering = ['id']
        indexes = [
            models.Index(fields=['order', 'product_id'], name='idx_detail_order_product'),
        ]
