from django.db import models
from stockroom.catalog.models import Product


class Stock(models.Model):
    """On-hand quantity, one row per product"""
    product = models.OneToOneField(Product, on_delete=models.CASCADE, related_name='stock')
    # Order placement decrements without a floor, so this can go negative
    quantity = models.IntegerField(default=0)
    last_stocked_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product_id}: {self.quantity}"

    class Meta:
        db_table = 'stock'


class StockMovement(models.Model):
    """History of stock changes (in/out/adjust/order)"""
    MOVEMENT_TYPE_CHOICES = [
        ('in', 'Stock In'),
        ('out', 'Stock Out'),
        ('adjust', 'Adjustment'),
        ('order', 'Order'),
    ]

    product_id = models.BigIntegerField(db_index=True)
    user = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='stock_movements')
    movement_type = models.CharField(max_length=10, choices=MOVEMENT_TYPE_CHOICES)
    quantity = models.IntegerField(help_text='Signed change: positive for stock in, negative for stock out')
    previous_quantity = models.IntegerField()
    new_quantity = models.IntegerField()
    reason = models.CharField(max_length=255, blank=True, null=True)
    order_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product_id', '-created_at'], name='idx_movement_product_created'),
            models.Index(fields=['movement_type'], name='idx_movement_type'),
        ]
