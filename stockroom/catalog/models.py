from django.db import models
from decimal import Decimal
from .validators import validate_jan_code, validate_price


class Product(models.Model):
    """Product master"""
    name = models.CharField(max_length=100, db_index=True)
    size = models.CharField(max_length=20, blank=True)
    product_code = models.CharField(max_length=50, db_index=True)
    jan_code = models.CharField(max_length=13, unique=True, validators=[validate_jan_code])
    image_url = models.URLField(blank=True)
    price_excl_tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=[validate_price])
    price_incl_tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=[validate_price])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.jan_code})"

    class Meta:
        db_table = 'products'
        ordering = ['product_code', 'size']
