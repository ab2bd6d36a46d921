from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'size', 'product_code', 'jan_code', 'price_excl_tax', 'price_incl_tax', 'updated_at']
    search_fields = ['name', 'product_code', 'jan_code']
    ordering = ['product_code', 'size']
    readonly_fields = ['created_at', 'updated_at']
