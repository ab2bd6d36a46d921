from django.contrib import admin
from .models import Stock, StockMovement


@admin.register(Stock)
class StockAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity', 'last_stocked_date', 'updated_at']
    search_fields = ['product__name', 'product__jan_code']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['product_id', 'movement_type', 'quantity', 'previous_quantity', 'new_quantity', 'order_id', 'user', 'created_at']
    list_filter = ['movement_type', 'created_at']
    search_fields = ['product_id', 'order_id', 'reason']
    ordering = ['-created_at']
    readonly_fields = ['product_id', 'user', 'movement_type', 'quantity', 'previous_quantity', 'new_quantity', 'reason', 'order_id', 'created_at']
