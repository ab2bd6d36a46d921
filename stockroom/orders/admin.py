from django.contrib import admin
from .models import Order, OrderDetail


class OrderDetailInline(admin.TabularInline):
    model = OrderDetail
    extra = 0
    readonly_fields = ['product_id', 'quantity', 'unit_price_excl_tax', 'unit_price_incl_tax',
                       'subtotal_excl_tax', 'subtotal_incl_tax', 'created_at']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'item_count', 'total_excl_tax', 'total_incl_tax', 'order_date', 'created_by']
    list_filter = ['order_date']
    ordering = ['-order_date']
    readonly_fields = ['item_count', 'total_excl_tax', 'total_incl_tax', 'order_date', 'created_by']
    inlines = [OrderDetailInline]
