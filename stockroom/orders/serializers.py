from decimal import Decimal, ROUND_HALF_UP

from rest_framework import serializers
from stockroom.catalog.validators import MAX_PRICE
from .models import Order, OrderDetail

MAX_ORDER_ITEMS = 100
MAX_LINE_QUANTITY = 10000
CENT = Decimal('0.01')


class StrictIntegerField(serializers.IntegerField):
    """Only JSON integers: ``"3"``, ``3.0`` and ``true`` are refused"""

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, int):
            self.fail('invalid')
        return super().to_internal_value(data)


class PriceField(serializers.DecimalField):
    """
    Any finite number from 0 to MAX_PRICE, rounded half up to whole cents.

    Clients send float arithmetic results such as ``110.00000000000001``,
    so precision is not validated.
    """

    def __init__(self, **kwargs):
        super().__init__(max_digits=None, decimal_places=None, **kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value < 0:
            self.fail('min_value', min_value=0)
        if value > MAX_PRICE:
            self.fail('max_value', max_value=MAX_PRICE)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


class OrderItemSerializer(serializers.Serializer):
    """One cart line as submitted by the client"""
    productId = StrictIntegerField(min_value=1)
    quantity = StrictIntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)
    unitPriceExclTax = PriceField()
    unitPriceInclTax = PriceField()


class OrderCreateSerializer(serializers.Serializer):
    items = OrderItemSerializer(many=True, allow_empty=False, max_length=MAX_ORDER_ITEMS)


class OrderDetailSerializer(serializers.ModelSerializer):
    detailId = serializers.IntegerField(source='id', read_only=True)
    orderId = serializers.IntegerField(source='order_id', read_only=True)
    productId = serializers.IntegerField(source='product_id', read_only=True)
    unitPriceExclTax = serializers.DecimalField(source='unit_price_excl_tax', max_digits=12, decimal_places=2, read_only=True)
    unitPriceInclTax = serializers.DecimalField(source='unit_price_incl_tax', max_digits=12, decimal_places=2, read_only=True)
    subtotalExclTax = serializers.DecimalField(source='subtotal_excl_tax', max_digits=18, decimal_places=2, read_only=True)
    subtotalInclTax = serializers.DecimalField(source='subtotal_incl_tax', max_digits=18, decimal_places=2, read_only=True)
    product = serializers.SerializerMethodField()

    class Meta:
        model = OrderDetail
        fields = ['detailId', 'orderId', 'productId', 'quantity', 'unitPriceExclTax', 'unitPriceInclTax',
                  'subtotalExclTax', 'subtotalInclTax', 'product']

    def get_product(self, obj):
        # product_id is a soft reference; the product may be gone
        product = self.context.get('products', {}).get(obj.product_id)
        if product is None:
            return None
        return {
            'id': product.id,
            'name': product.name,
            'size': product.size,
            'productCode': product.product_code,
            'janCode': product.jan_code,
            'imageUrl': product.image_url,
        }


class OrderSerializer(serializers.ModelSerializer):
    orderId = serializers.IntegerField(source='id', read_only=True)
    itemCount = serializers.IntegerField(source='item_count', read_only=True)
    totalExclTax = serializers.DecimalField(source='total_excl_tax', max_digits=18, decimal_places=2, read_only=True)
    totalInclTax = serializers.DecimalField(source='total_incl_tax', max_digits=18, decimal_places=2, read_only=True)
    orderDate = serializers.DateTimeField(source='order_date', read_only=True)

    class Meta:
        model = Order
        fields = ['orderId', 'itemCount', 'totalExclTax', 'totalInclTax', 'orderDate']


class OrderWithDetailsSerializer(OrderSerializer):
    details = OrderDetailSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['details']
