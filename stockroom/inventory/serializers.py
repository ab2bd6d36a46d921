from rest_framework import serializers
from .models import Stock, StockMovement


class StockSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    jan_code = serializers.CharField(source='product.jan_code', read_only=True)

    class Meta:
        model = Stock
        fields = ['id', 'product', 'product_name', 'jan_code', 'quantity', 'last_stocked_date', 'created_at', 'updated_at']


class StockUpdateSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=-100000, max_value=100000)
    mode = serializers.ChoiceField(choices=['set', 'add'], default='set')
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)


class StockMovementSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = ['id', 'product_id', 'username', 'movement_type', 'quantity', 'previous_quantity',
                  'new_quantity', 'reason', 'order_id', 'created_at']
