from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    stock_quantity = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'size', 'product_code', 'jan_code', 'image_url',
                  'price_excl_tax', 'price_incl_tax', 'stock_quantity', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_stock_quantity(self, obj):
        # reverse one-to-one raises when the product has no stock row
        stock = getattr(obj, 'stock', None)
        return stock.quantity if stock is not None else None

    def validate_jan_code(self, value):
        return value.strip()

    def validate(self, attrs):
        price_excl = attrs.get('price_excl_tax', getattr(self.instance, 'price_excl_tax', None))
        price_incl = attrs.get('price_incl_tax', getattr(self.instance, 'price_incl_tax', None))
        if price_excl is not None and price_incl is not None and price_incl <= price_excl:
            raise serializers.ValidationError({
                'price_incl_tax': 'Price including tax must be greater than price excluding tax.'
            })
        return attrs


class ProductCreateSerializer(ProductSerializer):
    """Product creation with an optional opening stock count"""
    initial_stock = serializers.IntegerField(required=False, min_value=0, max_value=100000, write_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ['initial_stock']
