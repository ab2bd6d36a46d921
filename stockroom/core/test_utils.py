"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from stockroom.catalog.models import Product
from stockroom.inventory.models import Stock
from stockroom.orders.models import Order, OrderDetail
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_jan_code():
        return ''.join(random.choices(string.digits, k=13))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, role='user'):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            role=role,
        )

    @staticmethod
    def create_product(name=None, jan_code=None, product_code=None, size='M',
                       price_excl_tax=None, price_incl_tax=None):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not jan_code:
            jan_code = TestDataFactory.random_jan_code()
            while Product.objects.filter(jan_code=jan_code).exists():
                jan_code = TestDataFactory.random_jan_code()
        if not product_code:
            product_code = f'CODE_{TestDataFactory.random_string(6).upper()}'
        if price_excl_tax is None:
            price_excl_tax = Decimal('1000.00')
        if price_incl_tax is None:
            price_incl_tax = Decimal('1100.00')
        return Product.objects.create(
            name=name,
            size=size,
            product_code=product_code,
            jan_code=jan_code,
            price_excl_tax=price_excl_tax,
            price_incl_tax=price_incl_tax,
        )

    @staticmethod
    def create_stock(product=None, quantity=10):
        """Create a stock row (and a product when none is given)"""
        if product is None:
            product = TestDataFactory.create_product()
        return Stock.objects.create(product=product, quantity=quantity)

    @staticmethod
    def create_order(user=None, with_details=True, product_id=1, quantity=1,
                     unit_price_excl_tax=Decimal('100.00'), unit_price_incl_tax=Decimal('110.00')):
        """Create an order directly in the database, bypassing placement"""
        order = Order.objects.create(
            item_count=quantity if with_details else 0,
            total_excl_tax=quantity * unit_price_excl_tax if with_details else Decimal('0.00'),
            total_incl_tax=quantity * unit_price_incl_tax if with_details else Decimal('0.00'),
            order_date=timezone.now(),
            created_by=user,
        )
        if with_details:
            OrderDetail.objects.create(
                order=order,
                product_id=product_id,
                quantity=quantity,
                unit_price_excl_tax=unit_price_excl_tax,
                unit_price_incl_tax=unit_price_incl_tax,
                subtotal_excl_tax=quantity * unit_price_excl_tax,
                subtotal_incl_tax=quantity * unit_price_incl_tax,
            )
        return order

    @staticmethod
    def order_item(product_id, quantity=1, unit_price_excl_tax=100, unit_price_incl_tax=110):
        """Build one item of an order request body"""
        return {
            'productId': product_id,
            'quantity': quantity,
            'unitPriceExclTax': unit_price_excl_tax,
            'unitPriceInclTax': unit_price_incl_tax,
        }


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
