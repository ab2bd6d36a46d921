"""
Test suite for the product catalog
Tests: product CRUD, JAN code lookup, price rules, opening stock, demo seed command
"""
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from stockroom.core.models import AuditLog
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from stockroom.inventory.models import Stock
from .models import Product
from .validators import validate_jan_code, validate_price


class ValidatorTests(TestCase):

    def test_jan_code(self):
        validate_jan_code('49012345')
        validate_jan_code('4901234567890')
        for bad in ['', '1234567', '123456789', '490123456789X', None]:
            with self.subTest(value=bad):
                with self.assertRaises(ValidationError):
                    validate_jan_code(bad)

    def test_price(self):
        validate_price(Decimal('0'))
        validate_price(Decimal('10000000'))
        with self.assertRaises(ValidationError):
            validate_price(Decimal('-1'))
        with self.assertRaises(ValidationError):
            validate_price(Decimal('10000000.01'))


class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def product_payload(self, **overrides):
        data = {
            'name': 'Basic Tee',
            'size': 'M',
            'product_code': 'TEE-001',
            'jan_code': '4901234567894',
            'price_excl_tax': '1000.00',
            'price_incl_tax': '1100.00',
        }
        data.update(overrides)
        return data

    def test_create_product_with_initial_stock(self):
        response = self.client.post('/api/v1/products/', self.product_payload(initial_stock=12), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['stock_quantity'], 12)

        product = Product.objects.get(jan_code='4901234567894')
        self.assertEqual(Stock.objects.get(product=product).quantity, 12)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Product').exists())

    def test_create_product_without_stock(self):
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['data']['stock_quantity'])
        self.assertEqual(Stock.objects.count(), 0)

    def test_invalid_jan_code(self):
        response = self.client.post('/api/v1/products/', self.product_payload(jan_code='12345'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(any(d.startswith('jan_code:') for d in response.data['details']))

    def test_duplicate_jan_code(self):
        TestDataFactory.create_product(jan_code='4901234567894')
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_price_incl_tax_must_exceed_excl_tax(self):
        payload = self.product_payload(price_excl_tax='1000.00', price_incl_tax='1000.00')
        response = self.client.post('/api/v1/products/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['details'][0].startswith('price_incl_tax:'))
        self.assertEqual(Product.objects.count(), 0)

    def test_initial_stock_out_of_range(self):
        response = self.client.post('/api/v1/products/', self.product_payload(initial_stock=-1), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Product.objects.count(), 0)

    def test_list_and_search(self):
        TestDataFactory.create_product(name='Red Hoodie')
        TestDataFactory.create_product(name='Blue Cap')

        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/v1/products/?search=hoodie')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['name'], 'Red Hoodie')

    def test_retrieve_update_delete(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_stock(product=product, quantity=4)

        response = self.client.get(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['stock_quantity'], 4)

        response = self.client.patch(f'/api/v1/products/{product.id}/', {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.name, 'Renamed')

        response = self.client.patch(f'/api/v1/products/{product.id}/', {'price_incl_tax': '10.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.id).exists())
        self.assertEqual(Stock.objects.count(), 0)

    def test_product_not_found(self):
        response = self.client.get('/api/v1/products/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Product not found')

    def test_lookup_by_jan_code(self):
        product = TestDataFactory.create_product(jan_code='49012345')
        response = self.client.get('/api/v1/products/jan/49012345/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['id'], product.id)

        response = self.client.get('/api/v1/products/jan/00000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class SeedDemoDataCommandTests(TestCase):

    def test_seed_is_repeatable(self):
        call_command('seed_demo_data', '--products', '3', '--stock', '5', stdout=StringIO())
        self.assertEqual(Product.objects.count(), 3)
        self.assertEqual(set(Stock.objects.values_list('quantity', flat=True)), {5})
        for product in Product.objects.all():
            self.assertGreater(product.price_incl_tax, product.price_excl_tax)

        out = StringIO()
        call_command('seed_demo_data', '--products', '3', stdout=out)
        self.assertEqual(Product.objects.count(), 3)
        self.assertIn('3 already present', out.getvalue())
