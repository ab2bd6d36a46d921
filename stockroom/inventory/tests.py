"""
Test suite for stock
Tests: atomic deltas, manual set/add updates, movement history endpoints
"""
from django.test import TestCase
from rest_framework import status

from stockroom.core.models import AuditLog
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import StockMovement
from .services import (
    InvalidStockQuantity, StockNotFound, apply_stock_delta, record_stock_movement, update_stock,
    validate_stock_quantity,
)


class StockServiceTests(TestCase):

    def setUp(self):
        self.stock = TestDataFactory.create_stock(quantity=10)

    def test_apply_negative_delta(self):
        previous, new = apply_stock_delta(self.stock, -4)
        self.assertEqual((previous, new), (10, 6))
        self.assertEqual(self.stock.quantity, 6)
        self.assertIsNone(self.stock.last_stocked_date)

    def test_apply_positive_delta_sets_last_stocked_date(self):
        apply_stock_delta(self.stock, 5)
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 15)
        self.assertIsNotNone(self.stock.last_stocked_date)

    def test_stale_instance_does_not_overwrite(self):
        # two readers holding the same row: both decrements must land
        stale = type(self.stock).objects.get(pk=self.stock.pk)
        apply_stock_delta(self.stock, -3)
        apply_stock_delta(stale, -2)
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 5)

    def test_validate_stock_quantity(self):
        validate_stock_quantity(0)
        validate_stock_quantity(100000)
        with self.assertRaises(InvalidStockQuantity):
            validate_stock_quantity(-1)
        with self.assertRaises(InvalidStockQuantity):
            validate_stock_quantity(100001)

    def test_update_stock_set(self):
        change = update_stock(self.stock.product_id, 25)
        self.assertEqual(change.previous_quantity, 10)
        self.assertEqual(change.new_quantity, 25)
        movement = StockMovement.objects.get(product_id=self.stock.product_id)
        self.assertEqual(movement.movement_type, 'adjust')
        self.assertEqual(movement.quantity, 15)

    def test_update_stock_add_and_remove(self):
        update_stock(self.stock.product_id, 5, mode='add', reason='delivery')
        change = update_stock(self.stock.product_id, -8, mode='add')
        self.assertEqual(change.new_quantity, 7)
        types = list(StockMovement.objects.order_by('id').values_list('movement_type', flat=True))
        self.assertEqual(types, ['in', 'out'])

    def test_update_stock_missing_row(self):
        product = TestDataFactory.create_product()
        with self.assertRaises(StockNotFound):
            update_stock(product.id, 5)

    def test_update_stock_rejects_negative_result(self):
        with self.assertRaises(InvalidStockQuantity):
            update_stock(self.stock.product_id, -11, mode='add')
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 10)
        self.assertEqual(StockMovement.objects.count(), 0)

    def test_record_stock_movement_anonymous(self):
        self.assertTrue(record_stock_movement(
            product_id=self.stock.product_id, movement_type='adjust', quantity=1,
            previous_quantity=10, new_quantity=11,
        ))
        self.assertIsNone(StockMovement.objects.get().user)


class StockAPITests(TestCase):
    """Test stock endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.stock = TestDataFactory.create_stock(quantity=10)

    def test_list_stock(self):
        TestDataFactory.create_stock(quantity=3)
        response = self.client.get('/api/v1/stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

        response = self.client.get(f'/api/v1/stock/?product_id={self.stock.product_id}')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['quantity'], 10)

    def test_set_stock(self):
        data = {'productId': self.stock.product_id, 'quantity': 42, 'reason': 'count'}
        response = self.client.put('/api/v1/stock/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['previousQuantity'], 10)
        self.assertEqual(response.data['data']['newQuantity'], 42)
        self.assertTrue(AuditLog.objects.filter(action='stock_update', user=self.user).exists())

        movement = StockMovement.objects.get()
        self.assertEqual(movement.user, self.user)
        self.assertEqual(movement.reason, 'count')

    def test_add_stock(self):
        data = {'productId': self.stock.product_id, 'quantity': -4, 'mode': 'add'}
        response = self.client.put('/api/v1/stock/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['newQuantity'], 6)

    def test_stock_not_found(self):
        product = TestDataFactory.create_product()
        response = self.client.put('/api/v1/stock/', {'productId': product.id, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])

    def test_negative_result_rejected(self):
        data = {'productId': self.stock.product_id, 'quantity': -20, 'mode': 'add'}
        response = self.client.put('/api/v1/stock/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 10)

    def test_invalid_payload(self):
        response = self.client.put('/api/v1/stock/', {'productId': self.stock.product_id, 'quantity': 'many'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['details'][0].startswith('quantity:'))

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/stock/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_movement_list_filters(self):
        update_stock(self.stock.product_id, 5, mode='add')
        update_stock(self.stock.product_id, 3)
        other = TestDataFactory.create_stock(quantity=1)
        update_stock(other.product_id, 2)

        response = self.client.get(f'/api/v1/stock-movements/?product_id={self.stock.product_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        # newest first
        self.assertEqual(response.data['data'][0]['movement_type'], 'adjust')

        response = self.client.get('/api/v1/stock-movements/?movement_type=in')
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/v1/stock-movements/?limit=1')
        self.assertEqual(response.data['count'], 1)
