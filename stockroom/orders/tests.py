"""
Test suite for order placement
Tests: item validation, totals, compensating delete, stock adjustment, API envelopes, rate limiting
"""
from decimal import Decimal
from io import StringIO
from unittest.mock import Mock, patch

from django.core.cache import cache
from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase, override_settings
from rest_framework import status

from stockroom.core.models import AuditLog
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from stockroom.core.throttling import IdentityRateThrottle
from stockroom.inventory.models import Stock, StockMovement
from .exceptions import OrderValidationError, OrderWriteError
from .models import Order, OrderDetail
from .services import OrderLine, adjust_stock_for_order, place_order, validate_order_items
from .store import DjangoOrderStore

item = TestDataFactory.order_item


def spy_store():
    """A store that records calls but still writes to the test database"""
    return Mock(wraps=DjangoOrderStore())


class OrderValidationTests(TestCase):
    """Rejected input must never reach the store"""

    def assert_rejected_without_writes(self, items):
        store = spy_store()
        with self.assertRaises(OrderValidationError) as ctx:
            place_order(items, store=store)
        store.insert_order.assert_not_called()
        store.insert_details.assert_not_called()
        store.decrement_stock.assert_not_called()
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderDetail.objects.count(), 0)
        return ctx.exception

    def test_out_of_range_fields_are_rejected(self):
        cases = [
            ('quantity', item(1, quantity=0)),
            ('quantity', item(1, quantity=-3)),
            ('quantity', item(1, quantity=10001)),
            ('unitPriceExclTax', item(1, unit_price_excl_tax=-1)),
            ('unitPriceExclTax', item(1, unit_price_excl_tax=10000001)),
            ('unitPriceInclTax', item(1, unit_price_incl_tax=-0.01)),
            ('unitPriceInclTax', item(1, unit_price_incl_tax=10000001)),
            ('productId', item(0)),
            ('productId', item(-5)),
        ]
        for field, bad_item in cases:
            with self.subTest(field=field, item=bad_item):
                error = self.assert_rejected_without_writes([bad_item])
                self.assertTrue(any(d.startswith(f'items[0].{field}:') for d in error.details), error.details)

    def test_non_numeric_and_missing_fields_are_rejected(self):
        error = self.assert_rejected_without_writes([
            {'productId': 'abc', 'quantity': 1, 'unitPriceExclTax': 1, 'unitPriceInclTax': 1},
        ])
        self.assertTrue(any(d.startswith('items[0].productId:') for d in error.details))

        error = self.assert_rejected_without_writes([{'productId': 1, 'quantity': 2}])
        self.assertTrue(any(d.startswith('items[0].unitPriceExclTax:') for d in error.details))
        self.assertTrue(any(d.startswith('items[0].unitPriceInclTax:') for d in error.details))

    def test_fractional_quantity_is_rejected(self):
        self.assert_rejected_without_writes([item(1, quantity=1.5)])

    def test_error_names_the_offending_line(self):
        error = self.assert_rejected_without_writes([
            item(1, quantity=1),
            item(2, quantity=1),
            item(3, quantity=1, unit_price_incl_tax=-10),
        ])
        self.assertEqual(len(error.details), 1)
        self.assertTrue(error.details[0].startswith('items[2].unitPriceInclTax:'))

    def test_empty_or_missing_items_are_rejected(self):
        self.assert_rejected_without_writes([])
        self.assert_rejected_without_writes(None)
        self.assert_rejected_without_writes('not a list')

    def test_boundary_values_are_accepted(self):
        lines = validate_order_items([
            item(1, quantity=1, unit_price_excl_tax=0, unit_price_incl_tax=0),
            item(2, quantity=10000, unit_price_excl_tax=10000000, unit_price_incl_tax=10000000),
        ])
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[1].quantity, 10000)
        self.assertEqual(lines[1].unit_price_excl_tax, Decimal('10000000'))

    def test_prices_are_rounded_to_cents(self):
        lines = validate_order_items([
            item(1, unit_price_excl_tax=100, unit_price_incl_tax=110.00000000000001),
            item(2, unit_price_excl_tax='99.999', unit_price_incl_tax='109.994'),
            item(3, unit_price_excl_tax=0.005, unit_price_incl_tax=0.004),
        ])
        self.assertEqual(lines[0].unit_price_incl_tax, Decimal('110.00'))
        self.assertEqual(lines[1].unit_price_excl_tax, Decimal('100.00'))
        self.assertEqual(lines[1].unit_price_incl_tax, Decimal('109.99'))
        self.assertEqual(lines[2].unit_price_excl_tax, Decimal('0.01'))
        self.assertEqual(lines[2].unit_price_incl_tax, Decimal('0.00'))

    def test_range_is_checked_before_rounding(self):
        error = self.assert_rejected_without_writes([item(1, unit_price_excl_tax='10000000.001')])
        self.assertTrue(error.details[0].startswith('items[0].unitPriceExclTax:'))
        error = self.assert_rejected_without_writes([item(1, unit_price_incl_tax='-0.001')])
        self.assertTrue(error.details[0].startswith('items[0].unitPriceInclTax:'))

    def test_non_finite_prices_are_rejected(self):
        for bad in ['NaN', 'Infinity', '-Infinity', 'abc']:
            with self.subTest(price=bad):
                self.assert_rejected_without_writes([item(1, unit_price_excl_tax=bad)])

    def test_integers_must_be_json_integers(self):
        cases = [
            ('productId', item('3')),
            ('productId', item(True)),
            ('quantity', item(1, quantity='3')),
            ('quantity', item(1, quantity=2.0)),
            ('quantity', item(1, quantity=True)),
        ]
        for field, bad_item in cases:
            with self.subTest(field=field, item=bad_item):
                error = self.assert_rejected_without_writes([bad_item])
                self.assertEqual(error.details, [f'items[0].{field}: A valid integer is required.'])

    def test_more_than_one_hundred_items_are_rejected(self):
        items = [item(i + 1) for i in range(101)]
        error = self.assert_rejected_without_writes(items)
        self.assertTrue(any(d.startswith('items:') for d in error.details), error.details)

    def test_exactly_one_hundred_items_are_accepted(self):
        items = [item(i + 1) for i in range(100)]
        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order(items)
        self.assertEqual(placement.item_count, 100)
        self.assertEqual(OrderDetail.objects.filter(order_id=placement.order_id).count(), 100)


class OrderPlacementTests(TestCase):
    """Order and detail writes, including the compensating delete"""

    def test_totals_and_subtotals(self):
        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order([
                item(1, quantity=2, unit_price_excl_tax=100, unit_price_incl_tax=110),
                item(2, quantity=3, unit_price_excl_tax=50, unit_price_incl_tax=55),
            ])

        self.assertEqual(placement.total_quantity, 5)
        self.assertEqual(placement.total_excl_tax, Decimal('350'))
        self.assertEqual(placement.total_incl_tax, Decimal('385'))
        self.assertEqual(placement.item_count, 2)

        order = Order.objects.get(pk=placement.order_id)
        self.assertEqual(order.item_count, 5)
        self.assertEqual(order.total_excl_tax, Decimal('350.00'))
        self.assertEqual(order.total_incl_tax, Decimal('385.00'))

        details = list(order.details.order_by('product_id'))
        self.assertEqual(len(details), 2)
        for detail in details:
            self.assertEqual(detail.subtotal_excl_tax, detail.quantity * detail.unit_price_excl_tax)
            self.assertEqual(detail.subtotal_incl_tax, detail.quantity * detail.unit_price_incl_tax)
        self.assertEqual(details[0].subtotal_excl_tax, Decimal('200.00'))
        self.assertEqual(details[1].subtotal_incl_tax, Decimal('165.00'))

    def test_detail_ids_are_generated(self):
        bad_id_item = dict(item(1), id=999, detailId=999)
        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order([bad_id_item])
        self.assertFalse(OrderDetail.objects.filter(pk=999).exists())
        self.assertEqual(OrderDetail.objects.filter(order_id=placement.order_id).count(), 1)

    def test_order_insert_failure_raises_write_error(self):
        store = spy_store()
        store.insert_order.side_effect = DatabaseError('database unavailable')

        with self.assertRaises(OrderWriteError):
            place_order([item(1)], store=store)

        store.insert_details.assert_not_called()
        store.delete_order.assert_not_called()
        self.assertEqual(Order.objects.count(), 0)

    def test_detail_failure_deletes_the_order(self):
        store = spy_store()
        store.insert_details.side_effect = DatabaseError('insert rejected')

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(OrderWriteError) as ctx:
                place_order([item(1), item(2)], store=store)

        store.insert_order.assert_called_once()
        store.insert_details.assert_called_once()
        self.assertIsNotNone(ctx.exception.order_id)
        store.delete_order.assert_called_once_with(ctx.exception.order_id)
        self.assertFalse(Order.objects.filter(pk=ctx.exception.order_id).exists())
        self.assertEqual(OrderDetail.objects.count(), 0)
        # stock is never touched for a failed order
        self.assertEqual(callbacks, [])
        store.get_stock.assert_not_called()

    def test_failed_compensating_delete_leaves_orphan_order(self):
        store = spy_store()
        store.insert_details.side_effect = DatabaseError('insert rejected')
        store.delete_order.side_effect = DatabaseError('delete rejected')

        with self.assertLogs('stockroom.orders.services', level='ERROR'):
            with self.assertRaises(OrderWriteError) as ctx:
                place_order([item(1)], store=store)

        orphan = Order.objects.get(pk=ctx.exception.order_id)
        self.assertEqual(orphan.details.count(), 0)

    def test_created_by_is_recorded(self):
        user = TestDataFactory.create_user()
        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order([item(1)], user=user)
        self.assertEqual(Order.objects.get(pk=placement.order_id).created_by, user)


class StockAdjustmentTests(TestCase):
    """Stock is decremented after commit, one line at a time"""

    def setUp(self):
        self.product = TestDataFactory.create_product()
        self.stock = TestDataFactory.create_stock(product=self.product, quantity=10)

    def test_stock_is_decremented(self):
        with self.captureOnCommitCallbacks(execute=True):
            place_order([item(self.product.id, quantity=4)])
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 6)

    def test_stock_waits_for_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            place_order([item(self.product.id, quantity=4)])
            self.stock.refresh_from_db()
            self.assertEqual(self.stock.quantity, 10)
        self.assertEqual(len(callbacks), 1)

        callbacks[0]()
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 6)

    def test_order_movement_is_recorded(self):
        user = TestDataFactory.create_user()
        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order([item(self.product.id, quantity=4)], user=user)

        movement = StockMovement.objects.get(product_id=self.product.id)
        self.assertEqual(movement.movement_type, 'order')
        self.assertEqual(movement.quantity, -4)
        self.assertEqual(movement.previous_quantity, 10)
        self.assertEqual(movement.new_quantity, 6)
        self.assertEqual(movement.order_id, placement.order_id)
        self.assertEqual(movement.user, user)

    def test_missing_stock_row_is_skipped(self):
        other = TestDataFactory.create_product()
        store = spy_store()

        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order([item(other.id, quantity=2)], store=store)

        store.get_stock.assert_called_once_with(other.id)
        store.decrement_stock.assert_not_called()
        self.assertFalse(Stock.objects.filter(product_id=other.id).exists())
        self.assertTrue(Order.objects.filter(pk=placement.order_id).exists())
        self.assertEqual(OrderDetail.objects.filter(order_id=placement.order_id).count(), 1)

    def test_unknown_product_is_accepted(self):
        with self.captureOnCommitCallbacks(execute=True):
            placement = place_order([item(987654, quantity=1)])
        detail = OrderDetail.objects.get(order_id=placement.order_id)
        self.assertEqual(detail.product_id, 987654)

    def test_failure_on_one_item_does_not_stop_the_others(self):
        product_b = TestDataFactory.create_product()
        stock_b = TestDataFactory.create_stock(product=product_b, quantity=20)
        real_store = DjangoOrderStore()
        store = Mock(wraps=real_store)

        def flaky_decrement(stock, quantity, **kwargs):
            if stock.product_id == self.product.id:
                raise DatabaseError('stock update rejected')
            return real_store.decrement_stock(stock, quantity, **kwargs)

        store.decrement_stock.side_effect = flaky_decrement

        with self.assertLogs('stockroom.orders.services', level='ERROR') as logs:
            with self.captureOnCommitCallbacks(execute=True):
                placement = place_order([
                    item(self.product.id, quantity=3),
                    item(product_b.id, quantity=5),
                ], store=store)

        self.assertIn(f'product {self.product.id}', '\n'.join(logs.output))
        self.assertEqual(store.decrement_stock.call_count, 2)
        self.assertTrue(Order.objects.filter(pk=placement.order_id).exists())
        self.assertEqual(OrderDetail.objects.filter(order_id=placement.order_id).count(), 2)

        self.stock.refresh_from_db()
        stock_b.refresh_from_db()
        self.assertEqual(self.stock.quantity, 10)
        self.assertEqual(stock_b.quantity, 15)

    def test_lookup_failure_is_isolated(self):
        product_b = TestDataFactory.create_product()
        stock_b = TestDataFactory.create_stock(product=product_b, quantity=8)
        real_store = DjangoOrderStore()
        store = Mock(wraps=real_store)

        def flaky_lookup(product_id):
            if product_id == self.product.id:
                raise DatabaseError('lookup failed')
            return real_store.get_stock(product_id)

        store.get_stock.side_effect = flaky_lookup

        with self.assertLogs('stockroom.orders.services', level='ERROR'):
            with self.captureOnCommitCallbacks(execute=True):
                place_order([item(self.product.id), item(product_b.id, quantity=2)], store=store)

        stock_b.refresh_from_db()
        self.assertEqual(stock_b.quantity, 6)

    def test_stock_can_go_negative(self):
        with self.captureOnCommitCallbacks(execute=True):
            place_order([item(self.product.id, quantity=15)])
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, -5)

    def test_repeated_lines_for_one_product_accumulate(self):
        with self.captureOnCommitCallbacks(execute=True):
            place_order([item(self.product.id, quantity=2), item(self.product.id, quantity=3)])
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 5)

    def test_rerunning_adjustment_decrements_again(self):
        lines = [OrderLine(self.product.id, 3, Decimal('100'), Decimal('110'))]
        store = DjangoOrderStore()
        self.assertEqual(adjust_stock_for_order(1, lines, store), 1)
        self.assertEqual(adjust_stock_for_order(1, lines, store), 1)
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 4)

    def test_updated_at_is_refreshed(self):
        before = self.stock.updated_at
        with self.captureOnCommitCallbacks(execute=True):
            place_order([item(self.product.id, quantity=1)])
        self.stock.refresh_from_db()
        self.assertGreaterEqual(self.stock.updated_at, before)


class OrderAPITests(TestCase):
    """Test order endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product()
        self.stock = TestDataFactory.create_stock(product=self.product, quantity=10)

    def test_create_order(self):
        data = {'items': [
            item(self.product.id, quantity=2, unit_price_excl_tax=100, unit_price_incl_tax=110),
            item(self.product.id, quantity=3, unit_price_excl_tax=50, unit_price_incl_tax=55),
        ]}
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post('/api/v1/orders/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['data']['totalQuantity'], 5)
        self.assertEqual(body['data']['totalExclTax'], 350)
        self.assertEqual(body['data']['totalInclTax'], 385)
        self.assertEqual(body['data']['itemCount'], 2)
        self.assertIn('createdAt', body['data'])
        self.assertTrue(Order.objects.filter(pk=body['data']['orderId']).exists())

        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 5)
        self.assertTrue(AuditLog.objects.filter(action='order_create', object_id=str(body['data']['orderId'])).exists())

    def test_float_artifact_price_is_accepted(self):
        data = {'items': [item(self.product.id, quantity=3, unit_price_excl_tax=100,
                               unit_price_incl_tax=110.00000000000001)]}
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post('/api/v1/orders/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['totalInclTax'], 330)
        detail = OrderDetail.objects.get(order_id=response.json()['data']['orderId'])
        self.assertEqual(detail.unit_price_incl_tax, Decimal('110.00'))
        self.assertEqual(detail.subtotal_incl_tax, Decimal('330.00'))

    def test_largest_order_can_be_read_back(self):
        data = {'items': [
            item(i + 1, quantity=10000, unit_price_excl_tax=10000000, unit_price_incl_tax=10000000)
            for i in range(100)
        ]}
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post('/api/v1/orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order_id = response.json()['data']['orderId']

        order = Order.objects.get(pk=order_id)
        self.assertEqual(order.item_count, 1000000)
        self.assertEqual(order.total_excl_tax, Decimal('10000000000000.00'))
        self.assertEqual(order.total_incl_tax, Decimal('10000000000000.00'))

        response = self.client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data'][0]['totalInclTax'], 10000000000000)

        response = self.client.get(f'/api/v1/orders/{order_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        details = response.json()['data']['details']
        self.assertEqual(len(details), 100)
        self.assertEqual(details[0]['subtotalExclTax'], 100000000000)

    def test_create_order_validation_error(self):
        data = {'items': [item(self.product.id, quantity=0)]}
        response = self.client.post('/api/v1/orders/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertFalse(body['success'])
        self.assertEqual(body['error'], 'Invalid order items')
        self.assertTrue(body['details'][0].startswith('items[0].quantity:'))
        self.assertEqual(Order.objects.count(), 0)

    def test_create_order_without_items(self):
        response = self.client.post('/api/v1/orders/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.json()['success'])

    def test_create_order_requires_authentication(self):
        self.client.logout()
        response = self.client.post('/api/v1/orders/', {'items': [item(self.product.id)]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()['success'])
        self.assertEqual(Order.objects.count(), 0)

    @override_settings(APP_ENV='production')
    def test_write_failure_is_redacted_in_production(self):
        with patch.object(DjangoOrderStore, 'insert_details', side_effect=DatabaseError('relation "order_details" is locked')):
            response = self.client.post('/api/v1/orders/', {'items': [item(self.product.id)]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        body = response.json()
        self.assertFalse(body['success'])
        self.assertEqual(body['error'], 'Failed to create order')
        self.assertNotIn('stack', body)
        self.assertEqual(Order.objects.count(), 0)
        self.assertTrue(AuditLog.objects.filter(action='order_rollback').exists())

    @override_settings(APP_ENV='development')
    def test_write_failure_is_detailed_in_development(self):
        with patch.object(DjangoOrderStore, 'insert_details', side_effect=DatabaseError('relation "order_details" is locked')):
            response = self.client.post('/api/v1/orders/', {'items': [item(self.product.id)]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        body = response.json()
        self.assertIn('order_details', body['error'])
        self.assertIn('stack', body)
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity, 10)

    def test_rate_limit(self):
        data = {'items': [item(self.product.id)]}
        with patch.object(IdentityRateThrottle, 'rate', '2/min', create=True):
            for _ in range(2):
                with self.captureOnCommitCallbacks(execute=True):
                    response = self.client.post('/api/v1/orders/', data, format='json')
                self.assertEqual(response.status_code, status.HTTP_200_OK)
            response = self.client.post('/api/v1/orders/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertIn('Retry-After', response)
        self.assertFalse(response.json()['success'])
        self.assertEqual(Order.objects.count(), 2)

    def test_rate_limit_is_per_user(self):
        data = {'items': [item(self.product.id)]}
        other_client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        with patch.object(IdentityRateThrottle, 'rate', '1/min', create=True):
            with self.captureOnCommitCallbacks(execute=True):
                first = self.client.post('/api/v1/orders/', data, format='json')
                second = other_client.post('/api/v1/orders/', data, format='json')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)

    def test_list_orders(self):
        older = TestDataFactory.create_order(user=self.user)
        newer = TestDataFactory.create_order(user=self.user)

        response = self.client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body['count'], 2)
        self.assertEqual([o['orderId'] for o in body['data']], [newer.id, older.id])

    def test_order_detail(self):
        order = TestDataFactory.create_order(user=self.user, product_id=self.product.id, quantity=2)
        OrderDetail.objects.create(
            order=order, product_id=555555, quantity=1,
            unit_price_excl_tax=Decimal('10'), unit_price_incl_tax=Decimal('11'),
            subtotal_excl_tax=Decimal('10'), subtotal_incl_tax=Decimal('11'),
        )

        response = self.client.get(f'/api/v1/orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['orderId'], order.id)
        self.assertEqual(len(data['details']), 2)
        self.assertEqual(data['details'][0]['product']['janCode'], self.product.jan_code)
        self.assertIsNone(data['details'][1]['product'])

    def test_order_detail_not_found(self):
        response = self.client.get('/api/v1/orders/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.json()['success'])


class FindOrphanOrdersCommandTests(TestCase):

    def test_reports_and_deletes_orphans(self):
        healthy = TestDataFactory.create_order()
        orphan = TestDataFactory.create_order(with_details=False)

        out = StringIO()
        call_command('find_orphan_orders', stdout=out)
        self.assertIn(f'Order #{orphan.id}', out.getvalue())
        self.assertNotIn(f'Order #{healthy.id}:', out.getvalue())
        self.assertTrue(Order.objects.filter(pk=orphan.id).exists())

        call_command('find_orphan_orders', '--delete', stdout=StringIO())
        self.assertFalse(Order.objects.filter(pk=orphan.id).exists())
        self.assertTrue(Order.objects.filter(pk=healthy.id).exists())

    def test_no_orphans(self):
        TestDataFactory.create_order()
        out = StringIO()
        call_command('find_orphan_orders', stdout=out)
        self.assertIn('No orphan orders found', out.getvalue())
