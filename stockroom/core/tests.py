"""
Test suite for shared API plumbing
Tests: error envelopes, audit logging, rate limit keys, authentication endpoints
"""

from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, RequestFactory, override_settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory
from rest_framework_simplejwt.tokens import AccessToken

from .errors import error_response, flatten_errors, validation_error_response
from .models import AuditLog
from .test_utils import TestDataFactory, AuthenticatedAPIClient
from .throttling import IdentityRateThrottle
from .utils import create_audit_log, get_client_ip


def raised(exc):
    """Return ``exc`` with a traceback attached"""
    try:
        raise exc
    except Exception as e:
        return e


class FlattenErrorsTests(TestCase):

    def test_nested_list_errors(self):
        errors = {'items': [{}, {'quantity': ['Ensure this value is greater than or equal to 1.']}]}
        self.assertEqual(
            flatten_errors(errors),
            ['items[1].quantity: Ensure this value is greater than or equal to 1.'],
        )

    def test_index_keyed_list_errors(self):
        # newer DRF versions report failing list children in a dict keyed by index
        errors = {'items': {2: {'unitPriceInclTax': ['Ensure this value is greater than or equal to 0.']}}}
        self.assertEqual(
            flatten_errors(errors),
            ['items[2].unitPriceInclTax: Ensure this value is greater than or equal to 0.'],
        )

    def test_non_field_errors_use_parent_path(self):
        errors = {'items': {'non_field_errors': ['Ensure this field has no more than 100 elements.']}}
        self.assertEqual(flatten_errors(errors), ['items: Ensure this field has no more than 100 elements.'])

    def test_several_fields(self):
        errors = {'productId': ['A valid integer is required.'], 'quantity': ['This field is required.']}
        self.assertEqual(len(flatten_errors(errors)), 2)


class ErrorResponseTests(TestCase):

    @override_settings(APP_ENV='production')
    def test_production_hides_details(self):
        with self.assertLogs('stockroom.core.errors', level='ERROR'):
            response = error_response(raised(ValueError('password=hunter2')), 'Failed to create order')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Failed to create order')
        self.assertNotIn('stack', response.data)
        self.assertFalse(response.data['success'])
        self.assertIn('timestamp', response.data)

    @override_settings(APP_ENV='development')
    def test_development_shows_details(self):
        with self.assertLogs('stockroom.core.errors', level='ERROR'):
            response = error_response(raised(ValueError('column "x" missing')), 'Failed to create order')
        self.assertEqual(response.data['error'], 'column "x" missing')
        self.assertIn('ValueError', response.data['stack'])

    def test_validation_error_response(self):
        response = validation_error_response(['items[0].quantity: too small'], 'Invalid order items')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details'], ['items[0].quantity: too small'])


class AuditLogTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.factory = RequestFactory()

    def test_create_audit_log(self):
        request = self.factory.post('/api/v1/orders/', HTTP_X_FORWARDED_FOR='203.0.113.5, 10.0.0.1')
        request.user = self.user
        log = create_audit_log(request=request, action='order_create', model_name='Order',
                               object_id=7, object_reference='Order #7', changes={'item_count': 2})
        self.assertIsNotNone(log)
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.object_id, '7')
        self.assertEqual(log.ip_address, '203.0.113.5')

    def test_missing_fields_are_skipped(self):
        with self.assertLogs('stockroom.core.utils', level='WARNING'):
            self.assertIsNone(create_audit_log(action='order_create', model_name='Order'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_anonymous_user_is_not_recorded(self):
        request = self.factory.get('/')
        request.user = AnonymousUser()
        log = create_audit_log(request=request, action='delete', model_name='Product', object_id=1)
        self.assertIsNone(log.user)

    def test_client_ip(self):
        request = self.factory.get('/', REMOTE_ADDR='198.51.100.7')
        self.assertEqual(get_client_ip(request), '198.51.100.7')
        self.assertIsNone(get_client_ip(None))


class IdentityRateThrottleTests(TestCase):

    def setUp(self):
        self.factory = APIRequestFactory()

    def test_cache_key_uses_user(self):
        user = TestDataFactory.create_user()
        request = Request(self.factory.post('/api/v1/orders/', REMOTE_ADDR='10.0.0.1'))
        request.user = user
        key = IdentityRateThrottle().get_cache_key(request, None)
        self.assertEqual(key, f'throttle_orders_user:{user.pk}')

    def test_cache_key_falls_back_to_ip(self):
        request = Request(self.factory.post('/api/v1/orders/', REMOTE_ADDR='10.0.0.1'))
        self.assertFalse(request.user.is_authenticated)
        key = IdentityRateThrottle().get_cache_key(request, None)
        self.assertEqual(key, 'throttle_orders_ip:10.0.0.1')


class AuthAPITests(TestCase):
    """Test login and current user endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='clerk', role='admin')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens_with_role(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'clerk', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'admin')
        self.assertEqual(token['username'], 'clerk')
        self.assertIn('refresh', response.data)

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'clerk', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertIn('error', response.data)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['username'], 'clerk')

    def test_me_requires_token(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('WWW-Authenticate', response)

    def test_audit_logs_are_admin_only(self):
        create_audit_log(user=self.user, action='create', model_name='Product', object_id=1)

        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        staff = TestDataFactory.create_user(is_staff=True)
        self.client.authenticate_user(staff)
        response = self.client.get('/api/v1/audit-logs/?action=create')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)


class AdminUserAPITests(TestCase):
    """Test admin user listing and role changes"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(username='manager', role='admin')
        self.clerk = TestDataFactory.create_user(username='clerk')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_list_users(self):
        response = self.client.get('/api/v1/admin/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual({u['username'] for u in response.data['data']}, {'manager', 'clerk'})

    def test_non_admin_is_forbidden(self):
        self.client.authenticate_user(self.clerk)
        response = self.client.get('/api/v1/admin/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['success'])

        response = self.client.put('/api/v1/admin/users/', {'userId': self.clerk.id, 'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.clerk.refresh_from_db()
        self.assertEqual(self.clerk.role, 'user')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/admin/users/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_change_role(self):
        response = self.client.put('/api/v1/admin/users/', {'userId': self.clerk.id, 'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['role'], 'admin')
        self.clerk.refresh_from_db()
        self.assertEqual(self.clerk.role, 'admin')

        log = AuditLog.objects.get(action='role_change')
        self.assertEqual(log.user, self.admin)
        self.assertEqual(log.object_id, str(self.clerk.id))
        self.assertEqual(log.changes, {'previous_role': 'user', 'new_role': 'admin'})

    def test_invalid_role(self):
        response = self.client.put('/api/v1/admin/users/', {'userId': self.clerk.id, 'role': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['details'][0].startswith('role:'))

    def test_missing_user_id(self):
        response = self.client.put('/api/v1/admin/users/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['details'][0].startswith('userId:'))

    def test_cannot_change_own_role(self):
        response = self.client.put('/api/v1/admin/users/', {'userId': self.admin.id, 'role': 'user'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, 'admin')
        self.assertFalse(AuditLog.objects.filter(action='role_change').exists())

    def test_unknown_user(self):
        response = self.client.put('/api/v1/admin/users/', {'userId': 99999, 'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'User not found')
