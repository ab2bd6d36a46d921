"""
JSON error envelopes shared by the API views.

Every failure body has the shape ``{"success": false, "error": ..., "timestamp": ...}``.
Outside production the raw exception text and traceback are included.
"""
import logging
import traceback

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def is_production():
    return getattr(settings, 'APP_ENV', 'development') == 'production'


def _timestamp():
    return timezone.now().isoformat()


def error_response(exc, default_message='An error occurred', status_code=status.HTTP_500_INTERNAL_SERVER_ERROR):
    """Log ``exc`` and build a failure response, redacting internals in production"""
    logger.error(f"API error: {exc}", exc_info=exc)

    if is_production():
        return Response({
            'success': False,
            'error': default_message,
            'timestamp': _timestamp(),
        }, status=status_code)

    return Response({
        'success': False,
        'error': str(exc) or default_message,
        'stack': ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        'timestamp': _timestamp(),
    }, status=status_code)


def validation_error_response(details, message='Invalid input'):
    return Response({
        'success': False,
        'error': message,
        'details': list(details),
        'timestamp': _timestamp(),
    }, status=status.HTTP_400_BAD_REQUEST)


def not_found_response(resource='Resource'):
    return Response({
        'success': False,
        'error': f'{resource} not found',
        'timestamp': _timestamp(),
    }, status=status.HTTP_404_NOT_FOUND)


def api_exception_handler(exc, context):
    """DRF exception handler that keeps the default status and headers but uses the envelope"""
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and 'detail' in data:
        message = str(data['detail'])
        body = {'success': False, 'error': message, 'timestamp': _timestamp()}
    else:
        body = {
            'success': False,
            'error': 'Invalid input',
            'details': flatten_errors(data),
            'timestamp': _timestamp(),
        }
    response.data = body
    return response


def flatten_errors(errors, prefix=''):
    """Turn nested serializer errors into ``"items[1].quantity: message"`` strings"""
    messages = []
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key == 'non_field_errors':
                path = prefix
            elif isinstance(key, int):
                # list serializers report failing children keyed by index
                path = f'{prefix}[{key}]'
            else:
                path = f'{prefix}.{key}' if prefix else str(key)
            messages.extend(flatten_errors(value, path))
    elif isinstance(errors, list):
        if errors and all(isinstance(item, str) for item in errors):
            for item in errors:
                messages.append(f'{prefix}: {item}' if prefix else str(item))
        else:
            for index, item in enumerate(errors):
                if item:
                    messages.extend(flatten_errors(item, f'{prefix}[{index}]'))
    elif errors:
        messages.append(f'{prefix}: {errors}' if prefix else str(errors))
    return messages
