"""Utility functions for audit logging"""
import logging

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (order_create, stock_update, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_reference: Reference identifier (e.g., order id, JAN code)

    Returns the created AuditLog, or None when the entry was skipped or failed.
    """
    if not action or not model_name or object_id is None:
        logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
        return None

    audit_user = user
    if audit_user is None and request is not None:
        audit_user = getattr(request, 'user', None)

    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                user=audit_user if audit_user and audit_user.is_authenticated else None,
                action=action,
                model_name=model_name,
                object_id=str(object_id),
                object_reference=object_reference,
                changes=changes or {},
                ip_address=get_client_ip(request) if request else None,
            )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None
