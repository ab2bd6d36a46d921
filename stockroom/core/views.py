import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from .errors import flatten_errors, not_found_response, validation_error_response
from .models import AuditLog, User
from .permissions import IsShopAdmin
from .serializers import UserSerializer, AuditLogSerializer, RoleUpdateSerializer
from .utils import create_audit_log

logger = logging.getLogger(__name__)


class StockroomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class StockroomTokenObtainPairView(TokenObtainPairView):
    serializer_class = StockroomTokenObtainPairSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get the current user"""
    return Response({'success': True, 'data': UserSerializer(request.user).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsShopAdmin])
def audit_log_list(request):
    """List recent audit logs, optionally filtered by action"""
    queryset = AuditLog.objects.select_related('user')
    action = request.query_params.get('action')
    if action:
        queryset = queryset.filter(action=action)
    try:
        limit = int(request.query_params.get('limit', 100))
    except ValueError:
        limit = 100
    limit = max(1, min(limit, 500))
    serializer = AuditLogSerializer(queryset[:limit], many=True)
    return Response({'success': True, 'data': serializer.data, 'count': len(serializer.data)})


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsShopAdmin])
def admin_user_list_update(request):
    """List users newest first, or change one user's role"""
    if request.method == 'GET':
        users = User.objects.order_by('-created_at', '-id')
        serializer = UserSerializer(users, many=True)
        return Response({'success': True, 'data': serializer.data, 'count': len(serializer.data)})

    serializer = RoleUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(flatten_errors(serializer.errors), 'Invalid role update')
    user_id = serializer.validated_data['userId']
    role = serializer.validated_data['role']

    # an admin demoting themselves could leave no admin at all
    if user_id == request.user.pk:
        return validation_error_response(['userId: You cannot change your own role.'], 'Invalid role update')

    target = User.objects.filter(pk=user_id).first()
    if target is None:
        return not_found_response('User')

    previous_role = target.role
    target.role = role
    target.save(update_fields=['role', 'updated_at'])
    logger.info(f"Role changed: user_id={target.pk}, {previous_role} -> {role}, by={request.user.pk}")

    create_audit_log(
        request=request,
        action='role_change',
        model_name='User',
        object_id=target.pk,
        object_reference=target.username,
        changes={'previous_role': previous_role, 'new_role': role},
    )
    return Response({
        'success': True,
        'message': f'Role for {target.username} changed to "{role}"',
        'data': UserSerializer(target).data,
    })
