from rest_framework import serializers
from .models import User, AuditLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'role', 'is_active', 'is_staff', 'created_at', 'updated_at']
        read_only_fields = ['role', 'is_staff', 'created_at', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ['id', 'username', 'action', 'model_name', 'object_id',
                  'object_reference', 'changes', 'ip_address', 'created_at']


class RoleUpdateSerializer(serializers.Serializer):
    userId = serializers.IntegerField(min_value=1)
    role = serializers.ChoiceField(choices=[choice for choice, _ in User.ROLE_CHOICES])
