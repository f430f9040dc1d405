from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'entity', 'entity_id', 'meta', 'created_at']
        read_only_fields = fields
