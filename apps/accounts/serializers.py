from rest_framework import serializers
from .models import User, UserRole


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'display_name',
            'role',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    username = serializers.CharField(required=True, max_length=150)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization (history, payments, audit)."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class UserAdminSerializer(serializers.ModelSerializer):
    """Account as seen by shop administrators."""

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'display_name',
            'role',
            'is_active',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    """Input for creating a shop account."""

    username = serializers.CharField(min_length=3, max_length=150)
    password = serializers.CharField(
        min_length=4,
        write_only=True,
        style={'input_type': 'password'}
    )
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=UserRole.choices, default=UserRole.STAFF)
    is_active = serializers.BooleanField(default=True)


class UserUpdateSerializer(serializers.Serializer):
    """Partial update of a shop account. Passwords go through reset-password."""

    username = serializers.CharField(min_length=3, max_length=150, required=False)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    is_active = serializers.BooleanField(required=False)


class PasswordSetSerializer(serializers.Serializer):
    password = serializers.CharField(
        min_length=4,
        write_only=True,
        style={'input_type': 'password'}
    )
