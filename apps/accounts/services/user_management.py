"""User management service - ADMIN maintenance of shop accounts."""

import logging
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import UserRole
from apps.ledger.services import write_audit

from .exceptions import (
    SelfLockoutError,
    UsernameTakenError,
    UserNotFoundError,
    UserValidationError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4

EDITABLE_FIELDS = frozenset({'username', 'email', 'display_name', 'role', 'is_active'})

AUDIT_ENTITY = 'User'


def _clean_username(username: str) -> str:
    username = (username or '').strip()
    if len(username) < MIN_USERNAME_LENGTH:
        raise UserValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )
    return username


def _check_password(password: str) -> None:
    if len(password or '') < MIN_PASSWORD_LENGTH:
        raise UserValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def _check_role(role: str) -> None:
    if role not in UserRole.values:
        raise UserValidationError(f"Unknown role: {role}")


def _lock_user(user_id: UUID) -> User:
    try:
        return User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")


def list_users(*, query: Optional[str] = None) -> QuerySet:
    """All accounts, newest first, optionally filtered by username or email."""
    queryset = User.objects.all()
    if query:
        queryset = queryset.filter(
            Q(username__icontains=query) | Q(email__icontains=query)
        )
    return queryset.order_by('-created_at')


@transaction.atomic
def create_user(
    *,
    username: str,
    password: str,
    role: str = UserRole.STAFF,
    email: str = '',
    display_name: str = '',
    is_active: bool = True,
    actor: Optional[User] = None
) -> User:
    """
    Create a shop account.

    Args:
        username: Login name, at least 3 characters, unique
        password: Initial password, at least 4 characters
        role: ADMIN or STAFF
        email: Optional contact address
        display_name: Optional name shown in history and receipts
        is_active: False creates a disabled account
        actor: Admin performing the action

    Returns:
        Created User instance

    Raises:
        UserValidationError: Short username or password, unknown role
        UsernameTakenError: If the username is already used
    """
    username = _clean_username(username)
    _check_password(password)
    _check_role(role)

    if User.objects.filter(username__iexact=username).exists():
        raise UsernameTakenError(f"Username {username} is already taken")

    user = User.objects.create_user(
        username=username,
        password=password,
        role=role,
        email=email or '',
        display_name=(display_name or '').strip(),
        is_active=is_active,
    )

    write_audit(actor, 'USER_CREATE', AUDIT_ENTITY, user.id, {
        'username': user.username,
        'role': user.role,
        'is_active': user.is_active,
    })

    logger.info("User %s created with role %s", user.username, user.role)
    return user


@transaction.atomic
def update_user(*, user_id: UUID, actor: Optional[User] = None, **fields) -> User:
    """
    Update username, email, display name, role or active flag.

    An admin cannot deactivate their own account or drop their own ADMIN
    role, so the shop always keeps at least the acting admin.

    Raises:
        UserNotFoundError: If the user doesn't exist
        UserValidationError: Unknown field, short username, unknown role
        UsernameTakenError: If the new username is already used
        SelfLockoutError: If the actor would lock themselves out
    """
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise UserValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    user = _lock_user(user_id)
    is_self = actor is not None and actor.pk == user.pk

    if 'username' in fields:
        fields['username'] = _clean_username(fields['username'])
        taken = (
            User.objects
            .filter(username__iexact=fields['username'])
            .exclude(id=user.id)
            .exists()
        )
        if taken:
            raise UsernameTakenError(f"Username {fields['username']} is already taken")

    if 'role' in fields:
        _check_role(fields['role'])
        if is_self and fields['role'] != UserRole.ADMIN and user.role == UserRole.ADMIN:
            raise SelfLockoutError("You cannot remove your own ADMIN role")

    if is_self and fields.get('is_active') is False:
        raise SelfLockoutError("You cannot deactivate your own account")

    if 'display_name' in fields:
        fields['display_name'] = (fields['display_name'] or '').strip()
    if 'email' in fields:
        fields['email'] = fields['email'] or ''

    changes = {}
    for name, value in fields.items():
        if getattr(user, name) != value:
            changes[name] = value
            setattr(user, name, value)

    if changes:
        user.save(update_fields=list(changes))
        write_audit(actor, 'USER_UPDATE', AUDIT_ENTITY, user.id, changes)
        logger.info("User %s updated: %s", user.username, ', '.join(sorted(changes)))

    return user


@transaction.atomic
def set_user_password(*, user_id: UUID, password: str, actor: Optional[User] = None) -> None:
    """
    Replace a user's password.

    Raises:
        UserNotFoundError: If the user doesn't exist
        UserValidationError: If the password is too short
    """
    _check_password(password)
    user = _lock_user(user_id)

    user.set_password(password)
    user.save(update_fields=['password'])

    write_audit(actor, 'USER_PASSWORD_RESET', AUDIT_ENTITY, user.id, {})
    logger.info("Password reset for user %s", user.username)


def deactivate_user(*, user_id: UUID, actor: Optional[User] = None) -> User:
    """
    Disable an account. The row is kept so history and payments still
    point at it.

    Raises:
        UserNotFoundError: If the user doesn't exist
        SelfLockoutError: If the actor tries to deactivate themselves
    """
    return update_user(user_id=user_id, actor=actor, is_active=False)
