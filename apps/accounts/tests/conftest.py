import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a staff user."""
    return User.objects.create_user(
        username='clerk',
        password='TestPass123!',
        display_name='Front Desk',
        role=UserRole.STAFF,
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        username='former',
        password='TestPass123!',
        display_name='Former Employee',
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def owner(db):
    """Create and return an ADMIN user."""
    return User.objects.create_user(
        username='owner',
        password='TestPass123!',
        display_name='Shop Owner',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def admin_client(owner):
    """Return a separate API client authenticated as an ADMIN user."""
    client = APIClient()
    refresh = RefreshToken.for_user(owner)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
