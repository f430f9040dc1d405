import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.inventory.models import Item


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def clerk(db):
    """Create and return a STAFF user."""
    return User.objects.create_user(
        username='clerk',
        password='TestPass123!',
        role=UserRole.STAFF,
    )


@pytest.fixture
def owner(db):
    """Create and return an ADMIN user."""
    return User.objects.create_user(
        username='owner',
        password='TestPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def authenticated_client(api_client, clerk):
    """Return API client authenticated as a STAFF user."""
    refresh = RefreshToken.for_user(clerk)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(owner):
    """Return a separate API client authenticated as an ADMIN user."""
    client = APIClient()
    refresh = RefreshToken.for_user(owner)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def item(db):
    """Stock item with no movements yet."""
    return Item.objects.create(
        sku='SOLE-VIB-42',
        barcode='8850001112223',
        name='Vibram sole 42',
        cost=Decimal('8.00'),
        price=Decimal('15.00'),
        reorder_level=5,
    )
