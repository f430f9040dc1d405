import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.inventory.models import Item
from apps.purchasing.models import Supplier
from apps.purchasing.services import create_purchase


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
def supplier(db):
    return Supplier.objects.create(code='SUP-01', name='Phnom Penh Leather Co', phone='023999000')


@pytest.fixture
def other_supplier(db):
    return Supplier.objects.create(name='Sole Traders')


@pytest.fixture
def sole(db):
    return Item.objects.create(sku='SOLE-VIB-42', name='Vibram sole 42', cost=Decimal('8.00'))


@pytest.fixture
def glue(db):
    return Item.objects.create(sku='GLUE-500', name='Contact glue 500ml', unit='can')


@pytest.fixture
def draft(supplier, sole, glue, clerk):
    """DRAFT purchase: 10 soles at 8.00 and 2 cans of glue at 4.50 = 89.00."""
    return create_purchase(
        supplier_id=supplier.id,
        invoice_no='INV-1001',
        lines=[
            {'item_id': sole.id, 'qty': 10, 'unit_cost': '8.00'},
            {'item_id': glue.id, 'qty': 2, 'unit_cost': '4.50'},
        ],
        actor=clerk,
    )
