import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.catalog.models import RepairService
from apps.customers.models import Customer
from apps.inventory.models import Item, StockMovementType
from apps.inventory.services import record_stock_movement
from apps.repairs.services import add_line, create_order
from apps.staff.models import StaffMember


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
        display_name='Front Desk',
        role=UserRole.STAFF,
    )


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
def customer(db):
    """Create and return a customer."""
    return Customer.objects.create(code='C-0001', name='Sok Dara', phone='012345678')


@pytest.fixture
def other_customer(db):
    return Customer.objects.create(code='C-0002', name='Maria Novak', phone='777123456')


@pytest.fixture
def staff_member(db):
    return StaffMember.objects.create(code='S-001', name='Vannak', position='Cobbler')


@pytest.fixture
def repair_service(db):
    """Active catalog service priced at 12.00."""
    return RepairService.objects.create(
        name='Heel replacement',
        default_price=Decimal('12.00'),
        default_duration_min=30,
    )


@pytest.fixture
def inactive_repair_service(db):
    return RepairService.objects.create(
        name='Retired service',
        default_price=Decimal('5.00'),
        active=False,
    )


@pytest.fixture
def item(db, owner):
    """Inventory item with 20 units in stock."""
    item = Item.objects.create(
        sku='HEEL-RUB-01',
        name='Rubber heel tip',
        cost=Decimal('1.20'),
        price=Decimal('3.00'),
    )
    record_stock_movement(
        item=item,
        movement_type=StockMovementType.PURCHASE_IN,
        qty=20,
        unit_cost=Decimal('1.20'),
        created_by=owner,
    )
    return item


@pytest.fixture
def order(customer, clerk):
    """A freshly received order without lines."""
    return create_order(customer_id=customer.id, actor=clerk, shoe_brand='Dr. Martens')


@pytest.fixture
def priced_order(order, clerk):
    """Order with one line: 2 x 250.00 = 500.00."""
    return add_line(order_id=order.id, actor=clerk, description='Full resole', qty=2, price='250.00')
