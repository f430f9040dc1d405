import pytest
from datetime import timedelta
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.customers.models import Customer
from apps.repairs.services import add_payment, create_order, set_status


@pytest.mark.django_db
class TestCustomerApi:
    """Tests for /api/customers/"""

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('customers:customer-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_customer(self, authenticated_client):
        url = reverse('customers:customer-list')
        response = authenticated_client.post(url, {
            'code': '',
            'name': '  Chan Sophea ',
            'phone': '099111222',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Chan Sophea'
        assert response.data['code'] is None

    def test_blank_codes_do_not_collide(self, authenticated_client):
        url = reverse('customers:customer-list')
        authenticated_client.post(url, {'code': '', 'name': 'First'})
        response = authenticated_client.post(url, {'code': '', 'name': 'Second'})

        assert response.status_code == status.HTTP_201_CREATED
        assert Customer.objects.count() == 2

    def test_name_required(self, authenticated_client):
        url = reverse('customers:customer-list')
        response = authenticated_client.post(url, {'name': '   '})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data

    def test_list(self, authenticated_client, customer):
        response = authenticated_client.get(reverse('customers:customer-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['name'] == 'Sok Dara'

    def test_partial_update(self, authenticated_client, customer):
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})
        response = authenticated_client.patch(url, {'phone': '010000000'})

        assert response.status_code == status.HTTP_200_OK
        customer.refresh_from_db()
        assert customer.phone == '010000000'

    def test_staff_cannot_delete(self, authenticated_client, customer):
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_soft_delete(self, admin_client, customer):
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Customer.objects.filter(id=customer.id).exists()
        assert Customer.all_objects.get(id=customer.id).is_deleted

        response = admin_client.get(url)
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCustomerOverview:
    """Tests for GET /api/customers/{id}/overview/"""

    def _order(self, customer, clerk, price, paid=None, received_at=None):
        order = create_order(
            customer_id=customer.id,
            actor=clerk,
            lines=[{'description': 'Resole', 'price': price}],
            received_at=received_at or timezone.now(),
        )
        if paid:
            add_payment(order_id=order.id, amount=paid, actor=clerk)
        return order

    def test_overview_stats(self, authenticated_client, customer, clerk):
        now = timezone.now()
        first = self._order(customer, clerk, '100.00', paid='100.00', received_at=now - timedelta(days=10))
        second = self._order(customer, clerk, '80.00', paid='30.00', received_at=now - timedelta(days=2))
        cancelled = self._order(customer, clerk, '45.00', received_at=now)
        set_status(order_id=cancelled.id, status='CANCELLED', actor=clerk)

        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['customer']['id'] == str(customer.id)

        stats = response.data['stats']
        assert stats['tickets'] == 3
        assert stats['total_spent'] == '180.00'
        assert stats['total_paid'] == '130.00'
        assert stats['outstanding'] == '95.00'
        assert stats['repeat_customer'] is True
        assert stats['last_visit'] is not None

        rows = response.data['recent_orders']
        assert [row['code'] for row in rows] == [cancelled.code, second.code, first.code]
        assert rows[1]['total'] == '80.00'
        assert rows[1]['paid'] == '30.00'
        assert rows[1]['balance'] == '50.00'
        assert rows[1]['payment_status'] == 'PARTIAL'

    def test_overpaid_order_not_counted_as_outstanding(self, authenticated_client, customer, clerk):
        self._order(customer, clerk, '20.00', paid='25.00')

        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.data['stats']['outstanding'] == '0.00'
        assert response.data['stats']['repeat_customer'] is False
        assert response.data['recent_orders'][0]['balance'] == '-5.00'

    def test_overview_without_orders(self, authenticated_client, customer):
        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['stats']['tickets'] == 0
        assert response.data['stats']['last_visit'] is None
        assert response.data['recent_orders'] == []

    def test_limit_applies_to_rows_only(self, authenticated_client, customer, clerk):
        for _ in range(6):
            self._order(customer, clerk, '10.00')

        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = authenticated_client.get(url, {'limit': 5})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['recent_orders']) == 5
        assert response.data['stats']['tickets'] == 6
        assert response.data['stats']['total_spent'] == '60.00'

    @pytest.mark.parametrize('limit', [4, 201, 'many'])
    def test_limit_out_of_range(self, authenticated_client, customer, limit):
        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = authenticated_client.get(url, {'limit': limit})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'limit' in response.data

    def test_deleted_customer(self, authenticated_client, customer):
        customer.soft_delete()

        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_authentication(self, api_client, customer):
        url = reverse('customers:customer-overview', kwargs={'pk': customer.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
