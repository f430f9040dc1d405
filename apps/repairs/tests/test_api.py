import pytest
from decimal import Decimal
from uuid import uuid4
from django.urls import reverse
from rest_framework import status

from apps.ledger.models import ARTransaction, ARType
from apps.repairs.models import Payment, ServiceOrder, ServiceOrderStatus
from apps.repairs.services import add_payment, create_order, mark_ready, set_status


def order_url(name, order, **kwargs):
    return reverse(f'repairs:service-order-{name}', kwargs={'pk': order.id, **kwargs})


# =============================================================================
# Authentication & permissions
# =============================================================================

@pytest.mark.django_db
class TestAuthentication:

    def test_list_requires_authentication(self, api_client):
        url = reverse('repairs:service-order-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_staff_cannot_delete(self, authenticated_client, order):
        response = authenticated_client.delete(order_url('detail', order))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert ServiceOrder.objects.filter(id=order.id).exists()

    def test_admin_soft_deletes(self, admin_client, order):
        response = admin_client.delete(order_url('detail', order))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert ServiceOrder.all_objects.filter(id=order.id).exists()

        response = admin_client.get(order_url('detail', order))
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Intake & read
# =============================================================================

@pytest.mark.django_db
class TestServiceOrderCreate:
    """Tests for POST /api/service-orders/"""

    def test_create_with_lines_and_deposit(self, authenticated_client, customer, repair_service):
        url = reverse('repairs:service-order-list')
        data = {
            'customer_id': str(customer.id),
            'shoe_brand': 'Clarks',
            'pair_count': 1,
            'lines': [
                {'repair_service_id': str(repair_service.id)},
                {'description': 'Polish', 'qty': 2, 'price': '1,000.50'},
            ],
            'deposit_amount': '10',
            'deposit_method': 'CARD',
        }

        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == ServiceOrderStatus.RECEIVED
        assert response.data['sub_total'] == '2013.00'
        assert response.data['total'] == '2013.00'
        assert response.data['payment_status'] == 'PARTIAL'
        assert response.data['balance'] == {'paid': '10.00', 'balance': '2003.00'}
        assert response.data['customer']['id'] == str(customer.id)
        assert len(response.data['lines']) == 2
        assert len(response.data['status_history']) == 1

    def test_create_unknown_customer(self, authenticated_client):
        url = reverse('repairs:service-order-list')
        response = authenticated_client.post(url, {'customer_id': str(uuid4())}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'not_found'

    def test_create_unpriced_line(self, authenticated_client, customer):
        url = reverse('repairs:service-order-list')
        data = {'customer_id': str(customer.id), 'lines': [{'description': 'Mystery'}]}

        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'line_invalid'
        assert ServiceOrder.all_objects.count() == 0

    def test_create_pair_count_out_of_range(self, authenticated_client, customer):
        url = reverse('repairs:service-order-list')
        data = {'customer_id': str(customer.id), 'pair_count': 11}

        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'pair_count' in response.data

    def test_create_invalid_deposit(self, authenticated_client, customer):
        url = reverse('repairs:service-order-list')
        data = {'customer_id': str(customer.id), 'deposit_amount': 'ten'}

        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'deposit_amount' in response.data


@pytest.mark.django_db
class TestServiceOrderRead:
    """Tests for GET /api/service-orders/ and /api/service-orders/{id}/"""

    def test_retrieve(self, authenticated_client, priced_order):
        response = authenticated_client.get(order_url('detail', priced_order))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['code'] == priced_order.code
        assert response.data['lines'][0]['line_total'] == '500.00'
        assert response.data['balance'] == {'paid': '0.00', 'balance': '500.00'}

    def test_retrieve_unknown(self, authenticated_client):
        url = reverse('repairs:service-order-detail', kwargs={'pk': uuid4()})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'not_found'

    def test_list_search(self, authenticated_client, order, other_customer, clerk):
        create_order(customer_id=other_customer.id, actor=clerk, shoe_brand='Birkenstock')
        url = reverse('repairs:service-order-list')

        response = authenticated_client.get(url, {'q': 'novak'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['customer_name'] == 'Maria Novak'

    def test_list_filter_by_status(self, authenticated_client, priced_order, clerk):
        mark_ready(order_id=priced_order.id, actor=clerk)
        url = reverse('repairs:service-order-list')

        ready = authenticated_client.get(url, {'status': 'READY'})
        cleaning = authenticated_client.get(url, {'status': 'CLEANING'})

        assert ready.status_code == status.HTTP_200_OK
        assert ready.data['count'] == 1
        assert cleaning.data['count'] == 0

    def test_partial_update(self, authenticated_client, order, staff_member):
        response = authenticated_client.patch(
            order_url('detail', order),
            {'assigned_staff_id': str(staff_member.id), 'urgent': True},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_staff']['id'] == str(staff_member.id)
        assert response.data['urgent'] is True

    def test_put_not_allowed(self, authenticated_client, order, customer):
        response = authenticated_client.put(
            order_url('detail', order), {'customer_id': str(customer.id)}, format='json'
        )

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


# =============================================================================
# Lines, parts, discount
# =============================================================================

@pytest.mark.django_db
class TestLinesAndParts:

    def test_add_and_remove_line(self, authenticated_client, order):
        response = authenticated_client.post(
            order_url('lines', order),
            {'description': 'Resole', 'qty': 2, 'price': '250'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total'] == '500.00'

        line_id = response.data['lines'][0]['id']
        response = authenticated_client.delete(order_url('delete-line', order, line_id=line_id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['lines'] == []
        assert response.data['total'] == '0.00'

    def test_add_line_inactive_service(self, authenticated_client, order, inactive_repair_service):
        response = authenticated_client.post(
            order_url('lines', order),
            {'repair_service_id': str(inactive_repair_service.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_part(self, authenticated_client, order, item):
        response = authenticated_client.post(
            order_url('parts', order),
            {'item_id': str(item.id), 'qty': 2, 'unit_price': '3.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['parts'][0]['item']['id'] == str(item.id)
        assert response.data['sub_total'] == '6.00'

    def test_remove_unknown_part(self, authenticated_client, order):
        response = authenticated_client.delete(order_url('delete-part', order, part_id=uuid4()))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_discount_clamped(self, authenticated_client, priced_order):
        response = authenticated_client.post(
            order_url('discount', priced_order), {'discount': '600'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['discount'] == '500.00'
        assert response.data['total'] == '0.00'
        assert response.data['status'] == ServiceOrderStatus.RECEIVED

    def test_line_qty_above_limit_rejected(self, authenticated_client, order):
        response = authenticated_client.post(
            order_url('lines', order),
            {'description': 'Laces', 'qty': 100000, 'price': '9999999.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'qty' in response.data
        assert order.lines.count() == 0

    def test_line_pushing_subtotal_past_column_limit_rejected(self, authenticated_client, priced_order):
        response = authenticated_client.post(
            order_url('lines', priced_order),
            {'description': 'Bulk resole', 'qty': 10000, 'price': '9999999.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'

        priced_order.refresh_from_db()
        assert priced_order.lines.count() == 1
        assert priced_order.sub_total == Decimal('500.00')

    def test_part_qty_above_limit_rejected(self, authenticated_client, order, item):
        response = authenticated_client.post(
            order_url('parts', order),
            {'item_id': str(item.id), 'qty': 10001, 'unit_price': '1.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'qty' in response.data


# =============================================================================
# Workflow)
# =============================================================================

@pytest.mark.django_db
class TestWorkflow:

    def test_set_status(self, authenticated_client, order):
        response = authenticated_client.post(
            order_url('set-status', order), {'status': 'CLEANING'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'CLEANING'

    def test_set_status_ready_rejected(self, authenticated_client, order):
        response = authenticated_client.post(
            order_url('set-status', order), {'status': 'READY'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'use_dedicated_action'

    def test_invalid_transition(self, authenticated_client, order, clerk):
        set_status(order_id=order.id, status='REPAIRING', actor=clerk)

        response = authenticated_client.post(
            order_url('set-status', order), {'status': 'CLEANING'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'invalid_transition'

    def test_mark_ready_with_discount(self, authenticated_client, priced_order):
        response = authenticated_client.post(
            order_url('ready', priced_order), {'discount': '20.00'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'READY'
        assert response.data['total'] == '480.00'
        assert ARTransaction.objects.filter(service_order=priced_order, type=ARType.CHARGE).count() == 1

    def test_close_is_alias_of_ready(self, authenticated_client, priced_order):
        response = authenticated_client.post(order_url('close', priced_order), {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'READY'

    def test_deliver_unpaid(self, authenticated_client, priced_order, clerk):
        mark_ready(order_id=priced_order.id, actor=clerk)

        response = authenticated_client.post(order_url('deliver-order', priced_order), {}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'payment_incomplete'
        priced_order.refresh_from_db()
        assert priced_order.status == ServiceOrderStatus.READY

    def test_full_flow(self, authenticated_client, customer):
        url = reverse('repairs:service-order-list')
        response = authenticated_client.post(url, {
            'customer_id': str(customer.id),
            'lines': [{'description': 'Full resole', 'qty': 2, 'price': '250.00'}],
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        order_id = response.data['id']

        response = authenticated_client.post(
            reverse('repairs:service-order-payments', kwargs={'pk': order_id}),
            {'amount': '500.00', 'method': 'TRANSFER'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '500.00'
        assert response.data['is_refund'] is False

        response = authenticated_client.post(
            reverse('repairs:service-order-ready', kwargs={'pk': order_id}), {}, format='json'
        )
        assert response.data['payment_status'] == 'PAID'

        response = authenticated_client.post(
            reverse('repairs:service-order-deliver-order', kwargs={'pk': order_id}),
            {'note': 'Collected'},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'DELIVERED'
        assert response.data['balance']['balance'] == '0.00'

        response = authenticated_client.post(
            reverse('repairs:service-order-lines', kwargs={'pk': order_id}),
            {'description': 'Late extra', 'price': '1'},
            format='json',
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'order_closed'


# =============================================================================
# Payments & audit
# =============================================================================

@pytest.mark.django_db
class TestPaymentsApi:

    def test_payment_must_be_positive(self, authenticated_client, priced_order):
        response = authenticated_client.post(
            order_url('payments', priced_order), {'amount': '0'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount' in response.data
        assert Payment.objects.count() == 0

    def test_refund(self, authenticated_client, priced_order, clerk):
        payment = add_payment(order_id=priced_order.id, amount='500.00', actor=clerk)

        response = authenticated_client.post(
            order_url('refund', priced_order, payment_id=payment.id),
            {'amount': '100', 'reason': 'Heel colour mismatch'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '-100.00'
        assert response.data['is_refund'] is True
        assert response.data['note'] == 'REFUND: Heel colour mismatch'

        priced_order.refresh_from_db()
        assert priced_order.payment_status == 'PARTIAL'

    def test_refund_over_original(self, authenticated_client, priced_order, clerk):
        payment = add_payment(order_id=priced_order.id, amount='50.00', actor=clerk)

        response = authenticated_client.post(
            order_url('refund', priced_order, payment_id=payment.id),
            {'amount': '50.01', 'reason': 'x'},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'refund_not_allowed'

    def test_refund_requires_reason(self, authenticated_client, priced_order, clerk):
        payment = add_payment(order_id=priced_order.id, amount='50.00', actor=clerk)

        response = authenticated_client.post(
            order_url('refund', priced_order, payment_id=payment.id), {}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'reason' in response.data

    def test_audit_trail(self, authenticated_client, priced_order, clerk):
        response = authenticated_client.get(order_url('audit', priced_order))

        assert response.status_code == status.HTTP_200_OK
        actions = {entry['action'] for entry in response.data}
        assert actions == {'SERVICE_ORDER_CREATE', 'SERVICE_ORDER_LINE_ADD'}
        assert all(entry['entity'] == 'ServiceOrder' for entry in response.data)

    def test_negative_payment_rejected(self, authenticated_client, priced_order):
        response = authenticated_client.post(
            order_url('payments', priced_order), {'amount': '-5'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Payment.objects.filter(service_order=priced_order).count() == 0

    def test_payment_above_column_limit_rejected(self, authenticated_client, priced_order):
        response = authenticated_client.post(
            order_url('payments', priced_order), {'amount': '99999999999.00'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['amount'][0].code == 'max_value'
        assert Payment.objects.filter(service_order=priced_order).count() == 0

        response = authenticated_client.get(order_url('detail', priced_order))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['payment_status'] == 'UNPAID'

    def test_whole_unit_currency(self, settings, authenticated_client, customer):
        settings.MONEY_DECIMALS = 0
        response = authenticated_client.post(
            reverse('repairs:service-order-list'),
            {
                'customer_id': str(customer.id),
                'lines': [{'description': 'Full resole', 'price': '15,000'}],
            },
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total'] == '15000'
        order = ServiceOrder.objects.get(id=response.data['id'])

        response = authenticated_client.post(
            order_url('payments', order), {'amount': '14999.5'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '15000'

        response = authenticated_client.get(order_url('detail', order))
        assert response.data['payment_status'] == 'PAID'
        assert response.data['balance'] == {'paid': '15000', 'balance': '0'}
