import pytest
from django.urls import reverse
from rest_framework import status

from apps.staff.models import StaffMember, StaffStatus


@pytest.mark.django_db
class TestStaffApi:
    """Tests for /api/staff/"""

    def test_create_staff_member(self, authenticated_client):
        url = reverse('staff:staff-member-list')
        response = authenticated_client.post(url, {
            'name': 'Dara',
            'position': 'Cleaner',
            'salary': '1,200.50',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['salary'] == '1200.50'
        assert response.data['status'] == StaffStatus.ACTIVE

    def test_negative_salary_rejected(self, authenticated_client):
        url = reverse('staff:staff-member-list')
        response = authenticated_client.post(url, {'name': 'Dara', 'salary': '-1'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'salary' in response.data

    def test_deactivate(self, authenticated_client, staff_member):
        url = reverse('staff:staff-member-detail', kwargs={'pk': staff_member.id})
        response = authenticated_client.patch(url, {'status': StaffStatus.INACTIVE})

        assert response.status_code == status.HTTP_200_OK
        staff_member.refresh_from_db()
        assert staff_member.status == StaffStatus.INACTIVE

    def test_admin_soft_delete(self, admin_client, staff_member):
        url = reverse('staff:staff-member-detail', kwargs={'pk': staff_member.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert StaffMember.all_objects.filter(id=staff_member.id).exists()
        assert not StaffMember.objects.filter(id=staff_member.id).exists()

    def test_staff_cannot_delete(self, authenticated_client, staff_member):
        url = reverse('staff:staff-member-detail', kwargs={'pk': staff_member.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
