from rest_framework import viewsets

from apps.common.pagination import StandardPagination
from apps.common.views import SoftDeleteViewSetMixin
from .models import StaffMember
from .serializers import StaffMemberSerializer


class StaffMemberViewSet(SoftDeleteViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for StaffMember CRUD operations.

    destroy: Soft delete (admin only)
    """

    queryset = StaffMember.objects.select_related('user')
    serializer_class = StaffMemberSerializer
    pagination_class = StandardPagination
