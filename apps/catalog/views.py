from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from apps.accounts.permissions import IsShopAdmin, IsShopStaff
from apps.common.pagination import StandardPagination
from apps.common.views import SoftDeleteViewSetMixin
from .models import RepairService
from .serializers import RepairServiceSerializer


class RepairServiceViewSet(SoftDeleteViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for the repair service catalog.

    list / retrieve: Staff and admins
    create / update / destroy: Admin only (prices are set by the owner)
    """

    queryset = RepairService.objects.all()
    serializer_class = RepairServiceSerializer
    pagination_class = StandardPagination

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated(), IsShopStaff()]
        return [IsAuthenticated(), IsShopAdmin()]
