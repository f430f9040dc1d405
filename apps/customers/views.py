from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.pagination import StandardPagination
from apps.common.views import SoftDeleteViewSetMixin
from apps.repairs.services import get_customer_overview, CustomerNotFoundError
from .models import Customer
from .serializers import (
    CustomerOverviewQuerySerializer,
    CustomerOverviewSerializer,
    CustomerSerializer,
)


class CustomerViewSet(SoftDeleteViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for Customer CRUD operations.

    list: All non-deleted customers, newest first
    create / update / partial_update: Staff and admins
    destroy: Soft delete (admin only)
    overview: Ticket stats and recent orders with balances
    """

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    pagination_class = StandardPagination

    @extend_schema(
        parameters=[
            OpenApiParameter('limit', int, description='Recent orders to list (5-200, default 50)'),
        ],
        responses={200: CustomerOverviewSerializer},
    )
    @action(detail=True, methods=['get'])
    def overview(self, request, pk=None):
        """Ticket count, spend, outstanding balance and recent orders."""
        query = CustomerOverviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            overview = get_customer_overview(
                customer_id=pk,
                limit=query.validated_data['limit'],
            )
        except CustomerNotFoundError as e:
            return Response({'error': str(e), 'code': e.code}, status=status.HTTP_404_NOT_FOUND)

        return Response(CustomerOverviewSerializer(overview).data)
