from django.db.models import Q
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.pagination import StandardPagination
from apps.common.views import SoftDeleteViewSetMixin
from .models import Item
from .serializers import (
    ItemSerializer,
    StockMovementCreateSerializer,
    StockMovementSerializer,
)
from .services import record_stock_movement


class ItemViewSet(SoftDeleteViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for inventory items.

    list / retrieve / create / update: Staff and admins
    destroy: Admin only, soft delete
    movements: GET history, POST manual purchase or adjustment
    """

    queryset = Item.objects.all()
    serializer_class = ItemSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(sku__iexact=search) | Q(barcode=search)
            )
        return queryset

    @extend_schema(
        request=StockMovementCreateSerializer,
        responses={200: StockMovementSerializer(many=True), 201: StockMovementSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def movements(self, request, pk=None):
        item = self.get_object()

        if request.method == 'GET':
            movements = item.stock_movements.select_related('created_by')[:200]
            return Response(StockMovementSerializer(movements, many=True).data)

        serializer = StockMovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        movement = record_stock_movement(
            item=item,
            movement_type=serializer.validated_data['type'],
            qty=serializer.validated_data['qty'],
            unit_cost=serializer.validated_data.get('unit_cost'),
            note=serializer.validated_data['note'],
            created_by=request.user,
        )
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)
