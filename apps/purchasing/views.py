from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.pagination import StandardPagination
from apps.common.views import SoftDeleteViewSetMixin
from .models import Supplier
from .serializers import (
    PurchaseCreateSerializer,
    PurchaseListSerializer,
    PurchaseSerializer,
    PurchaseUpdateSerializer,
    SupplierSerializer,
)
from .services import (
    create_purchase,
    delete_purchase,
    get_purchase,
    receive_purchase,
    search_purchases,
    update_purchase,
    # Exceptions
    PurchasingServiceError,
)

UUID_PATTERN = r'[0-9a-fA-F-]{32,36}'


def _service_error_response(error):
    return Response({'error': str(error), 'code': error.code}, status=error.status_code)


class SupplierViewSet(SoftDeleteViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for Supplier CRUD operations.

    list: Non-deleted suppliers, newest first (q searches name, phone, code)
    destroy: Soft delete (admin only)
    """

    serializer_class = SupplierSerializer
    pagination_class = StandardPagination
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        queryset = Supplier.objects.all()
        query = self.request.query_params.get('q')
        if query:
            queryset = queryset.filter(
                Q(name__icontains=query)
                | Q(phone__icontains=query)
                | Q(code__icontains=query)
            )
        return queryset.order_by('-created_at')

    @extend_schema(parameters=[OpenApiParameter('q', str, description='Search name, phone or code')])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)


class PurchaseViewSet(SoftDeleteViewSetMixin, viewsets.GenericViewSet):
    """
    ViewSet for supplier purchases.

    All business logic is handled by services.

    list: Search purchases (q, status, supplier)
    create: New DRAFT purchase with lines
    retrieve: Purchase with lines and totals
    partial_update: Edit a DRAFT (lines replace the current ones)
    destroy: Soft delete (admin only)
    receive: Book a DRAFT into stock
    """

    serializer_class = PurchaseSerializer
    pagination_class = StandardPagination
    lookup_value_regex = UUID_PATTERN
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        params = self.request.query_params
        return search_purchases(
            query=params.get('q'),
            status=params.get('status'),
            supplier_id=params.get('supplier'),
        )

    def _purchase_response(self, purchase_id, status_code=status.HTTP_200_OK):
        purchase = get_purchase(purchase_id=purchase_id)
        return Response(PurchaseSerializer(purchase).data, status=status_code)

    @extend_schema(
        parameters=[
            OpenApiParameter('q', str, description='Search invoice number or supplier name'),
            OpenApiParameter('status', str),
            OpenApiParameter('supplier', str, description='Supplier UUID'),
        ],
        responses=PurchaseListSerializer(many=True),
    )
    def list(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = PurchaseListSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(PurchaseListSerializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            return self._purchase_response(pk)
        except PurchasingServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=PurchaseCreateSerializer, responses={201: PurchaseSerializer})
    def create(self, request):
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            purchase = create_purchase(actor=request.user, **serializer.validated_data)
        except PurchasingServiceError as e:
            return _service_error_response(e)

        return self._purchase_response(purchase.id, status.HTTP_201_CREATED)

    @extend_schema(request=PurchaseUpdateSerializer, responses=PurchaseSerializer)
    def partial_update(self, request, pk=None):
        serializer = PurchaseUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            update_purchase(purchase_id=pk, actor=request.user, **serializer.validated_data)
            return self._purchase_response(pk)
        except PurchasingServiceError as e:
            return _service_error_response(e)

    def destroy(self, request, pk=None):
        """Soft-delete a purchase (admin only)."""
        try:
            delete_purchase(purchase_id=pk, actor=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except PurchasingServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=None, responses=PurchaseSerializer)
    @action(detail=True, methods=['post'])
    def receive(self, request, pk=None):
        """Record PURCHASE_IN stock movements and mark the purchase RECEIVED."""
        try:
            receive_purchase(purchase_id=pk, actor=request.user)
            return self._purchase_response(pk)
        except PurchasingServiceError as e:
            return _service_error_response(e)
