from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.pagination import StandardPagination
from apps.common.views import SoftDeleteViewSetMixin
from apps.ledger.serializers import AuditLogSerializer
from .serializers import (
    DeliverSerializer,
    DiscountSerializer,
    MarkReadySerializer,
    PaymentInputSerializer,
    PaymentSerializer,
    RefundInputSerializer,
    ServiceLineInputSerializer,
    ServiceOrderCreateSerializer,
    ServiceOrderHeaderSerializer,
    ServiceOrderListSerializer,
    ServiceOrderSerializer,
    ServicePartInputSerializer,
    StatusInputSerializer,
)

from apps.repairs.services import (
    add_line,
    add_part,
    add_payment,
    apply_discount,
    create_order,
    delete_order,
    deliver,
    get_order,
    get_order_audit_trail,
    mark_ready,
    refund_payment,
    remove_line,
    remove_part,
    search_orders,
    set_status,
    update_order,
    # Exceptions
    RepairsServiceError,
)

UUID_PATTERN = r'[0-9a-fA-F-]{32,36}'


def _service_error_response(error):
    return Response({'error': str(error), 'code': error.code}, status=error.status_code)


class ServiceOrderViewSet(SoftDeleteViewSetMixin, viewsets.GenericViewSet):
    """
    ViewSet for repair tickets.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Search orders (q, status, payment_status, customer)
    create: Intake a new order
    retrieve: Full order with lines, parts, history and payments
    partial_update: Edit header fields
    destroy: Soft delete (admin only)
    """

    serializer_class = ServiceOrderSerializer
    pagination_class = StandardPagination
    lookup_value_regex = UUID_PATTERN
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        params = self.request.query_params
        return search_orders(
            query=params.get('q') or params.get('search'),
            status=params.get('status'),
            payment_status=params.get('payment_status'),
            customer_id=params.get('customer'),
        )

    def _order_response(self, order_id, status_code=status.HTTP_200_OK):
        order = get_order(order_id=order_id)
        return Response(ServiceOrderSerializer(order).data, status=status_code)

    @extend_schema(
        parameters=[
            OpenApiParameter('q', str, description='Search code, customer, shoe or problem'),
            OpenApiParameter('status', str),
            OpenApiParameter('payment_status', str),
            OpenApiParameter('customer', str, description='Customer UUID'),
        ],
        responses=ServiceOrderListSerializer(many=True),
    )
    def list(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ServiceOrderListSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(ServiceOrderListSerializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=ServiceOrderCreateSerializer, responses={201: ServiceOrderSerializer})
    def create(self, request):
        """Intake a new order with optional initial lines and deposit."""
        serializer = ServiceOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = create_order(actor=request.user, **serializer.validated_data)
        except RepairsServiceError as e:
            return _service_error_response(e)

        return self._order_response(order.id, status.HTTP_201_CREATED)

    @extend_schema(request=ServiceOrderHeaderSerializer, responses=ServiceOrderSerializer)
    def partial_update(self, request, pk=None):
        """Edit header fields (customer, staff, shoe details, dates)."""
        serializer = ServiceOrderHeaderSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            update_order(order_id=pk, actor=request.user, **serializer.validated_data)
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    def destroy(self, request, pk=None):
        """Soft-delete an order (admin only)."""
        try:
            delete_order(order_id=pk, actor=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except RepairsServiceError as e:
            return _service_error_response(e)

    # -------------------------------------------------------------------------
    # Lines & parts
    # -------------------------------------------------------------------------

    @extend_schema(request=ServiceLineInputSerializer, responses={201: ServiceOrderSerializer})
    @action(detail=True, methods=['post'])
    def lines(self, request, pk=None):
        """Add a service line."""
        serializer = ServiceLineInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            add_line(order_id=pk, actor=request.user, **serializer.validated_data)
            return self._order_response(pk, status.HTTP_201_CREATED)
        except RepairsServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=None, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['delete'], url_path=rf'lines/(?P<line_id>{UUID_PATTERN})')
    def delete_line(self, request, pk=None, line_id=None):
        """Remove a service line."""
        try:
            remove_line(order_id=pk, line_id=line_id, actor=request.user)
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=ServicePartInputSerializer, responses={201: ServiceOrderSerializer})
    @action(detail=True, methods=['post'])
    def parts(self, request, pk=None):
        """Add an inventory part (deducts stock)."""
        serializer = ServicePartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            add_part(order_id=pk, actor=request.user, **serializer.validated_data)
            return self._order_response(pk, status.HTTP_201_CREATED)
        except RepairsServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=None, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['delete'], url_path=rf'parts/(?P<part_id>{UUID_PATTERN})')
    def delete_part(self, request, pk=None, part_id=None):
        """Remove a part. Stock is not restored."""
        try:
            remove_part(order_id=pk, part_id=part_id, actor=request.user)
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    # -------------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------------

    @extend_schema(request=StatusInputSerializer, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """Move to RECEIVED, CLEANING, REPAIRING or CANCELLED."""
        serializer = StatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            set_status(
                order_id=pk,
                status=serializer.validated_data['status'],
                note=serializer.validated_data.get('note'),
                actor=request.user,
            )
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    def _mark_ready(self, request, pk):
        serializer = MarkReadySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            mark_ready(
                order_id=pk,
                discount=serializer.validated_data.get('discount'),
                actor=request.user,
            )
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=MarkReadySerializer, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['post'])
    def ready(self, request, pk=None):
        """Finalize pricing and mark READY (creates the AR charge once)."""
        return self._mark_ready(request, pk)

    @extend_schema(request=MarkReadySerializer, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        """Alias of ready."""
        return self._mark_ready(request, pk)

    @extend_schema(request=DeliverSerializer, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['post'], url_path='deliver')
    def deliver_order(self, request, pk=None):
        """Hand over to the customer. Requires PAID."""
        serializer = DeliverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            deliver(order_id=pk, note=serializer.validated_data.get('note'), actor=request.user)
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    @extend_schema(request=DiscountSerializer, responses=ServiceOrderSerializer)
    @action(detail=True, methods=['post'])
    def discount(self, request, pk=None):
        """Set the discount without changing status."""
        serializer = DiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            apply_discount(
                order_id=pk,
                discount=serializer.validated_data['discount'],
                actor=request.user,
            )
            return self._order_response(pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    @extend_schema(request=PaymentInputSerializer, responses={201: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def payments(self, request, pk=None):
        """Record a payment."""
        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = add_payment(order_id=pk, actor=request.user, **serializer.validated_data)
        except RepairsServiceError as e:
            return _service_error_response(e)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=RefundInputSerializer, responses={201: PaymentSerializer})
    @action(
        detail=True,
        methods=['post'],
        url_path=rf'payments/(?P<payment_id>{UUID_PATTERN})/refund'
    )
    def refund(self, request, pk=None, payment_id=None):
        """Refund all or part of a payment."""
        serializer = RefundInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            refund = refund_payment(
                order_id=pk,
                payment_id=payment_id,
                reason=serializer.validated_data['reason'],
                amount=serializer.validated_data.get('amount'),
                actor=request.user,
            )
        except RepairsServiceError as e:
            return _service_error_response(e)

        return Response(PaymentSerializer(refund).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses=AuditLogSerializer(many=True))
    @action(detail=True, methods=['get'])
    def audit(self, request, pk=None):
        """Latest 200 audit entries for the order."""
        try:
            entries = get_order_audit_trail(order_id=pk)
        except RepairsServiceError as e:
            return _service_error_response(e)

        return Response(AuditLogSerializer(entries, many=True).data)
