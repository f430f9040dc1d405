"""Reusable view pieces for soft-deletable resources."""

import logging

from rest_framework.permissions import IsAuthenticated

from apps.accounts.permissions import IsShopAdmin, IsShopStaff

logger = logging.getLogger(__name__)


class SoftDeleteViewSetMixin:
    """
    ModelViewSet mixin: staff can read and write, only admins can delete,
    and delete marks the row instead of removing it.
    """

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAuthenticated(), IsShopAdmin()]
        return [IsAuthenticated(), IsShopStaff()]

    def perform_destroy(self, instance):
        instance.soft_delete()
        logger.info(
            "%s %s soft-deleted by %s",
            type(instance).__name__, instance.pk, self.request.user,
        )
