"""
URL configuration for the Shoe Repair Shop project.

    /api/auth/             login, token refresh, current user, user management
    /api/customers/        customer records
    /api/staff/            staff records
    /api/repair-services/  repair service catalog
    /api/items/            inventory items and stock movements
    /api/purchasing/       suppliers and purchases received into stock
    /api/service-orders/   repair tickets and their workflow
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check (for Render)
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/customers/', include('apps.customers.urls')),
    path('api/staff/', include('apps.staff.urls')),
    path('api/repair-services/', include('apps.catalog.urls')),
    path('api/items/', include('apps.inventory.urls')),
    path('api/purchasing/', include('apps.purchasing.urls')),
    path('api/service-orders/', include('apps.repairs.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
