from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # GET    /api/customers/          - List customers
    # POST   /api/customers/          - Create customer
    # GET    /api/customers/{id}/     - Customer details
    # PATCH  /api/customers/{id}/     - Update customer
    # DELETE /api/customers/{id}/     - Soft delete (admin)
    # GET    /api/customers/{id}/overview/ - Ticket stats and recent orders
    path('', include(router.urls)),
]
