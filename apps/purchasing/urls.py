from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'purchasing'

router = DefaultRouter()
router.register(r'suppliers', views.SupplierViewSet, basename='supplier')
router.register(r'purchases', views.PurchaseViewSet, basename='purchase')

urlpatterns = [
    # Supplier routes
    # GET    /api/purchasing/suppliers/               - List suppliers
    # POST   /api/purchasing/suppliers/               - Create supplier
    # PATCH  /api/purchasing/suppliers/{id}/          - Update supplier
    # DELETE /api/purchasing/suppliers/{id}/          - Soft delete (admin)

    # Purchase routes
    # GET    /api/purchasing/purchases/               - List purchases
    # POST   /api/purchasing/purchases/               - Create DRAFT purchase
    # GET    /api/purchasing/purchases/{id}/          - Purchase details
    # PATCH  /api/purchasing/purchases/{id}/          - Edit DRAFT
    # DELETE /api/purchasing/purchases/{id}/          - Soft delete (admin)
    # POST   /api/purchasing/purchases/{id}/receive/  - Receive into stock
    path('', include(router.urls)),
]
