from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'', views.RepairServiceViewSet, basename='repair-service')

urlpatterns = [
    path('', include(router.urls)),
]
