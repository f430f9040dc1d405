from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'repairs'

router = DefaultRouter()
router.register(r'', views.ServiceOrderViewSet, basename='service-order')

urlpatterns = [
    path('', include(router.urls)),
]
