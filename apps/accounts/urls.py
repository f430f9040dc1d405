from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    path('login/', views.login, name='login'),
    path('me/', views.get_current_user, name='current-user'),

    # User management (ADMIN only)
    # GET    /api/auth/users/                      - List accounts
    # POST   /api/auth/users/                      - Create account
    # GET    /api/auth/users/{id}/                 - Account details
    # PATCH  /api/auth/users/{id}/                 - Update role, name, active flag
    # DELETE /api/auth/users/{id}/                 - Deactivate account
    # POST   /api/auth/users/{id}/reset-password/  - Set a new password
    path('', include(router.urls)),
]
