from rest_framework import status, serializers, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import OpenApiParameter, extend_schema

from apps.common.pagination import StandardPagination
from .permissions import IsShopAdmin
from .serializers import (
    PasswordSetSerializer,
    UserAdminSerializer,
    UserCreateSerializer,
    UserLoginSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from .services import (
    authenticate_user,
    create_user,
    deactivate_user,
    list_users,
    set_user_password,
    update_user,
    # Exceptions
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    SelfLockoutError,
    UsernameTakenError,
    UserNotFoundError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with username and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with username and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            username=serializer.validated_data['username'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


# =============================================================================
# User management (ADMIN only)
# =============================================================================

def _user_error_response(error):
    if isinstance(error, UserNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (UsernameTakenError, SelfLockoutError)):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


class UserViewSet(viewsets.GenericViewSet):
    """
    ViewSet for shop accounts.

    list: All accounts, newest first (q searches username and email)
    create: New account with an initial password
    retrieve / partial_update: Account details, role and active flag
    destroy: Deactivate the account (rows are never removed)
    reset_password: Set a new password
    """

    permission_classes = [IsAuthenticated, IsShopAdmin]
    serializer_class = UserAdminSerializer
    lookup_value_regex = r'[0-9a-fA-F-]{32,36}'
    pagination_class = StandardPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return list_users(query=self.request.query_params.get('q'))

    @extend_schema(parameters=[OpenApiParameter('q', str, description='Search username or email')])
    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = UserAdminSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):
        return Response(UserAdminSerializer(self.get_object()).data)

    @extend_schema(request=UserCreateSerializer, responses={201: UserAdminSerializer})
    def create(self, request):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = create_user(actor=request.user, **serializer.validated_data)
        except AccountsServiceError as e:
            return _user_error_response(e)

        return Response(UserAdminSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserAdminSerializer})
    def partial_update(self, request, pk=None):
        serializer = UserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            user = update_user(user_id=pk, actor=request.user, **serializer.validated_data)
        except AccountsServiceError as e:
            return _user_error_response(e)

        return Response(UserAdminSerializer(user).data)

    def destroy(self, request, pk=None):
        try:
            deactivate_user(user_id=pk, actor=request.user)
        except AccountsServiceError as e:
            return _user_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=PasswordSetSerializer, responses={204: None})
    @action(detail=True, methods=['post'], url_path='reset-password')
    def reset_password(self, request, pk=None):
        """Set a new password for the account."""
        serializer = PasswordSetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            set_user_password(
                user_id=pk,
                password=serializer.validated_data['password'],
                actor=request.user,
            )
        except AccountsServiceError as e:
            return _user_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)
