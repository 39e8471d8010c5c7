import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .authz import require, resolve_actor
from .permissions import AccessLevelError, set_access_level
from .serializers import (
    AccessLevelSerializer,
    EmailTokenObtainPairSerializer,
    RegistrationSerializer,
    SetAccessLevelSerializer,
    UserAccessRowSerializer,
    UserSerializer,
)
from .throttles import LoginThrottle, RegistrationThrottle

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterView(generics.CreateAPIView):
    """New users start at the "Registered" level with no role."""

    serializer_class = RegistrationSerializer
    permission_classes = [permissions.AllowAny]
    throttle_classes = [RegistrationThrottle]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User registered", extra={"user_id": user.pk})
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class LoginView(generics.GenericAPIView):
    serializer_class = EmailTokenObtainPairSerializer
    permission_classes = [permissions.AllowAny]
    throttle_classes = [LoginThrottle]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)


class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return Response({"detail": "Refresh token required"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError:
            return Response({"detail": "Invalid token"}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """GET /api/auth/me/ -> user + access level"""

    def get(self, request, *args, **kwargs):
        actor = resolve_actor(request)
        data = UserSerializer(actor.user).data
        data["access_level"] = actor.access_level
        return Response(data)


class AccessLevelView(APIView):
    """GET /api/access-level/ -> {"access_level": "Admin" | "Bookkeeper" | "ReportViewer" | "Registered"}"""

    def get(self, request, *args, **kwargs):
        actor = resolve_actor(request)
        return Response(AccessLevelSerializer({"access_level": actor.access_level}).data)


class AdminUserListView(APIView):
    """GET /api/admin/users/ -> every user with their access level"""

    def get(self, request, *args, **kwargs):
        actor = resolve_actor(request)
        require(actor, "users.manage")

        users = User.objects.order_by("email").prefetch_related("groups")
        return Response(UserAccessRowSerializer(users, many=True).data)


class AdminUserAccessLevelView(APIView):
    """PUT /api/admin/users/<pk>/access-level/ -> 204"""

    def put(self, request, pk: int, *args, **kwargs):
        actor = resolve_actor(request)
        require(actor, "users.manage")

        serializer = SetAccessLevelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = get_object_or_404(User, pk=pk)
        try:
            set_access_level(user, serializer.validated_data["access_level"])
        except AccessLevelError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(status=status.HTTP_204_NO_CONTENT)
