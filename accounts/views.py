import logging

from django.conf import settings
from django.contrib.auth import authenticate
from django.utils import timezone

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from tournamentsuk.ratelimit import check_rate_limit, is_rate_limited, reset_rate_limit

from .auth_errors import RATE_LIMITED, sanitize_auth_error
from .models import OrganizerProfile
from .serializers import LoginSerializer, OrganizerProfileSerializer, OrganizerRegistrationSerializer, UserSerializer
from .session_policy import SessionPolicy
from .tasks import send_welcome_email_task

logger = logging.getLogger(__name__)


def token_response(user, policy):
    refresh = policy.apply(RefreshToken.for_user(user))
    return {
        "user": UserSerializer(user).data,
        "tokens": {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
        },
        "session": policy.as_dict(),
    }


class OrganizerRegistrationView(generics.CreateAPIView):
    """
    Organizer Registration API
    POST /api/accounts/register/
    """

    serializer_class = OrganizerRegistrationSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Organizer registered: {user.email}")

        send_welcome_email_task.delay(user.id)

        data = token_response(user, SessionPolicy.for_login(remember_me=False))
        data["message"] = "Organizer registered successfully!"
        return Response(data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Login API
    POST /api/accounts/login/
    Failed attempts per email are limited; errors never reveal whether the account exists
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            error = sanitize_auth_error("Invalid email" if "email" in serializer.errors else None)
            return Response(error.as_dict(), status=status.HTTP_400_BAD_REQUEST)

        email = serializer.validated_data["email"].strip().lower()
        password = serializer.validated_data["password"]
        attempts_key = f"login:{email}"

        if is_rate_limited(attempts_key, settings.LOGIN_ATTEMPT_LIMIT):
            return Response(RATE_LIMITED.as_dict(), status=status.HTTP_429_TOO_MANY_REQUESTS)

        user = authenticate(request, username=email, password=password)
        if user is None:
            check_rate_limit(attempts_key, settings.LOGIN_ATTEMPT_LIMIT, settings.LOGIN_ATTEMPT_WINDOW_SECONDS)
            logger.warning(f"Failed login for {email}")
            return Response(
                sanitize_auth_error("Invalid login credentials").as_dict(), status=status.HTTP_401_UNAUTHORIZED
            )

        reset_rate_limit(attempts_key)
        data = token_response(user, SessionPolicy.for_login(serializer.validated_data["remember_me"]))
        data["message"] = "Login successful!"
        return Response(data, status=status.HTTP_200_OK)


class CurrentUserView(APIView):
    """
    Current user and organizer profile
    GET/PATCH /api/accounts/me/
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)

    def patch(self, request):
        profile, _ = OrganizerProfile.objects.get_or_create(
            user=request.user, defaults={"full_name": request.user.get_full_name() or request.user.email}
        )
        serializer = OrganizerProfileSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)


class DeleteAccountView(APIView):
    """
    Delete the current account. Tournaments stay listed without an organizer.
    DELETE /api/accounts/me/delete/
    """

    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request):
        user = request.user
        logger.info(f"Deleting account for user {user.id} at {timezone.now().isoformat()}")
        user.delete()
        return Response({"message": "Account deleted successfully"}, status=status.HTTP_200_OK)
