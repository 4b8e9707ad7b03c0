from django.urls import path

from rest_framework_simplejwt.views import TokenRefreshView

from .views import CurrentUserView, DeleteAccountView, LoginView, OrganizerRegistrationView

urlpatterns = [
    # Authentication
    path("register/", OrganizerRegistrationView.as_view(), name="organizer-register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    # Profile Management
    path("me/", CurrentUserView.as_view(), name="current-user"),
    path("me/delete/", DeleteAccountView.as_view(), name="delete-account"),
]
