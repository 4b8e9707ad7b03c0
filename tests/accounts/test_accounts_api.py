"""
Test cases for organizer registration, login and profile endpoints
"""
from django.core import mail

import pytest
from rest_framework import status

from accounts.models import OrganizerProfile, User
from tests.factories import TournamentFactory


def registration_payload(**overrides):
    payload = {
        "email": "Coach@Club.test",
        "password": "Str0ngPass!2025",
        "password2": "Str0ngPass!2025",
        "full_name": "Chris Coach",
        "organization_name": "Riverside Youth FC",
        "data_processing_consent": True,
    }
    payload.update(overrides)
    return payload


def login(client, email, password):
    return client.post("/api/accounts/login/", {"email": email, "password": password}, format="json")


@pytest.mark.django_db
class TestRegistration:
    def test_register_organizer(self, api_client):
        response = api_client.post("/api/accounts/register/", registration_payload(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["message"] == "Organizer registered successfully!"
        assert response.data["user"]["email"] == "coach@club.test"
        assert response.data["tokens"]["access"]

        user = User.objects.get(email="coach@club.test")
        assert user.user_type == "organizer"
        assert user.organizer_profile.consent_date is not None

    def test_welcome_email_sent(self, api_client):
        api_client.post("/api/accounts/register/", registration_payload(), format="json")

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["coach@club.test"]

    def test_duplicate_email_rejected(self, api_client, organizer_user):
        response = api_client.post(
            "/api/accounts/register/", registration_payload(email=organizer_user.email.upper()), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "already exists" in str(response.data["email"][0])

    def test_consent_required(self, api_client):
        response = api_client.post(
            "/api/accounts/register/", registration_payload(data_processing_consent=False), format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "data_processing_consent" in response.data

    def test_passwords_must_match(self, api_client):
        response = api_client.post(
            "/api/accounts/register/", registration_payload(password2="Different!2025"), format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "password" in response.data


@pytest.mark.django_db
@pytest.mark.auth
class TestLogin:
    def test_login_returns_tokens_and_session(self, api_client, organizer_user):
        response = api_client.post(
            "/api/accounts/login/", {"email": organizer_user.email, "password": "testpass123"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["message"] == "Login successful!"
        assert response.data["tokens"]["refresh"]
        assert response.data["session"]["rememberMe"] is False

    def test_remember_me_extends_session(self, api_client, organizer_user, settings):
        settings.SESSION_REMEMBER_ME_DAYS = 30
        response = api_client.post(
            "/api/accounts/login/",
            {"email": organizer_user.email, "password": "testpass123", "remember_me": True},
            format="json",
        )

        assert response.data["session"]["rememberMe"] is True
        assert response.data["session"]["timeoutSeconds"] == 30 * 24 * 60 * 60

    def test_wrong_password_gets_generic_error(self, api_client, organizer_user):
        response = api_client.post(
            "/api/accounts/login/", {"email": organizer_user.email, "password": "wrong"}, format="json"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["code"] == "invalid_credentials"

    def test_unknown_email_looks_the_same(self, api_client):
        response = api_client.post(
            "/api/accounts/login/", {"email": "nobody@test.com", "password": "wrong"}, format="json"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["code"] == "invalid_credentials"

    def test_lockout_after_repeated_failures(self, api_client, organizer_user, settings):
        settings.LOGIN_ATTEMPT_LIMIT = 5
        for _ in range(5):
            login(api_client, organizer_user.email, "wrong")

        response = api_client.post(
            "/api/accounts/login/", {"email": organizer_user.email, "password": "testpass123"}, format="json"
        )
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data["code"] == "rate_limited"

    def test_success_resets_failures(self, api_client, organizer_user, settings):
        settings.LOGIN_ATTEMPT_LIMIT = 5
        for _ in range(4):
            login(api_client, organizer_user.email, "wrong")
        login(api_client, organizer_user.email, "testpass123")

        for _ in range(4):
            login(api_client, organizer_user.email, "wrong")
        response = api_client.post(
            "/api/accounts/login/", {"email": organizer_user.email, "password": "testpass123"}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK

    def test_token_refresh(self, api_client, organizer_user):
        login = api_client.post(
            "/api/accounts/login/", {"email": organizer_user.email, "password": "testpass123"}, format="json"
        )
        response = api_client.post(
            "/api/accounts/token/refresh/", {"refresh": login.data["tokens"]["refresh"]}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data


@pytest.mark.django_db
class TestCurrentUser:
    def test_get_me(self, organizer_client, organizer_user):
        response = organizer_client.get("/api/accounts/me/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["email"] == organizer_user.email
        assert response.data["organizer_profile"]["full_name"] == organizer_user.organizer_profile.full_name

    def test_patch_profile(self, organizer_client, organizer_user):
        response = organizer_client.patch(
            "/api/accounts/me/", {"organization_name": "Northside Juniors"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        organizer_user.organizer_profile.refresh_from_db()
        assert organizer_user.organizer_profile.organization_name == "Northside Juniors"

    def test_consent_is_read_only(self, organizer_client, organizer_user):
        organizer_client.patch("/api/accounts/me/", {"data_processing_consent": False}, format="json")
        assert OrganizerProfile.objects.get(user=organizer_user).data_processing_consent is True

    def test_requires_authentication(self, api_client):
        response = api_client.get("/api/accounts/me/")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_delete_account_keeps_tournaments(self, organizer_client, organizer_user):
        tournament = TournamentFactory(organizer=organizer_user)
        response = organizer_client.delete("/api/accounts/me/delete/")

        assert response.status_code == status.HTTP_200_OK
        assert not User.objects.filter(id=organizer_user.id).exists()
        tournament.refresh_from_db()
        assert tournament.organizer is None
