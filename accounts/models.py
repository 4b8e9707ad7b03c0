from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class OrganizerUserManager(UserManager):
    """Email is the login; username is derived from it when not given"""

    def _create_user(self, username, email, password, **extra_fields):
        if not email:
            raise ValueError("The email address must be set")
        email = self.normalize_email(email)
        username = username or email
        return super()._create_user(username, email, password, **extra_fields)

    def create_user(self, email=None, password=None, username=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("user_type", "organizer")
        return self._create_user(username, email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, username=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("user_type", "admin")
        return self._create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Custom User model. Organizers list tournaments, admins moderate them.
    """

    USER_TYPE_CHOICES = (
        ("organizer", "Organizer"),
        ("admin", "Admin"),
    )

    email = models.EmailField(unique=True)
    user_type = models.CharField(max_length=10, choices=USER_TYPE_CHOICES, default="organizer")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrganizerUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    def __str__(self):
        return f"{self.email} - {self.user_type}"

    @property
    def is_moderator(self):
        return self.user_type == "admin" or self.is_staff

    class Meta:
        db_table = "users"


class OrganizerProfile(models.Model):
    """
    Contact and consent details for an organizer
    """

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="organizer_profile")
    full_name = models.CharField(max_length=200)
    organization_name = models.CharField(max_length=200, blank=True)
    contact_phone = models.CharField(max_length=30, blank=True)
    data_processing_consent = models.BooleanField(default=False)
    consent_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Organizer: {self.organization_name or self.full_name}"

    class Meta:
        db_table = "organizer_profiles"
