from django.contrib.auth.password_validation import validate_password
from django.utils import timezone

from rest_framework import serializers

from .auth_errors import USER_EXISTS
from .models import OrganizerProfile, User


class OrganizerProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrganizerProfile
        fields = ("full_name", "organization_name", "contact_phone", "data_processing_consent", "consent_date")
        read_only_fields = ("data_processing_consent", "consent_date")


class UserSerializer(serializers.ModelSerializer):
    organizer_profile = OrganizerProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = ("id", "email", "user_type", "organizer_profile", "created_at")
        read_only_fields = ("id", "email", "user_type", "created_at")


class OrganizerRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=True, validators=[validate_password])
    password2 = serializers.CharField(write_only=True, required=True)
    full_name = serializers.CharField(required=True, max_length=200)
    organization_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    contact_phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    data_processing_consent = serializers.BooleanField(required=True)

    class Meta:
        model = User
        fields = (
            "email",
            "password",
            "password2",
            "full_name",
            "organization_name",
            "contact_phone",
            "data_processing_consent",
        )
        extra_kwargs = {"email": {"validators": []}}

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(USER_EXISTS.message)
        return value

    def validate_data_processing_consent(self, value):
        if not value:
            raise serializers.ValidationError("You must agree to the processing of your data to register.")
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["password2"]:
            raise serializers.ValidationError({"password": "Password fields didn't match."})
        return attrs

    def create(self, validated_data):
        validated_data.pop("password2")
        profile_data = {
            "full_name": validated_data.pop("full_name"),
            "organization_name": validated_data.pop("organization_name", ""),
            "contact_phone": validated_data.pop("contact_phone", ""),
            "data_processing_consent": validated_data.pop("data_processing_consent"),
            "consent_date": timezone.now(),
        }

        user = User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            user_type="organizer",
        )
        OrganizerProfile.objects.create(user=user, **profile_data)
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(required=True, write_only=True)
    remember_me = serializers.BooleanField(required=False, default=False)
