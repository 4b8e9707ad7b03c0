from rest_framework import serializers

from .models import Tournament, TournamentAttachment
from .transforms import transform_tournament, tournament_row


class TournamentSerializer(serializers.ModelSerializer):
    """Organizer/admin serializer: writable listing fields plus derived status and completion"""

    organizer_id = serializers.IntegerField(read_only=True)
    banner_image = serializers.ImageField(
        max_length=None, use_url=True, required=False, allow_null=True, allow_empty_file=True
    )
    computed_status = serializers.CharField(read_only=True)
    completion_percentage = serializers.SerializerMethodField()
    completion_level = serializers.SerializerMethodField()

    class Meta:
        model = Tournament
        exclude = ("organizer",)
        read_only_fields = (
            "slug",
            "is_published",
            "review_email_sent_at",
            "registered_teams",
            "created_at",
            "updated_at",
        )

    def get_completion_percentage(self, obj):
        return obj.completion_percentage()

    def get_completion_level(self, obj):
        return obj.completion_level()

    def validate_banner_image(self, value):
        """Validate banner image size (max 5MB)"""
        if value and value.size > 5 * 1024 * 1024:
            raise serializers.ValidationError("Banner image size should not exceed 5MB")
        return value

    def validate_format(self, value):
        allowed = {choice for choice, _ in Tournament.FORMAT_CHOICES}
        formats = [item.strip() for item in value.split(",") if item.strip()]
        if not formats:
            raise serializers.ValidationError("At least one format is required")
        invalid = [item for item in formats if item not in allowed]
        if invalid:
            raise serializers.ValidationError(f"Unknown format(s): {', '.join(invalid)}")
        return ", ".join(formats)

    def validate_age_groups(self, value):
        if not isinstance(value, list) or not value:
            raise serializers.ValidationError("Select at least one age group")
        invalid = [item for item in value if item not in Tournament.AGE_GROUPS]
        if invalid:
            raise serializers.ValidationError(f"Unknown age group(s): {', '.join(map(str, invalid))}")
        return value

    def validate_team_types(self, value):
        if not isinstance(value, list) or not value:
            raise serializers.ValidationError("Select at least one team type")
        invalid = [item for item in value if item not in Tournament.TEAM_TYPES]
        if invalid:
            raise serializers.ValidationError(f"Unknown team type(s): {', '.join(map(str, invalid))}")
        return value

    def validate_status(self, value):
        # Everything except a cancellation is derived from the dates
        if value not in ("upcoming", "cancelled"):
            raise serializers.ValidationError("Status can only be set to 'cancelled' or back to 'upcoming'")
        return value

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        deadline = attrs.get("registration_deadline", getattr(self.instance, "registration_deadline", None))

        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date must be on or after the start date"})
        if deadline and end and deadline > end:
            raise serializers.ValidationError(
                {"registration_deadline": "Registration deadline must be before the tournament ends"}
            )

        max_teams = attrs.get("max_teams", getattr(self.instance, "max_teams", None))
        if max_teams is not None and max_teams < 1:
            raise serializers.ValidationError({"max_teams": "Maximum teams must be at least 1"})
        return attrs


class TournamentListSerializer(serializers.ModelSerializer):
    """Public view model (camelCase, derived status)"""

    class Meta:
        model = Tournament
        fields = ("id",)

    def to_representation(self, instance):
        return transform_tournament(tournament_row(instance))


class GeocodeRequestSerializer(serializers.Serializer):
    location_name = serializers.CharField(max_length=255)
    postcode = serializers.CharField(max_length=12, required=False, allow_blank=True)
    region = serializers.CharField(max_length=100, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ContactOrganizerSerializer(serializers.Serializer):
    tournamentId = serializers.IntegerField()
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    subject = serializers.CharField(max_length=200)
    message = serializers.CharField(max_length=5000)

    def validate_message(self, value):
        if len(value.strip()) < 10:
            raise serializers.ValidationError("Message must be at least 10 characters")
        return value.strip()


ATTACHMENT_CONTENT_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
MAX_ATTACHMENT_SIZE = 10 * 1024 * 1024  # 10MB


class TournamentAttachmentSerializer(serializers.ModelSerializer):
    file_url = serializers.SerializerMethodField()

    class Meta:
        model = TournamentAttachment
        fields = (
            "id",
            "tournament",
            "file",
            "file_name",
            "file_type",
            "file_size",
            "file_url",
            "uploaded_by",
            "created_at",
        )
        read_only_fields = ("tournament", "file_name", "file_type", "file_size", "uploaded_by", "created_at")
        extra_kwargs = {"file": {"write_only": True}}

    def get_file_url(self, obj):
        request = self.context.get("request")
        url = obj.file.url
        return request.build_absolute_uri(url) if request else url

    def validate_file(self, value):
        """PDF, JPG, PNG, DOC or DOCX up to 10MB"""
        if getattr(value, "content_type", None) not in ATTACHMENT_CONTENT_TYPES:
            raise serializers.ValidationError(
                f"{value.name} is not supported. Please use PDF, JPG, PNG, DOC, or DOCX files."
            )
        if value.size > MAX_ATTACHMENT_SIZE:
            raise serializers.ValidationError(f"{value.name} exceeds 10MB limit.")
        return value

    def create(self, validated_data):
        upload = validated_data["file"]
        validated_data.update(file_name=upload.name, file_type=upload.content_type, file_size=upload.size)
        return super().create(validated_data)
