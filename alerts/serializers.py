from rest_framework import serializers

from tournaments.filters import parse_filters, serialize_filters

from .models import TournamentAlert


def normalize_alert_filters(value):
    """Store filters in the same canonical query-param form the tournament list uses"""
    if not value:
        return {}
    if not isinstance(value, dict):
        raise serializers.ValidationError("Filters must be an object")

    params = {}
    for key, item in value.items():
        if isinstance(item, (list, tuple)):
            item = ",".join(str(part) for part in item)
        elif isinstance(item, bool):
            item = "true" if item else "false"
        if item is not None:
            params[key] = str(item)
    return serialize_filters(parse_filters(params))


class TournamentAlertSerializer(serializers.ModelSerializer):
    class Meta:
        model = TournamentAlert
        fields = (
            "id",
            "email",
            "filters",
            "frequency",
            "consent_source",
            "is_active",
            "verified_at",
            "last_sent_at",
            "created_at",
        )
        read_only_fields = fields


class CreateAlertSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={"invalid": "Valid email is required"})
    filters = serializers.JSONField(required=False, default=dict)
    frequency = serializers.ChoiceField(
        choices=TournamentAlert.FREQUENCY_CHOICES, error_messages={"invalid_choice": "Valid frequency is required"}
    )
    source = serializers.ChoiceField(
        choices=TournamentAlert.SOURCE_CHOICES, error_messages={"invalid_choice": "Valid source is required"}
    )

    def validate_email(self, value):
        return value.strip().lower()

    def validate_filters(self, value):
        return normalize_alert_filters(value)


class AlertUpdatesSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False)
    frequency = serializers.ChoiceField(choices=TournamentAlert.FREQUENCY_CHOICES, required=False)
    filters = serializers.JSONField(required=False)

    def validate_filters(self, value):
        return normalize_alert_filters(value)


class ManageAlertSerializer(serializers.Serializer):
    ACTIONS = ("list", "update", "delete", "unsubscribe_all")

    action = serializers.ChoiceField(choices=ACTIONS, error_messages={"invalid_choice": "Invalid action"})
    managementToken = serializers.CharField(error_messages={"required": "Management token is required"})
    alertId = serializers.IntegerField(required=False)
    updates = AlertUpdatesSerializer(required=False)

    def validate(self, attrs):
        action = attrs["action"]
        if action == "update" and ("alertId" not in attrs or not attrs.get("updates")):
            raise serializers.ValidationError("Alert ID and updates are required")
        if action == "delete" and "alertId" not in attrs:
            raise serializers.ValidationError("Alert ID is required")
        return attrs
