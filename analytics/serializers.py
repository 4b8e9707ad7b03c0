from rest_framework import serializers

from .models import AnalyticsEvent


class AnalyticsEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = AnalyticsEvent
        fields = ("id", "event_name", "properties", "session_id", "timestamp")
        read_only_fields = ("id",)
        extra_kwargs = {"timestamp": {"required": False}}

    def validate_properties(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Properties must be an object")
        return value


class EngagementEventSerializer(serializers.Serializer):
    EVENTS = ("page_view", "time", "action", "status")

    event = serializers.ChoiceField(choices=EVENTS)
    path = serializers.CharField(required=False, max_length=500)
    milliseconds = serializers.IntegerField(required=False, min_value=0)
    action = serializers.CharField(required=False, max_length=100)

    def validate(self, attrs):
        if attrs["event"] == "time" and "milliseconds" not in attrs:
            raise serializers.ValidationError({"milliseconds": "Required for time events"})
        if attrs["event"] == "action" and not attrs.get("action"):
            raise serializers.ValidationError({"action": "Required for action events"})
        return attrs
