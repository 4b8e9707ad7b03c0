from rest_framework import serializers

from .models import SupportTicket

FEEDBACK_TOPICS = {
    "bug": "Bug Report",
    "tournament-cards": "Tournament Cards Improvement",
    "missing-info": "Missing Information",
    "general": "General Suggestion",
}


class SupportTicketSerializer(serializers.ModelSerializer):
    category = serializers.ChoiceField(
        choices=SupportTicket.CATEGORY_CHOICES, error_messages={"invalid_choice": "Invalid category"}
    )

    class Meta:
        model = SupportTicket
        fields = ("id", "name", "email", "subject", "category", "message", "status", "created_at")
        read_only_fields = ("id", "status", "created_at")


class FeedbackSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    topic = serializers.CharField(max_length=50)
    message = serializers.CharField(max_length=5000)

    def validate(self, attrs):
        # Unknown topics are passed through under their own name
        attrs["topic_label"] = FEEDBACK_TOPICS.get(attrs["topic"], attrs["topic"])
        return attrs
