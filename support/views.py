import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tournamentsuk.email_utils import send_feedback_email, send_support_confirmation_email, send_support_request_email
from tournamentsuk.throttling import SupportRequestThrottle

from .serializers import FeedbackSerializer, SupportTicketSerializer

logger = logging.getLogger(__name__)


def honeypot_filled(request):
    return bool(str(request.data.get("honeypot") or "").strip())


class SupportRequestView(APIView):
    """
    Signed-in user raises a support ticket
    POST /api/support/requests/
    The ticket is stored first, so email failures are logged but do not fail the request
    """

    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [SupportRequestThrottle]

    def post(self, request):
        if honeypot_filled(request):
            logger.warning(f"Support request from {request.user.email} blocked by honeypot")
            return Response({"error": "Request blocked"}, status=status.HTTP_429_TOO_MANY_REQUESTS)

        serializer = SupportTicketSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ticket = serializer.save(user=request.user)

        if not send_support_request_email(ticket):
            logger.error(f"Support inbox email failed for ticket {ticket.id}")
        if not send_support_confirmation_email(ticket):
            logger.error(f"Support confirmation email failed for ticket {ticket.id}")

        logger.info(f"Support ticket {ticket.id} created by {request.user.email}")
        return Response(
            {"success": True, "ticketId": ticket.id, "message": "Support request submitted successfully"},
            status=status.HTTP_201_CREATED,
        )


class FeedbackView(APIView):
    """
    Anonymous site feedback forwarded to the team inbox
    POST /api/support/feedback/
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [SupportRequestThrottle]

    def post(self, request):
        if honeypot_filled(request):
            return Response({"error": "Request blocked"}, status=status.HTTP_429_TOO_MANY_REQUESTS)

        serializer = FeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if not send_feedback_email(data["name"], data["email"], data["topic_label"], data["message"]):
            return Response({"error": "Failed to send feedback"}, status=status.HTTP_502_BAD_GATEWAY)

        logger.info(f"Feedback received from {data['email']} ({data['topic']})")
        return Response({"success": True, "message": "Feedback submitted successfully"})
