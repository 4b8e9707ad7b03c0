import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from django.shortcuts import render
from django.utils import timezone
from django.utils.http import urlencode

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tournamentsuk.email_utils import send_alert_verification_email

from .models import TournamentAlert
from .serializers import CreateAlertSerializer, ManageAlertSerializer, TournamentAlertSerializer

logger = logging.getLogger(__name__)

MAX_ACTIVE_ALERTS_PER_EMAIL = 5


def first_error(errors):
    """Flatten DRF serializer errors into a single message"""
    if isinstance(errors, dict):
        for value in errors.values():
            return first_error(value)
    if isinstance(errors, list) and errors:
        return first_error(errors[0])
    return str(errors)


class CreateAlertView(APIView):
    """
    Subscribe an email address to tournament alerts
    POST /api/alerts/
    The alert stays inactive until the verification link is followed
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = CreateAlertSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        active = TournamentAlert.objects.filter(email=data["email"], is_active=True).count()
        if active >= MAX_ACTIVE_ALERTS_PER_EMAIL:
            return Response(
                {"error": f"Maximum number of alerts reached ({MAX_ACTIVE_ALERTS_PER_EMAIL} per email)"},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )

        alert = TournamentAlert.objects.create(
            email=data["email"],
            filters=data["filters"],
            frequency=data["frequency"],
            consent_source=data["source"],
            is_active=False,
        )

        if not send_alert_verification_email(alert):
            alert.delete()
            return Response({"error": "Failed to send verification email"}, status=status.HTTP_502_BAD_GATEWAY)

        logger.info(f"Alert {alert.id} created for {alert.email} ({alert.frequency})")
        return Response(
            {
                "success": True,
                "message": "Alert created successfully. Please check your email to verify.",
                "alertId": alert.id,
            },
            status=status.HTTP_201_CREATED,
        )


class VerifyAlertView(APIView):
    """
    Verify an alert subscription
    GET /api/alerts/verify/?token=  (link in the email, redirects to the site)
    POST /api/alerts/verify/ {"token": ...}  (called by the site's verify page)
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        token = request.query_params.get("token")
        if not token:
            return Response({"status": "error", "message": "Token is required"}, status=status.HTTP_400_BAD_REQUEST)
        response = HttpResponseRedirect(f"{settings.SITE_URL}/alerts/verify?{urlencode({'token': token})}")
        response["Cache-Control"] = "no-store, no-cache, must-revalidate"
        return response

    def post(self, request):
        token = request.data.get("token")
        if not token:
            return Response({"status": "error", "message": "Token is required"}, status=status.HTTP_400_BAD_REQUEST)

        alert = TournamentAlert.objects.filter(verification_token=token).first()
        if alert is None:
            return Response(
                {"status": "error", "message": "This verification link has expired or has already been used."},
                status=status.HTTP_404_NOT_FOUND,
            )

        payload = {"id": alert.id, "frequency": alert.frequency, "management_token": alert.management_token}

        if alert.is_verified:
            return Response(
                {
                    "status": "already_verified",
                    "message": "Your tournament alerts are already active!",
                    "alert": payload,
                }
            )

        alert.is_active = True
        alert.verified_at = timezone.now()
        alert.save(update_fields=["is_active", "verified_at", "updated_at"])
        logger.info(f"Alert {alert.id} verified")

        return Response(
            {"status": "success", "message": "Your tournament alerts have been activated!", "alert": payload}
        )


class ManageAlertsView(APIView):
    """
    Manage every alert belonging to the email behind a management token
    POST /api/alerts/manage/ {"action": "list" | "update" | "delete" | "unsubscribe_all", ...}
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ManageAlertSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        owner = TournamentAlert.objects.filter(management_token=data["managementToken"]).first()
        if owner is None:
            return Response({"error": "Invalid management token"}, status=status.HTTP_404_NOT_FOUND)

        alerts = TournamentAlert.objects.filter(email=owner.email)
        action = data["action"]

        if action == "list":
            return Response({"alerts": TournamentAlertSerializer(alerts.order_by("-created_at"), many=True).data})

        if action == "update":
            alert = alerts.filter(id=data["alertId"]).first()
            if alert is None:
                return Response({"error": "Alert not found or unauthorized"}, status=status.HTTP_404_NOT_FOUND)
            for field, value in data["updates"].items():
                setattr(alert, field, value)
            alert.save()
            return Response({"alert": TournamentAlertSerializer(alert).data})

        if action == "delete":
            alerts.filter(id=data["alertId"]).delete()
            return Response({"success": True})

        deleted, _ = alerts.delete()
        logger.info(f"All alerts deleted for {owner.email} ({deleted} rows)")
        return Response({"success": True})


class UnsubscribeView(APIView):
    """
    One-click unsubscribe from the link in alert emails, renders an HTML page
    GET /api/alerts/unsubscribe/?token=&alert_id=
    Without alert_id every alert for the email is removed
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def page(self, request, title, message, status_code, success=False):
        context = {
            "title": title,
            "message": message,
            "success": success,
            "site_url": settings.SITE_URL,
            "site_name": settings.SITE_NAME,
        }
        return render(request, "alerts/unsubscribe.html", context, status=status_code)

    def get(self, request):
        token = request.query_params.get("token")
        alert_id = request.query_params.get("alert_id")

        if not token:
            return self.page(request, "Invalid Link", "This unsubscribe link is invalid or expired.", 400)

        if alert_id:
            alert = None
            if alert_id.isdigit():
                alert = TournamentAlert.objects.filter(id=alert_id, management_token=token).first()
            if alert is None:
                return self.page(
                    request, "Alert Not Found", "This alert has already been removed or the link is invalid.", 404
                )
            alert.delete()
            logger.info(f"Alert {alert_id} unsubscribed")
            return self.page(
                request, "Unsubscribed", "You will no longer receive emails for this alert.", 200, success=True
            )

        owner = TournamentAlert.objects.filter(management_token=token).first()
        if owner is None:
            return self.page(
                request, "Alert Not Found", "This alert has already been removed or the link is invalid.", 404
            )
        TournamentAlert.objects.filter(email=owner.email).delete()
        logger.info(f"All alerts unsubscribed for {owner.email}")
        return self.page(
            request, "Unsubscribed", "You have been unsubscribed from all tournament alerts.", 200, success=True
        )
