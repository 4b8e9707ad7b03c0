from django.db import models

from accounts.models import User


class SupportTicket(models.Model):
    """A signed-in user's request for help, mirrored to the support inbox"""

    CATEGORY_CHOICES = (
        ("General", "General"),
        ("Bug Report", "Bug Report"),
        ("Feature Request", "Feature Request"),
        ("Billing", "Billing"),
        ("Other", "Other"),
    )

    STATUS_CHOICES = (
        ("open", "Open"),
        ("resolved", "Resolved"),
    )

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="support_tickets")
    name = models.CharField(max_length=150)
    email = models.EmailField()
    subject = models.CharField(max_length=200)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    message = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="open")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"#{self.id} {self.category}: {self.subject}"

    class Meta:
        db_table = "support_tickets"
        ordering = ["-created_at"]
