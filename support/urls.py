from django.urls import path

from .views import FeedbackView, SupportRequestView

urlpatterns = [
    path("requests/", SupportRequestView.as_view(), name="support-request"),
    path("feedback/", FeedbackView.as_view(), name="support-feedback"),
]
