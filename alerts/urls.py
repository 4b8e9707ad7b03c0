from django.urls import path

from .views import CreateAlertView, ManageAlertsView, UnsubscribeView, VerifyAlertView

urlpatterns = [
    path("", CreateAlertView.as_view(), name="alert-create"),
    path("verify/", VerifyAlertView.as_view(), name="alert-verify"),
    path("manage/", ManageAlertsView.as_view(), name="alert-manage"),
    path("unsubscribe/", UnsubscribeView.as_view(), name="alert-unsubscribe"),
]
