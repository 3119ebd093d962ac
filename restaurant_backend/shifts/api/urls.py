from django.urls import path

from shifts.api.views import ActiveShiftView, CloseShiftView, OpenShiftView

app_name = "shifts"

urlpatterns = [
    path("open/", OpenShiftView.as_view(), name="shift-open"),
    path("close/", CloseShiftView.as_view(), name="shift-close"),
    path("active/", ActiveShiftView.as_view(), name="shift-active"),
]
