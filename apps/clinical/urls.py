from rest_framework.routers import DefaultRouter
from django.urls import include, path

from apps.clinical.views import PatientViewSet

app_name = "clinical"

router = DefaultRouter()

router.register(r"patients", PatientViewSet, basename="patient")


urlpatterns = [
    path("", include(router.urls)),
]
