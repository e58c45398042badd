from rest_framework.permissions import IsAuthenticated

from apps.clinical.models import Patient
from apps.clinical.serializers import PatientSerializer
from apps.core.pagination import StandardPagination
from apps.core.views import SoftDeleteModelViewSet


class PatientViewSet(SoftDeleteModelViewSet):
    """
    CRUD for patients with:
    - search by name/email (?search=)
    - optional ?department= filter
    - soft delete on DELETE, plus the destroyed/ and restore/ trash actions
      for staff users
    """

    serializer_class = PatientSerializer
    pagination_class = StandardPagination
    permission_classes = [IsAuthenticated]
    search_fields = ["name", "email"]
    filterset_fields = ["department", "gender"]

    def get_queryset(self):
        """
        Patient.objects already excludes soft-deleted rows.
        """
        return Patient.objects.select_related("department").order_by("name", "id")
