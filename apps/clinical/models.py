from django.db import models

from apps.core.models import TimeStampedModel, SoftDeleteModel


class Department(TimeStampedModel):
    """
    Hospital department, e.g. Cardiology, Radiology.
    """

    name = models.CharField(max_length=255, unique=True)
    description = models.CharField(max_length=255, blank=True, null=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name", "-created_at"]

    def __str__(self) -> str:
        return self.name


class Patient(TimeStampedModel, SoftDeleteModel):
    """
    Domain profile for patients.

    Deleting a patient only marks it deleted; Patient.objects never returns
    it again until restore() is called.
    """

    class Gender(models.TextChoices):
        MALE = "MALE", "Male"
        FEMALE = "FEMALE", "Female"
        OTHER = "OTHER", "Other"
        UNKNOWN = "UNKNOWN", "Unknown"

    name = models.CharField(max_length=255)
    gender = models.CharField(
        max_length=10,
        choices=Gender.choices,
        default=Gender.UNKNOWN,
    )
    email = models.EmailField(
        blank=True,
        null=True,
        db_index=True,
        help_text="Contact email for the patient.",
    )
    date_of_birth = models.DateField()
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="patients",
    )

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="clinical_patient_name_idx"),
        ]

    def __str__(self) -> str:
        return self.name
