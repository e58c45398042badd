import datetime

from rest_framework import serializers

from apps.clinical.models import Patient, Department


class PatientSerializer(serializers.ModelSerializer):
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.filter(is_active=True),
        allow_null=True,
        required=False,
    )
    is_destroyed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "name",
            "gender",
            "email",
            "date_of_birth",
            "department",
            "created_at",
            "updated_at",
            "deleted_at",
            "is_destroyed",
        ]
        read_only_fields = ["id", "created_at", "updated_at", "deleted_at"]

    def validate_date_of_birth(self, value):
        today = datetime.date.today()
        if value > today:
            raise serializers.ValidationError("Date of birth cannot be in the future.")
        return value
