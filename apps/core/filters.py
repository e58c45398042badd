import django_filters
from rest_framework.exceptions import ValidationError


class DestroyedFilter(django_filters.FilterSet):
    """
    Filter for GET <prefix>/destroyed/?deleted_after=...&deleted_before=...

    Optional query parameters:
    - deleted_after: ISO 8601 datetime, inclusive
    - deleted_before: ISO 8601 datetime, exclusive
    """

    deleted_after = django_filters.IsoDateTimeFilter(
        field_name="deleted_at", lookup_expr="gte"
    )
    deleted_before = django_filters.IsoDateTimeFilter(
        field_name="deleted_at", lookup_expr="lt"
    )

    def filter_queryset(self, queryset):
        after = self.form.cleaned_data.get("deleted_after")
        before = self.form.cleaned_data.get("deleted_before")
        if after and before and after >= before:
            raise ValidationError(
                {"deleted_before": ["Must be later than deleted_after."]}
            )
        return super().filter_queryset(queryset)
