from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response

from apps.core.filters import DestroyedFilter


class DestroyVetoed(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The record could not be deleted."
    default_code = "destroy_vetoed"


class SoftDeleteModelViewSet(viewsets.ModelViewSet):
    """
    CRUD for a soft-deletable model with:
    - DELETE marking the row deleted instead of removing it
    - GET <prefix>/destroyed/ listing only deleted rows
    - POST <prefix>/<pk>/restore/ bringing a deleted row back

    list / retrieve / update only ever see rows that are not deleted.
    The trash actions use trash_permission_classes instead of
    permission_classes.
    """

    trash_permission_classes = [permissions.IsAdminUser]
    destroyed_filterset_class = DestroyedFilter

    def get_permissions(self):
        if self.action in ("destroyed", "restore"):
            return [permission() for permission in self.trash_permission_classes]
        return super().get_permissions()

    def get_destroyed_queryset(self):
        """
        Base queryset for the trash actions.

        Built from the model's manager rather than get_queryset(), which
        only ever returns rows that are not deleted, then narrowed by
        filter_destroyed_queryset().
        """
        model = self.get_queryset().model
        queryset = self.filter_destroyed_queryset(model._default_manager.destroyed())
        return queryset.order_by("-deleted_at", "pk")

    def filter_destroyed_queryset(self, queryset):
        """
        Apply the same narrowing (tenant, ownership, ...) that get_queryset()
        applies to live rows. Both trash actions go through it.
        """
        return queryset

    def perform_destroy(self, instance):
        if not instance.destroy():
            raise DestroyVetoed()

    @action(detail=False, methods=["get"])
    def destroyed(self, request):
        filterset = self.destroyed_filterset_class(
            request.query_params,
            queryset=self.get_destroyed_queryset(),
            request=request,
        )
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        queryset = filterset.qs

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=["post"])
    def restore(self, request, *args, **kwargs):
        lookup_url_kwarg = self.lookup_url_kwarg or self.lookup_field
        instance = get_object_or_404(
            self.get_destroyed_queryset(),
            **{self.lookup_field: self.kwargs[lookup_url_kwarg]},
        )
        self.check_object_permissions(request, instance)

        instance.restore()
        serializer = self.get_serializer(instance)
        return Response(serializer.data)
