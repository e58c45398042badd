import logging

from django.core.exceptions import ValidationError
from django.db import models, transaction

from .deletion import DELETED_FIELD, destroyed_q, not_destroyed_q
from .exceptions import DeletionStateError

logger = logging.getLogger(__name__)


class SoftDeleteQuerySet(models.QuerySet):
    def find(self, *ids):
        """
        Fetch by primary key within this queryset.

        A single id returns the instance; several ids return a list in the
        order requested. Raises DoesNotExist if any id has no matching row,
        including ids that aren't valid for the primary key field.
        """
        if not ids:
            raise self.model.DoesNotExist(
                f"Couldn't find {self.model._meta.object_name} without an ID."
            )
        wanted = list(dict.fromkeys(self._to_pk(pk) for pk in ids))
        if len(ids) == 1:
            return self.get(pk=wanted[0])

        found = self.in_bulk(wanted)
        missing = [pk for pk in wanted if pk not in found]
        if missing:
            raise self.model.DoesNotExist(
                f"Couldn't find all {self.model._meta.verbose_name_plural} "
                f"with IDs {wanted} (missing {missing})."
            )
        return [found[pk] for pk in wanted]

    def _to_pk(self, value):
        try:
            pk = self.model._meta.pk.to_python(value)
        except ValidationError as exc:
            raise self.model.DoesNotExist(
                f"Couldn't find {self.model._meta.object_name} with ID {value!r}."
            ) from exc
        if pk is None:
            raise self.model.DoesNotExist(
                f"Couldn't find {self.model._meta.object_name} without an ID."
            )
        return pk

    def delete(self):
        """
        Soft delete: destroy() every matching row so hooks run per instance.
        """
        count = 0
        with transaction.atomic(using=self.db):
            for instance in self:
                if instance.destroy(using=self.db):
                    count += 1
        self._result_cache = None
        return count, ({self.model._meta.label: count} if count else {})

    delete.alters_data = True
    delete.queryset_only = True

    def hard_delete(self):
        """
        Hard delete: Actually delete rows from the database.

        Issued as a single DELETE without loading instances, so no
        per-record signals are sent.
        """
        if self.query.is_sliced:
            raise TypeError("Cannot use 'limit' or 'offset' with hard_delete().")
        del_query = self._chain()
        del_query._for_write = True
        del_query.query.select_for_update = False
        del_query.query.select_related = False
        del_query.query.clear_ordering(force=True)
        deleted = del_query._raw_delete(del_query.db)
        self._result_cache = None
        logger.info("Hard-deleted %s %s row(s)", deleted, self.model._meta.label)
        return deleted

    hard_delete.alters_data = True
    hard_delete.queryset_only = True

    def update(self, **kwargs):
        if DELETED_FIELD in kwargs:
            raise DeletionStateError(
                f"{DELETED_FIELD} can only be changed through destroy() and restore()."
            )
        return super().update(**kwargs)

    update.alters_data = True


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Default manager that hides soft-deleted rows.

    Every queryset it builds carries the "not deleted" predicate. The
    *_destroyed methods below are the only ways around it.
    """

    def get_queryset(self):
        return super().get_queryset().filter(not_destroyed_q())

    def unscoped(self):
        queryset = super().get_queryset()
        # Related managers (department.patients) stay limited to their instance.
        apply_rel_filters = getattr(self, "_apply_rel_filters", None)
        if apply_rel_filters is not None:
            queryset = apply_rel_filters(queryset)
        return queryset

    def with_destroyed(self):
        return self.unscoped()

    def destroyed(self):
        return self.unscoped().filter(destroyed_q())

    def count_including_destroyed(self) -> int:
        return self.unscoped().count()

    def count_only_destroyed(self) -> int:
        return self.destroyed().count()

    def find_including_destroyed(self, *ids):
        return self.unscoped().find(*ids)

    def find_only_destroyed(self, *ids):
        return self.destroyed().find(*ids)

    def exists_including_destroyed(self, *args, **criteria) -> bool:
        return self.unscoped().filter(*args, **criteria).exists()

    def exists_only_destroyed(self, *args, **criteria) -> bool:
        return self.destroyed().filter(*args, **criteria).exists()

    def delete_all(self, *args, **criteria) -> int:
        """
        Physically delete every row matching the criteria, deleted or not.

        Skips destroy hooks entirely. Returns the number of rows removed.
        """
        return self.unscoped().filter(*args, **criteria).hard_delete()
