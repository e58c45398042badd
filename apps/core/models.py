import logging

from django.db import models, router, transaction
from django.utils import timezone

from .deletion import (
    DELETED_FIELD,
    destroyed_q,
    epoch_marker,
    is_marked_destroyed,
)
from .exceptions import (
    DeletionStateError,
    DestroyAborted,
    FrozenRecordError,
    RecordNotDestroyed,
)
from .hooks import SignalDestroyHooks
from .managers import SoftDeleteManager

logger = logging.getLogger(__name__)


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides created_at / updated_at timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True


class SoftDeleteModel(models.Model):
    """
    Abstract base model for soft deletion.

    deleted_at holds the epoch marker while the row is live and the deletion
    time once destroyed. Only destroy() and restore() write it; both issue a
    single UPDATE keyed by primary key instead of going through save().
    """

    deleted_at = models.DateTimeField(
        default=epoch_marker, editable=False, db_index=True
    )

    objects = SoftDeleteManager()

    destroy_hooks = SignalDestroyHooks()

    _frozen = False

    class Meta:
        abstract = True

    def __setattr__(self, name, value):
        if self._frozen and not name.startswith("_"):
            raise FrozenRecordError(
                f"Can't modify destroyed {self._meta.object_name} pk={self.pk}."
            )
        super().__setattr__(name, value)

    @property
    def is_destroyed(self) -> bool:
        return is_marked_destroyed(self.deleted_at)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def destroy(self, using=None, hooks=None) -> bool:
        """
        Soft delete: run the destroy hooks around marking the row deleted.

        Args:
            using: Database alias; defaults to the router's write database.
            hooks: DestroyHooks strategy; defaults to ``destroy_hooks``.

        Returns:
            True once the row is marked deleted and this instance frozen,
            False if a hook vetoed the destroy (nothing is written).
        """
        try:
            self._destroy(using, hooks)
        except DestroyAborted:
            return False
        return True

    def delete(self, using=None, keep_parents=False):
        """
        Django's delete entry point, routed through destroy().

        Raises RecordNotDestroyed instead of returning a status when a hook
        vetoes.
        """
        try:
            self._destroy(using, None)
        except DestroyAborted as exc:
            raise RecordNotDestroyed(self, str(exc)) from exc
        return 1, {self._meta.label: 1}

    def restore(self, using=None) -> bool:
        """
        Undo a soft delete by writing the epoch marker back, skipping hooks.

        Returns True if a deleted row was restored and False when the row
        was not deleted to begin with, in which case nothing changes. If the
        row no longer exists at all, False is returned and the instance is
        left as it was.
        """
        self._check_persisted("restored")
        using = using or router.db_for_write(self.__class__, instance=self)
        epoch = epoch_marker()
        base_qs = type(self)._base_manager.using(using).filter(pk=self.pk)
        restored = base_qs.filter(destroyed_q()).update(**{DELETED_FIELD: epoch})
        if not restored and not base_qs.exists():
            logger.warning(
                "Can't restore %s pk=%s: the row no longer exists",
                self._meta.label,
                self.pk,
            )
            return False

        self._frozen = False
        setattr(self, DELETED_FIELD, epoch)
        if restored:
            logger.info("Restored %s pk=%s", self._meta.label, self.pk)
        else:
            logger.debug("%s pk=%s is not deleted; nothing to restore", self._meta.label, self.pk)
        return bool(restored)

    def save(self, *args, **kwargs):
        """
        Save every field except deleted_at for rows that already exist.

        Clearing the pk still inserts a copy. Saving an instance whose row
        was physically removed (delete_all, purge_destroyed) raises
        DatabaseError rather than inserting it again.
        """
        if self._frozen:
            raise FrozenRecordError(
                f"Can't save destroyed {self._meta.object_name} pk={self.pk}."
            )
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            if DELETED_FIELD in update_fields:
                raise DeletionStateError(
                    f"{DELETED_FIELD} can only be changed through destroy() and restore()."
                )
        elif (
            not args
            and self.pk is not None
            and not self._state.adding
            and not kwargs.get("force_insert")
        ):
            # An existing row keeps whatever deletion state the database holds.
            kwargs["update_fields"] = self._fields_without_deletion_state()
        super().save(*args, **kwargs)

    def _fields_without_deletion_state(self):
        deferred = self.get_deferred_fields()
        return [
            field.name
            for field in self._meta.concrete_fields
            if not field.primary_key
            and field.name != DELETED_FIELD
            and field.attname not in deferred
        ]

    def _check_persisted(self, verb):
        if self.pk is None:
            raise ValueError(
                f"{self._meta.object_name} object can't be {verb} because its "
                f"{self._meta.pk.attname} attribute is set to None."
            )

    def _destroy(self, using, hooks):
        self._check_persisted("destroyed")
        if self._frozen:
            raise FrozenRecordError(
                f"{self._meta.object_name} pk={self.pk} is already destroyed."
            )
        using = using or router.db_for_write(self.__class__, instance=self)
        hooks = hooks or self.destroy_hooks
        previous = getattr(self, DELETED_FIELD)
        try:
            with transaction.atomic(using=using):
                with hooks.around_destroy(self, using):
                    self._mark_destroyed(using)
        except Exception as exc:
            setattr(self, DELETED_FIELD, previous)
            if isinstance(exc, DestroyAborted):
                logger.info(
                    "Destroy of %s pk=%s aborted: %s", self._meta.label, self.pk, exc
                )
            raise
        self._frozen = True
        logger.info("Soft-deleted %s pk=%s", self._meta.label, self.pk)

    def _mark_destroyed(self, using):
        timestamp = timezone.now()
        type(self)._base_manager.using(using).filter(pk=self.pk).update(
            **{DELETED_FIELD: timestamp}
        )
        setattr(self, DELETED_FIELD, timestamp)
