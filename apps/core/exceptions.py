"""
Errors raised by the soft-delete layer.

Lookups that find nothing raise the model's own DoesNotExist, and database
errors propagate untouched; only conditions specific to soft deletion live here.
"""


class SoftDeleteError(Exception):
    """Base class for soft-delete errors."""


class DestroyAborted(SoftDeleteError):
    """
    Raised by a destroy hook (e.g. a pre_delete receiver) to veto a destroy.

    destroy() turns it into a False return value; delete() into RecordNotDestroyed.
    """


class RecordNotDestroyed(SoftDeleteError):
    def __init__(self, instance, reason=""):
        self.instance = instance
        self.reason = reason
        message = f"{instance._meta.label} pk={instance.pk} was not destroyed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FrozenRecordError(SoftDeleteError):
    """The instance represents a completed destroy and can no longer be changed."""


class DeletionStateError(SoftDeleteError):
    """deleted_at was given an invalid value or written outside destroy()/restore()."""
