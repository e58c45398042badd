"""
Deletion state for soft-deletable models.

A row is "not deleted" while its deleted_at column holds the epoch marker,
and "deleted at T" once it holds any T later than that. The column is never
null.
"""

import datetime

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from .exceptions import DeletionStateError

DELETED_FIELD = "deleted_at"

EPOCH_MARKER = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def epoch_marker() -> datetime.datetime:
    """
    Return the "not deleted" sentinel in the form the ORM expects.

    Aware when USE_TZ is enabled, naive UTC otherwise. Also serves as the
    column default, so it has to stay importable by migrations.
    """
    if settings.USE_TZ:
        return EPOCH_MARKER
    return timezone.make_naive(EPOCH_MARKER, datetime.timezone.utc)


def is_marked_destroyed(value) -> bool:
    if value is None:
        raise DeletionStateError(f"{DELETED_FIELD} must never be null.")
    return value > epoch_marker()


def not_destroyed_q() -> Q:
    return Q(**{DELETED_FIELD: epoch_marker()})


def destroyed_q() -> Q:
    return Q(**{f"{DELETED_FIELD}__gt": epoch_marker()})
