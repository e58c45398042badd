"""
Django management command to physically remove long-deleted rows.

Run with: python manage.py purge_destroyed [--days 30] [--model clinical.Patient] [--dry-run]
"""

import datetime

from django.apps import apps
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q
from django.utils import timezone

from apps.core.constants import DEFAULT_PURGE_AFTER_DAYS
from apps.core.deletion import DELETED_FIELD, destroyed_q
from apps.core.models import SoftDeleteModel


class Command(BaseCommand):
    help = "Hard delete rows that were soft-deleted more than --days days ago"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=getattr(
                settings, "SOFT_DELETE_PURGE_AFTER_DAYS", DEFAULT_PURGE_AFTER_DAYS
            ),
            help="Only purge rows deleted at least this many days ago.",
        )
        parser.add_argument(
            "--model",
            action="append",
            dest="models",
            metavar="APP_LABEL.MODEL",
            help="Restrict the purge to this model. May be given more than once.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would be purged without deleting anything.",
        )

    def handle(self, *args, **options):
        days = options["days"]
        if days < 0:
            raise CommandError("--days must not be negative.")

        cutoff = timezone.now() - datetime.timedelta(days=days)
        criteria = destroyed_q() & Q(**{f"{DELETED_FIELD}__lt": cutoff})

        total = 0
        for model in get_soft_delete_models(options["models"]):
            label = model._meta.label
            if options["dry_run"]:
                count = model._default_manager.destroyed().filter(criteria).count()
                self.stdout.write(f"{label}: {count} row(s) would be purged")
            else:
                count = model._default_manager.delete_all(criteria)
                self.stdout.write(f"{label}: purged {count} row(s)")
            total += count

        verb = "would be purged" if options["dry_run"] else "purged"
        self.stdout.write(self.style.SUCCESS(f"{total} row(s) {verb}."))


def get_soft_delete_models(labels=None):
    """
    Resolve the models to purge.

    Args:
        labels: Optional list of "app_label.ModelName" strings.

    Returns:
        List of concrete SoftDeleteModel subclasses.
    """
    if not labels:
        return [
            model
            for model in apps.get_models()
            if issubclass(model, SoftDeleteModel)
        ]

    models = []
    for label in labels:
        try:
            model = apps.get_model(label)
        except (LookupError, ValueError) as exc:
            raise CommandError(f"Unknown model {label!r}.") from exc
        if not issubclass(model, SoftDeleteModel):
            raise CommandError(f"{label} does not support soft deletion.")
        models.append(model)
    return models
