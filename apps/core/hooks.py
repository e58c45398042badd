"""
Hook strategies wrapped around a soft destroy.

A strategy decides what runs before and after the row is marked deleted. The
default one dispatches Django's own pre_delete / post_delete signals, so
receivers written for physical deletes keep firing. A receiver vetoes the
destroy by raising DestroyAborted.
"""

from contextlib import contextmanager

from django.db.models import signals


class DestroyHooks:
    """
    Capability interface: run the soft mark inside ``around_destroy``.

    The base implementation runs no hooks at all.
    """

    @contextmanager
    def around_destroy(self, instance, using):
        yield


class SignalDestroyHooks(DestroyHooks):
    @contextmanager
    def around_destroy(self, instance, using):
        sender = type(instance)
        signals.pre_delete.send(
            sender=sender, instance=instance, using=using, origin=instance
        )
        yield
        signals.post_delete.send(
            sender=sender, instance=instance, using=using, origin=instance
        )
