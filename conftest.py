"""
Shared pytest fixtures for all tests in the application.

These fixtures provide common test data and API clients that are
reused across multiple test modules to eliminate duplication.
"""

import datetime

import pytest
from django.contrib.auth import get_user_model
from django.db.models.signals import post_delete, pre_delete
from rest_framework.test import APIClient

from apps.clinical.models import Department, Patient
from apps.core.exceptions import DestroyAborted


@pytest.fixture
def api_client():
    """
    Provides a DRF APIClient for making API requests in tests.

    Returns:
        APIClient instance
    """
    return APIClient()


@pytest.fixture
def staff_user(db):
    """
    Creates a staff user, allowed to use the trash endpoints.

    Args:
        db: pytest-django database fixture

    Returns:
        User instance with is_staff set
    """
    return get_user_model().objects.create_user(
        username="admin",
        email="admin@example.com",
        password="password123",
        is_staff=True,
    )


@pytest.fixture
def regular_user(db):
    """
    Creates a regular authenticated user without staff rights.

    Args:
        db: pytest-django database fixture

    Returns:
        User instance
    """
    return get_user_model().objects.create_user(
        username="regular",
        email="regular@example.com",
        password="password123",
    )


@pytest.fixture
def department(db):
    """
    Creates a test department.

    Args:
        db: pytest-django database fixture

    Returns:
        Department instance
    """
    return Department.objects.create(name="Cardiology")


@pytest.fixture
def active_patient(db, department):
    """
    Creates a test patient.

    Args:
        db: pytest-django database fixture
        department: The department fixture

    Returns:
        Patient instance
    """
    return Patient.objects.create(
        name="Jane Doe",
        gender=Patient.Gender.FEMALE,
        email="jane@example.com",
        date_of_birth=datetime.date(1990, 1, 1),
        department=department,
    )


@pytest.fixture
def another_patient(db):
    """
    Creates a second test patient for multi-patient scenarios.

    Args:
        db: pytest-django database fixture

    Returns:
        Patient instance
    """
    return Patient.objects.create(
        name="John Smith",
        gender=Patient.Gender.MALE,
        email="john.smith@example.com",
        date_of_birth=datetime.date(1985, 5, 5),
    )


@pytest.fixture
def soft_deleted_patient(db):
    """
    Creates a test patient and soft-deletes it.

    Args:
        db: pytest-django database fixture

    Returns:
        Soft-deleted Patient instance, freshly loaded (not frozen)
    """
    p = Patient.objects.create(
        name="Deleted Patient",
        gender=Patient.Gender.OTHER,
        email="deleted@example.com",
        date_of_birth=datetime.date(1970, 1, 1),
    )
    p.delete()
    return Patient.objects.find_including_destroyed(p.pk)


@pytest.fixture
def veto_destroy():
    """
    Connects a pre_delete receiver that vetoes every Patient destroy.

    Returns:
        List collecting the instances the receiver was called with
    """
    calls = []

    def receiver(sender, instance, **kwargs):
        calls.append(instance)
        raise DestroyAborted("patient is locked")

    pre_delete.connect(receiver, sender=Patient, dispatch_uid="test-veto-destroy")
    yield calls
    pre_delete.disconnect(sender=Patient, dispatch_uid="test-veto-destroy")


@pytest.fixture
def delete_signals():
    """
    Records the pre_delete / post_delete signals sent for Patient.

    Returns:
        List of (signal name, instance pk, kwargs) tuples in dispatch order
    """
    sent = []

    def on_pre_delete(sender, instance, **kwargs):
        sent.append(("pre_delete", instance.pk, kwargs))

    def on_post_delete(sender, instance, **kwargs):
        sent.append(("post_delete", instance.pk, kwargs))

    pre_delete.connect(on_pre_delete, sender=Patient, dispatch_uid="test-pre-delete")
    post_delete.connect(on_post_delete, sender=Patient, dispatch_uid="test-post-delete")
    yield sent
    pre_delete.disconnect(sender=Patient, dispatch_uid="test-pre-delete")
    post_delete.disconnect(sender=Patient, dispatch_uid="test-post-delete")
