"""Pytest configuration and shared fixtures."""

import uuid
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from bookings.domain import Course, CourseId, DelegateCount, Money


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


def _course(name: str, required: int, order: int = 0) -> Course:
    return Course(
        id=CourseId(uuid.uuid4()),
        name=name,
        required_delegates=DelegateCount(required),
        dates="12-14 March",
        venue="Leeds",
        price=Money(Decimal("450.00")),
        display_order=order,
    )


@pytest.fixture
def make_course():
    """Factory for roster courses: make_course(name, required, order=0)."""
    return _course


@pytest.fixture
def course_x() -> Course:
    return _course("CourseX", 2)


@pytest.fixture
def course_y() -> Course:
    return _course("CourseY", 1, order=1)
