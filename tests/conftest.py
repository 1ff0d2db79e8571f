"""Global test fixtures and utilities for finedu tests"""
import pytest
from datetime import datetime, timedelta, timezone

from finedu.models.avatar import Avatar
from finedu.services.avatar_store import InMemoryAvatarStore
from finedu.services.progression_service import ProgressionService


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def noon():
    """Fixed midday timestamp"""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def yesterday(noon):
    return noon - timedelta(days=1)


# ============================================================================
# Avatar Fixtures
# ============================================================================

@pytest.fixture
def fresh_avatar(noon):
    """Default avatar created at noon"""
    return Avatar.new(noon)


@pytest.fixture
def make_avatar(noon):
    """Factory for avatars with overridden fields"""
    def _make(**overrides):
        overrides.setdefault("last_activity_date", noon)
        return Avatar(**overrides)
    return _make


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "student-42"


@pytest.fixture
def memory_store():
    return InMemoryAvatarStore()


@pytest.fixture
def progression_service(memory_store):
    return ProgressionService(memory_store, timezone="UTC")
