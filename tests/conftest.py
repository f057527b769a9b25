"""Global test fixtures for progression tests"""
import pytest
from datetime import datetime, timedelta, timezone

from progression.catalog.repository import JsonCatalogRepository
from progression.models.catalog import Position, SkillCategory, SkillLevel
from progression.models.profile import PlayerProfile
from progression.services.progress_service import ProgressStore
from progression.storage.snapshot_store import InMemoryStorage


# ============================================================================
# Clock Fixtures
# ============================================================================

class FakeClock:
    """Settable clock; call it to read the current time"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> None:
        self.now = self.now + timedelta(days=days, hours=hours, minutes=minutes)


@pytest.fixture
def clock():
    """Wednesday 2025-01-08 10:00 UTC (week starts Monday 2025-01-06)"""
    return FakeClock(datetime(2025, 1, 8, 10, 0, tzinfo=timezone.utc))


# ============================================================================
# Catalog & Profile Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def catalog():
    """Bundled content catalog"""
    return JsonCatalogRepository()


@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "player-1"


@pytest.fixture
def test_profile(test_user_id):
    """Intermediate striker who wants to improve shooting"""
    return PlayerProfile(
        user_id=test_user_id,
        position=Position.ST,
        goals=[SkillCategory.SHOOTING],
        skill_level=SkillLevel.INTERMEDIATE,
    )


# ============================================================================
# Storage & Store Fixtures
# ============================================================================

@pytest.fixture
def storage():
    """Empty in-memory snapshot storage"""
    return InMemoryStorage()


@pytest.fixture
def store(test_user_id, storage, catalog, clock, test_profile):
    """ProgressStore over in-memory storage (not yet loaded)"""
    return ProgressStore(
        user_id=test_user_id,
        storage=storage,
        catalog=catalog,
        clock=clock,
        profile_provider=lambda: test_profile,
    )
