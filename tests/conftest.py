"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
import tempfile
from pathlib import Path

# Minimal environment for Settings(); tests never reach real services
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("EMAIL_API_KEY", "")
os.environ.setdefault(
    "LOG_FILE", str(Path(tempfile.gettempdir()) / "genius_referrals_test.log")
)

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from genius_referrals.config.settings import Settings
from genius_referrals.models.enums import UserRole
from genius_referrals.services.authorization import Actor


@pytest.fixture
def test_settings():
    """Settings with the documented defaults and no env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        email_api_key=None,
        default_commission_rate=Decimal("0.10"),
        min_payout_amount=Decimal("50.00"),
    )


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.delete = MagicMock()
    session.refresh = AsyncMock()
    session.begin_nested = MagicMock()
    return session


@pytest.fixture
def mock_redis():
    """Mock redis.asyncio client whose pipeline records queued commands."""
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 0])
    client = MagicMock()
    client.pipeline = MagicMock(return_value=pipe)
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_notifier():
    """Notifier that accepts every message."""
    notifier = AsyncMock()
    notifier.send = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def failing_notifier():
    """Notifier whose provider is down."""
    from genius_referrals.utils.exceptions import DependencyError

    notifier = AsyncMock()
    notifier.send = AsyncMock(
        side_effect=DependencyError("Email provider unreachable: ClientError")
    )
    return notifier


@pytest.fixture
def admin_actor():
    """Admin caller."""
    return Actor(profile_id=1, role=UserRole.ADMIN)


@pytest.fixture
def affiliate_actor():
    """Affiliate caller with profile id 10."""
    return Actor(profile_id=10, role=UserRole.AFFILIATE)
