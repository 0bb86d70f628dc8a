"""
Submission velocity counters.

Time-windowed count of recent lead submissions per IP address. The Redis
counter keeps one sorted set per IP (score = submission timestamp) and
trims entries older than the window on every read. The database counter
counts lead rows and needs no recording step.
"""

import time
import uuid
from datetime import datetime, timedelta
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.repositories.lead_repository import LeadRepository
from genius_referrals.utils.datetime_utils import utc_now


class SubmissionCounter(Protocol):
    """Time-windowed counter of recent submissions by IP."""

    async def count_recent_submissions(
        self, ip_address: str, window_seconds: int
    ) -> int:
        ...

    async def record_submission(self, ip_address: str) -> None:
        ...


class RedisSubmissionCounter:
    """
    Sliding-window counter on a Redis sorted set.

    Errors from Redis propagate; the fraud checker decides how to degrade.
    """

    def __init__(
        self,
        redis_client: Any,
        key_prefix: str = "fraud:submissions:",
        ttl_seconds: int = 24 * 3600,
    ) -> None:
        """
        Initialize counter.

        Args:
            redis_client: redis.asyncio client
            key_prefix: Prefix for per-IP keys
            ttl_seconds: Expiry for idle keys (longest window of interest)
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    def _key(self, ip_address: str) -> str:
        return f"{self.key_prefix}{ip_address}"

    async def count_recent_submissions(
        self, ip_address: str, window_seconds: int
    ) -> int:
        key = self._key(ip_address)
        window_start = time.time() - window_seconds

        pipe = self.redis.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zcard(key)
        results = await pipe.execute()
        return int(results[1])

    async def record_submission(self, ip_address: str) -> None:
        key = self._key(ip_address)
        now = time.time()

        pipe = self.redis.pipeline()
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.expire(key, self.ttl_seconds)
        await pipe.execute()


class DatabaseSubmissionCounter:
    """Counts lead rows by IP; recording happens when the lead is stored."""

    def __init__(self, session: AsyncSession) -> None:
        self.lead_repo = LeadRepository(session)

    async def count_recent_submissions(
        self, ip_address: str, window_seconds: int, now: datetime | None = None
    ) -> int:
        since = (now or utc_now()) - timedelta(seconds=window_seconds)
        return await self.lead_repo.count_by_ip_since(ip_address, since)

    async def record_submission(self, ip_address: str) -> None:
        return None
