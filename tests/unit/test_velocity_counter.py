"""
Unit tests for the Redis sliding-window submission counter.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from genius_referrals.services.fraud.velocity import RedisSubmissionCounter


class TestRedisSubmissionCounter:
    """Test RedisSubmissionCounter with a mocked pipeline."""

    @pytest.mark.asyncio
    async def test_count_trims_then_counts(self, mock_redis):
        """Test entries older than the window are dropped before counting."""
        pipe = mock_redis.pipeline.return_value
        pipe.execute.return_value = [2, 3]
        counter = RedisSubmissionCounter(mock_redis, key_prefix="test:")

        count = await counter.count_recent_submissions("203.0.113.5", 3600)

        assert count == 3
        key, low, high = pipe.zremrangebyscore.call_args.args
        assert key == "test:203.0.113.5"
        assert low == 0
        assert high > 0
        pipe.zcard.assert_called_once_with("test:203.0.113.5")

    @pytest.mark.asyncio
    async def test_record_adds_member_and_expiry(self, mock_redis):
        """Test recording adds a unique member and refreshes the TTL."""
        pipe = mock_redis.pipeline.return_value
        counter = RedisSubmissionCounter(mock_redis, key_prefix="test:", ttl_seconds=600)

        await counter.record_submission("203.0.113.5")
        await counter.record_submission("203.0.113.5")

        first = pipe.zadd.call_args_list[0].args[1]
        second = pipe.zadd.call_args_list[1].args[1]
        assert first.keys() != second.keys()
        pipe.expire.assert_called_with("test:203.0.113.5", 600)

    @pytest.mark.asyncio
    async def test_redis_errors_propagate(self, mock_redis):
        """Test the counter does not hide Redis failures from the caller."""
        mock_redis.pipeline.return_value.execute.side_effect = RedisConnectionError(
            "connection refused"
        )
        counter = RedisSubmissionCounter(mock_redis)

        with pytest.raises(RedisConnectionError):
            await counter.count_recent_submissions("203.0.113.5", 3600)
