"""Tests for the Redis cache store against a mocked client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from brewcache.cache.redis import RedisCacheStore
from brewcache.errors import BackendUnavailable

NOW = 1_700_000_000.0
NOW_MS = 1_700_000_000_000


@pytest.fixture
def mock_pipe() -> MagicMock:
    """Create mock pipeline."""
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 1, True])
    return pipe


@pytest.fixture
def mock_redis(mock_pipe: MagicMock) -> AsyncMock:
    """Create mock Redis client."""
    mock = AsyncMock()
    mock.get = AsyncMock(return_value=None)
    mock.psetex = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.exists = AsyncMock(return_value=1)
    mock.zrangebyscore = AsyncMock(return_value=[])
    mock.zrem = AsyncMock(return_value=1)
    mock.ping = AsyncMock(return_value=True)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=mock_pipe)
    ctx.__aexit__ = AsyncMock(return_value=False)
    mock.pipeline = MagicMock(return_value=ctx)
    return mock


@pytest.fixture
def redis_store(mock_redis: AsyncMock) -> RedisCacheStore:
    return RedisCacheStore(mock_redis, clock=lambda: NOW)


class TestValues:
    """Test plain value commands."""

    @pytest.mark.asyncio
    async def test_put_uses_psetex(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Values are written with a millisecond ttl."""
        await redis_store.put_with_ttl("ns:4", b"data", ttl=60)

        mock_redis.psetex.assert_awaited_once_with("ns:4", 60_000, b"data")

    @pytest.mark.asyncio
    async def test_fractional_ttl_rounds_up(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Sub-millisecond ttls never become zero."""
        await redis_store.put_with_ttl("k", b"v", ttl=0.0001)

        mock_redis.psetex.assert_awaited_once_with("k", 1, b"v")

    @pytest.mark.asyncio
    async def test_get_hit_and_miss(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Get returns bytes or None."""
        mock_redis.get.return_value = b"data"
        assert await redis_store.get("ns:4") == b"data"

        mock_redis.get.return_value = None
        assert await redis_store.get("ns:4") is None

    @pytest.mark.asyncio
    async def test_delete_and_exists(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Integer replies become booleans."""
        assert await redis_store.delete("ns:4")
        assert await redis_store.exists("ns:4")

        mock_redis.delete.return_value = 0
        mock_redis.exists.return_value = 0
        assert not await redis_store.delete("ns:4")
        assert not await redis_store.exists("ns:4")

    @pytest.mark.asyncio
    async def test_rejects_non_positive_ttl(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Nothing is sent for an invalid ttl."""
        with pytest.raises(ValueError):
            await redis_store.put_with_ttl("k", b"v", ttl=0)
        mock_redis.psetex.assert_not_awaited()


class TestMemberSets:
    """Test sorted-set backed member sets."""

    @pytest.mark.asyncio
    async def test_add_member_pipeline(
        self, redis_store: RedisCacheStore, mock_redis, mock_pipe
    ) -> None:
        """Prune, add with deadline score and refresh key expiry in one transaction."""
        await redis_store.add_member("ns:name:mocha", "4", ttl=60)

        mock_redis.pipeline.assert_called_once_with(transaction=True)
        mock_pipe.zremrangebyscore.assert_called_once_with("ns:name:mocha", "-inf", NOW_MS)
        mock_pipe.zadd.assert_called_once_with("ns:name:mocha", {"4": NOW_MS + 60_000})
        mock_pipe.pexpire.assert_called_once_with("ns:name:mocha", 60_000)
        mock_pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_members_reads_live_scores(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Only members with a deadline after now are read."""
        mock_redis.zrangebyscore.return_value = [b"4", b"7"]

        assert await redis_store.members("ns:name:mocha") == {"4", "7"}
        mock_redis.zrangebyscore.assert_awaited_once_with(
            "ns:name:mocha", f"({NOW_MS}", "+inf"
        )

    @pytest.mark.asyncio
    async def test_remove_member(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Remove uses ZREM."""
        assert await redis_store.remove_member("ns", "4")
        mock_redis.zrem.assert_awaited_once_with("ns", "4")

        mock_redis.zrem.return_value = 0
        assert not await redis_store.remove_member("ns", "4")


class TestErrors:
    """Test error translation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [RedisConnectionError("down"), RedisTimeoutError("slow")])
    async def test_connectivity_errors_become_backend_unavailable(
        self, redis_store: RedisCacheStore, mock_redis, error: Exception
    ) -> None:
        """Connection problems are not reported as misses."""
        mock_redis.get.side_effect = error

        with pytest.raises(BackendUnavailable) as exc_info:
            await redis_store.get("ns:4")

        assert exc_info.value.backend == "cache"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_pipeline_errors_translated(
        self, redis_store: RedisCacheStore, mock_pipe
    ) -> None:
        """Failures inside the pipeline are translated too."""
        mock_pipe.execute.side_effect = RedisConnectionError("down")

        with pytest.raises(BackendUnavailable):
            await redis_store.add_member("ns", "4", ttl=60)

    @pytest.mark.asyncio
    async def test_other_redis_errors_propagate(
        self, redis_store: RedisCacheStore, mock_redis
    ) -> None:
        """Command errors are bugs, not outages, and pass through unchanged."""
        mock_redis.zrangebyscore.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(ResponseError):
            await redis_store.members("ns:4")

    @pytest.mark.asyncio
    async def test_ping(self, redis_store: RedisCacheStore, mock_redis) -> None:
        """Ping reports connectivity without raising."""
        assert await redis_store.ping()

        mock_redis.ping.side_effect = RedisConnectionError("down")
        assert not await redis_store.ping()
