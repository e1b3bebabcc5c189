"""Tests for the offline write path (symptrack.client.offline)."""
import asyncio
import uuid
from unittest.mock import AsyncMock

import pytest

from symptrack.client.local_cache import LocalCache, MemoryBackend
from symptrack.client.offline import LocalIdGenerator, SymptomWriter
from symptrack.client.query_cache import SYMPTOMS_QUERY, QueryCache
from symptrack.client.remote import RemoteStore
from symptrack.core.errors import LocalStorageError, RemoteUnavailableError
from symptrack.models.symptoms import Symptom, SymptomCreate

PAYLOAD = SymptomCreate(name="Headache", severity=7, duration=2, duration_type="hours")


def make_remote() -> AsyncMock:
    remote = AsyncMock(spec=RemoteStore)

    async def create_symptom(payload):
        return Symptom(
            **payload.model_dump(exclude={"client_id"}), id=41, client_id=payload.client_id
        )

    remote.create_symptom.side_effect = create_symptom
    return remote


async def _primed_queries() -> QueryCache:
    queries = QueryCache()

    async def loader():
        return ["stale"]

    await queries.fetch(SYMPTOMS_QUERY, loader)
    return queries


class FailingBackend(MemoryBackend):
    async def write(self, data):
        raise LocalStorageError("quota exceeded")


# ---------------------------------------------------------------------------
# LocalIdGenerator
# ---------------------------------------------------------------------------


class TestLocalIdGenerator:
    def test_uses_millisecond_timestamp(self):
        gen = LocalIdGenerator(clock=lambda: 1700000000.123)
        assert gen() == 1700000000123

    def test_strictly_increasing_on_same_clock_tick(self):
        gen = LocalIdGenerator(clock=lambda: 1700000000.0)
        ids = [gen() for _ in range(5)]
        assert ids == sorted(set(ids))
        assert len(ids) == 5

    def test_clock_moving_backwards_still_increases(self):
        ticks = iter([2.0, 1.0])
        gen = LocalIdGenerator(clock=lambda: next(ticks))
        first, second = gen(), gen()
        assert second > first


# ---------------------------------------------------------------------------
# SymptomWriter
# ---------------------------------------------------------------------------


class TestOfflineSubmit:
    def test_writes_only_the_local_cache(self):
        cache = LocalCache(MemoryBackend())
        remote = make_remote()

        async def scenario():
            writer = SymptomWriter(cache, remote, await _primed_queries())
            result = await writer.submit(PAYLOAD, offline=True)
            return result, await cache.get_symptoms()

        result, stored = asyncio.run(scenario())
        assert result.destination == "local"
        remote.create_symptom.assert_not_called()
        assert len(stored) == 1
        assert stored[0].name == "Headache"
        assert stored[0].remote_id is None
        assert stored[0].client_id == result.symptom.client_id

    def test_assigns_client_id_and_local_id(self):
        cache = LocalCache(MemoryBackend())
        ids = iter([100, 101])

        async def scenario():
            writer = SymptomWriter(
                cache, make_remote(), QueryCache(), id_generator=lambda: next(ids)
            )
            first = await writer.submit(PAYLOAD, offline=True)
            second = await writer.submit(PAYLOAD, offline=True)
            return first.symptom, second.symptom

        first, second = asyncio.run(scenario())
        assert (first.id, second.id) == (100, 101)
        assert isinstance(first.client_id, uuid.UUID)
        assert first.client_id != second.client_id

    def test_keeps_supplied_client_id(self):
        client_id = uuid.uuid4()
        cache = LocalCache(MemoryBackend())

        async def scenario():
            writer = SymptomWriter(cache, make_remote(), QueryCache())
            payload = PAYLOAD.model_copy(update={"client_id": client_id})
            return await writer.submit(payload, offline=True)

        assert asyncio.run(scenario()).symptom.client_id == client_id

    def test_invalidates_symptom_query(self):
        cache = LocalCache(MemoryBackend())

        async def scenario():
            queries = await _primed_queries()
            await SymptomWriter(cache, make_remote(), queries).submit(PAYLOAD, offline=True)
            return queries

        assert SYMPTOMS_QUERY not in asyncio.run(scenario())

    def test_local_failure_raises_and_skips_remote(self):
        cache = LocalCache(FailingBackend())
        remote = make_remote()

        async def scenario():
            queries = await _primed_queries()
            writer = SymptomWriter(cache, remote, queries)
            with pytest.raises(LocalStorageError):
                await writer.submit(PAYLOAD, offline=True)
            return queries

        queries = asyncio.run(scenario())
        remote.create_symptom.assert_not_called()
        assert SYMPTOMS_QUERY in queries


class TestOnlineSubmit:
    def test_writes_only_the_remote_store(self):
        backend = MemoryBackend()
        cache = LocalCache(backend)
        remote = make_remote()

        async def scenario():
            writer = SymptomWriter(cache, remote, await _primed_queries())
            return await writer.submit(PAYLOAD, offline=False)

        result = asyncio.run(scenario())
        assert result.destination == "remote"
        assert result.symptom.id == 41
        remote.create_symptom.assert_awaited_once()
        sent = remote.create_symptom.await_args.args[0]
        assert sent.client_id is not None
        assert asyncio.run(backend.read()) == {}

    def test_invalidates_symptom_query(self):
        async def scenario():
            queries = await _primed_queries()
            writer = SymptomWriter(LocalCache(MemoryBackend()), make_remote(), queries)
            await writer.submit(PAYLOAD, offline=False)
            return queries

        assert SYMPTOMS_QUERY not in asyncio.run(scenario())

    def test_remote_failure_raises_without_local_fallback(self):
        backend = MemoryBackend()
        remote = make_remote()
        remote.create_symptom.side_effect = RemoteUnavailableError("connection refused")

        async def scenario():
            writer = SymptomWriter(LocalCache(backend), remote, QueryCache())
            with pytest.raises(RemoteUnavailableError):
                await writer.submit(PAYLOAD, offline=False)

        asyncio.run(scenario())
        assert asyncio.run(backend.read()) == {}
