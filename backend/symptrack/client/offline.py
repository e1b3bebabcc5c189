"""Offline write path: route a new symptom to the local cache or the server.

Exactly one destination is written per submission, chosen by the caller's
offline flag. Either way the cached symptom-list query is invalidated so the
next dashboard/history/insights read sees the new record. Failures surface as
``LocalStorageError`` (local path) or ``RemoteStoreError`` (remote path);
there is no automatic fallback to the other destination.
"""
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Literal

from symptrack.client.local_cache import LocalCache
from symptrack.client.query_cache import SYMPTOMS_QUERY, QueryCache
from symptrack.client.remote import RemoteStore
from symptrack.models.symptoms import LocalSymptom, Symptom, SymptomCreate

logger = logging.getLogger(__name__)

Destination = Literal["local", "remote"]


class LocalIdGenerator:
    """Millisecond-timestamp ids, strictly increasing within one process.

    Not unique across devices or sessions; ``client_id`` is the stable key.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> int:
        candidate = int(self._clock() * 1000)
        self._last = max(candidate, self._last + 1)
        return self._last


@dataclass
class WriteResult:
    destination: Destination
    symptom: Symptom


class SymptomWriter:
    def __init__(
        self,
        cache: LocalCache,
        remote: RemoteStore,
        queries: QueryCache,
        id_generator: LocalIdGenerator | None = None,
    ) -> None:
        self._cache = cache
        self._remote = remote
        self._queries = queries
        self._next_local_id = id_generator or LocalIdGenerator()

    async def submit(self, payload: SymptomCreate, offline: bool) -> WriteResult:
        """Write one validated symptom to a single destination.

        Raises:
            LocalStorageError: offline and the local cache write failed.
            RemoteStoreError: online and the server rejected or missed the write.
        """
        if payload.client_id is None:
            payload = payload.model_copy(update={"client_id": uuid.uuid4()})

        if offline:
            record = LocalSymptom(**payload.model_dump(), id=self._next_local_id())
            await self._cache.store_symptom(record)
            self._queries.invalidate(SYMPTOMS_QUERY)
            logger.info(
                "Symptom stored locally: local_id=%s client_id=%s", record.id, record.client_id
            )
            return WriteResult(destination="local", symptom=record)

        symptom = await self._remote.create_symptom(payload)
        self._queries.invalidate(SYMPTOMS_QUERY)
        logger.info("Symptom sent to server: id=%s", symptom.id)
        return WriteResult(destination="remote", symptom=symptom)
