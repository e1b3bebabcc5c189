"""Best-effort push of locally cached symptoms to the remote store.

Each unsynced record is sent through the normal create endpoint carrying its
``client_id``; the server dedupes replays on that id, so a push interrupted
after the server accepted it is safe to repeat. Pushed records stay in the
local cache, marked with ``remote_id`` and ``synced_at``; they are never
deleted here. There is no retry or backoff: failed records stay unsynced
until the next call.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from symptrack.client.local_cache import LocalCache
from symptrack.client.query_cache import SYMPTOMS_QUERY, QueryCache
from symptrack.client.remote import RemoteStore
from symptrack.core.errors import RemoteStoreError
from symptrack.models.symptoms import LocalSymptom

logger = logging.getLogger(__name__)

SyncStatus = Literal["nothing_to_sync", "synced", "partial", "failed"]


@dataclass
class SyncReport:
    status: SyncStatus
    pushed: int = 0
    already_synced: int = 0
    failed: int = 0
    errors: dict[int, str] = field(default_factory=dict)
    last_sync: datetime | None = None


class SyncReconciler:
    def __init__(
        self,
        cache: LocalCache,
        remote: RemoteStore,
        queries: QueryCache | None = None,
        clock=None,
    ) -> None:
        self._cache = cache
        self._remote = remote
        self._queries = queries
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def sync(self) -> SyncReport:
        """Push every unsynced local record, then stamp ``last_sync``.

        An empty local list is reported as ``nothing_to_sync`` and writes
        nothing. Otherwise ``last_sync`` advances when at least one record was
        pushed or every record was already synced; a run where every push
        failed leaves it unchanged.

        Raises:
            LocalStorageError: if the push results cannot be saved locally.
        """
        records = await self._cache.get_symptoms()
        if not records:
            logger.debug("Sync: no local symptoms")
            return SyncReport(status="nothing_to_sync")

        pending = [r for r in records if not r.is_synced]
        report = SyncReport(status="synced", already_synced=len(records) - len(pending))
        pushed: dict[int, LocalSymptom] = {}

        for record in pending:
            try:
                remote = await self._remote.create_symptom(record.to_create())
            except RemoteStoreError as exc:
                report.failed += 1
                report.errors[record.id] = exc.message
                logger.warning("Sync: symptom local_id=%s not pushed: %s", record.id, exc)
                continue
            pushed[record.id] = record.model_copy(
                update={"remote_id": remote.id, "synced_at": self._clock()}
            )

        report.pushed = len(pushed)
        if pushed:
            await self._cache.update_symptoms(
                lambda current: [pushed.get(r.id, r) for r in current]
            )
            if self._queries is not None:
                self._queries.invalidate(SYMPTOMS_QUERY)

        if report.pushed or not pending:
            now = self._clock()
            await self._cache.set_last_sync(now)
            report.last_sync = now

        if not pending:
            report.status = "nothing_to_sync"
        elif report.failed and not report.pushed:
            report.status = "failed"
        elif report.failed:
            report.status = "partial"

        logger.info(
            "Sync finished: status=%s pushed=%d already_synced=%d failed=%d",
            report.status,
            report.pushed,
            report.already_synced,
            report.failed,
        )
        return report
