"""Client facade wiring the offline data layer together.

Every public coroutine here is an operation boundary: failures are logged and
turned into a :class:`Notification` instead of propagating, so one failing
view or write never takes the rest of the client down.
"""
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from symptrack.client import notifications
from symptrack.client.catalog import CatalogService
from symptrack.client.local_cache import JsonFileBackend, LocalCache, StorageKey
from symptrack.client.notifications import Notification
from symptrack.client.offline import SymptomWriter, WriteResult
from symptrack.client.preferences import Preferences, PreferenceStore
from symptrack.client.query_cache import SYMPTOMS_QUERY, QueryCache
from symptrack.client.remote import RemoteStore
from symptrack.client.sync import SyncReconciler, SyncReport
from symptrack.core.config import settings
from symptrack.core.errors import RemoteStoreError, TrackerError
from symptrack.models.insights import DashboardSummary, InsightsResponse, Period
from symptrack.models.symptoms import Symptom, SymptomCreate
from symptrack.services.analytics import build_dashboard, build_insights

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    value: T | None = None
    notification: Notification | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


class SymptomTracker:
    def __init__(self, cache: LocalCache, remote: RemoteStore) -> None:
        self.cache = cache
        self.remote = remote
        self.queries = QueryCache()
        self.preferences = PreferenceStore(cache)
        self.catalog = CatalogService(cache, remote)
        self.writer = SymptomWriter(cache, remote, self.queries)
        self.reconciler = SyncReconciler(cache, remote, self.queries)

    @classmethod
    def from_settings(cls) -> "SymptomTracker":
        backend = JsonFileBackend(
            settings.LOCAL_CACHE_PATH, max_bytes=settings.LOCAL_CACHE_MAX_BYTES
        )
        return cls(
            LocalCache(backend, namespace=settings.LOCAL_CACHE_NAMESPACE),
            RemoteStore.from_settings(),
        )

    async def start(self) -> None:
        await self.preferences.load()
        if not self.preferences.offline_mode:
            try:
                await self.catalog.refresh()
            except TrackerError as exc:
                logger.warning("Catalog refresh skipped at startup: %s", exc)

    async def close(self) -> None:
        await self.remote.aclose()

    # -- writes -------------------------------------------------------------

    async def log_symptom(self, data: dict[str, Any]) -> Outcome[WriteResult]:
        """Validate and record a symptom submission from the form."""
        try:
            payload = SymptomCreate.model_validate(data)
        except ValidationError as exc:
            logger.info("Symptom submission rejected: %s", exc.errors())
            return Outcome(notification=notifications.could_not_save("add symptom", exc))

        offline = self.preferences.offline_mode
        try:
            triggers = await self.catalog.resolve_triggers(payload.triggers, offline)
            payload = payload.model_copy(update={"triggers": triggers})
            result = await self.writer.submit(payload, offline=offline)
        except TrackerError as exc:
            logger.error("Failed to add symptom (offline=%s): %s", offline, exc, exc_info=True)
            return Outcome(notification=notifications.could_not_save("add symptom", exc))

        if result.destination == "local":
            notice = notifications.saved_locally(result.symptom.name)
        else:
            notice = notifications.saved_remotely(result.symptom.name)
        return Outcome(value=result, notification=notice)

    async def sync(self) -> Outcome[SyncReport]:
        """Push unsynced symptoms, then push offline catalog names and re-mirror.

        A catalog failure is logged and does not change the sync outcome; the
        names stay cached and are pushed on the next refresh.
        """
        try:
            report = await self.reconciler.sync()
        except TrackerError as exc:
            logger.error("Sync failed: %s", exc, exc_info=True)
            return Outcome(notification=notifications.could_not_save("sync symptoms", exc))
        try:
            await self.catalog.refresh()
        except TrackerError as exc:
            logger.warning("Catalog refresh after sync failed: %s", exc)
        return Outcome(
            value=report,
            notification=notifications.sync_result(report.pushed, report.failed),
        )

    # -- settings -----------------------------------------------------------

    async def update_preferences(self, **changes) -> Outcome[Preferences]:
        """Save preference changes.

        Switching ``offline_mode`` drops the cached symptom list, since which
        sources it was built from depends on the mode.
        """
        previous = self.preferences.offline_mode
        try:
            updated = await self.preferences.update(**changes)
        except (ValidationError, TrackerError) as exc:
            logger.warning("Preferences not saved: %s", exc)
            return Outcome(notification=notifications.could_not_save("save settings", exc))
        if updated.offline_mode != previous:
            self.queries.invalidate(SYMPTOMS_QUERY)
        return Outcome(value=updated, notification=notifications.settings_saved())

    async def reset_settings(self) -> Outcome[Preferences]:
        previous = self.preferences.offline_mode
        try:
            defaults = await self.preferences.reset()
        except TrackerError as exc:
            logger.error("Settings reset failed: %s", exc, exc_info=True)
            return Outcome(notification=notifications.could_not_save("reset settings", exc))
        if defaults.offline_mode != previous:
            self.queries.invalidate(SYMPTOMS_QUERY)
        return Outcome(value=defaults, notification=notifications.settings_reset())

    async def clear_local_data(self) -> Outcome[bool]:
        """Remove cached symptoms, catalogs and sync metadata; keep preferences."""
        try:
            await self.cache.clear_symptoms()
            for key in (StorageKey.triggers, StorageKey.common_symptoms, StorageKey.last_sync):
                await self.cache.remove_item(key)
        except TrackerError as exc:
            logger.error("Clearing local data failed: %s", exc, exc_info=True)
            return Outcome(notification=notifications.could_not_save("clear data", exc))
        finally:
            self.queries.invalidate(SYMPTOMS_QUERY)
        logger.info("Local data cleared")
        return Outcome(value=True, notification=notifications.data_cleared())

    # -- reads --------------------------------------------------------------

    async def _load_symptoms(self) -> list[Symptom]:
        """Server records plus local records not yet pushed.

        In offline mode an unreachable server is tolerated and only local
        records are returned.
        """
        local = [s for s in await self.cache.get_symptoms() if not s.is_synced]
        try:
            remote = await self.remote.list_symptoms()
        except RemoteStoreError:
            if not self.preferences.offline_mode:
                raise
            logger.info("Server unavailable in offline mode; showing local symptoms only")
            remote = []
        return [*remote, *local]

    async def symptoms(self) -> list[Symptom]:
        return await self.queries.fetch(SYMPTOMS_QUERY, self._load_symptoms)

    async def dashboard(self) -> Outcome[DashboardSummary]:
        try:
            return Outcome(value=build_dashboard(await self.symptoms()))
        except Exception as exc:
            logger.error("Dashboard failed: %s", exc, exc_info=True)
            return Outcome(notification=notifications.could_not_load("dashboard", exc))

    async def insights(self, period: Period = "week") -> Outcome[InsightsResponse]:
        try:
            return Outcome(value=build_insights(await self.symptoms(), period))
        except Exception as exc:
            logger.error("Insights failed: %s", exc, exc_info=True)
            return Outcome(notification=notifications.could_not_load("insights", exc))
