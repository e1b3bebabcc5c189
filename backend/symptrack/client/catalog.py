"""Trigger and common-symptom catalogs as seen by the client.

The last catalogs fetched from the server are mirrored into the local cache
(``triggers`` and ``common_symptoms`` keys) so suggestions work offline.
Typed trigger names are resolved case-insensitively against the catalog so
"stress" reuses an existing "Stress".
"""
import logging

from symptrack.client.local_cache import LocalCache, StorageKey
from symptrack.client.remote import RemoteStore
from symptrack.core.errors import LocalStorageError, RemoteStoreError

logger = logging.getLogger(__name__)


def find_by_name(names: list[str], name: str) -> str | None:
    key = name.strip().casefold()
    for existing in names:
        if existing.casefold() == key:
            return existing
    return None


class CatalogService:
    def __init__(self, cache: LocalCache, remote: RemoteStore) -> None:
        self._cache = cache
        self._remote = remote

    async def _cached_names(self, key: StorageKey) -> list[str]:
        try:
            return list(await self._cache.get_item(key) or [])
        except LocalStorageError as exc:
            logger.warning("Cached %s unreadable: %s", key.value, exc)
            return []

    async def triggers(self) -> list[str]:
        return await self._cached_names(StorageKey.triggers)

    async def common_symptoms(self) -> list[str]:
        return await self._cached_names(StorageKey.common_symptoms)

    async def refresh(self) -> None:
        """Push locally created catalog names, then mirror both server catalogs.

        Names added while offline exist only in the local mirror; they are
        created on the server first so the mirror never drops them.

        Raises:
            RemoteStoreError: if a catalog cannot be fetched or a name pushed.
            LocalStorageError: if the mirror cannot be written.
        """
        triggers = await self._merge(
            StorageKey.triggers, self._remote.list_triggers, self._remote.create_trigger
        )
        common = await self._merge(
            StorageKey.common_symptoms,
            self._remote.list_common_symptoms,
            self._remote.create_common_symptom,
        )
        await self._cache.set_item(StorageKey.triggers, triggers)
        await self._cache.set_item(StorageKey.common_symptoms, common)
        logger.info(
            "Catalogs refreshed: triggers=%d common_symptoms=%d", len(triggers), len(common)
        )

    async def _merge(self, key: StorageKey, list_remote, create_remote) -> list[str]:
        names = [item.name for item in await list_remote()]
        for local_name in await self._cached_names(key):
            if find_by_name(names, local_name) is None:
                created = await create_remote(local_name)
                logger.info("Pushed offline %s entry %r", key.value, created.name)
                if find_by_name(names, created.name) is None:
                    names.append(created.name)
        return names

    async def resolve_triggers(self, names: list[str], offline: bool) -> list[str]:
        """Return ``names`` with known triggers replaced by their stored spelling.

        Unknown names are created: on the server when online, in the cached
        ``triggers`` list when offline. The server also dedupes by name, so a
        name missing from a stale mirror still resolves to the stored
        spelling. Duplicates within ``names`` collapse.
        """
        known = await self.triggers()
        resolved: list[str] = []
        for name in names:
            existing = find_by_name(known, name)
            if existing is None:
                existing = await self._add_trigger(name.strip(), offline)
                known.append(existing)
            if existing not in resolved:
                resolved.append(existing)
        return resolved

    async def _add_trigger(self, name: str, offline: bool) -> str:
        # Online writes only touch the server; the mirror catches up on refresh().
        if not offline:
            try:
                return (await self._remote.create_trigger(name)).name
            except RemoteStoreError as exc:
                logger.warning("Could not create trigger %r on server: %s", name, exc)
                raise
        known = await self.triggers()
        if find_by_name(known, name) is None:
            await self._cache.set_item(StorageKey.triggers, [*known, name])
        return name
