"""Device-local key/value cache for offline symptom data.

Keys live under a namespace (``<namespace>/<key>``) so symptom, trigger,
common-symptom, preference and sync data never collide. Values are stored as
JSON. Every mutation goes through a single ``asyncio.Lock``, so concurrent
read-modify-write cycles on the symptom list cannot lose updates.

All operations raise :class:`LocalStorageError` on failure, except
:meth:`LocalCache.get_symptoms`, which degrades to an empty list: callers
cannot tell "no local data" from "local data unreadable".
"""
import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from symptrack.core.errors import LocalStorageError
from symptrack.models.base import ensure_aware
from symptrack.models.symptoms import LocalSymptom

logger = logging.getLogger(__name__)


class StorageKey(str, Enum):
    symptoms = "symptoms"
    triggers = "triggers"
    common_symptoms = "common_symptoms"
    last_sync = "last_sync"
    preferences = "preferences"


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class CacheBackend(Protocol):
    async def read(self) -> dict[str, str]: ...

    async def write(self, data: dict[str, str]) -> None: ...


def _check_quota(data: dict[str, str], max_bytes: int | None) -> None:
    if max_bytes is None:
        return
    size = sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())
    if size > max_bytes:
        raise LocalStorageError(
            f"Local storage quota exceeded ({size} > {max_bytes} bytes)"
        )


class MemoryBackend:
    """Process-memory backend; used for tests and ephemeral sessions."""

    def __init__(self, max_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self.max_bytes = max_bytes

    async def read(self) -> dict[str, str]:
        return dict(self._data)

    async def write(self, data: dict[str, str]) -> None:
        _check_quota(data, self.max_bytes)
        self._data = dict(data)


class JsonFileBackend:
    """Single JSON file on disk, replaced atomically on every write."""

    def __init__(self, path: str | Path, max_bytes: int | None = None) -> None:
        self.path = Path(path).expanduser()
        self.max_bytes = max_bytes

    def _read_sync(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise LocalStorageError(f"Local cache at {self.path} is unreadable: {exc}") from exc
        if not isinstance(raw, dict):
            raise LocalStorageError(f"Local cache at {self.path} is corrupt")
        return raw

    def _write_sync(self, data: dict[str, str]) -> None:
        _check_quota(data, self.max_bytes)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as exc:
            raise LocalStorageError(f"Could not write local cache at {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise LocalStorageError(f"Could not write local cache at {self.path}: {exc}") from exc

    async def read(self) -> dict[str, str]:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, data: dict[str, str]) -> None:
        await asyncio.to_thread(self._write_sync, data)


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class LocalCache:
    def __init__(self, backend: CacheBackend, namespace: str = "symptom-tracker") -> None:
        self._backend = backend
        self._namespace = namespace
        self._lock = asyncio.Lock()

    def key(self, key: StorageKey) -> str:
        return f"{self._namespace}/{key.value}"

    async def _read_all(self) -> dict[str, str]:
        try:
            return await self._backend.read()
        except LocalStorageError:
            raise
        except Exception as exc:
            raise LocalStorageError(f"Local cache read failed: {exc}") from exc

    async def _write_all(self, data: dict[str, str]) -> None:
        try:
            await self._backend.write(data)
        except LocalStorageError:
            raise
        except Exception as exc:
            raise LocalStorageError(f"Local cache write failed: {exc}") from exc

    # -- generic items ------------------------------------------------------

    async def get_item(self, key: StorageKey) -> Any | None:
        data = await self._read_all()
        raw = data.get(self.key(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LocalStorageError(f"Stored value for {key.value!r} is corrupt") from exc

    async def set_item(self, key: StorageKey, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise LocalStorageError(f"Value for {key.value!r} is not serializable: {exc}") from exc
        async with self._lock:
            data = await self._read_all()
            data[self.key(key)] = encoded
            await self._write_all(data)

    async def remove_item(self, key: StorageKey) -> None:
        async with self._lock:
            data = await self._read_all()
            if data.pop(self.key(key), None) is not None:
                await self._write_all(data)

    # -- symptoms -----------------------------------------------------------

    def _decode_symptoms(self, raw: str | None) -> list[LocalSymptom]:
        if raw is None:
            return []
        try:
            rows = json.loads(raw)
            return [LocalSymptom.model_validate(row) for row in rows]
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            raise LocalStorageError(f"Stored symptom list is corrupt: {exc}") from exc

    @staticmethod
    def _encode_symptoms(symptoms: list[LocalSymptom]) -> str:
        return json.dumps([s.to_wire() for s in symptoms])

    async def get_symptoms(self) -> list[LocalSymptom]:
        """Return every cached symptom; any read failure yields ``[]``."""
        try:
            data = await self._read_all()
            return self._decode_symptoms(data.get(self.key(StorageKey.symptoms)))
        except LocalStorageError as exc:
            logger.warning("Treating unreadable local symptom list as empty: %s", exc)
            return []

    async def update_symptoms(
        self, mutate: Callable[[list[LocalSymptom]], list[LocalSymptom]]
    ) -> list[LocalSymptom]:
        """Atomically replace the symptom list with ``mutate(current)``.

        Unlike :meth:`get_symptoms`, a corrupt stored list raises here so a
        write never silently discards existing records.
        """
        async with self._lock:
            data = await self._read_all()
            current = self._decode_symptoms(data.get(self.key(StorageKey.symptoms)))
            updated = mutate(current)
            data[self.key(StorageKey.symptoms)] = self._encode_symptoms(updated)
            await self._write_all(data)
            return updated

    async def store_symptom(self, symptom: LocalSymptom) -> None:
        await self.update_symptoms(lambda current: [*current, symptom])

    async def clear_symptoms(self) -> None:
        async with self._lock:
            data = await self._read_all()
            data[self.key(StorageKey.symptoms)] = "[]"
            await self._write_all(data)

    # -- sync metadata ------------------------------------------------------

    async def get_last_sync(self) -> datetime | None:
        raw = await self.get_item(StorageKey.last_sync)
        if raw is None:
            return None
        try:
            return ensure_aware(datetime.fromisoformat(raw))
        except (TypeError, ValueError) as exc:
            raise LocalStorageError(f"Stored last_sync value is corrupt: {raw!r}") from exc

    async def set_last_sync(self, moment: datetime) -> None:
        await self.set_item(StorageKey.last_sync, ensure_aware(moment).isoformat())
