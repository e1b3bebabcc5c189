"""In-memory remote store backing the REST API.

Every collection is a process-wide dict keyed by an auto-incrementing integer
id. Data is lost on restart. Each method is atomic with respect to the event
loop (no awaits inside), but there is no cross-collection transaction.
"""
import logging
import uuid
from datetime import datetime, timezone

from symptrack.core.config import settings
from symptrack.models.catalog import CatalogItem
from symptrack.models.medications import Medication, MedicationCreate, MedicationUpdate
from symptrack.models.profile import UserProfile, UserProfileUpdate
from symptrack.models.salt import (
    SaltIntake,
    SaltIntakeCreate,
    SaltRecommendation,
    SaltRecommendationUpdate,
)
from symptrack.models.symptoms import Symptom, SymptomCreate

logger = logging.getLogger(__name__)

DEFAULT_TRIGGERS = [
    "Stress",
    "Lack of sleep",
    "Food sensitivity",
    "Exercise",
    "Weather change",
]

DEFAULT_COMMON_SYMPTOMS = [
    "Headache",
    "Nausea",
    "Fatigue",
    "Dizziness",
    "Joint Pain",
    "Fever",
    "Chest Pain",
    "Anxiety",
]


class _Catalog:
    """Name catalog deduplicated by case-insensitive name."""

    def __init__(self) -> None:
        self._items: dict[int, CatalogItem] = {}
        self._next_id = 1

    def list(self) -> list[CatalogItem]:
        return list(self._items.values())

    def find(self, name: str) -> CatalogItem | None:
        key = name.strip().casefold()
        for item in self._items.values():
            if item.name.casefold() == key:
                return item
        return None

    def add(self, name: str) -> tuple[CatalogItem, bool]:
        existing = self.find(name)
        if existing:
            return existing, False
        item = CatalogItem(id=self._next_id, name=name.strip())
        self._items[item.id] = item
        self._next_id += 1
        return item, True


class MemStorage:
    def __init__(self, seed: bool = True) -> None:
        self._symptoms: dict[int, Symptom] = {}
        self._symptom_id = 1
        self._by_client_id: dict[uuid.UUID, int] = {}

        self.triggers = _Catalog()
        self.common_symptoms = _Catalog()

        self._medications: dict[int, Medication] = {}
        self._medication_id = 1

        self._profile: UserProfile | None = None

        self._salt_intakes: dict[int, SaltIntake] = {}
        self._salt_intake_id = 1
        self._salt_recommendation = SaltRecommendation()

        if seed:
            for name in DEFAULT_TRIGGERS:
                self.triggers.add(name)
            for name in DEFAULT_COMMON_SYMPTOMS:
                self.common_symptoms.add(name)

    # -- symptoms -----------------------------------------------------------

    async def get_symptoms(self) -> list[Symptom]:
        return list(self._symptoms.values())

    async def get_symptom_by_id(self, symptom_id: int) -> Symptom | None:
        return self._symptoms.get(symptom_id)

    async def get_symptoms_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[Symptom]:
        return [s for s in self._symptoms.values() if start <= s.date <= end]

    async def insert_symptom(self, payload: SymptomCreate) -> tuple[Symptom, bool]:
        """Insert a symptom, or return the stored one when its client_id is known.

        Returns ``(symptom, created)``.
        """
        if payload.client_id is not None:
            existing_id = self._by_client_id.get(payload.client_id)
            if existing_id is not None and existing_id in self._symptoms:
                return self._symptoms[existing_id], False

        client_id = payload.client_id or uuid.uuid4()
        symptom = Symptom(
            **payload.model_dump(exclude={"client_id"}),
            id=self._symptom_id,
            client_id=client_id,
        )
        self._symptoms[symptom.id] = symptom
        self._by_client_id[client_id] = symptom.id
        self._symptom_id += 1
        return symptom, True

    async def delete_symptom(self, symptom_id: int) -> bool:
        symptom = self._symptoms.pop(symptom_id, None)
        if symptom is None:
            return False
        self._by_client_id.pop(symptom.client_id, None)
        return True

    # -- triggers / common symptoms -----------------------------------------

    async def get_triggers(self) -> list[CatalogItem]:
        return self.triggers.list()

    async def insert_trigger(self, name: str) -> tuple[CatalogItem, bool]:
        return self.triggers.add(name)

    async def get_common_symptoms(self) -> list[CatalogItem]:
        return self.common_symptoms.list()

    async def insert_common_symptom(self, name: str) -> tuple[CatalogItem, bool]:
        return self.common_symptoms.add(name)

    # -- medications --------------------------------------------------------

    async def get_medications(self) -> list[Medication]:
        return list(self._medications.values())

    async def get_active_medications(self) -> list[Medication]:
        return [m for m in self._medications.values() if m.active]

    async def get_medication_by_id(self, medication_id: int) -> Medication | None:
        return self._medications.get(medication_id)

    async def insert_medication(self, payload: MedicationCreate) -> Medication:
        medication = Medication(**payload.model_dump(), id=self._medication_id)
        self._medications[medication.id] = medication
        self._medication_id += 1
        return medication

    async def update_medication(
        self, medication_id: int, changes: MedicationUpdate
    ) -> Medication | None:
        current = self._medications.get(medication_id)
        if current is None:
            return None
        updated = Medication.model_validate(
            {**current.model_dump(), **changes.model_dump(exclude_unset=True)}
        )
        self._medications[medication_id] = updated
        return updated

    async def delete_medication(self, medication_id: int) -> bool:
        return self._medications.pop(medication_id, None) is not None

    # -- profile ------------------------------------------------------------

    async def get_user_profile(self) -> UserProfile | None:
        return self._profile

    async def update_user_profile(self, changes: UserProfileUpdate) -> UserProfile:
        base = self._profile.model_dump() if self._profile else {}
        base.update(changes.model_dump(exclude_unset=True))
        base["updated_at"] = datetime.now(timezone.utc)
        self._profile = UserProfile(**base)
        return self._profile

    # -- salt ---------------------------------------------------------------

    async def get_salt_intakes(self) -> list[SaltIntake]:
        return sorted(self._salt_intakes.values(), key=lambda i: i.date, reverse=True)

    async def insert_salt_intake(self, payload: SaltIntakeCreate) -> SaltIntake:
        intake = SaltIntake(**payload.model_dump(), id=self._salt_intake_id)
        self._salt_intakes[intake.id] = intake
        self._salt_intake_id += 1
        return intake

    async def delete_salt_intake(self, intake_id: int) -> bool:
        return self._salt_intakes.pop(intake_id, None) is not None

    async def get_salt_recommendation(self) -> SaltRecommendation:
        return self._salt_recommendation

    async def update_salt_recommendation(
        self, changes: SaltRecommendationUpdate
    ) -> SaltRecommendation:
        self._salt_recommendation = SaltRecommendation.model_validate(
            {
                **self._salt_recommendation.model_dump(),
                **changes.model_dump(exclude_unset=True),
            }
        )
        return self._salt_recommendation


_storage: MemStorage | None = None


def get_storage() -> MemStorage:
    global _storage
    if _storage is None:
        _storage = MemStorage(seed=settings.SEED_CATALOGS)
        logger.info("In-memory store initialised (seed_catalogs=%s)", settings.SEED_CATALOGS)
    return _storage
