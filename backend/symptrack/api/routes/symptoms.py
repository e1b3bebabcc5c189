import logging
from datetime import datetime, time, timezone

from fastapi import APIRouter, HTTPException, Query, Response, status

from symptrack.api.dependencies import Store
from symptrack.models.base import ensure_aware
from symptrack.models.symptoms import Symptom, SymptomCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/symptoms", tags=["symptoms"])


def _parse_bound(raw: str | None, *, end: bool) -> datetime | None:
    """Parse an ISO 8601 date or datetime query value.

    A bare date covers the whole UTC day: 00:00:00 as a start bound and
    23:59:59.999999 as an end bound. Returns None if the value is unparsable.
    """
    if not raw:
        return None
    value = raw.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if len(value) == 10:
        parsed = datetime.combine(parsed.date(), time.max if end else time.min)
    return ensure_aware(parsed)


# ---------------------------------------------------------------------------
# GET /api/symptoms
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=list[Symptom],
    summary="List symptoms",
    description="Return every symptom record held by the store.",
)
async def list_symptoms(store: Store) -> list[Symptom]:
    return await store.get_symptoms()


# ---------------------------------------------------------------------------
# GET /api/symptoms/range
# ---------------------------------------------------------------------------


@router.get(
    "/range",
    response_model=list[Symptom],
    summary="Symptoms in a date range",
    description="Return symptoms whose date falls within [startDate, endDate], inclusive.",
)
async def list_symptoms_in_range(
    store: Store,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
) -> list[Symptom]:
    """Inclusive range filter. Bare dates cover the full UTC day.

    Raises:
        HTTPException: 400 if either bound is missing or unparsable. A start
            after the end is not an error; it matches nothing.
    """
    start = _parse_bound(start_date, end=False)
    end = _parse_bound(end_date, end=True)
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date range provided",
        )

    symptoms = await store.get_symptoms_by_date_range(start, end)
    logger.info("Range query %s–%s matched %d symptoms", start, end, len(symptoms))
    return symptoms


# ---------------------------------------------------------------------------
# GET /api/symptoms/{symptom_id}
# ---------------------------------------------------------------------------


@router.get(
    "/{symptom_id}",
    response_model=Symptom,
    summary="Get a symptom",
)
async def get_symptom(symptom_id: int, store: Store) -> Symptom:
    symptom = await store.get_symptom_by_id(symptom_id)
    if symptom is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Symptom not found",
        )
    return symptom


# ---------------------------------------------------------------------------
# POST /api/symptoms
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=Symptom,
    status_code=status.HTTP_201_CREATED,
    summary="Create a symptom",
    description=(
        "Store a new symptom record. A payload whose clientId matches an "
        "existing record is treated as a replay and returns that record with 200."
    ),
)
async def create_symptom(
    payload: SymptomCreate, store: Store, response: Response
) -> Symptom:
    """Create a symptom, assigning the next server id.

    Raises:
        HTTPException: 400 if the payload fails schema validation.
    """
    symptom, created = await store.insert_symptom(payload)
    if created:
        logger.info(
            "Symptom created: id=%s name=%s severity=%d",
            symptom.id,
            symptom.name,
            symptom.severity,
        )
    else:
        response.status_code = status.HTTP_200_OK
        logger.info(
            "Symptom create replayed: client_id=%s -> id=%s", symptom.client_id, symptom.id
        )
    return symptom


# ---------------------------------------------------------------------------
# DELETE /api/symptoms/{symptom_id}
# ---------------------------------------------------------------------------


@router.delete(
    "/{symptom_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a symptom",
)
async def delete_symptom(symptom_id: int, store: Store) -> Response:
    if not await store.delete_symptom(symptom_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Symptom not found",
        )
    logger.info("Symptom deleted: id=%s", symptom_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
