import logging

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import ValidationError

from symptrack.api.dependencies import Store
from symptrack.api.errors import format_validation_errors
from symptrack.models.medications import Medication, MedicationCreate, MedicationUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/medications", tags=["medications"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Medication not found",
    )


@router.get("", response_model=list[Medication], summary="List medications")
async def list_medications(store: Store) -> list[Medication]:
    return await store.get_medications()


@router.get(
    "/active",
    response_model=list[Medication],
    summary="List active medications",
)
async def list_active_medications(store: Store) -> list[Medication]:
    return await store.get_active_medications()


@router.get("/{medication_id}", response_model=Medication, summary="Get a medication")
async def get_medication(medication_id: int, store: Store) -> Medication:
    medication = await store.get_medication_by_id(medication_id)
    if medication is None:
        raise _not_found()
    return medication


@router.post(
    "",
    response_model=Medication,
    status_code=status.HTTP_201_CREATED,
    summary="Create a medication",
)
async def create_medication(payload: MedicationCreate, store: Store) -> Medication:
    medication = await store.insert_medication(payload)
    logger.info("Medication created: id=%s name=%s", medication.id, medication.name)
    return medication


@router.patch(
    "/{medication_id}",
    response_model=Medication,
    summary="Partially update a medication",
)
async def update_medication(
    medication_id: int, payload: MedicationUpdate, store: Store
) -> Medication:
    """Apply only the fields present in the payload.

    Raises:
        HTTPException: 400 if the merged record is invalid (e.g. name set to null).
        HTTPException: 404 if the medication does not exist.
    """
    try:
        medication = await store.update_medication(medication_id, payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=format_validation_errors(exc.errors()),
        )
    if medication is None:
        raise _not_found()
    logger.info("Medication updated: id=%s", medication_id)
    return medication


@router.delete(
    "/{medication_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a medication",
)
async def delete_medication(medication_id: int, store: Store) -> Response:
    if not await store.delete_medication(medication_id):
        raise _not_found()
    logger.info("Medication deleted: id=%s", medication_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
