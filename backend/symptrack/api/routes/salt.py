import logging

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import ValidationError

from symptrack.api.dependencies import Store
from symptrack.api.errors import format_validation_errors
from symptrack.models.salt import (
    DailySaltProgress,
    SaltIntake,
    SaltIntakeCreate,
    SaltRecommendation,
    SaltRecommendationUpdate,
)
from symptrack.services.salt import daily_salt_progress

logger = logging.getLogger(__name__)

intakes_router = APIRouter(prefix="/api/salt-intakes", tags=["salt"])
recommendation_router = APIRouter(prefix="/api/salt-recommendation", tags=["salt"])


# ---------------------------------------------------------------------------
# /api/salt-intakes
# ---------------------------------------------------------------------------


@intakes_router.get(
    "",
    response_model=list[SaltIntake],
    summary="List salt intakes",
    description="Return every logged salt intake, newest first.",
)
async def list_salt_intakes(store: Store) -> list[SaltIntake]:
    return await store.get_salt_intakes()


@intakes_router.get(
    "/today",
    response_model=DailySaltProgress,
    summary="Today's salt progress",
    description="Total salt logged today compared with the saved recommendation.",
)
async def get_today_progress(store: Store) -> DailySaltProgress:
    intakes = await store.get_salt_intakes()
    recommendation = await store.get_salt_recommendation()
    return daily_salt_progress(intakes, recommendation)


@intakes_router.post(
    "",
    response_model=SaltIntake,
    status_code=status.HTTP_201_CREATED,
    summary="Log a salt intake",
)
async def create_salt_intake(payload: SaltIntakeCreate, store: Store) -> SaltIntake:
    intake = await store.insert_salt_intake(payload)
    logger.info("Salt intake logged: id=%s amount=%.2fg", intake.id, intake.amount)
    return intake


@intakes_router.delete(
    "/{intake_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a salt intake",
)
async def delete_salt_intake(intake_id: int, store: Store) -> Response:
    if not await store.delete_salt_intake(intake_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salt intake not found",
        )
    logger.info("Salt intake deleted: id=%s", intake_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# /api/salt-recommendation
# ---------------------------------------------------------------------------


@recommendation_router.get(
    "", response_model=SaltRecommendation, summary="Get salt recommendation"
)
async def get_salt_recommendation(store: Store) -> SaltRecommendation:
    return await store.get_salt_recommendation()


@recommendation_router.patch(
    "", response_model=SaltRecommendation, summary="Update salt recommendation"
)
async def update_salt_recommendation(
    payload: SaltRecommendationUpdate, store: Store
) -> SaltRecommendation:
    """Merge the supplied targets into the saved recommendation.

    Raises:
        HTTPException: 400 if the merged recommendation is invalid.
    """
    try:
        recommendation = await store.update_salt_recommendation(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=format_validation_errors(exc.errors()),
        )
    logger.info(
        "Salt recommendation updated: fields=%s",
        sorted(payload.model_dump(exclude_unset=True)),
    )
    return recommendation
