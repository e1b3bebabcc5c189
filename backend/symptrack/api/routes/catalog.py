"""Trigger and common-symptom catalogs.

Both are name lists deduplicated case-insensitively: POSTing a name that
already exists (in any casing) returns the stored item with 200 instead of
creating a new one.
"""
import logging

from fastapi import APIRouter, Response, status

from symptrack.api.dependencies import Store
from symptrack.models.catalog import CatalogItem, CatalogItemCreate

logger = logging.getLogger(__name__)

triggers_router = APIRouter(prefix="/api/triggers", tags=["triggers"])
common_symptoms_router = APIRouter(prefix="/api/common-symptoms", tags=["common-symptoms"])


@triggers_router.get("", response_model=list[CatalogItem], summary="List triggers")
async def list_triggers(store: Store) -> list[CatalogItem]:
    return await store.get_triggers()


@triggers_router.post(
    "",
    response_model=CatalogItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create or reuse a trigger",
)
async def create_trigger(
    payload: CatalogItemCreate, store: Store, response: Response
) -> CatalogItem:
    trigger, created = await store.insert_trigger(payload.name)
    if created:
        logger.info("Trigger created: id=%s name=%s", trigger.id, trigger.name)
    else:
        response.status_code = status.HTTP_200_OK
    return trigger


@common_symptoms_router.get(
    "", response_model=list[CatalogItem], summary="List common symptoms"
)
async def list_common_symptoms(store: Store) -> list[CatalogItem]:
    return await store.get_common_symptoms()


@common_symptoms_router.post(
    "",
    response_model=CatalogItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create or reuse a common symptom",
)
async def create_common_symptom(
    payload: CatalogItemCreate, store: Store, response: Response
) -> CatalogItem:
    item, created = await store.insert_common_symptom(payload.name)
    if created:
        logger.info("Common symptom created: id=%s name=%s", item.id, item.name)
    else:
        response.status_code = status.HTTP_200_OK
    return item
