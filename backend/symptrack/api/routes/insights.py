import logging

from fastapi import APIRouter, Query

from symptrack.api.dependencies import Store
from symptrack.models.insights import DashboardSummary, InsightsResponse, Period
from symptrack.services.analytics import build_dashboard, build_insights

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get(
    "",
    response_model=InsightsResponse,
    summary="Symptom insights for a period",
    description=(
        "Severity distribution, top 10 symptom types, the current week's "
        "day-by-day distribution and top 5 triggers, computed over the "
        "trailing week, month or quarter."
    ),
)
async def get_insights(
    store: Store,
    period: Period = Query(default="week", description="week, month or quarter"),
) -> InsightsResponse:
    symptoms = await store.get_symptoms()
    insights = build_insights(symptoms, period)
    logger.info(
        "Insights: period=%s total=%d types=%d triggers=%d",
        period,
        insights.total_symptoms,
        len(insights.symptoms_by_type),
        len(insights.common_triggers),
    )
    return insights


@router.get(
    "/dashboard",
    response_model=DashboardSummary,
    summary="Dashboard summary",
    description="Severity counts over the last 7 days plus the current week's trend.",
)
async def get_dashboard(store: Store) -> DashboardSummary:
    return build_dashboard(await store.get_symptoms())
