from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from symptrack.api.errors import register_exception_handlers
from symptrack.api.routes import catalog, export, insights, medications, profile, salt, symptoms
from symptrack.core.config import settings
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
app = FastAPI(
    title="Symptrack API",
    description="Symptom, medication and salt-intake tracking API for POTS/dysautonomia",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(symptoms.router)
app.include_router(catalog.triggers_router)
app.include_router(catalog.common_symptoms_router)
app.include_router(medications.router)
app.include_router(profile.router)
app.include_router(salt.intakes_router)
app.include_router(salt.recommendation_router)
app.include_router(insights.router)
app.include_router(export.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "symptrack-api"}
