"""Router aggregation."""

from fastapi import APIRouter

from services.api.src.screening.routes.assessment import router as assessment_router

api_router = APIRouter()
api_router.include_router(assessment_router, prefix="/api/v1/assessment", tags=["assessment"])
