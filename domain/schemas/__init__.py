"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.meal_schemas import (
    MealRecord,
    AssistantReply,
    ParsePreviewResponse,
    MealEntryResponse,
    NutritionTotals,
    DailySummary,
)
from domain.schemas.patient_schemas import (
    PatientUpsert,
    PatientResponse,
    QuotaStatus,
    ConsumeResponse,
    SubscriptionUpdate,
    ExpiringSubscription,
)

__all__ = [
    # Meal schemas
    "MealRecord",
    "AssistantReply",
    "ParsePreviewResponse",
    "MealEntryResponse",
    "NutritionTotals",
    "DailySummary",
    # Patient schemas
    "PatientUpsert",
    "PatientResponse",
    "QuotaStatus",
    "ConsumeResponse",
    "SubscriptionUpdate",
    "ExpiringSubscription",
]
