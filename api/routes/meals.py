"""Meal log routes"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db
from domain.schemas.meal_schemas import (
    AssistantReply,
    DailySummary,
    MealEntryResponse,
    ParsePreviewResponse,
)
from services.meal_logging_service import MealLoggingService
from services.summary_service import SummaryService

router = APIRouter(tags=["Meals"])
logger = logging.getLogger("quecomi.api.meals")


@router.post("/meals/parse", response_model=ParsePreviewResponse)
def parse_reply(reply: AssistantReply):
    """Parse an assistant reply without storing anything."""
    return MealLoggingService.preview(reply.text)


@router.post(
    "/users/{user_id}/meals",
    response_model=List[MealEntryResponse],
    status_code=status.HTTP_201_CREATED,
)
def log_meals(user_id: int, reply: AssistantReply, db: Session = Depends(get_db)):
    """
    Store every dish found in an assistant reply.

    Replies without a recognizable dish return an empty list.
    """
    entries = MealLoggingService.log_response(db, user_id, reply.text)
    return [MealEntryResponse.model_validate(e) for e in entries]


@router.get("/users/{user_id}/meals/summary", response_model=DailySummary)
def get_daily_summary(
    user_id: int,
    at: Optional[datetime] = Query(
        None, description="Moment inside the requested day (defaults to now)"
    ),
    db: Session = Depends(get_db),
):
    """Meals and totals for the user's current local day."""
    return SummaryService.get_daily_summary(db, user_id, now=at)


@router.delete("/meals/{meal_id}")
def delete_meal(meal_id: int, db: Session = Depends(get_db)):
    MealLoggingService.delete_meal(db, meal_id)
    return {"status": "ok", "deleted": meal_id}
