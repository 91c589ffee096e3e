from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

# Largest values the meals table columns hold (Numeric(8,2) and Numeric(7,2))
MAX_KCAL = Decimal("999999.99")
MAX_GRAMS = Decimal("99999.99")


class MealRecord(BaseModel):
    """One dish parsed out of an assistant reply"""

    description: str = Field(..., min_length=1, description="Dish name")
    kcal: Decimal = Field(..., ge=0, le=MAX_KCAL, description="Energy in kcal")
    protein: Decimal = Field(..., ge=0, le=MAX_GRAMS, description="Protein grams")
    fat: Decimal = Field(..., ge=0, le=MAX_GRAMS, description="Fat grams")
    carbohydrates: Decimal = Field(
        ..., ge=0, le=MAX_GRAMS, description="Carbohydrate grams"
    )

    model_config = {"frozen": True}


class AssistantReply(BaseModel):
    """Free-text reply produced by the nutrition assistant for one user turn"""

    text: str = Field(..., description="Assistant reply exactly as received")


class ParsePreviewResponse(BaseModel):
    """Result of parsing a reply without storing anything"""

    fragments: int = Field(..., ge=0, description="Number of dish fragments found")
    records: List[MealRecord]
    skipped_as_error: bool = Field(
        default=False, description="True when the reply was an assistant error message"
    )


class MealEntryResponse(BaseModel):
    """Stored meal row"""

    meal_id: int
    user_id: int
    description: str
    kcal: Decimal
    protein: Decimal
    fat: Decimal
    carbohydrates: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class NutritionTotals(BaseModel):
    """Summed nutrition values"""

    kcal: Decimal = Decimal("0")
    protein: Decimal = Decimal("0")
    fat: Decimal = Decimal("0")
    carbohydrates: Decimal = Decimal("0")


class DailySummary(BaseModel):
    """Meals logged by one user during one local calendar day"""

    user_id: int
    day: date
    timezone: str
    entries: List[MealEntryResponse]
    totals: NutritionTotals
    text: Optional[str] = Field(None, description="Chat-ready Spanish rendering")
