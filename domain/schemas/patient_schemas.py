from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from domain.enums import SubscriptionTier


class PatientUpsert(BaseModel):
    """Basic data collected when a user registers with the bot"""

    name: Optional[str] = Field(None, max_length=200)
    age: Optional[int] = Field(None, ge=1, le=120)
    height: Optional[str] = Field(
        None, max_length=50, description="As typed by the user (cm or feet/inches)"
    )
    weight: Optional[str] = Field(
        None, max_length=50, description="As typed by the user (kg or lb)"
    )

    @field_validator("name", "height", "weight", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class PatientResponse(BaseModel):
    user_id: int
    name: Optional[str]
    age: Optional[int]
    height: Optional[str]
    weight: Optional[str]
    subscription: SubscriptionTier
    requests: int
    subscription_started_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class QuotaStatus(BaseModel):
    """Whether a user may send another request to the assistant"""

    has_requests: bool
    is_premium: bool
    remaining_requests: Optional[int] = Field(
        None, description="Remaining free requests; None for premium tiers"
    )


class ConsumeResponse(BaseModel):
    consumed: bool
    status: QuotaStatus
    warning: Optional[str] = None


class SubscriptionUpdate(BaseModel):
    tier: SubscriptionTier


class ExpiringSubscription(BaseModel):
    """Premium patient whose subscription period ends soon"""

    user_id: int
    tier: SubscriptionTier
    started_at: datetime
    expires_at: datetime
    days_left: int
    message: str
