"""
Patient (bot user) model with subscription and request quota.
"""

from sqlalchemy import BigInteger, Column, Integer, Text, TIMESTAMP, Enum as SQLEnum
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.enums import SubscriptionTier


class Patient(Base):
    """Registered bot user"""

    __tablename__ = "patients"

    user_id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(Text)
    age = Column(Integer)
    height = Column(Text)  # free text as typed, e.g. "172" or 5'8"
    weight = Column(Text)
    subscription = Column(
        SQLEnum(SubscriptionTier, name="subscription_tier"),
        nullable=False,
        default=SubscriptionTier.FREE,
    )
    requests = Column(Integer, nullable=False, default=20)
    subscription_started_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
