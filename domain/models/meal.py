"""
Meal log model.
"""

from sqlalchemy import BigInteger, Column, Integer, Numeric, Text, TIMESTAMP, Index
from sqlalchemy.sql import func

from domain.models.database import Base


class MealEntry(Base):
    """One dish logged by a user, as parsed from an assistant reply"""

    __tablename__ = "meals"

    meal_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, nullable=False)  # Telegram user id
    description = Column(Text, nullable=False)
    kcal = Column(Numeric(8, 2), nullable=False, default=0)
    protein = Column(Numeric(7, 2), nullable=False, default=0)
    fat = Column(Numeric(7, 2), nullable=False, default=0)
    carbohydrates = Column(Numeric(7, 2), nullable=False, default=0)
    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("ix_meals_user_created", "user_id", "created_at"),)
