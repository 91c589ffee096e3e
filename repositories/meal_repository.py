"""
Meal Repository - Data access layer for the meal log
"""

from datetime import datetime
from typing import Iterable, List
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealEntry
from domain.schemas.meal_schemas import MealRecord


class MealRepository(BaseRepository[MealEntry]):
    """Repository for meal log data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealEntry)

    def add_records(
        self, user_id: int, records: Iterable[MealRecord], logged_at: datetime
    ) -> List[MealEntry]:
        """Insert one row per parsed record, all sharing the same timestamp"""
        entries = [
            MealEntry(
                user_id=user_id,
                description=record.description,
                kcal=record.kcal,
                protein=record.protein,
                fat=record.fat,
                carbohydrates=record.carbohydrates,
                created_at=logged_at,
            )
            for record in records
        ]
        if not entries:
            return []

        self.db.add_all(entries)
        self.db.commit()
        for entry in entries:
            self.db.refresh(entry)
        return entries

    def get_by_user_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> List[MealEntry]:
        """Meals for a user with start <= created_at < end, oldest first"""
        return (
            self.db.query(MealEntry)
            .filter(
                MealEntry.user_id == user_id,
                MealEntry.created_at >= start,
                MealEntry.created_at < end,
            )
            .order_by(MealEntry.created_at.asc(), MealEntry.meal_id.asc())
            .all()
        )
