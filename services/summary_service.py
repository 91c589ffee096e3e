from typing import Optional, Tuple
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo
from sqlalchemy.orm import Session
import logging

from app.config import settings
from domain.parsing.vocabulary import DISH_MARKER
from domain.schemas.meal_schemas import DailySummary, MealEntryResponse, NutritionTotals
from repositories import MealRepository

logger = logging.getLogger("quecomi.summary")

EMPTY_DAY_MESSAGE = "No has registrado comidas hoy."


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _plain(value: Decimal) -> str:
    """Decimal without trailing zeros or exponent: 30.50 -> '30.5', 500.00 -> '500'"""
    return f"{Decimal(value).normalize():f}"


class SummaryService:
    """Daily meal summaries in the user's local calendar day"""

    @staticmethod
    def local_day_bounds(
        now: datetime, tz_name: Optional[str] = None
    ) -> Tuple[date, datetime, datetime]:
        """
        Local calendar day containing ``now`` and its UTC bounds.

        Returns:
            (local_date, start_utc, end_utc) with the interval half-open:
            start_utc <= t < end_utc
        """
        tz = ZoneInfo(tz_name or settings.timezone)
        local_now = _as_utc(now).astimezone(tz)
        day = local_now.date()
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
        return day, start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    @staticmethod
    def compute_totals(entries) -> NutritionTotals:
        totals = NutritionTotals()
        for entry in entries:
            totals.kcal += Decimal(entry.kcal or 0)
            totals.protein += Decimal(entry.protein or 0)
            totals.fat += Decimal(entry.fat or 0)
            totals.carbohydrates += Decimal(entry.carbohydrates or 0)
        return totals

    @staticmethod
    def get_daily_summary(
        db: Session,
        user_id: int,
        now: Optional[datetime] = None,
        tz_name: Optional[str] = None,
    ) -> DailySummary:
        """Meals of ``user_id`` for the local day of ``now`` (default: current time)."""
        tz_name = tz_name or settings.timezone
        now = now or datetime.now(timezone.utc)
        day, start, end = SummaryService.local_day_bounds(now, tz_name)

        rows = MealRepository(db).get_by_user_between(user_id, start, end)
        entries = [MealEntryResponse.model_validate(row) for row in rows]
        for entry in entries:
            entry.created_at = _as_utc(entry.created_at)

        summary = DailySummary(
            user_id=user_id,
            day=day,
            timezone=tz_name,
            entries=entries,
            totals=SummaryService.compute_totals(entries),
        )
        summary.text = SummaryService.format_summary(summary)

        logger.info(f"summary_built user_id={user_id} day={day} meals={len(entries)}")
        return summary

    @staticmethod
    def format_summary(summary: DailySummary) -> str:
        """Render a summary as the chat message sent to the user."""
        if not summary.entries:
            return EMPTY_DAY_MESSAGE

        tz = ZoneInfo(summary.timezone)
        lines = ["📋 Resumen de hoy:", ""]
        for index, entry in enumerate(summary.entries, start=1):
            local_time = _as_utc(entry.created_at).astimezone(tz).strftime("%H:%M")
            lines.extend(
                [
                    f"🕐 Comida {index} ({local_time}):",
                    f"{DISH_MARKER} {entry.description}",
                    "📊 Nutrientes:",
                    f"  • Calorías: {_plain(entry.kcal)} kcal",
                    f"  • Proteínas: {_plain(entry.protein)}g",
                    f"  • Carbohidratos: {_plain(entry.carbohydrates)}g",
                    f"  • Grasas: {_plain(entry.fat)}g",
                    "",
                ]
            )

        totals = summary.totals
        lines.extend(
            [
                "📊 Total del día:",
                f"  • Calorías totales: {totals.kcal:.1f} kcal",
                f"  • Proteínas totales: {totals.protein:.1f}g",
                f"  • Carbohidratos totales: {totals.carbohydrates:.1f}g",
                f"  • Grasas totales: {totals.fat:.1f}g",
            ]
        )
        return "\n".join(lines)
