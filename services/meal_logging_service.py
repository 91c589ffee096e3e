from typing import List, Optional, Sequence
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.models import MealEntry
from domain.parsing import MealResponseParser
from domain.schemas.meal_schemas import ParsePreviewResponse
from repositories import MealRepository

logger = logging.getLogger("quecomi.meals")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class MealLoggingService:
    """Stores the dishes found in assistant replies"""

    @staticmethod
    def get_parser() -> MealResponseParser:
        return MealResponseParser.from_settings(settings)

    @staticmethod
    def is_error_reply(
        response_text: str, markers: Optional[Sequence[str]] = None
    ) -> bool:
        """True when the reply is one of the assistant's apology/error messages."""
        if markers is None:
            markers = settings.error_reply_markers
        return any(marker and marker in response_text for marker in markers)

    @staticmethod
    def preview(
        response_text: str, parser: Optional[MealResponseParser] = None
    ) -> ParsePreviewResponse:
        """Parse a reply without persisting anything."""
        if MealLoggingService.is_error_reply(response_text):
            return ParsePreviewResponse(fragments=0, records=[], skipped_as_error=True)

        parser = parser or MealLoggingService.get_parser()
        fragments, records = parser.parse_with_fragments(response_text)
        return ParsePreviewResponse(fragments=len(fragments), records=records)

    @staticmethod
    def log_response(
        db: Session,
        user_id: int,
        response_text: str,
        logged_at: Optional[datetime] = None,
        parser: Optional[MealResponseParser] = None,
    ) -> List[MealEntry]:
        """
        Parse an assistant reply and store one meal row per dish found.

        Error replies and replies without any valid dish store nothing and
        return an empty list; that is not an error.

        Args:
            db: Database session
            user_id: Telegram user id owning the meals
            response_text: Assistant reply exactly as received
            logged_at: Timestamp for every stored row (defaults to now, UTC)
            parser: Parser to use (defaults to the configured policy)

        Returns:
            Stored MealEntry rows in the order the dishes appear in the reply

        Raises:
            ServiceValidationError: If user_id is not a positive integer
        """
        if user_id <= 0:
            raise ServiceValidationError(
                "user_id must be a positive integer", details={"user_id": user_id}
            )

        if not response_text or not response_text.strip():
            logger.info(f"meal_log_skipped user_id={user_id} reason=empty_reply")
            return []

        if MealLoggingService.is_error_reply(response_text):
            logger.info(f"meal_log_skipped user_id={user_id} reason=error_reply")
            return []

        parser = parser or MealLoggingService.get_parser()
        records = parser.parse(response_text)
        if not records:
            logger.info(f"meal_log_skipped user_id={user_id} reason=no_valid_dishes")
            return []

        stamp = _as_utc(logged_at) if logged_at else datetime.now(timezone.utc)
        repo = MealRepository(db)
        try:
            entries = repo.add_records(user_id, records, stamp)
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"meal_log_failed user_id={user_id} records={len(records)}")
            raise

        logger.info(
            f"meals_logged user_id={user_id} count={len(entries)} "
            f"meal_ids={[e.meal_id for e in entries]}"
        )
        return entries

    @staticmethod
    def delete_meal(db: Session, meal_id: int) -> None:
        """Remove a logged meal."""
        repo = MealRepository(db)
        if not repo.delete(meal_id):
            logger.warning(f"meal_not_found meal_id={meal_id}")
            raise NotFoundError(f"Meal {meal_id} not found")
        logger.info(f"meal_deleted meal_id={meal_id}")
