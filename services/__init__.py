"""Services package - Business logic layer"""

from services.meal_logging_service import MealLoggingService
from services.summary_service import SummaryService
from services.quota_service import QuotaService

__all__ = [
    "MealLoggingService",
    "SummaryService",
    "QuotaService",
]
