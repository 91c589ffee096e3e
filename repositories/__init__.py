"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.meal_repository import MealRepository
from repositories.patient_repository import PatientRepository

__all__ = [
    "BaseRepository",
    "MealRepository",
    "PatientRepository",
]
