"""
Domain enums for QueComi application.
Contains all enumeration types used across the domain models and the parser.
"""

import enum


class SubscriptionTier(str, enum.Enum):
    """Patient subscription plans"""

    FREE = "FREE"
    PRO = "PRO"
    MEDICAL = "MEDICAL"

    @property
    def is_premium(self) -> bool:
        return self in (SubscriptionTier.PRO, SubscriptionTier.MEDICAL)


class ParsePolicy(str, enum.Enum):
    """What the extractor does with a missing or malformed nutrition label"""

    STRICT = "strict"  # reject the whole fragment
    LENIENT = "lenient"  # default the field to zero


class RejectionReason(str, enum.Enum):
    """Why a response fragment did not become a meal record"""

    DESCRIPTION_EMPTY = "description_empty"
    FIELD_MISSING = "field_missing"
    NUMBER_UNPARSEABLE = "number_unparseable"


class NutritionField(str, enum.Enum):
    """Numeric fields carried by every meal record"""

    KCAL = "kcal"
    PROTEIN = "protein"
    FAT = "fat"
    CARBOHYDRATES = "carbohydrates"
