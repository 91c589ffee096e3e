"""
Label vocabulary shared by the splitter and the extractor.

Every string the assistant template uses to introduce a dish or a nutrient
lives here, so a prompt change means editing one table.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Tuple

from domain.enums import NutritionField
from domain.schemas.meal_schemas import MAX_GRAMS, MAX_KCAL

DISH_MARKER = "🍽️ Plato:"

KCAL_UNITS = (
    "kilocalorías",
    "kilocalorias",
    "calorías",
    "calorias",
    "kcals",
    "kcal",
    "cal",
)
GRAM_UNITS = ("g",)


@dataclass(frozen=True)
class FieldVocabulary:
    """Accepted labels, unit suffixes and largest storable value for one field"""

    labels: Tuple[str, ...]
    units: Tuple[str, ...] = GRAM_UNITS
    max_value: Decimal = MAX_GRAMS


def _default_fields() -> Dict[NutritionField, FieldVocabulary]:
    return {
        NutritionField.KCAL: FieldVocabulary(
            labels=("Calorías", "Calorias"), units=KCAL_UNITS, max_value=MAX_KCAL
        ),
        NutritionField.PROTEIN: FieldVocabulary(labels=("Proteínas", "Proteinas")),
        NutritionField.FAT: FieldVocabulary(labels=("Grasas",)),
        NutritionField.CARBOHYDRATES: FieldVocabulary(labels=("Carbohidratos",)),
    }


@dataclass(frozen=True)
class ParserVocabulary:
    """Dish marker plus the label table for the four nutrition fields"""

    dish_marker: str = DISH_MARKER
    fields: Dict[NutritionField, FieldVocabulary] = field(
        default_factory=_default_fields
    )

    def for_field(self, name: NutritionField) -> FieldVocabulary:
        return self.fields[name]


DEFAULT_VOCABULARY = ParserVocabulary()
