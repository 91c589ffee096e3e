"""
Field extraction from a single response fragment.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple

from domain.enums import NutritionField, ParsePolicy, RejectionReason
from domain.parsing.vocabulary import (
    DEFAULT_VOCABULARY,
    FieldVocabulary,
    ParserVocabulary,
)
from domain.schemas.meal_schemas import MealRecord

# Leading emoji, list numbers, bullets and punctuation before a dish name
LEADING_NON_LETTERS = re.compile(r"^[\W\d_]+")
TRAILING_PUNCTUATION = re.compile(r"[.:,;]$")
ZERO = Decimal("0")


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of extracting one fragment: a record or the reason it was dropped"""

    record: Optional[MealRecord] = None
    reason: Optional[RejectionReason] = None
    missing: Tuple[NutritionField, ...] = field(default_factory=tuple)
    unparseable: Tuple[NutritionField, ...] = field(default_factory=tuple)

    @property
    def accepted(self) -> bool:
        return self.record is not None


class FieldExtractor:
    """
    Pulls a dish description and four nutrition values out of one fragment.

    Missing labels and values that are not non-negative numbers are handled
    by a single policy: STRICT drops the fragment, LENIENT uses zero.
    A fragment without a description is always dropped.
    """

    def __init__(
        self,
        vocabulary: ParserVocabulary = DEFAULT_VOCABULARY,
        policy: ParsePolicy = ParsePolicy.STRICT,
    ):
        self.vocabulary = vocabulary
        self.policy = ParsePolicy(policy)
        self._description_pattern = re.compile(
            re.escape(vocabulary.dish_marker) + r"[ \t]*(?P<name>[^\r\n]*)"
        )
        self._label_patterns: Dict[NutritionField, re.Pattern] = {}
        self._value_patterns: Dict[NutritionField, re.Pattern] = {}
        self._max_values: Dict[NutritionField, Decimal] = {}
        for name in NutritionField:
            field_vocab = vocabulary.for_field(name)
            self._label_patterns[name] = self._build_label_pattern(field_vocab)
            self._value_patterns[name] = self._build_value_pattern(field_vocab)
            self._max_values[name] = field_vocab.max_value

    @staticmethod
    def _build_label_pattern(field_vocab: FieldVocabulary) -> re.Pattern:
        labels = "|".join(re.escape(label) for label in field_vocab.labels)
        # tolerates markdown emphasis around the label, e.g. "**Grasas:** 12g"
        return re.compile(
            rf"(?<!\w)(?:{labels})[*_]*[ \t]*:[*_]*[ \t]*(?P<value>[^\r\n]*)",
            re.IGNORECASE,
        )

    @staticmethod
    def _build_value_pattern(field_vocab: FieldVocabulary) -> re.Pattern:
        units = "|".join(
            re.escape(unit) for unit in sorted(field_vocab.units, key=len, reverse=True)
        )
        return re.compile(
            rf"^(?P<number>\d+(?:\.\d+)?)[ \t]*(?:(?:{units})(?!\w)|(?!\w|[.,]\d))",
            re.IGNORECASE,
        )

    def extract(self, fragment: Optional[str]) -> Optional[MealRecord]:
        """Return a complete MealRecord, or None when the fragment is rejected."""
        return self.evaluate(fragment).record

    def evaluate(self, fragment: Optional[str]) -> ExtractionResult:
        text = fragment or ""

        description = self.extract_description(text)
        if not description:
            return ExtractionResult(reason=RejectionReason.DESCRIPTION_EMPTY)

        values: Dict[str, Decimal] = {}
        missing = []
        unparseable = []
        for name in NutritionField:
            value, problem = self.read_field(text, name)
            if problem is RejectionReason.FIELD_MISSING:
                missing.append(name)
            elif problem is RejectionReason.NUMBER_UNPARSEABLE:
                unparseable.append(name)
            values[name.value] = value if value is not None else ZERO

        if self.policy is ParsePolicy.STRICT and (missing or unparseable):
            reason = (
                RejectionReason.FIELD_MISSING
                if missing
                else RejectionReason.NUMBER_UNPARSEABLE
            )
            return ExtractionResult(
                reason=reason, missing=tuple(missing), unparseable=tuple(unparseable)
            )

        return ExtractionResult(
            record=MealRecord(description=description, **values),
            missing=tuple(missing),
            unparseable=tuple(unparseable),
        )

    def extract_description(self, text: str) -> str:
        """Dish name after the marker, else the first non-empty, non-label line, cleaned."""
        marker_match = self._description_pattern.search(text)
        if marker_match:
            return marker_match.group("name").strip().strip("*").strip()

        first_line = next(
            (
                line
                for line in text.splitlines()
                if line.strip() and not self._is_label_line(line)
            ),
            "",
        )
        description = LEADING_NON_LETTERS.sub("", first_line.strip()).strip()
        return TRAILING_PUNCTUATION.sub("", description).strip()

    def _is_label_line(self, line: str) -> bool:
        return any(pattern.search(line) for pattern in self._label_patterns.values())

    def read_field(
        self, text: str, name: NutritionField
    ) -> Tuple[Optional[Decimal], Optional[RejectionReason]]:
        label_match = self._label_patterns[name].search(text)
        if label_match is None:
            return None, RejectionReason.FIELD_MISSING

        value_match = self._value_patterns[name].match(label_match.group("value"))
        if value_match is None:
            return None, RejectionReason.NUMBER_UNPARSEABLE

        value = Decimal(value_match.group("number"))
        if value > self._max_values[name]:
            return None, RejectionReason.NUMBER_UNPARSEABLE
        return value, None
