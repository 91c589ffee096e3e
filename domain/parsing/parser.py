"""
Meal response parser: section splitting followed by field extraction.
"""

import logging
from typing import List, Optional, Tuple

from domain.enums import ParsePolicy
from domain.parsing.extractor import FieldExtractor
from domain.parsing.splitter import SectionSplitter
from domain.parsing.vocabulary import DEFAULT_VOCABULARY, ParserVocabulary
from domain.schemas.meal_schemas import MealRecord

logger = logging.getLogger("quecomi.parser")


class MealResponseParser:
    """Turns one assistant reply into zero or more validated meal records.

    Stateless: the same instance can serve every user turn.
    """

    def __init__(
        self,
        splitter: Optional[SectionSplitter] = None,
        extractor: Optional[FieldExtractor] = None,
    ):
        self.splitter = splitter or SectionSplitter()
        self.extractor = extractor or FieldExtractor()

    @classmethod
    def with_policy(
        cls,
        policy: ParsePolicy,
        vocabulary: ParserVocabulary = DEFAULT_VOCABULARY,
    ) -> "MealResponseParser":
        return cls(
            splitter=SectionSplitter(vocabulary),
            extractor=FieldExtractor(vocabulary, policy),
        )

    @classmethod
    def from_settings(cls, settings) -> "MealResponseParser":
        """Build a parser using the configured missing-field policy."""
        return cls.with_policy(settings.parser_policy)

    @property
    def policy(self) -> ParsePolicy:
        return self.extractor.policy

    def split(self, response_text: Optional[str]) -> List[str]:
        return self.splitter.split(response_text)

    def extract(self, fragment: Optional[str]) -> Optional[MealRecord]:
        return self.extractor.extract(fragment)

    def parse(self, response_text: Optional[str]) -> List[MealRecord]:
        return self.parse_with_fragments(response_text)[1]

    def parse_with_fragments(
        self, response_text: Optional[str]
    ) -> Tuple[List[str], List[MealRecord]]:
        """Parse a reply and also return the fragments it was split into."""
        fragments = self.splitter.split(response_text)
        records: List[MealRecord] = []

        for position, fragment in enumerate(fragments, start=1):
            result = self.extractor.evaluate(fragment)
            if result.accepted:
                records.append(result.record)
                continue
            logger.debug(
                f"fragment_rejected position={position}/{len(fragments)} "
                f"reason={result.reason.value} "
                f"missing={[f.value for f in result.missing]} "
                f"unparseable={[f.value for f in result.unparseable]}"
            )

        logger.info(
            f"reply_parsed fragments={len(fragments)} records={len(records)} "
            f"policy={self.policy.value}"
        )
        return fragments, records


default_parser = MealResponseParser()


def split(response_text: Optional[str]) -> List[str]:
    """Split a reply into per-dish fragments with the default vocabulary."""
    return default_parser.split(response_text)


def extract(fragment: Optional[str]) -> Optional[MealRecord]:
    """Extract one fragment with the default (strict) policy."""
    return default_parser.extract(fragment)


def parse(response_text: Optional[str]) -> List[MealRecord]:
    """Split and extract a whole reply with the default (strict) policy."""
    return default_parser.parse(response_text)
