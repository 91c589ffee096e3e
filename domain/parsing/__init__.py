"""
Parsing package - turns free-text assistant replies into meal records.
"""

from domain.parsing.vocabulary import (
    DISH_MARKER,
    DEFAULT_VOCABULARY,
    FieldVocabulary,
    ParserVocabulary,
)
from domain.parsing.splitter import SectionSplitter
from domain.parsing.extractor import ExtractionResult, FieldExtractor
from domain.parsing.parser import (
    MealResponseParser,
    default_parser,
    split,
    extract,
    parse,
)

__all__ = [
    "DISH_MARKER",
    "DEFAULT_VOCABULARY",
    "FieldVocabulary",
    "ParserVocabulary",
    "SectionSplitter",
    "ExtractionResult",
    "FieldExtractor",
    "MealResponseParser",
    "default_parser",
    "split",
    "extract",
    "parse",
]
