"""
Section splitting of assistant replies.

Rules are tried in order and the first that applies wins:

1. the dish marker occurs more than once: one fragment per marker
2. numbered list lines (``1. ``): one fragment per numbered line
3. otherwise the whole reply is a single fragment

A reply with exactly one marker is a single dish, even if it contains a
numbered list (e.g. its ingredients).
"""

import re
from typing import List, Optional

from domain.parsing.vocabulary import DEFAULT_VOCABULARY, ParserVocabulary

NUMBERED_LINE = re.compile(r"^\s*\d+\.[ \t]+")


class SectionSplitter:
    """Breaks one assistant reply into per-dish text fragments."""

    def __init__(self, vocabulary: ParserVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def split(self, response_text: Optional[str]) -> List[str]:
        """
        Split a reply into ordered, trimmed, non-empty fragments.

        The result always has at least one element: when no structure is
        found (or every candidate is blank) it is the trimmed input itself.
        """
        text = response_text or ""

        if text.count(self.vocabulary.dish_marker) == 1:
            return [text.strip()]

        fragments = self.split_on_marker(text)
        if fragments is None:
            fragments = self.split_numbered(text)
        if not fragments:
            return [text.strip()]
        return fragments

    def split_on_marker(self, text: str) -> Optional[List[str]]:
        """Marker rule; None when the marker occurs fewer than two times."""
        marker = self.vocabulary.dish_marker
        if text.count(marker) < 2:
            return None

        # pieces[0] is preamble before the first dish
        pieces = text.split(marker)[1:]
        return [f"{marker}{piece}".strip() for piece in pieces if piece.strip()]

    def split_numbered(self, text: str) -> Optional[List[str]]:
        """Numbered-list rule; None when no line starts with ``N. ``."""
        sections: List[List[str]] = []
        for line in text.splitlines():
            if NUMBERED_LINE.match(line):
                sections.append([line])
            elif sections:
                sections[-1].append(line)

        if not sections:
            return None

        fragments = ("\n".join(lines).strip() for lines in sections)
        return [fragment for fragment in fragments if fragment]
