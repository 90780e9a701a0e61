"""
Utilities for splitting a story into flip-book pages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_PARAGRAPH_BREAK = re.compile(r"\r?\n[ \t]*\r?\n")


@dataclass(frozen=True)
class StoryPage:
    """
    A single flip-book page derived from the full story text.
    """

    page_number: int
    text: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "page_number": self.page_number,
            "text": self.text,
        }


def split_paragraphs(content: str) -> list[str]:
    return [block.strip() for block in _PARAGRAPH_BREAK.split(content) if block.strip()]


def split_into_pages(content: str, *, paragraphs_per_page: int = 1) -> list[StoryPage]:
    """
    Group the story's paragraphs into numbered pages.
    """
    if paragraphs_per_page < 1:
        raise ValueError("paragraphs_per_page must be at least 1.")

    paragraphs = split_paragraphs(content)
    if not paragraphs:
        raise ValueError("Story content must contain at least one paragraph.")

    pages: list[StoryPage] = []
    for start in range(0, len(paragraphs), paragraphs_per_page):
        chunk = paragraphs[start : start + paragraphs_per_page]
        pages.append(StoryPage(page_number=len(pages) + 1, text="\n\n".join(chunk)))
    return pages
