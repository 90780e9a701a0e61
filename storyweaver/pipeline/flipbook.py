"""
Page navigation state for reading a story as a flip-book.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from .pipeline import PageAsset

COVER_INDEX = -1

logger = logging.getLogger(__name__)


class Narrator(Protocol):
    def synthesize_base64(self, text: str) -> str:
        ...


class FlipBook:
    """
    Cover-then-pages navigation over a generated story.

    ``current_page`` is ``-1`` while the cover is shown and ``0..len-1`` for
    pages. ``direction`` records the last turn: ``1`` forward, ``-1`` back,
    ``0`` before any turn.
    """

    def __init__(
        self,
        pages: Sequence["PageAsset"],
        title: str,
        *,
        narrator: Narrator | None = None,
    ) -> None:
        self._pages = list(pages)
        self.title = title
        self._narrator = narrator
        self.current_page = COVER_INDEX
        self.direction = 0
        self._audio: dict[int, str] = {
            index: page.narration_audio
            for index, page in enumerate(self._pages)
            if page.narration_audio
        }

    def __len__(self) -> int:
        return len(self._pages)

    @property
    def pages(self) -> list["PageAsset"]:
        return list(self._pages)

    @property
    def is_cover(self) -> bool:
        return self.current_page == COVER_INDEX

    @property
    def is_last_page(self) -> bool:
        return self.current_page == len(self._pages) - 1

    @property
    def current(self) -> "PageAsset | None":
        if self.is_cover:
            return None
        return self._pages[self.current_page]

    @property
    def cover_image(self) -> str | None:
        if not self._pages:
            return None
        return self._pages[0].primary_image

    def next_page(self) -> bool:
        if self.current_page < len(self._pages) - 1:
            self.direction = 1
            self.current_page += 1
            return True
        return False

    def previous_page(self) -> bool:
        if self.current_page > COVER_INDEX:
            self.direction = -1
            self.current_page -= 1
            return True
        return False

    def go_to(self, index: int) -> None:
        if not COVER_INDEX <= index < len(self._pages):
            raise IndexError(f"Page index {index} is outside the book.")
        if index != self.current_page:
            self.direction = 1 if index > self.current_page else -1
        self.current_page = index

    def narration_for_current(self) -> str | None:
        """
        Return base64 narration for the open page, synthesizing it on first visit.
        """
        page = self.current
        if page is None:
            return None

        cached = self._audio.get(self.current_page)
        if cached is not None:
            return cached

        if self._narrator is None:
            return None

        logger.debug("Narrating page %d.", page.page.page_number)
        audio = self._narrator.synthesize_base64(page.page.text)
        self._audio[self.current_page] = audio
        return audio

    def narration_audio(self) -> list[str | None]:
        """Audio per page as currently cached, in page order."""
        return [self._audio.get(index) for index in range(len(self._pages))]
