import pytest

from storyweaver.pipeline import FlipBook, PageAsset
from storyweaver.story_generation import StoryPage


class FakeNarrator:
    def __init__(self):
        self.calls = []

    def synthesize_base64(self, text):
        self.calls.append(text)
        return f"audio:{text}"


def make_pages(count):
    return [
        PageAsset(
            page=StoryPage(page_number=index + 1, text=f"page {index + 1}"),
            image_outputs=(f"https://img/{index + 1}.png",),
        )
        for index in range(count)
    ]


def test_starts_on_cover():
    book = FlipBook(make_pages(2), "Title")

    assert book.is_cover
    assert book.current is None
    assert book.direction == 0
    assert book.cover_image == "https://img/1.png"


def test_navigation_respects_bounds():
    book = FlipBook(make_pages(2), "Title")

    assert book.previous_page() is False
    assert book.next_page() is True
    assert book.current.page_number == 1
    assert book.direction == 1
    assert book.next_page() is True
    assert book.is_last_page
    assert book.next_page() is False
    assert book.current_page == 1

    assert book.previous_page() is True
    assert book.direction == -1
    assert book.previous_page() is True
    assert book.is_cover


def test_go_to_validates_index():
    book = FlipBook(make_pages(3), "Title")

    book.go_to(2)
    assert book.current.page_number == 3
    assert book.direction == 1
    book.go_to(-1)
    assert book.is_cover
    assert book.direction == -1

    with pytest.raises(IndexError):
        book.go_to(3)
    with pytest.raises(IndexError):
        book.go_to(-2)


def test_narration_is_synthesized_once_per_page():
    narrator = FakeNarrator()
    book = FlipBook(make_pages(2), "Title", narrator=narrator)

    assert book.narration_for_current() is None
    book.next_page()
    assert book.narration_for_current() == "audio:page 1"
    assert book.narration_for_current() == "audio:page 1"
    assert narrator.calls == ["page 1"]
    assert book.narration_audio() == ["audio:page 1", None]


def test_existing_narration_is_reused():
    pages = make_pages(1)
    pages[0].narration_audio = "stored"
    narrator = FakeNarrator()
    book = FlipBook(pages, "Title", narrator=narrator)

    book.next_page()

    assert book.narration_for_current() == "stored"
    assert narrator.calls == []


def test_empty_book_has_no_cover_image():
    book = FlipBook([], "Empty")

    assert book.cover_image is None
    assert book.next_page() is False
