"""
Structured representation of the story parameters gathered from the form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None

    text = str(value).strip()
    return text or None


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and str(value).strip():
            return value
    return None


@dataclass(frozen=True)
class StoryRequest:
    """
    Canonical representation of a story generation request.

    Attributes
    ----------
    story_about:
        Core idea or theme of the story (required).
    settings:
        Where the story takes place.
    age_range:
        Target reader age, e.g. "4-6".
    language:
        Language the whole story is written in (defaults to English).
    genre:
        Story genre (defaults to Fantasy).
    tone:
        Emotional tone (defaults to Heartwarming).
    length:
        Rough length bucket: short, medium, or long.
    moral_lesson:
        Lesson the story should land on.
    characters:
        Main characters, free-form.
    plot_twist:
        Optional twist to weave into the plot.
    """

    story_about: str
    settings: str | None = None
    age_range: str | None = None
    language: str = "English"
    genre: str = "Fantasy"
    tone: str = "Heartwarming"
    length: str = "medium"
    moral_lesson: str | None = None
    characters: str | None = None
    plot_twist: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StoryRequest":
        """
        Build a request from a dict-like object (form payload, JSON, or YAML).

        Accepts snake_case keys, the form's camelCase keys, and the older
        ``theme``/``mainCharacter``/``ageGroup`` payload.
        """
        story_about = _coerce_optional_str(
            _first_present(data, "story_about", "storyAbout", "theme")
        )
        if not story_about:
            raise ValueError("Story request must include a non-empty 'story_about' field.")

        return cls(
            story_about=story_about,
            settings=_coerce_optional_str(_first_present(data, "settings", "setting")),
            age_range=_coerce_optional_str(
                _first_present(data, "age_range", "ageRange", "ageGroup")
            ),
            language=_coerce_optional_str(data.get("language")) or "English",
            genre=_coerce_optional_str(data.get("genre")) or "Fantasy",
            tone=_coerce_optional_str(data.get("tone")) or "Heartwarming",
            length=_coerce_optional_str(data.get("length")) or "medium",
            moral_lesson=_coerce_optional_str(
                _first_present(data, "moral_lesson", "moralLesson", "lesson")
            ),
            characters=_coerce_optional_str(
                _first_present(data, "characters", "mainCharacter", "main_character")
            ),
            plot_twist=_coerce_optional_str(_first_present(data, "plot_twist", "plotTwist")),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "story_about": self.story_about,
            "settings": self.settings,
            "age_range": self.age_range,
            "language": self.language,
            "genre": self.genre,
            "tone": self.tone,
            "length": self.length,
            "moral_lesson": self.moral_lesson,
            "characters": self.characters,
            "plot_twist": self.plot_twist,
        }

    def context_bullets(self) -> list[str]:
        """
        Produce bullet-friendly lines describing the request, for prompt conditioning.
        """
        bullets: list[str] = [f"Core idea: {self.story_about}"]

        if self.settings:
            bullets.append(f"Setting: {self.settings}")

        if self.age_range:
            bullets.append(f"Target age: {self.age_range}")

        bullets.append(f"Genre: {self.genre}")
        bullets.append(f"Tone: {self.tone}")
        bullets.append(f"Length: {self.length}")

        if self.moral_lesson:
            bullets.append(f"Moral lesson: {self.moral_lesson}")

        if self.characters:
            bullets.append(f"Main characters: {self.characters}")

        if self.plot_twist:
            bullets.append(f"Plot twist: {self.plot_twist}")

        return bullets

    def summary_for_prompt(self) -> str:
        """
        Format the request as a readable block suitable for LLM prompting.
        """
        return "\n".join(f"- {line}" for line in self.context_bullets())
