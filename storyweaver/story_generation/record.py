"""
Typed story records produced from normalized model output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from storyweaver.common import SchemaMismatchError

IllustrationIdea = str | Mapping[str, Any]


@dataclass(frozen=True)
class FieldMapping:
    """
    Exact, case-sensitive JSON keys a call site asked the model to emit.

    Each prompt names its own keys, so the parser is configured per call site
    instead of guessing between casings.
    """

    title_key: str = "title"
    content_key: str = "content"
    moral_lesson_key: str = "moralLesson"
    illustrations_key: str = "suggestedIllustrations"
    allow_empty_illustrations: bool = False

    @property
    def keys(self) -> tuple[str, str, str, str]:
        return (
            self.title_key,
            self.content_key,
            self.moral_lesson_key,
            self.illustrations_key,
        )


CANONICAL_FIELDS = FieldMapping()

CAPITALIZED_FIELDS = FieldMapping(
    title_key="Title",
    content_key="Content",
    moral_lesson_key="MoralLesson",
    illustrations_key="SuggestedIllustrations",
)


@dataclass(frozen=True)
class StoryRecord:
    """
    The normalized result of a successful story generation request.
    """

    title: str
    content: str
    moral_lesson: str
    suggested_illustrations: tuple[IllustrationIdea, ...] = ()

    @classmethod
    def from_mapping(
        cls,
        data: Any,
        mapping: FieldMapping = CANONICAL_FIELDS,
    ) -> "StoryRecord":
        """
        Build a record from a parsed JSON object using the call site's key table.
        """
        if not isinstance(data, Mapping):
            raise SchemaMismatchError(
                f"Story payload must be a JSON object, got {type(data).__name__}.",
                details=data,
            )

        missing = [key for key in mapping.keys if key not in data]
        if missing:
            raise SchemaMismatchError(
                "Story payload is missing required fields: " + ", ".join(missing),
                missing_fields=missing,
                details=dict(data),
            )

        text_fields: dict[str, str] = {}
        for key in (mapping.title_key, mapping.content_key, mapping.moral_lesson_key):
            value = data[key]
            if not isinstance(value, str):
                raise SchemaMismatchError(
                    f"Field '{key}' must be a string, got {type(value).__name__}.",
                    details=dict(data),
                )
            if not value.strip():
                raise SchemaMismatchError(
                    f"Field '{key}' must not be blank.",
                    missing_fields=(key,),
                    details=dict(data),
                )
            text_fields[key] = value

        illustrations = data[mapping.illustrations_key]
        if not isinstance(illustrations, list):
            raise SchemaMismatchError(
                f"Field '{mapping.illustrations_key}' must be a list.",
                details=dict(data),
            )
        if not illustrations and not mapping.allow_empty_illustrations:
            raise SchemaMismatchError(
                f"Field '{mapping.illustrations_key}' must not be empty.",
                details=dict(data),
            )
        for item in illustrations:
            if not isinstance(item, (str, Mapping)):
                raise SchemaMismatchError(
                    f"Illustration entries must be strings or objects, got {type(item).__name__}.",
                    details=dict(data),
                )

        return cls(
            title=text_fields[mapping.title_key],
            content=text_fields[mapping.content_key],
            moral_lesson=text_fields[mapping.moral_lesson_key],
            suggested_illustrations=tuple(illustrations),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "moralLesson": self.moral_lesson,
            "suggestedIllustrations": [
                dict(item) if isinstance(item, Mapping) else item
                for item in self.suggested_illustrations
            ],
        }

    def illustration_prompts(self) -> list[str]:
        """
        Return the suggested illustrations as plain scene descriptions.
        """
        prompts: list[str] = []
        for item in self.suggested_illustrations:
            text = describe_illustration(item)
            if text:
                prompts.append(text)
        return prompts


def describe_illustration(item: IllustrationIdea) -> str:
    """
    Reduce a suggested illustration (text or scene object) to a single line.
    """
    if isinstance(item, Mapping):
        for key in ("description", "scene", "prompt", "text"):
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return " ".join(str(value).strip() for value in item.values() if value).strip()
    return str(item).strip()
