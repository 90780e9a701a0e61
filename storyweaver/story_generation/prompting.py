"""
Prompt construction utilities for the Storyweaver story generation workflow.
"""

from __future__ import annotations

from dataclasses import dataclass

from .record import CANONICAL_FIELDS, FieldMapping
from .request import StoryRequest

SYSTEM_PROMPT = (
    "You are a talented multilingual children's book author. Create engaging, age-appropriate "
    "stories with clear moral lessons. Use simple language and vivid descriptions appropriate "
    "for the requested language."
)

LENGTH_GUIDANCE = {
    "short": "Keep the story to about 3-4 short paragraphs.",
    "medium": "Write about 5-7 paragraphs.",
    "long": "Write about 8-10 paragraphs with a fuller middle act.",
}


@dataclass(frozen=True)
class StoryPrompt:
    """
    Container for the system and user prompts passed to the LLM.
    """

    system: str
    user: str


def build_story_prompt(
    request: StoryRequest,
    mapping: FieldMapping = CANONICAL_FIELDS,
    *,
    illustration_count: int = 3,
) -> StoryPrompt:
    """
    Build the prompt pair that asks for one JSON story object keyed per ``mapping``.
    """
    length_instruction = LENGTH_GUIDANCE.get(request.length.lower(), f"Length: {request.length}.")

    user_prompt = f"""Create a children's story in {request.language} with the following details:

{request.summary_for_prompt()}

{length_instruction}

Respond with a single JSON object and nothing else, using exactly these keys:
{{
  "{mapping.title_key}": "the story title",
  "{mapping.content_key}": "the full story, paragraphs separated by a blank line",
  "{mapping.moral_lesson_key}": "one or two sentences stating the moral lesson",
  "{mapping.illustrations_key}": ["{illustration_count} short descriptions of key scenes that would work well as illustrations"]
}}

Make the story engaging and appropriate for the target age group. The entire story, including title and moral lesson, should be in {request.language}."""

    return StoryPrompt(system=SYSTEM_PROMPT, user=user_prompt)
