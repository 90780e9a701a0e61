"""
Service layer for producing stories via LiteLLM-compatible models.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from storyweaver.common import ChatResult, CompletionCallable, EmptyResponseError, call_chat_completion

from .normalizer import normalize
from .prompting import StoryPrompt, build_story_prompt
from .record import CANONICAL_FIELDS, FieldMapping, StoryRecord
from .request import StoryRequest

DEFAULT_STORY_MODEL = "claude-3-opus-20240229"

logger = logging.getLogger(__name__)


class StoryGenerator:
    """
    High-level helper that turns a story request into a normalized story record.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        completion_fn: CompletionCallable | None = None,
        field_mapping: FieldMapping = CANONICAL_FIELDS,
    ) -> None:
        self._api_key = (
            api_key
            or os.getenv("STORYWEAVER_API_KEY")
            or os.getenv("ANTHROPIC_API_KEY")
            or os.getenv("OPENAI_API_KEY")
            or os.getenv("LITELLM_API_KEY")
        )
        self._model = (
            model
            or os.getenv("STORYWEAVER_STORY_MODEL")
            or os.getenv("LITELLM_STORY_MODEL")
            or os.getenv("LITELLM_MODEL")
            or DEFAULT_STORY_MODEL
        )
        self._completion_fn: CompletionCallable = completion_fn or call_chat_completion
        self._field_mapping = field_mapping

    @property
    def model(self) -> str:
        """Return the model identifier in use."""
        return self._model

    @property
    def field_mapping(self) -> FieldMapping:
        return self._field_mapping

    def generate_story(
        self,
        request: StoryRequest,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 4096,
        **response_kwargs: Any,
    ) -> StoryRecord:
        """
        Invoke the configured LLM and normalize its answer into a story record.
        """
        prompt: StoryPrompt = build_story_prompt(request, self._field_mapping)

        messages = [
            {"role": "system", "content": prompt.system},
            {"role": "user", "content": prompt.user},
        ]

        logger.info("Generating %s story about %r with %s.", request.language, request.story_about, self._model)
        result: ChatResult = self._completion_fn(
            model=self._model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_output_tokens,
            api_key=self._api_key,
            **response_kwargs,
        )

        if not result.text:
            raise EmptyResponseError("LLM response did not contain any text content.")

        record = normalize(result.text, self._field_mapping)
        logger.info("Generated story %r (%d characters).", record.title, len(record.content))
        return record
