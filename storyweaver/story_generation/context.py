"""
Request-scoped state for a single story generation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from storyweaver.common import JsonSyntaxError, StoryGenerationError

from .record import StoryRecord
from .request import StoryRequest

GENERIC_FAILURE_MESSAGE = "Failed to generate story"

logger = logging.getLogger(__name__)


class SupportsStoryGeneration(Protocol):
    def generate_story(self, request: StoryRequest, **kwargs: Any) -> StoryRecord:
        ...


@dataclass(frozen=True)
class ErrorReport:
    """User-facing description of a failed generation."""

    error: str
    details: str | None = None
    type: str | None = None
    raw_response: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        if self.type is not None:
            payload["type"] = self.type
        if self.raw_response is not None:
            payload["rawResponse"] = self.raw_response
        return payload


@dataclass
class GenerationContext:
    """
    Story, loading flag, and error for one generation request.

    A fresh context is created per request and handed back to the caller.
    """

    story: StoryRecord | None = None
    is_loading: bool = False
    error: ErrorReport | None = None

    @property
    def succeeded(self) -> bool:
        return self.story is not None and self.error is None


def build_error_report(exc: StoryGenerationError) -> ErrorReport:
    raw_response = exc.cleaned_text if isinstance(exc, JsonSyntaxError) else None
    return ErrorReport(
        error=GENERIC_FAILURE_MESSAGE,
        details=str(exc),
        type=type(exc).__name__,
        raw_response=raw_response,
    )


def run_generation(
    context: GenerationContext,
    request: StoryRequest,
    generator: SupportsStoryGeneration,
    **generation_kwargs: Any,
) -> GenerationContext:
    """
    Run one generation against ``context`` and return it.

    Generation errors are recorded on the context instead of raised; the
    reader may resubmit. Anything else propagates.
    """
    context.story = None
    context.error = None
    context.is_loading = True
    try:
        context.story = generator.generate_story(request, **generation_kwargs)
    except StoryGenerationError as exc:
        logger.error("Story generation failed: %s", exc)
        context.error = build_error_report(exc)
    finally:
        context.is_loading = False
    return context
