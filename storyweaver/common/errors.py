"""
Error taxonomy shared by the Storyweaver generation workflow.
"""

from __future__ import annotations

import json
from typing import Any, Sequence


class StoryGenerationError(Exception):
    """
    Base class for failures that end a story generation request.

    None of these are retried automatically; callers surface them and let the
    reader submit the request again.
    """

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class MalformedResponseError(StoryGenerationError):
    """The model output does not contain a JSON object at all."""


class EmptyResponseError(MalformedResponseError):
    """The completion came back without any text content."""


class JsonSyntaxError(StoryGenerationError, json.JSONDecodeError):
    """
    The repaired text still fails to parse as JSON.

    Subclasses :class:`json.JSONDecodeError` so the parse failure keeps its
    usual shape; ``cleaned_text`` holds the repaired text for diagnostics.
    """

    def __init__(self, msg: str, cleaned_text: str, pos: int) -> None:
        json.JSONDecodeError.__init__(self, msg, cleaned_text, pos)
        self.cleaned_text = cleaned_text
        self.details = cleaned_text


class SchemaMismatchError(StoryGenerationError, ValueError):
    """The JSON parsed but required story fields are absent or mistyped."""

    def __init__(
        self,
        message: str,
        *,
        missing_fields: Sequence[str] = (),
        details: Any = None,
    ) -> None:
        super().__init__(message, details=details)
        self.missing_fields = tuple(missing_fields)


class SpeechSynthesisError(RuntimeError):
    """The text-to-speech provider rejected a narration request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
