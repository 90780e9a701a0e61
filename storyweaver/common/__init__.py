"""
Common utilities shared across Storyweaver modules.
"""

from .errors import (
    EmptyResponseError,
    JsonSyntaxError,
    MalformedResponseError,
    SchemaMismatchError,
    SpeechSynthesisError,
    StoryGenerationError,
)
from .llm import ChatResult, CompletionCallable, call_chat_completion, extract_message_text

__all__ = [
    "ChatResult",
    "CompletionCallable",
    "call_chat_completion",
    "extract_message_text",
    "EmptyResponseError",
    "JsonSyntaxError",
    "MalformedResponseError",
    "SchemaMismatchError",
    "SpeechSynthesisError",
    "StoryGenerationError",
]
