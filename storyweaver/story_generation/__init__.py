"""
Story generation utilities for producing children's stories from model output.
"""

from .context import ErrorReport, GenerationContext, run_generation
from .normalizer import locate_json_object, normalize, repair_body_field
from .page_splitter import StoryPage, split_into_pages
from .prompting import StoryPrompt, build_story_prompt
from .record import CANONICAL_FIELDS, CAPITALIZED_FIELDS, FieldMapping, StoryRecord
from .request import StoryRequest
from .story_service import StoryGenerator

__all__ = [
    "CANONICAL_FIELDS",
    "CAPITALIZED_FIELDS",
    "ErrorReport",
    "FieldMapping",
    "GenerationContext",
    "StoryGenerator",
    "StoryPage",
    "StoryPrompt",
    "StoryRecord",
    "StoryRequest",
    "build_story_prompt",
    "locate_json_object",
    "normalize",
    "repair_body_field",
    "run_generation",
    "split_into_pages",
]
