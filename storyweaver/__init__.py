"""
Storyweaver package exposing story generation, illustration, narration, and flip-book tooling.
"""

from .pipeline import FlipBook, StorybookOrchestrator, StoryPackage
from .story_generation import (
    GenerationContext,
    StoryGenerator,
    StoryRecord,
    StoryRequest,
    normalize,
    run_generation,
)

__all__ = [
    "FlipBook",
    "GenerationContext",
    "StoryGenerator",
    "StoryPackage",
    "StoryRecord",
    "StoryRequest",
    "StorybookOrchestrator",
    "normalize",
    "run_generation",
]
