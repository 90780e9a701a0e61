"""
End-to-end orchestration for Storyweaver story, illustration, and narration generation.
"""

from .flipbook import FlipBook
from .pipeline import PageAsset, StorybookOrchestrator, StoryPackage, normalize_image_outputs

__all__ = [
    "FlipBook",
    "PageAsset",
    "StorybookOrchestrator",
    "StoryPackage",
    "normalize_image_outputs",
]
