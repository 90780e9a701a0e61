"""
AI illustration and narration package for Storyweaver.
"""

from .prompting import build_illustration_prompt
from .replicate_service import ReplicateImageGenerator
from .speech import ElevenLabsSpeechSynthesizer

__all__ = ["build_illustration_prompt", "ElevenLabsSpeechSynthesizer", "ReplicateImageGenerator"]
