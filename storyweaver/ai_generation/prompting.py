"""
Prompt construction utilities for Storyweaver illustration generation.
"""

from __future__ import annotations

from storyweaver.story_generation.record import IllustrationIdea, describe_illustration

STYLE_PREAMBLE = (
    "Create a digital children's book illustration with soft watercolor textures. "
    "Use warm, inviting lighting with soft shadows. "
    "The color palette should be vibrant but harmonious with pastel undertones. "
    "Keep the background clean and simple, focusing on the main elements. "
    "The overall mood should be cheerful and welcoming. "
    "The scene should be viewed from an eye-level perspective that's engaging for children."
)


def build_illustration_prompt(
    scene: IllustrationIdea,
    *,
    style: str = STYLE_PREAMBLE,
) -> str:
    """
    Combine the house illustration style with a single scene description.

    Parameters
    ----------
    scene:
        Scene to illustrate, either plain text or a scene object from the
        story's suggested illustrations.
    style:
        Style preamble placed before the scene.
    """
    description = describe_illustration(scene)
    if not description:
        raise ValueError("scene must describe something to illustrate.")

    return f"{style}\n\nSpecific scene to illustrate: {description}"
