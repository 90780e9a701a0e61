"""
Integration with Replicate for storybook illustration generation.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Iterable

import replicate

from storyweaver.story_generation.record import IllustrationIdea

from .prompting import build_illustration_prompt

DEFAULT_IMAGE_MODEL = "black-forest-labs/flux-schnell"

logger = logging.getLogger(__name__)


def _build_flux_input(*, prompt: str) -> dict[str, Any]:
    return {
        "prompt": prompt,
        "aspect_ratio": "1:1",
        "output_format": "png",
        "num_outputs": 1,
    }


def _build_sdxl_input(*, prompt: str) -> dict[str, Any]:
    return {
        "prompt": prompt,
        "negative_prompt": "scary, violent, text, watermark, logo, distorted faces",
        "width": 1024,
        "height": 1024,
        "num_outputs": 1,
    }


_MODEL_INPUT_BUILDERS: dict[str, Callable[..., dict[str, Any]]] = {
    "black-forest-labs/flux-schnell": _build_flux_input,
    "black-forest-labs/flux-dev": _build_flux_input,
    "stability-ai/sdxl": _build_sdxl_input,
}


def _build_replicate_input_payload(*, model_identifier: str, prompt: str) -> dict[str, Any]:
    normalized_identifier = model_identifier.strip().lower()
    builder = _MODEL_INPUT_BUILDERS.get(normalized_identifier)
    if builder is None and ":" in normalized_identifier:
        base_identifier = normalized_identifier.split(":", maxsplit=1)[0]
        builder = _MODEL_INPUT_BUILDERS.get(base_identifier)
    if builder is None:
        supported_models = ", ".join(sorted(_MODEL_INPUT_BUILDERS))
        raise ValueError(
            "Model identifier "
            f"'{model_identifier}' is not configured with a default input payload. "
            f"Supported models: {supported_models}."
        )

    return builder(prompt=prompt)


class ReplicateImageGenerator:
    """
    Convenience wrapper around the Replicate client for storybook illustrations.

    Parameters
    ----------
    api_token:
        Replicate API token. Falls back to ``REPLICATE_API_TOKEN`` environment variable.
    model_identifier:
        Model string in the ``owner/model[:version]`` format. Falls back to
        ``REPLICATE_MODEL`` and then to ``black-forest-labs/flux-schnell``.
    client:
        Optional pre-configured :class:`replicate.Client`. Mainly useful for testing.
    """

    def __init__(
        self,
        *,
        api_token: str | None = None,
        model_identifier: str | None = None,
        client: replicate.Client | None = None,
    ) -> None:
        self._api_token = api_token or os.getenv("REPLICATE_API_TOKEN")
        if not self._api_token and not client:
            raise ValueError(
                "Replicate API token is required. Set REPLICATE_API_TOKEN or pass api_token."
            )

        self._model_identifier = (
            model_identifier or os.getenv("REPLICATE_MODEL") or DEFAULT_IMAGE_MODEL
        )
        self._client = client or replicate.Client(api_token=self._api_token)

    @property
    def model_identifier(self) -> str:
        """Return the model identifier currently used."""
        return self._model_identifier

    def generate_image(self, scene: IllustrationIdea, **model_kwargs: Any) -> Iterable[Any]:
        """
        Generate an illustration for ``scene`` with the configured model.

        ``model_kwargs`` override the default input payload (e.g. ``seed``).
        Returns the raw Replicate output, usually an iterable of URLs.
        """
        prompt = build_illustration_prompt(scene)
        replicate_input = _build_replicate_input_payload(
            model_identifier=self._model_identifier,
            prompt=prompt,
        )
        replicate_input.update(model_kwargs)

        logger.debug("Running %s for illustration.", self._model_identifier)
        return self._client.run(self._model_identifier, input=replicate_input)
