"""
Orchestrates the full Storyweaver pipeline from request to story, pages, images, and audio.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable as IterableABC
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import yaml

from storyweaver.ai_generation import ElevenLabsSpeechSynthesizer, ReplicateImageGenerator
from storyweaver.common import CompletionCallable
from storyweaver.story_generation import (
    StoryGenerator,
    StoryPage,
    StoryRecord,
    StoryRequest,
    split_into_pages,
)
from storyweaver.story_generation.record import FieldMapping, IllustrationIdea

from .flipbook import FlipBook, Narrator

ProgressCallback = Callable[[str, dict[str, Any]], None]

STORED_FIELDS = FieldMapping(allow_empty_illustrations=True)

logger = logging.getLogger(__name__)


@dataclass
class PageAsset:
    """Represents all data for a single story page."""

    page: StoryPage
    image_outputs: Sequence[str] = ()
    narration_audio: str | None = None

    @property
    def page_number(self) -> int:
        return self.page.page_number

    @property
    def primary_image(self) -> str | None:
        return self.image_outputs[0] if self.image_outputs else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_number": self.page.page_number,
            "text": self.page.text,
            "image_outputs": list(self.image_outputs),
            "narration_audio": self.narration_audio,
        }


@dataclass
class StoryPackage:
    """Aggregated output of the Storyweaver pipeline."""

    request: StoryRequest
    story: StoryRecord
    pages: list[PageAsset]

    @property
    def title(self) -> str:
        return self.story.title

    def flipbook(self, *, narrator: Narrator | None = None) -> FlipBook:
        return FlipBook(self.pages, self.story.title, narrator=narrator)

    def to_dict(self) -> dict[str, Any]:
        return {
            "request": self.request.as_dict(),
            "story": self.story.as_dict(),
            "pages": [asset.to_dict() for asset in self.pages],
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StoryPackage":
        if "request" not in payload:
            raise ValueError("Story package payload must include 'request'.")
        if "story" not in payload:
            raise ValueError("Story package payload must include 'story'.")

        request = StoryRequest.from_mapping(payload["request"])
        story = StoryRecord.from_mapping(payload["story"], STORED_FIELDS)

        pages: list[PageAsset] = []
        for entry in payload.get("pages") or []:
            try:
                page_number = int(entry["page_number"])
                text = str(entry["text"]).strip()
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Invalid page entry: {entry}") from exc

            image_outputs = tuple(normalize_image_outputs(entry.get("image_outputs", [])))
            audio = entry.get("narration_audio")
            pages.append(
                PageAsset(
                    page=StoryPage(page_number=page_number, text=text),
                    image_outputs=image_outputs,
                    narration_audio=str(audio) if audio else None,
                )
            )

        return cls(request=request, story=story, pages=pages)

    @classmethod
    def from_yaml(cls, source: str | Path) -> "StoryPackage":
        path = Path(source)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, Mapping):
            raise ValueError("Story package YAML must deserialize to a mapping.")
        return cls.from_dict(data)


class StorybookOrchestrator:
    """
    High-level coordinator that chains story, illustration, and narration workflows.

    Image and speech clients are only built when a run asks for them, so a
    text-only run needs no Replicate or ElevenLabs credentials.
    """

    def __init__(
        self,
        *,
        story_generator: StoryGenerator | None = None,
        image_generator: ReplicateImageGenerator | None = None,
        speech_synthesizer: ElevenLabsSpeechSynthesizer | None = None,
        story_model: str | None = None,
        story_api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
    ) -> None:
        self._story_generator = story_generator or StoryGenerator(
            api_key=story_api_key,
            model=story_model,
            completion_fn=completion_fn,
        )
        self._image_generator = image_generator
        self._speech_synthesizer = speech_synthesizer

    def run_from_request_file(
        self,
        request_path: Path | str,
        **run_kwargs: Any,
    ) -> StoryPackage:
        """
        Load request data from a YAML or JSON file and run the pipeline.
        """
        data = load_mapping_file(Path(request_path))
        return self.run(StoryRequest.from_mapping(data), **run_kwargs)

    def run(
        self,
        request: StoryRequest,
        *,
        illustrate: bool = True,
        narrate: bool = False,
        paragraphs_per_page: int = 1,
        image_kwargs: Mapping[str, Any] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> StoryPackage:
        """
        Complete pipeline from request to story record, pages, illustrations, and narration.
        """
        self._notify(progress_callback, "story:generating", story_about=request.story_about)
        story = self._story_generator.generate_story(request)
        self._notify(
            progress_callback,
            "story:generated",
            title=story.title,
            word_count=len(story.content.split()),
        )

        pages = split_into_pages(story.content, paragraphs_per_page=paragraphs_per_page)
        self._notify(progress_callback, "pages:ready", total_pages=len(pages))

        image_generator = self._resolve_image_generator() if illustrate else None
        synthesizer = self._resolve_speech_synthesizer() if narrate else None

        assets: list[PageAsset] = []
        scenes = list(story.suggested_illustrations)
        for index, page in enumerate(pages):
            self._notify(
                progress_callback,
                "page:processing",
                page_number=page.page_number,
                total_pages=len(pages),
            )

            image_outputs: list[str] = []
            if image_generator is not None:
                scene: IllustrationIdea = scenes[index] if index < len(scenes) else page.text
                image_outputs = normalize_image_outputs(
                    image_generator.generate_image(scene, **dict(image_kwargs or {}))
                )

            narration = synthesizer.synthesize_base64(page.text) if synthesizer is not None else None

            assets.append(
                PageAsset(page=page, image_outputs=tuple(image_outputs), narration_audio=narration)
            )
            self._notify(
                progress_callback,
                "page:done",
                page_number=page.page_number,
                total_pages=len(pages),
            )

        package = StoryPackage(request=request, story=story, pages=assets)
        logger.info("Story %r packaged with %d pages.", story.title, len(assets))
        self._notify(progress_callback, "pipeline:complete", total_pages=len(assets), title=story.title)
        return package

    def _resolve_image_generator(self) -> ReplicateImageGenerator:
        if self._image_generator is None:
            self._image_generator = ReplicateImageGenerator()
        return self._image_generator

    def _resolve_speech_synthesizer(self) -> ElevenLabsSpeechSynthesizer:
        if self._speech_synthesizer is None:
            self._speech_synthesizer = ElevenLabsSpeechSynthesizer()
        return self._speech_synthesizer

    @staticmethod
    def _notify(
        callback: ProgressCallback | None,
        stage: str,
        **payload: Any,
    ) -> None:
        if callback is not None:
            callback(stage, payload)


def load_mapping_file(path: Path) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    elif suffix == ".json":
        data = json.loads(text)
    else:
        raise ValueError("Unsupported request file format. Use YAML or JSON.")

    if not isinstance(data, Mapping):
        raise ValueError("Request file must deserialize to a mapping.")
    return data


def normalize_image_outputs(raw: Any) -> list[str]:
    """
    Normalize the image outputs returned by Replicate into a list of URL strings.
    """

    if raw is None:
        return []

    if isinstance(raw, str):
        return [raw]

    if isinstance(raw, bytes):
        return [raw.decode("utf-8", errors="ignore")]

    # Replicate FileOutput objects iterate over bytes; use their URL instead.
    url = getattr(raw, "url", None)
    if isinstance(url, str):
        return [url]

    if isinstance(raw, IterableABC):
        collected = list(raw)
        if not collected:
            return []

        if all(isinstance(item, str) and len(item) == 1 for item in collected):
            return ["".join(collected)]

        normalized: list[str] = []
        for item in collected:
            if isinstance(item, str):
                normalized.append(item)
            elif isinstance(item, bytes):
                normalized.append(item.decode("utf-8", errors="ignore"))
            elif isinstance(item, IterableABC):
                normalized.extend(normalize_image_outputs(item))
            elif item is not None:
                normalized.append(str(item))
        return normalized

    return [str(raw)]
