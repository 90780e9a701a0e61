"""
CLI to run the complete Storyweaver pipeline end-to-end.

Usage:
    python scripts/generate_story.py \
        --request story_request.yaml \
        --output story_package.yaml \
        --narrate
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from tqdm.auto import tqdm

# Ensure project root is on the Python path when running as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storyweaver import StorybookOrchestrator, StoryGenerator  # noqa: E402
from storyweaver.common import SpeechSynthesisError, StoryGenerationError  # noqa: E402
from storyweaver.logging_setup import configure_logging  # noqa: E402
from storyweaver.story_generation import CANONICAL_FIELDS, CAPITALIZED_FIELDS  # noqa: E402

FIELD_MAPPINGS = {
    "canonical": CANONICAL_FIELDS,
    "capitalized": CAPITALIZED_FIELDS,
}

logger = logging.getLogger("storyweaver.scripts.generate_story")


class ProgressTracker:
    """
    Provides user-friendly command-line progress updates for the Storyweaver pipeline.
    """

    def __init__(self) -> None:
        self._page_bar: tqdm | None = None

    def __call__(self, stage: str, payload: Dict[str, Any]) -> None:
        match stage:
            case "story:generating":
                self._write(f"[1/3] Writing a story about {payload.get('story_about')!s}...")
            case "story:generated":
                word_count = payload.get("word_count")
                summary = (
                    f" (~{word_count} words)." if isinstance(word_count, int) and word_count > 0 else "."
                )
                self._write(f"[1/3] \"{payload.get('title')}\" is ready{summary}")
            case "pages:ready":
                total = payload.get("total_pages", 0)
                self._write(f"[2/3] Story divided into {total} pages. Illustrating and narrating...")
                self._page_bar = tqdm(total=total, desc="Pages", unit="page")
            case "page:processing":
                if self._page_bar is not None:
                    self._page_bar.set_description(f"Page {payload.get('page_number')}")
            case "page:done":
                if self._page_bar is not None:
                    self._page_bar.update(1)
            case "pipeline:complete":
                self.close()
                self._write("[3/3] Pipeline complete.")

    def close(self) -> None:
        if self._page_bar is not None:
            self._page_bar.close()
            self._page_bar = None

    @staticmethod
    def _write(message: str) -> None:
        tqdm.write(message)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate an illustrated, narrated children's story.")
    parser.add_argument(
        "--request",
        required=True,
        help="Path to the story request YAML/JSON file.",
    )
    parser.add_argument(
        "--output",
        default="story_package.yaml",
        help="Output YAML file to store the story, pages, images, and narration.",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Override the LiteLLM model used to write the story.",
    )
    parser.add_argument(
        "--field-casing",
        choices=sorted(FIELD_MAPPINGS),
        default="canonical",
        help="JSON key casing requested from the model (default: canonical).",
    )
    parser.add_argument(
        "--paragraphs-per-page",
        type=int,
        default=1,
        help="Number of story paragraphs on each flip-book page (default: 1).",
    )
    parser.add_argument(
        "--no-illustrations",
        dest="illustrate",
        action="store_false",
        help="Skip illustration generation.",
    )
    parser.add_argument(
        "--narrate",
        action="store_true",
        help="Generate narration audio for every page.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    configure_logging(args.log_level.upper())

    generator = StoryGenerator(model=args.model, field_mapping=FIELD_MAPPINGS[args.field_casing])
    orchestrator = StorybookOrchestrator(story_generator=generator)
    tracker = ProgressTracker()

    try:
        package = orchestrator.run_from_request_file(
            args.request,
            illustrate=args.illustrate,
            narrate=args.narrate,
            paragraphs_per_page=args.paragraphs_per_page,
            progress_callback=tracker,
        )
    except StoryGenerationError as exc:
        logger.error("Failed to generate story: %s", exc)
        return 1
    except SpeechSynthesisError as exc:
        logger.error("Failed to narrate story: %s", exc)
        return 1
    except ValueError as exc:
        # Missing media credentials or an unusable request file.
        logger.error("Story pipeline could not run: %s", exc)
        return 1
    finally:
        tracker.close()

    output_path = Path(args.output)
    output_path.write_text(package.to_yaml(), encoding="utf-8")
    print(f"Saved story package to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
