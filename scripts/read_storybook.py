"""
Page through a saved Storyweaver story package in the terminal.

Usage:
    python scripts/read_storybook.py --package story_package.yaml [--narrate --audio-dir audio/]

Commands at the prompt: n (next), p (previous), <number> (jump), q (quit).
"""

from __future__ import annotations

import argparse
import base64
import sys
import textwrap
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storyweaver import FlipBook, StoryPackage  # noqa: E402
from storyweaver.ai_generation import ElevenLabsSpeechSynthesizer  # noqa: E402
from storyweaver.logging_setup import configure_logging  # noqa: E402


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Read a Storyweaver story package as a flip-book.")
    parser.add_argument(
        "--package",
        required=True,
        help="Path to the story package YAML (output of generate_story.py).",
    )
    parser.add_argument(
        "--narrate",
        action="store_true",
        help="Synthesize narration for pages that do not have audio yet.",
    )
    parser.add_argument(
        "--audio-dir",
        default=None,
        help="Directory to write each page's narration as page_<n>.mp3.",
    )
    return parser.parse_args(argv)


def render(book: FlipBook) -> str:
    if book.is_cover:
        lines = [f"=== {book.title} ==="]
        if book.cover_image:
            lines.append(f"Cover image: {book.cover_image}")
        lines.append("(n to start reading)")
        return "\n".join(lines)

    asset = book.current
    lines = [f"--- Page {asset.page_number} of {len(book)} ---", textwrap.fill(asset.page.text, width=78)]
    if asset.primary_image:
        lines.append(f"Illustration: {asset.primary_image}")
    if book.is_last_page:
        lines.append("The End.")
    return "\n".join(lines)


def save_narration(book: FlipBook, audio_dir: Path) -> None:
    audio = book.narration_for_current()
    if audio is None or book.current is None:
        return
    audio_dir.mkdir(parents=True, exist_ok=True)
    target = audio_dir / f"page_{book.current.page_number}.mp3"
    target.write_bytes(base64.b64decode(audio))
    print(f"Narration saved to {target}")


def main(argv: list[str]) -> int:
    load_dotenv()
    args = parse_args(argv)
    configure_logging()

    package = StoryPackage.from_yaml(args.package)
    narrator = ElevenLabsSpeechSynthesizer() if args.narrate else None
    book = package.flipbook(narrator=narrator)
    audio_dir = Path(args.audio_dir) if args.audio_dir else None

    while True:
        print(render(book))
        if audio_dir is not None:
            save_narration(book, audio_dir)

        command = input("> ").strip().lower()
        if command in {"q", "quit"}:
            return 0
        if command in {"n", ""}:
            book.next_page()
        elif command == "p":
            book.previous_page()
        elif command.isdigit():
            try:
                book.go_to(int(command) - 1)
            except IndexError as exc:
                print(exc)
        else:
            print("Commands: n, p, <page number>, q")


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
