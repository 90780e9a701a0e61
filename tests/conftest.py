import json
import os

# Use litellm's bundled model cost map instead of fetching it over the network at import.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

import pytest

from storyweaver.common import ChatResult


class FakeCompletion:
    """Records completion calls and answers with canned text."""

    def __init__(self, text):
        self.text = text
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return ChatResult(text=self.text, raw={"fake": True})


@pytest.fixture
def story_payload():
    return {
        "title": "Luna and the Lantern",
        "content": "Luna found a lantern.\n\nIt glowed when she was kind.\n\nShe shared its light.",
        "moralLesson": "Kindness makes the world brighter.",
        "suggestedIllustrations": [
            "Luna discovering the lantern in the attic",
            "The lantern glowing in Luna's hands",
            "Luna sharing the light with her village",
        ],
    }


@pytest.fixture
def story_json(story_payload):
    return json.dumps(story_payload)


@pytest.fixture
def fake_completion(story_json):
    return FakeCompletion(story_json)
