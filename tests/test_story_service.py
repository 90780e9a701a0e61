import pytest

from conftest import FakeCompletion
from storyweaver.common import EmptyResponseError, MalformedResponseError
from storyweaver.story_generation import CAPITALIZED_FIELDS, StoryGenerator, StoryRequest, build_story_prompt


@pytest.fixture
def request_():
    return StoryRequest(story_about="a shy dragon", settings="a misty valley", age_range="4-6")


def test_generate_story_returns_normalized_record(fake_completion, request_, story_payload):
    generator = StoryGenerator(api_key="key", model="test-model", completion_fn=fake_completion)

    record = generator.generate_story(request_)

    assert record.title == story_payload["title"]
    call = fake_completion.calls[0]
    assert call["model"] == "test-model"
    assert call["api_key"] == "key"
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 4096
    assert call["messages"][0]["role"] == "system"
    assert "a shy dragon" in call["messages"][1]["content"]


def test_generate_story_uses_call_site_mapping(request_):
    completion = FakeCompletion(
        'Here you go:\n{"Title": "Mist", "Content": "The dragon hid.\nThen it waved.", '
        '"MoralLesson": "Be brave.", "SuggestedIllustrations": ["dragon waving"]}'
    )
    generator = StoryGenerator(model="m", completion_fn=completion, field_mapping=CAPITALIZED_FIELDS)

    record = generator.generate_story(request_)

    assert record.content == "The dragon hid.\nThen it waved."
    assert '"Title"' in completion.calls[0]["messages"][1]["content"]


def test_blank_completion_raises_empty_response(request_):
    generator = StoryGenerator(model="m", completion_fn=FakeCompletion(""))

    with pytest.raises(EmptyResponseError):
        generator.generate_story(request_)
    assert issubclass(EmptyResponseError, MalformedResponseError)


def test_model_resolves_from_environment(monkeypatch):
    monkeypatch.setenv("STORYWEAVER_STORY_MODEL", "env-model")

    assert StoryGenerator(completion_fn=FakeCompletion("{}")).model == "env-model"


def test_model_defaults_when_environment_is_empty(monkeypatch):
    for name in ("STORYWEAVER_STORY_MODEL", "LITELLM_STORY_MODEL", "LITELLM_MODEL"):
        monkeypatch.delenv(name, raising=False)

    assert StoryGenerator(completion_fn=FakeCompletion("{}")).model == "claude-3-opus-20240229"


def test_prompt_lists_request_details_and_keys(request_):
    prompt = build_story_prompt(request_)

    assert "children's book author" in prompt.system
    assert "Setting: a misty valley" in prompt.user
    assert "Target age: 4-6" in prompt.user
    assert '"moralLesson"' in prompt.user
    assert '"suggestedIllustrations"' in prompt.user
    assert "should be in English" in prompt.user
