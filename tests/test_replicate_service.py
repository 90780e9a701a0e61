import pytest

from storyweaver.ai_generation import ReplicateImageGenerator, build_illustration_prompt


class FakeReplicateClient:
    def __init__(self, output):
        self.output = output
        self.calls = []

    def run(self, model, input):
        self.calls.append((model, input))
        return self.output


def test_generate_image_sends_styled_prompt(monkeypatch):
    monkeypatch.delenv("REPLICATE_MODEL", raising=False)
    client = FakeReplicateClient(["https://img/1.png"])
    generator = ReplicateImageGenerator(client=client)

    output = generator.generate_image("A fox reading by candlelight", seed=7)

    assert output == ["https://img/1.png"]
    model, payload = client.calls[0]
    assert model == "black-forest-labs/flux-schnell"
    assert payload["prompt"].endswith("Specific scene to illustrate: A fox reading by candlelight")
    assert "watercolor" in payload["prompt"]
    assert payload["seed"] == 7


def test_versioned_identifier_uses_base_builder():
    client = FakeReplicateClient([])
    generator = ReplicateImageGenerator(client=client, model_identifier="stability-ai/sdxl:abc123")

    generator.generate_image("A castle")

    assert "negative_prompt" in client.calls[0][1]


def test_unknown_model_is_rejected():
    generator = ReplicateImageGenerator(client=FakeReplicateClient([]), model_identifier="someone/unknown")

    with pytest.raises(ValueError, match="Supported models"):
        generator.generate_image("A castle")


def test_token_required_without_client(monkeypatch):
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)

    with pytest.raises(ValueError):
        ReplicateImageGenerator()


def test_illustration_prompt_accepts_scene_objects():
    prompt = build_illustration_prompt({"description": "Two friends on a hill"})

    assert prompt.endswith("Two friends on a hill")


def test_illustration_prompt_rejects_blank_scene():
    with pytest.raises(ValueError):
        build_illustration_prompt("   ")
