import base64

import pytest

from storyweaver.ai_generation import ElevenLabsSpeechSynthesizer
from storyweaver.common import SpeechSynthesisError


class FakeResponse:
    def __init__(self, status_code=200, content=b"", payload=None):
        self.status_code = status_code
        self.content = content
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def test_synthesize_posts_expected_request():
    session = FakeSession(FakeResponse(content=b"mp3-bytes"))
    synth = ElevenLabsSpeechSynthesizer(api_key="xi", session=session)

    assert synth.synthesize("Once upon a time") == b"mp3-bytes"

    url, kwargs = session.calls[0]
    assert url == "https://api.elevenlabs.io/v1/text-to-speech/pNInz6obpgDQGcFmaJgB"
    assert kwargs["headers"]["xi-api-key"] == "xi"
    assert kwargs["headers"]["Accept"] == "audio/mpeg"
    assert kwargs["json"]["model_id"] == "eleven_multilingual_v2"
    assert kwargs["json"]["voice_settings"]["similarity_boost"] == 0.75
    assert kwargs["timeout"] == 60.0


def test_synthesize_base64_encodes_audio():
    synth = ElevenLabsSpeechSynthesizer(api_key="xi", session=FakeSession(FakeResponse(content=b"abc")))

    assert synth.synthesize_base64("hi") == base64.b64encode(b"abc").decode("ascii")


def test_provider_error_message_is_surfaced():
    response = FakeResponse(status_code=401, payload={"detail": {"message": "Invalid API key"}})
    synth = ElevenLabsSpeechSynthesizer(api_key="bad", session=FakeSession(response))

    with pytest.raises(SpeechSynthesisError, match="Invalid API key") as excinfo:
        synth.synthesize("hi")
    assert excinfo.value.status_code == 401


def test_non_json_error_uses_generic_message():
    synth = ElevenLabsSpeechSynthesizer(api_key="xi", session=FakeSession(FakeResponse(status_code=500)))

    with pytest.raises(SpeechSynthesisError, match="Failed to generate speech"):
        synth.synthesize("hi")


def test_blank_text_is_rejected():
    synth = ElevenLabsSpeechSynthesizer(api_key="xi", session=FakeSession(FakeResponse()))

    with pytest.raises(ValueError):
        synth.synthesize("  ")


def test_api_key_is_required(monkeypatch):
    monkeypatch.delenv("ELEVENLABS_API_KEY", raising=False)

    with pytest.raises(ValueError):
        ElevenLabsSpeechSynthesizer(session=FakeSession(FakeResponse()))


def test_voice_id_from_environment(monkeypatch):
    monkeypatch.setenv("ELEVENLABS_VOICE_ID", "voice-123")

    synth = ElevenLabsSpeechSynthesizer(api_key="xi", session=FakeSession(FakeResponse()))

    assert synth.voice_id == "voice-123"
