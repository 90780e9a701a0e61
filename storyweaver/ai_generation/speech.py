"""
ElevenLabs text-to-speech client used to narrate story pages.
"""

from __future__ import annotations

import base64
import logging
import os
from typing import Any, Mapping

import requests

from storyweaver.common import SpeechSynthesisError

ELEVENLABS_API_URL = "https://api.elevenlabs.io/v1/text-to-speech"
DEFAULT_VOICE_ID = "pNInz6obpgDQGcFmaJgB"
DEFAULT_SPEECH_MODEL = "eleven_multilingual_v2"

DEFAULT_VOICE_SETTINGS: Mapping[str, Any] = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.25,
    "use_speaker_boost": True,
}

logger = logging.getLogger(__name__)


class ElevenLabsSpeechSynthesizer:
    """
    Turns page text into MP3 narration.

    Parameters
    ----------
    api_key:
        ElevenLabs key. Falls back to ``ELEVENLABS_API_KEY``.
    voice_id:
        Voice to narrate with. Falls back to ``ELEVENLABS_VOICE_ID`` and then
        to a warm storytelling voice.
    session:
        Optional :class:`requests.Session`, mainly useful for testing.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        voice_id: str | None = None,
        model_id: str = DEFAULT_SPEECH_MODEL,
        voice_settings: Mapping[str, Any] | None = None,
        session: requests.Session | None = None,
        request_timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key or os.getenv("ELEVENLABS_API_KEY")
        if not self._api_key:
            raise ValueError(
                "ElevenLabs API key is required. Set ELEVENLABS_API_KEY or pass api_key."
            )
        self._voice_id = voice_id or os.getenv("ELEVENLABS_VOICE_ID") or DEFAULT_VOICE_ID
        self._model_id = model_id
        self._voice_settings = dict(voice_settings or DEFAULT_VOICE_SETTINGS)
        self._session = session or requests.Session()
        self.request_timeout = request_timeout

    @property
    def voice_id(self) -> str:
        return self._voice_id

    def synthesize(self, text: str) -> bytes:
        """
        Return MP3 bytes narrating ``text``.
        """
        if not text or not text.strip():
            raise ValueError("Text is required for speech synthesis.")

        response = self._session.post(
            f"{ELEVENLABS_API_URL}/{self._voice_id}",
            headers={
                "Accept": "audio/mpeg",
                "Content-Type": "application/json",
                "xi-api-key": self._api_key,
            },
            json={
                "text": text,
                "model_id": self._model_id,
                "voice_settings": self._voice_settings,
            },
            timeout=self.request_timeout,
        )

        if not response.ok:
            message = _error_message(response)
            logger.error("Speech generation failed (%s): %s", response.status_code, message)
            raise SpeechSynthesisError(message, status_code=response.status_code)

        return response.content

    def synthesize_base64(self, text: str) -> str:
        """Return the narration as a base64 string, ready to embed or persist."""
        return base64.b64encode(self.synthesize(text)).decode("ascii")


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "Failed to generate speech"

    detail = payload.get("detail") if isinstance(payload, Mapping) else None
    if isinstance(detail, Mapping) and detail.get("message"):
        return str(detail["message"])
    if isinstance(detail, str) and detail:
        return detail
    return "Failed to generate speech"
