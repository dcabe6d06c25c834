# In backend/podcast_generator/core/tts.py

import logging
from typing import Iterator, List, Optional, Protocol

import requests

from podcast_generator.core.audio import drain_stream
from podcast_generator.core.errors import SynthesisError
from podcast_generator.core.personas import VoiceTable
from podcast_generator.core.segmenter import ScriptTurn

logger = logging.getLogger(__name__)

STREAM_CHUNK_SIZE = 8192


class SpeechProvider(Protocol):
    """Renders text with a given voice and yields the encoded audio bytes."""
    content_type: str

    def stream(self, voice_id: str, text: str, model_id: str) -> Iterator[bytes]:
        ...


class ElevenLabsSpeechProvider:
    """ElevenLabs streaming text-to-speech over HTTP."""
    content_type = "audio/mpeg"

    def __init__(self, api_key: str, base_url: str = "https://api.elevenlabs.io/v1", timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        if not api_key:
            raise ValueError("ELEVENLABS_API_KEY must be set for ElevenLabs TTS")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def stream(self, voice_id: str, text: str, model_id: str) -> Iterator[bytes]:
        url = f"{self.base_url}/text-to-speech/{voice_id}/stream"
        headers = {
            "xi-api-key": self.api_key,
            "Accept": self.content_type,
            "Content-Type": "application/json",
        }
        json_body = {"text": text, "model_id": model_id}

        try:
            with self.session.post(url, headers=headers, json=json_body, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=STREAM_CHUNK_SIZE):
                    if chunk:
                        yield chunk
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"ElevenLabs TTS failed: {e}") from e


class AzureSpeechProvider:
    """Azure OpenAI text-to-speech deployment."""
    content_type = "audio/mpeg"

    def __init__(self, api_key: str, endpoint: str, deployment_name: str = "tts", api_version: str = "2025-03-01-preview", timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        if not all([api_key, endpoint, deployment_name, api_version]):
            raise ValueError("AZURE_TTS_KEY, AZURE_TTS_ENDPOINT, AZURE_TTS_DEPLOYMENT, and AZURE_TTS_API_VERSION must be set for Azure OpenAI TTS")
        self.api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.deployment_name = deployment_name
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()

    def stream(self, voice_id: str, text: str, model_id: str) -> Iterator[bytes]:
        # Azure OpenAI Service TTS endpoint format
        tts_url = f"{self.endpoint}/openai/deployments/{self.deployment_name}/audio/speech?api-version={self.api_version}"
        tts_headers = {
            "api-key": self.api_key,
            "Content-Type": "application/json",
        }
        json_body = {
            "model": model_id or self.deployment_name,
            "input": text,
            "voice": voice_id,
            "response_format": "mp3",
        }

        try:
            with self.session.post(tts_url, headers=tts_headers, json=json_body, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=STREAM_CHUNK_SIZE):
                    if chunk:
                        yield chunk
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"Azure TTS failed: {e}") from e


class GoogleSpeechProvider:
    """Google Cloud Text-to-Speech. The API answers in one piece, so the stream has a single chunk."""
    content_type = "audio/mpeg"

    def __init__(self, language_code: str = "en-US", client=None):
        self.language_code = language_code
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from google.cloud import texttospeech
            self._client = texttospeech.TextToSpeechClient()
        return self._client

    def stream(self, voice_id: str, text: str, model_id: str) -> Iterator[bytes]:
        from google.cloud import texttospeech

        try:
            response = self.client.synthesize_speech(
                input=texttospeech.SynthesisInput(text=text),
                voice=texttospeech.VoiceSelectionParams(language_code=self.language_code, name=voice_id),
                audio_config=texttospeech.AudioConfig(audio_encoding=texttospeech.AudioEncoding.MP3),
            )
        except Exception as e:
            raise RuntimeError(f"Google Cloud TTS failed: {e}") from e
        yield response.audio_content


DEFAULT_MODEL_IDS = {
    "elevenlabs": "eleven_multilingual_v2",
    "azure": "tts-1",
    "gcp": "",
}


def default_model_id(settings) -> str:
    """The synthesis model to request: TTS_MODEL_ID, else the provider's default."""
    if settings.TTS_MODEL_ID:
        return settings.TTS_MODEL_ID
    return DEFAULT_MODEL_IDS.get((settings.TTS_PROVIDER or "elevenlabs").lower(), "")


def create_speech_provider(settings) -> SpeechProvider:
    """Build the speech provider selected by TTS_PROVIDER."""
    provider = (settings.TTS_PROVIDER or "elevenlabs").lower()
    if provider == "elevenlabs":
        return ElevenLabsSpeechProvider(
            api_key=settings.ELEVENLABS_API_KEY,
            base_url=settings.ELEVENLABS_BASE_URL,
            timeout=settings.TTS_REQUEST_TIMEOUT,
        )
    elif provider == "azure":
        return AzureSpeechProvider(
            api_key=settings.AZURE_TTS_KEY,
            endpoint=settings.AZURE_TTS_ENDPOINT,
            deployment_name=settings.AZURE_TTS_DEPLOYMENT,
            api_version=settings.AZURE_TTS_API_VERSION,
            timeout=settings.TTS_REQUEST_TIMEOUT,
        )
    elif provider == "gcp":
        return GoogleSpeechProvider(language_code=settings.GCP_TTS_LANGUAGE)
    else:
        raise ValueError(f"Unsupported TTS_PROVIDER: {provider}")


class SpeechSynthesizer:
    """
    Turns script turns into audio chunks, one chunk per turn.

    Turns are rendered one at a time in script order; each provider stream is
    drained completely before the next request starts. A failure on any turn
    stops the run.
    """

    def __init__(self, provider: SpeechProvider, voices: VoiceTable, model_id: str):
        self.provider = provider
        self.voices = voices
        self.model_id = model_id

    @property
    def content_type(self) -> str:
        return getattr(self.provider, "content_type", "audio/mpeg")

    def synthesize(self, turn: ScriptTurn) -> bytes:
        """Render a single turn into one contiguous audio buffer."""
        if not turn.text or not turn.text.strip():
            raise ValueError("Text cannot be empty")
        voice_id = self.voices.voice_for(turn.speaker)
        return drain_stream(self.provider.stream(voice_id, turn.text, self.model_id))

    def synthesize_script(self, turns: List[ScriptTurn]) -> Iterator[bytes]:
        """
        Yield the audio for each turn, strictly in order.

        Raises:
            SynthesisError: On the first turn that fails.
        """
        total = len(turns)
        for index, turn in enumerate(turns, start=1):
            logger.debug(f"SpeechSynthesizer: Generating audio for segment {index}/{total}: {turn.speaker} - \"{turn.text[:50]}...\"")
            try:
                audio = self.synthesize(turn)
            except Exception as e:
                logger.error(f"SpeechSynthesizer: Error generating audio for segment {index}: {e}")
                raise SynthesisError(f"segment {index}/{total} ({turn.speaker}): {e}") from e
            logger.debug(f"SpeechSynthesizer: Generated {len(audio)} bytes for segment {index}")
            yield audio
