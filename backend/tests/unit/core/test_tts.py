"""
Speech Synthesis Unit Tests
"""
from unittest.mock import MagicMock, Mock

import pytest
import requests

from podcast_generator.core.config import Settings
from podcast_generator.core.errors import SynthesisError
from podcast_generator.core.segmenter import ScriptTurn
from podcast_generator.core.tts import (
    AzureSpeechProvider,
    ElevenLabsSpeechProvider,
    GoogleSpeechProvider,
    SpeechSynthesizer,
    create_speech_provider,
    default_model_id,
)


TURNS = [
    ScriptTurn("Maya", "First."),
    ScriptTurn("Jordan", "Second."),
    ScriptTurn("Maya", "Third."),
]


class TestSpeechSynthesizer:

    def test_turns_are_rendered_in_order_with_their_voices(self, voice_table, fake_speech):
        """
        Given: Three turns alternating speakers
        When: Synthesizing the script
        Then: One chunk per turn, requested sequentially with each speaker's voice
        """
        synthesizer = SpeechSynthesizer(provider=fake_speech, voices=voice_table, model_id="m1")

        chunks = list(synthesizer.synthesize_script(TURNS))

        assert fake_speech.calls == [
            ("voice-maya", "First.", "m1"),
            ("voice-jordan", "Second.", "m1"),
            ("voice-maya", "Third.", "m1"),
        ]
        assert chunks == [
            b"[voice-maya|First.]",
            b"[voice-jordan|Second.]",
            b"[voice-maya|Third.]",
        ]

    def test_failure_stops_at_failing_turn(self, voice_table, fakes):
        """
        Given: A provider that fails on the second request
        When: Synthesizing the script
        Then: SynthesisError names the turn and no later turn is requested
        """
        provider = fakes["speech"](fail_on_call=2)
        synthesizer = SpeechSynthesizer(provider=provider, voices=voice_table, model_id="m1")
        produced = []

        with pytest.raises(SynthesisError, match=r"segment 2/3 \(Jordan\)"):
            for chunk in synthesizer.synthesize_script(TURNS):
                produced.append(chunk)

        assert len(produced) == 1
        assert len(provider.calls) == 2

    def test_unknown_speaker_is_a_synthesis_error(self, voice_table, fake_speech):
        synthesizer = SpeechSynthesizer(provider=fake_speech, voices=voice_table, model_id="m1")

        with pytest.raises(SynthesisError):
            list(synthesizer.synthesize_script([ScriptTurn("Narrator", "hello")]))

        assert fake_speech.calls == []

    def test_content_type_comes_from_provider(self, voice_table, fake_speech):
        synthesizer = SpeechSynthesizer(provider=fake_speech, voices=voice_table, model_id="m1")

        assert synthesizer.content_type == "audio/mpeg"


def mock_session(chunks=(b"ab", b"cd"), error=None):
    session = Mock()
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    response.iter_content.return_value = iter(chunks)
    if error:
        response.raise_for_status.side_effect = error
    session.post.return_value = response
    return session


class TestElevenLabsSpeechProvider:

    def test_streams_audio_from_api(self):
        """
        Given: An ElevenLabs provider with a mocked HTTP session
        When: Streaming a line
        Then: The voice, model and key are sent and chunks are yielded in order
        """
        session = mock_session()
        provider = ElevenLabsSpeechProvider(api_key="xi", base_url="https://api.test/v1/", session=session)

        audio = b"".join(provider.stream("voice-1", "Hello.", "eleven_multilingual_v2"))

        assert audio == b"abcd"
        args, kwargs = session.post.call_args
        assert args[0] == "https://api.test/v1/text-to-speech/voice-1/stream"
        assert kwargs["headers"]["xi-api-key"] == "xi"
        assert kwargs["json"] == {"text": "Hello.", "model_id": "eleven_multilingual_v2"}
        assert kwargs["stream"] is True
        assert kwargs["timeout"] is None

    def test_http_error_is_raised(self):
        session = mock_session(error=requests.exceptions.HTTPError("401 Unauthorized"))
        provider = ElevenLabsSpeechProvider(api_key="xi", session=session)

        with pytest.raises(RuntimeError, match="ElevenLabs TTS failed: 401"):
            b"".join(provider.stream("voice-1", "Hello.", "m"))

    def test_requires_api_key(self):
        with pytest.raises(ValueError, match="ELEVENLABS_API_KEY"):
            ElevenLabsSpeechProvider(api_key=None)


class TestAzureSpeechProvider:

    def test_request_shape(self):
        session = mock_session(chunks=(b"mp3",))
        provider = AzureSpeechProvider(api_key="k", endpoint="https://azure.test/", session=session)

        assert b"".join(provider.stream("alloy", "Hi.", "tts-1")) == b"mp3"
        args, kwargs = session.post.call_args
        assert args[0].startswith("https://azure.test/openai/deployments/tts/audio/speech")
        assert kwargs["json"]["voice"] == "alloy"
        assert kwargs["json"]["model"] == "tts-1"


class TestGoogleSpeechProvider:

    def test_yields_audio_content(self):
        client = Mock()
        client.synthesize_speech.return_value = Mock(audio_content=b"gcp-audio")
        provider = GoogleSpeechProvider(language_code="en-US", client=client)

        assert list(provider.stream("en-US-Wavenet-D", "Hi.", "")) == [b"gcp-audio"]


class TestProviderFactory:

    def test_elevenlabs_is_default(self):
        settings = Settings(_env_file=None, ELEVENLABS_API_KEY="xi")

        provider = create_speech_provider(settings)

        assert isinstance(provider, ElevenLabsSpeechProvider)
        assert default_model_id(settings) == "eleven_multilingual_v2"

    def test_model_id_override(self):
        settings = Settings(_env_file=None, TTS_PROVIDER="azure", TTS_MODEL_ID="tts-1-hd")

        assert default_model_id(settings) == "tts-1-hd"

    def test_azure_default_model(self):
        assert default_model_id(Settings(_env_file=None, TTS_PROVIDER="azure")) == "tts-1"

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported TTS_PROVIDER"):
            create_speech_provider(Settings(_env_file=None, TTS_PROVIDER="espeak"))
