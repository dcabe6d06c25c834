"""
Pytest Configuration Fixtures

Sets up an isolated in-memory database, a temporary blob store and fake
text/speech providers so the pipeline runs without network access.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

# Set test environment variables BEFORE importing app modules
# so the settings object never points at a real database or storage path.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("STORAGE_PATH", tempfile.mkdtemp(prefix="podcast_storage_"))
os.environ.setdefault("ELEVENLABS_API_KEY", "test_elevenlabs_key")
os.environ.setdefault("GOOGLE_API_KEY", "test_google_key")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import podcast_generator.models  # noqa: F401
from podcast_generator.core.personas import Persona, VoiceTable, SUMMARY_PROFILE
from podcast_generator.core.script_generator import ScriptGenerator
from podcast_generator.core.tts import SpeechSynthesizer
from podcast_generator.db.session import Base
from podcast_generator.services.episode_service import EpisodeService
from podcast_generator.services.podcast_service import PodcastService
from podcast_generator.services.storage_service import LocalBlobStore


SAMPLE_SCRIPT = """Maya: Welcome to What Is It? I'm Maya, and I'm Jordan, we're not real but this code is!
Jordan: Today we're looking at a tiny retry helper.
(upbeat music)
Maya: It wraps any call and retries it with exponential backoff.
Jordan: That's What Is It?"""


class FakeLLM:
    """Text-generation provider returning a canned script."""

    def __init__(self, response=SAMPLE_SCRIPT, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get_response(self, messages, max_tokens=None):
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        return self.response


class FakeSpeechProvider:
    """Speech provider that encodes voice and text into deterministic bytes."""
    content_type = "audio/mpeg"

    def __init__(self, fail_on_call=None, empty=False):
        self.fail_on_call = fail_on_call
        self.empty = empty
        self.calls = []

    def stream(self, voice_id, text, model_id):
        self.calls.append((voice_id, text, model_id))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise RuntimeError("speech backend unavailable")
        if self.empty:
            return
        payload = f"[{voice_id}|{text}]".encode("utf-8")
        # Split into two pieces so callers must drain the whole stream.
        yield payload[: len(payload) // 2]
        yield payload[len(payload) // 2:]


class StepClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start=None):
        self.current = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture(scope="function")
def test_engine():
    """
    Create an isolated in-memory SQLite engine for testing.

    Each test function gets a fresh database. StaticPool keeps a single
    connection so the API thread sees the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def test_session(session_factory):
    """
    Create a database session for testing.
    """
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(base_path=str(tmp_path / "storage"))


@pytest.fixture
def voice_table():
    return VoiceTable(personas=(
        Persona("Maya", "voice-maya", "An energetic female AI host"),
        Persona("Jordan", "voice-jordan", "An enthusiastic male AI host"),
    ))


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def episode_service(clock):
    return EpisodeService(clock=clock)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_speech():
    return FakeSpeechProvider()


@pytest.fixture
def make_podcast_service(voice_table, episode_service, blob_store):
    """
    Factory for a PodcastService wired with fakes.

    Usage:
        service = make_podcast_service(llm=FakeLLM(response=""))
    """
    def _make(llm=None, speech=None):
        generator = ScriptGenerator(llm=llm or FakeLLM(), voices=voice_table, profile=SUMMARY_PROFILE)
        synthesizer = SpeechSynthesizer(provider=speech or FakeSpeechProvider(), voices=voice_table, model_id="test-model")
        return PodcastService(
            script_generator=generator,
            synthesizer=synthesizer,
            episode_service=episode_service,
            blob_store=blob_store,
        )
    return _make


@pytest.fixture
def fakes():
    """Expose the fake classes to tests that need custom instances."""
    return {"llm": FakeLLM, "speech": FakeSpeechProvider, "script": SAMPLE_SCRIPT}
