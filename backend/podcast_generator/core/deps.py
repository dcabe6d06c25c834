from functools import lru_cache

from fastapi import Depends

from podcast_generator.core.config import settings
from podcast_generator.core.llm import LLMManager
from podcast_generator.core.personas import VoiceTable, GenerationProfile, get_profile
from podcast_generator.core.script_generator import ScriptGenerator
from podcast_generator.core.tts import SpeechSynthesizer, create_speech_provider, default_model_id
from podcast_generator.services.episode_service import EpisodeService, get_episode_service
from podcast_generator.services.podcast_service import PodcastService
from podcast_generator.services.storage_service import LocalBlobStore, get_blob_store


@lru_cache
def get_voice_table() -> VoiceTable:
    return VoiceTable.from_settings(settings)


@lru_cache
def get_generation_profile() -> GenerationProfile:
    return get_profile(settings.GENERATION_PROFILE)


@lru_cache
def get_llm_manager() -> LLMManager:
    return LLMManager.from_settings(settings)


@lru_cache
def get_speech_synthesizer() -> SpeechSynthesizer:
    return SpeechSynthesizer(
        provider=create_speech_provider(settings),
        voices=get_voice_table(),
        model_id=default_model_id(settings),
    )


def get_podcast_service(
    episode_service: EpisodeService = Depends(get_episode_service),
    blob_store: LocalBlobStore = Depends(get_blob_store),
) -> PodcastService:
    """
    Dependency function to provide the podcast service instance.

    The LLM client, speech provider, voice table and profile are built once
    from settings and shared; the service itself is cheap to create per request.
    """
    script_generator = ScriptGenerator(
        llm=get_llm_manager(),
        voices=get_voice_table(),
        profile=get_generation_profile(),
    )
    return PodcastService(
        script_generator=script_generator,
        synthesizer=get_speech_synthesizer(),
        episode_service=episode_service,
        blob_store=blob_store,
    )
