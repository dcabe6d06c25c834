import logging
from typing import Optional, List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from podcast_generator.core.audio import AudioAssembler
from podcast_generator.core.duration import estimate_duration_seconds
from podcast_generator.core.errors import (
    GenerationError,
    InvalidInputError,
    InvalidTransitionError,
    PodcastError,
    SegmentationError,
)
from podcast_generator.core.llm import LLMError
from podcast_generator.core.script_generator import ScriptGenerator
from podcast_generator.core.segmenter import parse_script_segments
from podcast_generator.core.state_machine import EpisodeStateMachine
from podcast_generator.core.tts import SpeechSynthesizer
from podcast_generator.models.episode import Episode
from podcast_generator.schemas.podcast import ContentType, EpisodeStatus, GenerationResult, FOCUS_AREAS_ADAPTER
from podcast_generator.services.episode_service import EpisodeService, audio_url_for
from podcast_generator.services.storage_service import LocalBlobStore

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Podcast generated successfully!"


def audio_key_for(episode_id: str) -> str:
    return f"podcasts/{episode_id}.mp3"


class PodcastService:
    """
    A service class that runs the podcast generation pipeline.

    It creates the episode, then walks it through script generation,
    segmentation, speech synthesis, assembly and storage. Whatever happens
    after the episode row exists, the episode ends in a terminal status before
    the call returns.
    """

    def __init__(
        self,
        script_generator: ScriptGenerator,
        synthesizer: SpeechSynthesizer,
        episode_service: EpisodeService,
        blob_store: LocalBlobStore,
        assembler: Optional[AudioAssembler] = None,
    ):
        self.script_generator = script_generator
        self.synthesizer = synthesizer
        self.episode_service = episode_service
        self.blob_store = blob_store
        self.assembler = assembler or AudioAssembler()
        logger.info("PodcastService initialized.")

    def submit_generation(
        self,
        db: Session,
        content: str,
        content_type: ContentType,
        title: Optional[str] = None,
        focus_areas: Optional[List[str]] = None,
    ) -> GenerationResult:
        """
        Generates a podcast episode from source content.

        Args:
            db (Session): The SQLAlchemy database session.
            content (str): The source content to analyze.
            content_type (ContentType): One of code, file, discussion, project.
            title (Optional[str]): Custom episode title.
            focus_areas (Optional[List[str]]): Topics to emphasize.

        Returns:
            GenerationResult: The episode id, its terminal status and a message.

        Raises:
            InvalidInputError: If the input is rejected before any episode is created.
        """
        if not content or not content.strip():
            raise InvalidInputError("Content cannot be empty.")
        try:
            content_type = ContentType(content_type)
        except ValueError:
            raise InvalidInputError(f"Unsupported content type: {content_type}")
        if focus_areas is not None:
            try:
                focus_areas = FOCUS_AREAS_ADAPTER.validate_python(focus_areas)
            except ValidationError as e:
                raise InvalidInputError(f"focus_areas must be a list of strings: {e.errors()[0]['msg']}") from e

        source_metadata = {"focus_areas": focus_areas} if focus_areas else None
        episode = self.episode_service.create_episode(
            db,
            content=content,
            content_type=content_type,
            title=title,
            source_metadata=source_metadata,
        )
        logger.info(f"PodcastService: Starting podcast generation for episode {episode.id} ({content_type.value}).")

        episode = self.run_pipeline(db, episode, content, content_type, title, focus_areas)

        if episode.status == EpisodeStatus.COMPLETED.value:
            return GenerationResult(
                episode_id=episode.id,
                status=EpisodeStatus.COMPLETED,
                message=SUCCESS_MESSAGE,
                audio_url=audio_url_for(episode.id),
            )
        return GenerationResult(
            episode_id=episode.id,
            status=EpisodeStatus.FAILED,
            message=episode.error_message or "Podcast generation failed",
        )

    def run_pipeline(
        self,
        db: Session,
        episode: Episode,
        content: str,
        content_type: ContentType,
        title: Optional[str] = None,
        focus_areas: Optional[List[str]] = None,
    ) -> Episode:
        """
        Runs every stage for an episode that is still generating.

        Raises:
            InvalidTransitionError: If the episode is already completed or failed.
        """
        if EpisodeStateMachine.is_terminal(episode.status):
            raise InvalidTransitionError(
                f"Episode {episode.id} is already {episode.status}; start a new generation instead."
            )

        try:
            self._generate(db, episode, content, content_type, title, focus_areas)
        except Exception as e:
            stage = e.stage if isinstance(e, PodcastError) else "pipeline"
            message = f"{stage} failed: {e}"
            logger.error(f"PodcastService: Failed to generate podcast for episode {episode.id}: {message}", exc_info=True)
            self.episode_service.mark_failed(db, episode, message)
        return episode

    def _generate(
        self,
        db: Session,
        episode: Episode,
        content: str,
        content_type: ContentType,
        title: Optional[str],
        focus_areas: Optional[List[str]],
    ):
        try:
            result = self.script_generator.generate(content, content_type, title=title, focus_areas=focus_areas)
        except LLMError as e:
            raise GenerationError(str(e)) from e
        if result.is_short:
            logger.warning(f"PodcastService: Script for episode {episode.id} is short ({len(result.text)} chars); continuing with synthesis.")
        self.episode_service.save_script(db, episode, result.text)

        turns = parse_script_segments(episode.script, self.script_generator.voices.names)
        logger.info(f"PodcastService: Parsed {len(turns)} segments for episode {episode.id}.")
        if not turns:
            raise SegmentationError("No segments found in script")

        chunks = self.synthesizer.synthesize_script(turns)
        audio = self.assembler.assemble(chunks)

        audio_key = audio_key_for(episode.id)
        logger.info(f"PodcastService: Uploading audio for episode {episode.id} with key: {audio_key}, size: {len(audio)}")
        self.blob_store.put(audio_key, audio, self.synthesizer.content_type)

        duration_seconds = estimate_duration_seconds(episode.script)
        self.episode_service.mark_completed(db, episode, audio_key, duration_seconds)
        logger.info(f"PodcastService: Successfully completed podcast generation for episode {episode.id}.")
