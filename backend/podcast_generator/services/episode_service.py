import logging
from typing import Callable, List, Optional
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from podcast_generator.core.config import settings
from podcast_generator.core.errors import InvalidInputError, NotFoundError, StorageError
from podcast_generator.core.state_machine import EpisodeStateMachine
from podcast_generator.models.episode import Episode, utcnow
from podcast_generator.models.generation_request import GenerationRequest
from podcast_generator.schemas.podcast import (
    ContentType,
    EpisodeStatus,
    EpisodeSummary,
    SCRIPT_PLACEHOLDER,
    SOURCE_METADATA_ADAPTER,
    SourceMetadata,
)
from podcast_generator.services.storage_service import LocalBlobStore, StoredBlob

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def audio_url_for(episode_id: str) -> str:
    return f"{settings.API_V1_STR}/podcasts/{episode_id}/audio"


class EpisodeService:
    """
    A service class containing the persistence logic for episodes.

    Every write goes through here so that status changes are checked against
    the episode state machine and timestamps are kept current.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock

    def create_episode(
        self,
        db: Session,
        content: str,
        content_type: ContentType,
        title: Optional[str] = None,
        source_metadata: Optional[SourceMetadata] = None,
    ) -> Episode:
        """
        Creates an episode in the generating status together with the request
        that produced it, in a single commit.

        Args:
            db: The SQLAlchemy database session.
            content: The verbatim source content.
            content_type: What kind of content it is.
            title: Optional custom title.
            source_metadata: Optional extra request data, e.g. focus areas.

        Returns:
            The newly created SQLAlchemy Episode object.

        Raises:
            InvalidInputError: If the source metadata holds unsupported values.
        """
        kind = ContentType(content_type).value
        if source_metadata is not None:
            try:
                source_metadata = SOURCE_METADATA_ADAPTER.validate_python(source_metadata)
            except ValidationError as e:
                raise InvalidInputError(f"Invalid source metadata: {e.errors()[0]['msg']}") from e
        now = self.clock()
        db_episode = Episode(
            title=title or f"AI Podcast: {kind} Analysis",
            description=f"Generated podcast discussing {kind} content",
            script="",
            status=EpisodeStateMachine.INITIAL.value,
            created_at=now,
            updated_at=now,
        )
        db_episode.generation_requests.append(GenerationRequest(
            source_type=kind,
            source_content=content,
            source_metadata=source_metadata,
            created_at=now,
        ))

        try:
            db.add(db_episode)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"EpisodeService: Failed to create episode: {e}", exc_info=True)
            raise StorageError(f"Could not create episode: {e}") from e
        db.refresh(db_episode)
        logger.info(f"EpisodeService: Created episode {db_episode.id} for {kind} content.")
        return db_episode

    def get_episode(self, db: Session, episode_id: str) -> Episode:
        """
        Retrieves a single episode by its ID.

        Raises:
            NotFoundError: If the episode does not exist.
        """
        episode = db.query(Episode).filter(Episode.id == episode_id).first()
        if not episode:
            logger.debug(f"EpisodeService: Episode with ID: {episode_id} not found.")
            raise NotFoundError("Episode not found")
        return episode

    def list_episodes(self, db: Session, limit: int = 10, offset: int = 0) -> List[Episode]:
        """
        Returns a page of episodes, newest first.

        Raises:
            InvalidInputError: If limit is outside [1, 100] or offset is negative.
        """
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}")
        if offset < 0:
            raise InvalidInputError(f"offset must be >= 0, got {offset}")

        return (
            db.query(Episode)
            .order_by(Episode.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    def save_script(self, db: Session, episode: Episode, script: str) -> Episode:
        """Checkpoint the generated script so it stays inspectable if later stages fail."""
        episode.script = script
        episode.updated_at = self.clock()
        self._commit(db, episode, "save script")
        logger.debug(f"EpisodeService: Saved script for episode {episode.id} ({len(script)} chars).")
        return episode

    def mark_completed(self, db: Session, episode: Episode, audio_file_key: str, duration_seconds: int) -> Episode:
        EpisodeStateMachine.validate_transition(episode.status, EpisodeStatus.COMPLETED)
        episode.status = EpisodeStatus.COMPLETED.value
        episode.audio_file_key = audio_file_key
        episode.duration_seconds = duration_seconds
        episode.error_message = None
        episode.updated_at = self.clock()
        self._commit(db, episode, "mark completed")
        logger.info(f"EpisodeService: Episode {episode.id} completed ({duration_seconds}s, key={audio_file_key}).")
        return episode

    def mark_failed(self, db: Session, episode: Episode, error_message: str) -> Episode:
        EpisodeStateMachine.validate_transition(episode.status, EpisodeStatus.FAILED)
        episode.status = EpisodeStatus.FAILED.value
        episode.audio_file_key = None
        episode.duration_seconds = None
        episode.error_message = error_message
        episode.updated_at = self.clock()
        self._commit(db, episode, "mark failed")
        logger.info(f"EpisodeService: Episode {episode.id} failed: {error_message}")
        return episode

    def get_script(self, db: Session, episode_id: str) -> str:
        episode = self.get_episode(db, episode_id)
        return episode.script or SCRIPT_PLACEHOLDER

    def fetch_audio(self, db: Session, blob_store: LocalBlobStore, episode_id: str) -> StoredBlob:
        """
        Returns the finished audio of an episode.

        Raises:
            NotFoundError: If the episode is unknown, has no audio yet, or the blob is missing.
        """
        episode = self.get_episode(db, episode_id)
        if not episode.audio_file_key:
            raise NotFoundError("Audio not found")
        return blob_store.get(episode.audio_file_key)

    def to_summary(self, episode: Episode) -> EpisodeSummary:
        return EpisodeSummary(
            episode_id=episode.id,
            title=episode.title,
            description=episode.description,
            status=EpisodeStatus(episode.status),
            duration_seconds=episode.duration_seconds,
            audio_url=audio_url_for(episode.id) if episode.audio_file_key else None,
            error_message=episode.error_message,
            created_at=episode.created_at,
            updated_at=episode.updated_at,
        )

    def _commit(self, db: Session, episode: Episode, action: str):
        try:
            db.add(episode)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"EpisodeService: Failed to {action} for episode {episode.id}: {e}", exc_info=True)
            raise StorageError(f"Could not {action} for episode {episode.id}: {e}") from e
        db.refresh(episode)


episode_service = EpisodeService()

def get_episode_service() -> EpisodeService:
    """
    Dependency function to provide the episode service instance.
    """
    return episode_service
