import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Path, Query
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

# Configure logger for this module
logger = logging.getLogger(__name__)

# Import services, models, and dependencies
from podcast_generator.core.deps import get_podcast_service
from podcast_generator.core.errors import InvalidInputError, InvalidTransitionError, NotFoundError
from podcast_generator.services.episode_service import EpisodeService, get_episode_service, MAX_PAGE_SIZE
from podcast_generator.services.podcast_service import PodcastService
from podcast_generator.services.storage_service import LocalBlobStore, get_blob_store
from podcast_generator.schemas import PodcastGenerateRequest, GenerationResult, EpisodeSummary
from podcast_generator.db.session import get_db

# Create a new router for this module.
router = APIRouter()

@router.post(
    "/generate",
    response_model=GenerationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a podcast from source content",
    description="Generates a two-host audio episode from code, a file, a discussion or a project description. The generation process is synchronous: the response reports the episode's terminal status, and failures are reported in `message` rather than as an HTTP error."
)
def generate_podcast(
    *,
    db: Session = Depends(get_db),
    podcast_in: PodcastGenerateRequest,
    podcast_service: PodcastService = Depends(get_podcast_service)
):
    """
    Synchronously generate a podcast episode.

    Raises:
        HTTPException: 400 Bad Request if the input is rejected.
        HTTPException: 409 Conflict if the episode has already reached a terminal status.
        HTTPException: 500 Internal Server Error for unexpected errors.
    """
    logger.info(f"API: Received request to generate podcast from {podcast_in.content_type.value} content.")
    try:
        result = podcast_service.submit_generation(
            db=db,
            content=podcast_in.content,
            content_type=podcast_in.content_type,
            title=podcast_in.title,
            focus_areas=podcast_in.focus_areas,
        )
        logger.info(f"API: Generation for episode {result.episode_id} finished with status '{result.status.value}'.")
        return result
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"API: An unexpected error occurred during podcast generation: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An internal error occurred while generating the podcast: {str(e)}"
        )

@router.get(
    "/",
    response_model=List[EpisodeSummary],
    summary="List podcast episodes",
    description="Returns a page of episodes ordered by creation time, newest first."
)
def list_podcasts(
    db: Session = Depends(get_db),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Maximum number of results."),
    offset: int = Query(0, ge=0, description="Pagination offset."),
    episode_service: EpisodeService = Depends(get_episode_service)
):
    try:
        episodes = episode_service.list_episodes(db, limit=limit, offset=offset)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [episode_service.to_summary(episode) for episode in episodes]

@router.get(
    "/{episode_id}",
    response_model=EpisodeSummary,
    summary="Retrieve the status of a podcast episode",
    description="Fetches an episode's status and metadata. Returns a 404 error if the episode is not found."
)
def get_podcast_status(
    *,
    db: Session = Depends(get_db),
    episode_id: str = Path(..., description="The episode ID to check."),
    episode_service: EpisodeService = Depends(get_episode_service)
):
    try:
        episode = episode_service.get_episode(db, episode_id)
    except NotFoundError as e:
        logger.warning(f"API: Episode with ID: {episode_id} not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return episode_service.to_summary(episode)

@router.get(
    "/{episode_id}/script",
    response_class=PlainTextResponse,
    summary="Retrieve the script of a podcast episode",
    description="Returns the generated script as plain text, or a placeholder if it has not been generated yet."
)
def get_podcast_script(
    *,
    db: Session = Depends(get_db),
    episode_id: str = Path(..., description="The episode ID."),
    episode_service: EpisodeService = Depends(get_episode_service)
):
    try:
        return episode_service.get_script(db, episode_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.get(
    "/{episode_id}/audio",
    response_class=Response,
    summary="Download the audio of a podcast episode",
    description="Streams the stored audio bytes. Returns a 404 error until the episode has completed."
)
def get_podcast_audio(
    *,
    db: Session = Depends(get_db),
    episode_id: str = Path(..., description="The episode ID."),
    episode_service: EpisodeService = Depends(get_episode_service),
    blob_store: LocalBlobStore = Depends(get_blob_store)
):
    try:
        blob = episode_service.fetch_audio(db, blob_store, episode_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(content=blob.data, media_type=blob.content_type)
