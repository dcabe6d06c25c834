from pydantic import BaseModel, Field, ConfigDict, TypeAdapter, field_validator
from typing import Optional, List, Dict, Union
from datetime import datetime
from enum import Enum


class ContentType(str, Enum):
    CODE = "code"
    FILE = "file"
    DISCUSSION = "discussion"
    PROJECT = "project"


class EpisodeStatus(str, Enum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


# Values allowed in a generation request's source metadata.
MetadataValue = Union[str, int, float, bool, None, List[str]]
SourceMetadata = Dict[str, MetadataValue]

# Used where data reaches the pipeline without going through a request model.
FOCUS_AREAS_ADAPTER = TypeAdapter(List[str])
SOURCE_METADATA_ADAPTER = TypeAdapter(SourceMetadata)

SCRIPT_PLACEHOLDER = "Script not yet generated"


# --- Request Model for Generation ---
class PodcastGenerateRequest(BaseModel):
    """
    Pydantic model for the request body to generate a podcast.
    """
    content: str = Field(..., min_length=1, description="The source content to analyze.")
    content_type: ContentType = Field(..., description="Type of content being analyzed.")
    title: Optional[str] = Field(None, description="Custom title for the podcast.")
    focus_areas: Optional[List[str]] = Field(None, description="Specific topics to emphasize.")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content cannot be blank")
        return value


# --- Response Models ---
class GenerationResult(BaseModel):
    """
    Outcome of one generation call. The episode is always in a terminal status.
    """
    episode_id: str = Field(..., description="The ID of the episode created for this request.")
    status: EpisodeStatus = Field(..., description="Terminal status of the episode.")
    message: str = Field(..., description="Success message, or the failing stage and cause.")
    audio_url: Optional[str] = Field(None, description="Where the audio can be fetched, once completed.")


class EpisodeSummary(BaseModel):
    """
    Pydantic model representing an episode as stored in the database.
    This model is used for API responses.
    """
    episode_id: str = Field(..., description="The unique identifier for the episode.")
    title: str = Field(..., description="The episode title.")
    description: Optional[str] = Field(None, description="A short description of the episode.")
    status: EpisodeStatus = Field(..., description="The current status of the generation job.")
    duration_seconds: Optional[int] = Field(None, description="Estimated length of the audio in seconds.")
    audio_url: Optional[str] = Field(None, description="The URL where the generated audio can be fetched.")
    error_message: Optional[str] = Field(None, description="Why generation failed, when it did.")
    created_at: datetime = Field(..., description="The timestamp when the episode was created.")
    updated_at: Optional[datetime] = Field(None, description="The timestamp of the last update.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "episode_id": "0b5d1f7e-3c1a-4a49-9a53-6f0f0a3c2d11",
                "title": "AI Podcast: code Analysis",
                "description": "Generated podcast discussing code content",
                "status": "completed",
                "duration_seconds": 74,
                "audio_url": "/api/v1/podcasts/0b5d1f7e-3c1a-4a49-9a53-6f0f0a3c2d11/audio",
                "error_message": None,
                "created_at": "2025-01-01T12:00:00",
                "updated_at": "2025-01-01T12:01:10",
            }
        }
    )

