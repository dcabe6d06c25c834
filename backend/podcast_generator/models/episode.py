import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Integer, DateTime
from sqlalchemy.orm import relationship

from podcast_generator.db.session import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Episode(Base):
    """
    SQLAlchemy model for the 'episodes' table.

    One generated audio artifact and its metadata. `audio_file_key` and
    `duration_seconds` are only set once the episode is completed.
    """
    __tablename__ = "episodes"

    id = Column(String, primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # Empty until the script generator has run.
    script = Column(Text, nullable=False, default="")

    # Blob store key of the finished audio.
    audio_file_key = Column(String, nullable=True)
    duration_seconds = Column(Integer, nullable=True)

    # One of "generating", "completed", "failed".
    status = Column(String, nullable=False, default="generating", index=True)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Defines the one-to-many relationship from Episode to GenerationRequest.
    generation_requests = relationship(
        "GenerationRequest",
        back_populates="episode",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
