from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.types import JSON # Using generic JSON type for SQLite compatibility
from sqlalchemy.orm import relationship

from podcast_generator.db.session import Base
from podcast_generator.models.episode import new_id, utcnow


class GenerationRequest(Base):
    """
    SQLAlchemy model for the 'generation_requests' table.

    An audit record of the input submitted for one generation attempt.
    """
    __tablename__ = "generation_requests"

    id = Column(String, primary_key=True, index=True, default=new_id)

    # `ondelete="CASCADE"` ensures that if an episode is deleted,
    # its generation requests are deleted with it.
    episode_id = Column(String, ForeignKey("episodes.id", ondelete="CASCADE"), nullable=False, index=True)

    # One of "code", "file", "discussion", "project".
    source_type = Column(String, nullable=False)
    source_content = Column(Text, nullable=False)
    source_metadata = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    episode = relationship("Episode", back_populates="generation_requests")
