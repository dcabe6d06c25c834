"""
Exception hierarchy for the podcast generation pipeline.

Every pipeline failure carries the name of the stage that raised it so the
orchestrator can record a message like "synthesis failed: ..." on the episode.
"""


class PodcastError(Exception):
    """Base exception for podcast generation errors."""
    stage = "pipeline"

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        if stage:
            self.stage = stage


class InvalidInputError(PodcastError):
    """Raised when a caller supplies unusable input (empty content, bad paging)."""
    stage = "validation"


class NotFoundError(PodcastError):
    """Raised when an episode or a stored blob does not exist."""
    stage = "lookup"


class InvalidTransitionError(PodcastError):
    """Raised when an episode status change is not allowed."""
    stage = "state"


class GenerationError(PodcastError):
    """Raised when the text-generation provider fails or returns unusable text."""
    stage = "script_generation"


class SegmentationError(PodcastError):
    """Raised when a script yields no speakable turns."""
    stage = "segmentation"


class SynthesisError(PodcastError):
    """Raised when speech synthesis fails for any turn."""
    stage = "synthesis"


class AssemblyError(PodcastError):
    """Raised when the assembled audio is empty."""
    stage = "assembly"


class StorageError(PodcastError):
    """Raised when a blob or database write fails."""
    stage = "storage"
