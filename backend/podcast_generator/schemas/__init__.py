# Re-export the API schemas so routers can import them from the package.

from .podcast import PodcastGenerateRequest, GenerationResult, EpisodeSummary
