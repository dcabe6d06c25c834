import os
from pydantic_settings import BaseSettings
from typing import Optional

# Get the root path of the project (the 'backend' directory)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

class Settings(BaseSettings):
    """
    Pydantic settings class to manage application configuration.
    It automatically reads environment variables from a .env file.
    """
    # --- Core Application Settings ---
    PROJECT_NAME: str = "AI Podcast Generator"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # --- Database Settings ---
    # The default URL points to a SQLite database file in the project's backend root.
    DATABASE_URL: str = f"sqlite:///{os.path.join(PROJECT_ROOT, 'app.db')}"

    # --- Storage Settings ---
    # The base path for the local blob store. In a containerized environment,
    # this path should be mounted to a persistent volume.
    STORAGE_PATH: str = os.path.join(PROJECT_ROOT, "storage")

    # --- Generation Settings ---
    # Either "summary" (the 60-second "What Is It?" format) or "conversation".
    GENERATION_PROFILE: str = "summary"

    # --- Persona Settings ---
    # The two hosts and the voices they are bound to.
    HOST_A_NAME: str = "Maya"
    HOST_A_VOICE_ID: str = "EXAVITQu4vr4xnSDxMaL"
    HOST_A_DESCRIPTION: str = "An energetic female AI host"
    HOST_B_NAME: str = "Jordan"
    HOST_B_VOICE_ID: str = "pNInz6obpgDQGcFmaJgB"
    HOST_B_DESCRIPTION: str = "An enthusiastic male AI host"

    # --- TTS Settings ---
    TTS_PROVIDER: str = "elevenlabs"
    # None means speech calls block until the provider answers.
    TTS_REQUEST_TIMEOUT: Optional[float] = None
    ELEVENLABS_API_KEY: Optional[str] = None
    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io/v1"
    # Synthesis model; each provider falls back to its own default when unset.
    TTS_MODEL_ID: Optional[str] = None
    AZURE_TTS_KEY: Optional[str] = None
    AZURE_TTS_ENDPOINT: Optional[str] = None
    AZURE_TTS_DEPLOYMENT: Optional[str] = "tts"
    AZURE_TTS_API_VERSION: Optional[str] = "2025-03-01-preview"
    GCP_TTS_LANGUAGE: str = "en-US"

    # --- LLM Settings ---
    LLM_PROVIDER: str = "gemini"
    GEMINI_MODEL: Optional[str] = None
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT: int = 30
    GOOGLE_API_KEY: Optional[str] = None
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None
    AZURE_OPENAI_KEY: Optional[str] = None
    AZURE_OPENAI_BASE: Optional[str] = None
    AZURE_API_VERSION: Optional[str] = None
    AZURE_DEPLOYMENT_NAME: Optional[str] = None
    OPENAI_MODEL: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_BASE: Optional[str] = None
    OLLAMA_MODEL: Optional[str] = None
    OLLAMA_BASE_URL: Optional[str] = None

    class Config:
        """
        Pydantic config subclass to specify the .env file location.
        """
        env_file = os.path.join(PROJECT_ROOT, ".env")
        env_file_encoding = 'utf-8'
        extra = "ignore" # Allow extra fields from .env to be ignored

# Instantiate the settings object that will be used throughout the application.
settings = Settings()
