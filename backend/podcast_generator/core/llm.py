# In backend/podcast_generator/core/llm.py

import logging
from typing import List, Dict, Optional, Union
from dataclasses import dataclass
from enum import Enum

# LangChain is used as an abstraction layer to interact with various LLM providers.
# This makes it easy to switch between models like Gemini, OpenAI, etc.
try:
    from langchain_openai import ChatOpenAI, AzureChatOpenAI
    from langchain_google_genai import ChatGoogleGenerativeAI
    from langchain_ollama import ChatOllama
    from langchain_core.messages import HumanMessage, SystemMessage, AIMessage
except ImportError as e:
    raise ImportError(
        f"Required LangChain packages not found ({e}). Please install:\n"
        "pip install langchain-core langchain-openai langchain-google-genai langchain-ollama"
    ) from e

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
    """Supported LLM providers."""
    GEMINI = "gemini"
    AZURE = "azure"
    OPENAI = "openai"
    OLLAMA = "ollama"


@dataclass
class LLMConfig:
    """Configuration for LLM providers."""
    provider: LLMProvider
    model: str
    temperature: float = 0.7
    timeout: int = 30

    # Provider-specific configs
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    api_version: Optional[str] = None
    deployment_name: Optional[str] = None
    credentials_path: Optional[str] = None


class LLMError(Exception):
    """Base exception for LLM-related errors."""
    pass


class ConfigurationError(LLMError):
    """Raised when LLM configuration is invalid."""
    pass


class ProviderError(LLMError):
    """Raised when LLM provider call fails."""
    pass


class LLMManager:
    """
    Unified LLM interface supporting multiple providers.

    This is the text-generation provider used by the script generator: it takes
    role-tagged messages plus an optional response-size cap and returns text, or
    raises ProviderError.
    """

    DEFAULT_MODELS = {
        LLMProvider.GEMINI: "gemini-2.5-flash",
        LLMProvider.AZURE: "gpt-4o",
        LLMProvider.OPENAI: "gpt-4o",
        LLMProvider.OLLAMA: "llama3",
    }

    # Name of the response-size keyword each LangChain chat model accepts.
    MAX_TOKENS_KWARG = {
        LLMProvider.GEMINI: "max_output_tokens",
        LLMProvider.AZURE: "max_tokens",
        LLMProvider.OPENAI: "max_tokens",
        LLMProvider.OLLAMA: "num_predict",
    }

    def __init__(self, config: LLMConfig, llm=None):
        """Initialize LLM Manager with configuration, or with a prebuilt chat model."""
        self.config = config
        logger.debug(f"LLMManager: Initializing with provider={config.provider.value}, model={config.model}")
        self._validate_config()
        self.llm = llm if llm is not None else self._initialize_llm()

    @classmethod
    def from_settings(cls, settings, provider: Optional[str] = None) -> "LLMManager":
        """Create LLMManager from the application settings."""
        return cls(cls.config_from_settings(settings, provider))

    @classmethod
    def config_from_settings(cls, settings, provider: Optional[str] = None) -> LLMConfig:
        """Build an LLMConfig from the application settings."""
        provider_str = provider or settings.LLM_PROVIDER
        try:
            provider_enum = LLMProvider(provider_str.lower())
        except ValueError as e:
            valid_providers = [p.value for p in LLMProvider]
            logger.error(f"LLMManager: Invalid LLM_PROVIDER: '{provider_str}'. Valid options: {valid_providers}")
            raise ConfigurationError(
                f"Invalid LLM_PROVIDER: {provider_str}. "
                f"Valid options: {valid_providers}"
            ) from e

        common = dict(temperature=settings.LLM_TEMPERATURE, timeout=settings.LLM_TIMEOUT)

        if provider_enum == LLMProvider.GEMINI:
            return LLMConfig(
                provider=provider_enum,
                model=settings.GEMINI_MODEL or cls.DEFAULT_MODELS[provider_enum],
                api_key=settings.GOOGLE_API_KEY,
                credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS,
                **common,
            )
        elif provider_enum == LLMProvider.AZURE:
            deployment_name = settings.AZURE_DEPLOYMENT_NAME or cls.DEFAULT_MODELS[provider_enum]
            return LLMConfig(
                provider=provider_enum,
                model=deployment_name, # Use deployment_name as model for Azure
                api_key=settings.AZURE_OPENAI_KEY,
                api_base=settings.AZURE_OPENAI_BASE,
                api_version=settings.AZURE_API_VERSION,
                deployment_name=deployment_name,
                **common,
            )
        elif provider_enum == LLMProvider.OPENAI:
            return LLMConfig(
                provider=provider_enum,
                model=settings.OPENAI_MODEL or cls.DEFAULT_MODELS[provider_enum],
                api_key=settings.OPENAI_API_KEY,
                api_base=settings.OPENAI_API_BASE or "https://api.openai.com/v1",
                **common,
            )
        else:
            return LLMConfig(
                provider=provider_enum,
                model=settings.OLLAMA_MODEL or cls.DEFAULT_MODELS[provider_enum],
                api_base=settings.OLLAMA_BASE_URL or "http://localhost:11434",
                **common,
            )

    def _validate_config(self) -> None:
        """Validate the current configuration."""
        if self.config.provider == LLMProvider.GEMINI:
            if not (self.config.api_key or self.config.credentials_path):
                raise ConfigurationError("Gemini requires either GOOGLE_API_KEY or GOOGLE_APPLICATION_CREDENTIALS.")
        elif self.config.provider == LLMProvider.AZURE:
            missing = [var for var in ["api_key", "api_base", "api_version", "deployment_name"] if not getattr(self.config, var)]
            if missing:
                raise ConfigurationError(f"Missing required Azure config: {missing}")
        elif self.config.provider == LLMProvider.OPENAI:
            if not self.config.api_key:
                raise ConfigurationError("OpenAI requires OPENAI_API_KEY.")
        elif self.config.provider == LLMProvider.OLLAMA:
            if not self.config.api_base:
                raise ConfigurationError("Ollama requires OLLAMA_BASE_URL.")

    def _initialize_llm(self):
        """Initialize the appropriate LLM client."""
        logger.debug(f"LLMManager: Initializing LLM client for provider: {self.config.provider.value}")
        try:
            if self.config.provider == LLMProvider.GEMINI:
                return ChatGoogleGenerativeAI(model=self.config.model, temperature=self.config.temperature, google_api_key=self.config.api_key, timeout=self.config.timeout)
            elif self.config.provider == LLMProvider.AZURE:
                return AzureChatOpenAI(azure_deployment=self.config.deployment_name, openai_api_version=self.config.api_version, azure_endpoint=self.config.api_base, api_key=self.config.api_key, temperature=self.config.temperature, timeout=self.config.timeout)
            elif self.config.provider == LLMProvider.OPENAI:
                return ChatOpenAI(model=self.config.model, api_key=self.config.api_key, base_url=self.config.api_base, temperature=self.config.temperature, timeout=self.config.timeout)
            else:
                return ChatOllama(model=self.config.model, base_url=self.config.api_base, temperature=self.config.temperature)
        except Exception as e:
            logger.critical(f"LLMManager: Failed to initialize {self.config.provider.value} LLM: {e}")
            raise ConfigurationError(f"Failed to initialize {self.config.provider.value} LLM: {e}") from e

    def _format_messages(self, messages: List[Dict[str, str]]) -> List[Union[HumanMessage, SystemMessage, AIMessage]]:
        """Convert message dictionaries to LangChain message objects."""
        formatted_messages = []
        for msg in messages:
            role, content = msg.get("role", "").lower(), msg.get("content", "")
            if role == "system": formatted_messages.append(SystemMessage(content=content))
            elif role in ("user", "human"): formatted_messages.append(HumanMessage(content=content))
            elif role in ("assistant", "ai"): formatted_messages.append(AIMessage(content=content))
            else: logger.warning(f"LLMManager: Unknown message role: {role}, treating as human."); formatted_messages.append(HumanMessage(content=content))
        return formatted_messages

    def _bind_max_tokens(self, llm, max_tokens: int):
        """Attach a response-size cap to a single call."""
        kwarg = self.MAX_TOKENS_KWARG[self.config.provider]
        if self.config.provider == LLMProvider.OLLAMA:
            # Ollama takes sampling limits in one options dict that replaces the client defaults.
            return llm.bind(options={kwarg: max_tokens, "temperature": self.config.temperature})
        return llm.bind(**{kwarg: max_tokens})

    def get_response(self, messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> str:
        """
        Get response from the configured LLM.

        Args:
            messages: Ordered role-tagged messages.
            max_tokens: Optional cap on the response size.

        Returns:
            The generated text.

        Raises:
            ProviderError: If the provider call fails.
        """
        try:
            formatted_messages = self._format_messages(messages)
            llm = self.llm
            if max_tokens:
                llm = self._bind_max_tokens(llm, max_tokens)
            logger.info(f"LLMManager: Calling {self.config.provider.value} with {len(messages)} messages (max_tokens={max_tokens}).")
            response = llm.invoke(formatted_messages)
            content = response.content
            if isinstance(content, list):
                # Some providers return content blocks instead of a plain string.
                content = "".join(block if isinstance(block, str) else block.get("text", "") for block in content)
            logger.info(f"LLMManager: Received response from {self.config.provider.value}. Content length: {len(content)}")
            return content
        except Exception as e:
            error_msg = f"{self.config.provider.value} call failed: {str(e)}"
            logger.error(f"LLMManager: {error_msg}")
            raise ProviderError(error_msg) from e
