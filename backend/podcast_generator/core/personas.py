import logging
from dataclasses import dataclass
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Persona:
    """One of the two synthetic hosts and the voice it speaks with."""
    name: str
    voice_id: str
    description: str = ""


@dataclass(frozen=True)
class VoiceTable:
    """
    Immutable persona -> voice mapping injected into the pipeline.

    Exactly two personas with distinct, non-empty names are allowed. Names are
    matched case-sensitively everywhere they are used.
    """
    personas: Tuple[Persona, Persona]

    def __post_init__(self):
        if len(self.personas) != 2:
            raise ValueError(f"VoiceTable needs exactly two personas, got {len(self.personas)}.")
        names = [p.name for p in self.personas]
        if any(not name or not name.strip() for name in names):
            raise ValueError("Persona names cannot be empty.")
        if names[0] == names[1]:
            raise ValueError(f"Persona names must be distinct, got '{names[0]}' twice.")

    @classmethod
    def from_settings(cls, settings) -> "VoiceTable":
        return cls(personas=(
            Persona(settings.HOST_A_NAME, settings.HOST_A_VOICE_ID, settings.HOST_A_DESCRIPTION),
            Persona(settings.HOST_B_NAME, settings.HOST_B_VOICE_ID, settings.HOST_B_DESCRIPTION),
        ))

    @property
    def names(self) -> Tuple[str, str]:
        return tuple(p.name for p in self.personas)

    def as_dict(self) -> Dict[str, str]:
        return {p.name: p.voice_id for p in self.personas}

    def voice_for(self, speaker: str) -> str:
        voices = self.as_dict()
        if speaker not in voices:
            raise KeyError(f"No voice configured for speaker '{speaker}'.")
        return voices[speaker]


@dataclass(frozen=True)
class GenerationProfile:
    """Target length and tone of a generated script."""
    name: str
    show_name: str
    target_seconds: int
    min_words: int
    max_words: int
    max_tokens: int
    min_script_chars: int
    tone: str
    system_prompt: str


SUMMARY_PROFILE = GenerationProfile(
    name="summary",
    show_name="What Is It?",
    target_seconds=60,
    min_words=150,
    max_words=200,
    max_tokens=500,
    min_script_chars=1000,
    tone="concise, energetic and informative, like an elevator pitch in audio form",
    system_prompt=(
        "You are an expert at creating concise, engaging 60-second audio summaries. "
        "Always write COMPLETE scripts that don't cut off mid-sentence."
    ),
)

CONVERSATION_PROFILE = GenerationProfile(
    name="conversation",
    show_name="What Is It? Deep Dive",
    target_seconds=600,
    min_words=1200,
    max_words=1800,
    max_tokens=4000,
    min_script_chars=6000,
    tone="relaxed, curious and conversational, with the hosts building on each other's points",
    system_prompt=(
        "You are an expert podcast writer creating natural, long-form conversations between two hosts. "
        "Always write COMPLETE scripts that don't cut off mid-sentence."
    ),
)

PROFILES = {p.name: p for p in (SUMMARY_PROFILE, CONVERSATION_PROFILE)}


def get_profile(name: str) -> GenerationProfile:
    """Look up a built-in generation profile by name."""
    try:
        return PROFILES[name.lower()]
    except KeyError:
        logger.error(f"Unknown GENERATION_PROFILE: '{name}'. Valid options: {list(PROFILES)}")
        raise ValueError(f"Unknown generation profile '{name}'. Valid options: {list(PROFILES)}")
