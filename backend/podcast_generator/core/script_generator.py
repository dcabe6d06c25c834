import logging
from dataclasses import dataclass
from typing import List, Dict, Optional, Protocol

from podcast_generator.core.errors import GenerationError, InvalidInputError
from podcast_generator.core.personas import GenerationProfile, VoiceTable
from podcast_generator.schemas.podcast import ContentType

logger = logging.getLogger(__name__)


class TextGenerationProvider(Protocol):
    def get_response(self, messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> str:
        ...


@dataclass
class ScriptResult:
    """A generated script plus the soft length check outcome."""
    text: str
    is_short: bool = False


class ScriptGenerator:
    """
    Builds the two-host prompt for a piece of source content and asks the
    text-generation provider for the dialogue.

    Provider errors propagate unchanged; retry policy belongs to the caller.
    """

    def __init__(self, llm: TextGenerationProvider, voices: VoiceTable, profile: GenerationProfile):
        self.llm = llm
        self.voices = voices
        self.profile = profile

    def build_messages(
        self,
        content: str,
        content_type: ContentType,
        title: Optional[str] = None,
        focus_areas: Optional[List[str]] = None,
    ) -> List[Dict[str, str]]:
        """
        Compile the deterministic prompt for a generation call.

        Args:
            content: The source material to talk about.
            content_type: What kind of material it is.
            title: Optional title the hosts should refer to.
            focus_areas: Optional topics to emphasize.

        Returns:
            A system message followed by a user message.
        """
        kind = ContentType(content_type).value
        host_a, host_b = self.voices.personas
        profile = self.profile

        focus_text = ""
        if focus_areas:
            focus_text = f"Focus particularly on these areas: {', '.join(focus_areas)}."
        title_text = f'The {kind} is titled "{title}".' if title else ""

        intro_seconds = max(5, profile.target_seconds // 10)
        outro_seconds = max(5, profile.target_seconds // 12)
        body_seconds = profile.target_seconds - intro_seconds - outro_seconds

        prompt = f"""You are creating a script for a {profile.target_seconds}-second audio piece called "{profile.show_name}" featuring two AI hosts:

- {host_a.name}: {host_a.description}
- {host_b.name}: {host_b.description}

{title_text} {focus_text}

STRUCTURE:
1. Quick intro (about {intro_seconds} seconds): "Welcome to {profile.show_name}, I'm {host_a.name}, and I'm {host_b.name}, we're not real but this {kind} is!"
2. Main body (about {body_seconds} seconds): explain what it is, its key features, and why it matters
3. Wrap-up (about {outro_seconds} seconds): "That's {profile.show_name}"

Content to discuss:
{content}

REQUIREMENTS:
- Target {profile.min_words}-{profile.max_words} words total
- Tone: {profile.tone}
- Focus on WHAT it is, its KEY features, and WHY it matters
- Quick mention they're AI but the {kind} is real
- Every line of dialogue must start with the speaker's exact name followed by a colon
- No stage directions, sound cues or narration lines

Format as:
{host_a.name}: [dialogue]
{host_b.name}: [dialogue]
{host_a.name}: [dialogue]
etc.
"""
        return [
            {"role": "system", "content": profile.system_prompt},
            {"role": "user", "content": prompt},
        ]

    def generate(
        self,
        content: str,
        content_type: ContentType,
        title: Optional[str] = None,
        focus_areas: Optional[List[str]] = None,
    ) -> ScriptResult:
        """
        Generate a complete two-host script.

        Raises:
            InvalidInputError: If the content is empty.
            GenerationError: If the provider returns no usable text.
        """
        if not content or not content.strip():
            raise InvalidInputError("Content cannot be empty.")

        messages = self.build_messages(content, content_type, title, focus_areas)
        logger.debug(f"ScriptGenerator: Requesting '{self.profile.name}' script for {ContentType(content_type).value} content ({len(content)} chars).")
        script = self.llm.get_response(messages, max_tokens=self.profile.max_tokens)

        if not script or not script.strip():
            raise GenerationError("Text generation returned an empty script.")

        logger.info(f"ScriptGenerator: Generated script length: {len(script)}")
        logger.debug(f"ScriptGenerator: Script preview: {script[:500]}...")

        is_short = len(script) < self.profile.min_script_chars
        if is_short:
            logger.warning(f"ScriptGenerator: Script is shorter than expected: {len(script)} characters (threshold {self.profile.min_script_chars}).")
        return ScriptResult(text=script, is_short=is_short)
