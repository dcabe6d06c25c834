import re
import logging
from dataclasses import dataclass
from typing import List, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptTurn:
    """One contiguous utterance attributed to a single persona."""
    speaker: str
    text: str


def _line_pattern(persona_names: Sequence[str]) -> "re.Pattern":
    names = "|".join(re.escape(name) for name in persona_names)
    return re.compile(rf"^({names}):\s*(.+)$")


def parse_script_segments(script: str, persona_names: Sequence[str]) -> List[ScriptTurn]:
    """
    Split a script into ordered (speaker, text) turns.

    Only lines of the exact form "<Persona>: <utterance>" are kept, with persona
    names matched case-sensitively. Narration, stray punctuation and malformed
    lines are dropped silently, as are utterances that are empty once trimmed.
    An empty list is a valid result; the caller decides whether it is fatal.
    """
    pattern = _line_pattern(persona_names)
    turns = []
    dropped = 0

    for line in script.split("\n"):
        if not line.strip():
            continue
        match = pattern.match(line.strip("\r"))
        if not match:
            dropped += 1
            continue
        text = match.group(2).strip()
        if text:
            turns.append(ScriptTurn(speaker=match.group(1), text=text))
        else:
            dropped += 1

    logger.debug(f"ScriptSegmenter: Parsed {len(turns)} turns, dropped {dropped} lines.")
    return turns
