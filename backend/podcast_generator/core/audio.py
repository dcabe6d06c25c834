import logging
from typing import Iterable

from podcast_generator.core.errors import AssemblyError

logger = logging.getLogger(__name__)


def drain_stream(stream: Iterable[bytes]) -> bytes:
    """Read a byte stream to exhaustion and return it as one contiguous buffer."""
    buffer = bytearray()
    for chunk in stream:
        if chunk:
            buffer.extend(chunk)
    return bytes(buffer)


class AudioAssembler:
    """
    Joins ordered audio chunks into a single artifact.

    Chunks are concatenated byte for byte: no decoding, re-encoding, cross-fade
    or padding. MPEG frames survive plain concatenation, which is what makes
    this safe for the per-turn MP3 output of the speech providers.
    """

    def assemble(self, chunks: Iterable[bytes]) -> bytes:
        """
        Concatenate chunks in iteration order.

        Raises:
            AssemblyError: If the combined audio is empty.
        """
        combined = bytearray()
        count = 0
        for chunk in chunks:
            combined.extend(chunk)
            count += 1
            logger.debug(f"AudioAssembler: Appended chunk {count} ({len(chunk)} bytes).")

        logger.info(f"AudioAssembler: Total audio size: {len(combined)} bytes from {count} chunks.")
        if not combined:
            raise AssemblyError("No audio data generated")
        return bytes(combined)
