import math

# Average speaking rate of the synthetic hosts.
WORDS_PER_SECOND = 2.5


def estimate_duration_seconds(script: str) -> int:
    """
    Estimate playback length in whole seconds from the script's word count.

    This is an approximation over the text, not a measurement of the produced
    audio: floor(word_count / 2.5). Words are the pieces between single
    spaces, so a newline does not separate words and a run of spaces adds
    empty ones.
    """
    word_count = len(script.split(" "))
    return math.floor(word_count / WORDS_PER_SECOND)
