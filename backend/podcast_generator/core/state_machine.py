"""
Episode State Machine

An episode starts in GENERATING and moves to exactly one terminal status,
COMPLETED or FAILED. Nothing leaves a terminal status.
"""
from typing import Dict, FrozenSet, Union

from podcast_generator.core.errors import InvalidTransitionError
from podcast_generator.schemas.podcast import EpisodeStatus


class EpisodeStateMachine:
    """
    Allowed status transitions for an Episode.
    """

    _TRANSITIONS: Dict[EpisodeStatus, FrozenSet[EpisodeStatus]] = {
        EpisodeStatus.GENERATING: frozenset({EpisodeStatus.COMPLETED, EpisodeStatus.FAILED}),
        EpisodeStatus.COMPLETED: frozenset(),
        EpisodeStatus.FAILED: frozenset(),
    }

    INITIAL = EpisodeStatus.GENERATING

    @classmethod
    def is_terminal(cls, status: Union[EpisodeStatus, str]) -> bool:
        return not cls._TRANSITIONS[EpisodeStatus(status)]

    @classmethod
    def can_transition(cls, current: Union[EpisodeStatus, str], target: Union[EpisodeStatus, str]) -> bool:
        return EpisodeStatus(target) in cls._TRANSITIONS[EpisodeStatus(current)]

    @classmethod
    def validate_transition(cls, current: Union[EpisodeStatus, str], target: Union[EpisodeStatus, str]) -> EpisodeStatus:
        """
        Check a transition and return the target status.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if not cls.can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot move episode from '{EpisodeStatus(current).value}' to '{EpisodeStatus(target).value}'."
            )
        return EpisodeStatus(target)
