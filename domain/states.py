"""
Version lifecycle states.

The write path moves versions between states; the read path only checks
that whatever it surfaces is one of the legal values.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from domain.errors import InvalidStateError

# Get logger for this module
logger = logging.getLogger(__name__)


class VersionState(Enum):
    """Lifecycle state of a version (instance)."""

    CREATED = "created"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    EDITION_CONFIRMED = "edition-confirmed"
    ASSOCIATED = "associated"
    PUBLISHED = "published"


PUBLISHED = VersionState.PUBLISHED.value

VALID_STATES = frozenset(state.value for state in VersionState)

# Versions past raw creation; the default filter for version lists
LISTABLE_STATES = (
    VersionState.EDITION_CONFIRMED.value,
    VersionState.ASSOCIATED.value,
    VersionState.PUBLISHED.value,
)


def is_published(state: Optional[str]) -> bool:
    return state == PUBLISHED


def check_state(state: Optional[str], required: str = "") -> None:
    """
    Validate a version state read from the store.

    Args:
        state: The stored state value
        required: Empty for any legal state, or "published" to demand exactly that

    Raises:
        InvalidStateError: If the state is not legal or does not match
    """
    if state not in VALID_STATES:
        raise InvalidStateError(str(state))

    if is_published(required) and not is_published(state):
        raise InvalidStateError(
            str(state), f"version state {state!r} is not {PUBLISHED!r}"
        )


def check_states(states: Iterable[Optional[str]], required: str = "") -> None:
    """Validate a page of states; the first invalid entry fails the whole page."""
    for state in states:
        try:
            check_state(state, required)
        except InvalidStateError:
            logger.error("version page rejected, invalid state: %s", state)
            raise
