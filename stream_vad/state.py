"""Per-session ownership of the scorer's recurrent state."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from stream_vad.scorer import RecurrentState

logger = logging.getLogger(__name__)

# (batch_size, sample_rate) value that never matches a real call
_UNSET: Tuple[int, int] = (0, 0)


class RecurrentStateTracker:
    """
    Holds the recurrent state between scoring calls.

    The last seen ``(batch_size, sample_rate)`` is kept on the instance so
    that independent detector sessions never share it.
    """

    def __init__(self):
        self._state: RecurrentState = RecurrentState.zeros()
        self._last_params: Tuple[int, int] = _UNSET

    @property
    def state(self) -> RecurrentState:
        return self._state

    @property
    def last_params(self) -> Optional[Tuple[int, int]]:
        """Last ``(batch_size, sample_rate)`` seen, or None after a reset."""
        if self._last_params == _UNSET:
            return None
        return self._last_params

    def ensure_state(self, batch_size: int, sample_rate: int) -> None:
        """Zero the state if batch size or sample rate changed since the last call."""
        params = (batch_size, sample_rate)
        if params == self._last_params:
            return
        logger.debug(
            "Reinitialising recurrent state: %s -> %s", self.last_params, params
        )
        self._state = RecurrentState.zeros(batch_size)
        self._last_params = params

    def update(self, new_state: RecurrentState) -> None:
        self._state = new_state

    def reset(self) -> None:
        """Zero the state and forget the last parameters."""
        self._state = RecurrentState.zeros()
        self._last_params = _UNSET
