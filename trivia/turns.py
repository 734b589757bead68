"""
Turn rotation between the players of a session.
"""
import logging
from typing import List, Sequence

from .models import Player


class TurnManager:
    """Tracks whose turn it is; single-player is simply the one-seat case."""

    def __init__(self, players: Sequence[Player]):
        if not players:
            raise ValueError("TurnManager needs at least one player")

        self.logger = logging.getLogger(__name__)
        self._players: List[Player] = list(players)
        self._current_index = 0
        self._rounds_completed = 0

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def player_count(self) -> int:
        return len(self._players)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_player(self) -> Player:
        return self._players[self._current_index]

    @property
    def rounds_completed(self) -> int:
        return self._rounds_completed

    @property
    def is_multiplayer(self) -> bool:
        return len(self._players) > 1

    def advance(self) -> Player:
        """
        Finish the current turn and hand over to the next seat.

        Returns:
            The player whose turn it now is
        """
        self._rounds_completed += 1
        if self.is_multiplayer:
            self._current_index = (self._current_index + 1) % len(self._players)
            self.logger.debug(
                f"Turn passed to {self.current_player.name} "
                f"(seat {self._current_index}, round {self._rounds_completed})"
            )
        return self.current_player
