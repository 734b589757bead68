"""
Main menu, player count and player name prompts.
"""
import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .answer_collector import AnswerCollector, parse_integer
from .display import GameDisplay
from .models import MAX_PLAYERS, Difficulty, Player


class MenuChoice(Enum):
    """Results of MainMenu.choose_difficulty besides a difficulty."""
    ANY = "any"
    EXIT = "exit"
    INVALID = "invalid"


DIFFICULTY_MENU = [
    ("Start New Game (Easy)", Difficulty.EASY),
    ("Start New Game (Medium)", Difficulty.MEDIUM),
    ("Start New Game (Hard)", Difficulty.HARD),
    ("Start New Game (Mixed Difficulty)", MenuChoice.ANY),
    ("Exit", MenuChoice.EXIT),
]

PLAYER_MENU = ["Single Player", "Two Players", "Three Players", "Four Players"]


def configured_difficulty_menu(difficulty: Optional[Difficulty]) -> List[Tuple[str, object]]:
    """Main menu entries when the difficulty comes from settings."""
    if difficulty is None:
        return [("Start New Game (Mixed Difficulty)", MenuChoice.ANY), ("Exit", MenuChoice.EXIT)]
    return [(f"Start New Game ({difficulty.label})", difficulty), ("Exit", MenuChoice.EXIT)]


class MainMenu:
    """Maps menu input to session choices."""

    def __init__(
        self,
        collector: AnswerCollector,
        display: GameDisplay,
        entries: Optional[Sequence[Tuple[str, object]]] = None
    ):
        self.logger = logging.getLogger(__name__)
        self.collector = collector
        self.display = display
        self.entries = list(entries) if entries is not None else DIFFICULTY_MENU

    def _read_number(self) -> Optional[int]:
        line = self.collector.read_line()
        if line is None:
            return None
        return parse_integer(line.strip())

    def choose_difficulty(self):
        """
        Show the main menu and read a choice.

        Returns:
            A Difficulty, MenuChoice.ANY, MenuChoice.EXIT (also at end of
            input) or MenuChoice.INVALID
        """
        self.display.show_menu(
            "TERMINAL TRIVIA - MAIN MENU",
            [label for label, _ in self.entries]
        )
        self.display.show_prompt("Enter your choice: ")

        line = self.collector.read_line()
        if line is None:
            return MenuChoice.EXIT
        choice = parse_integer(line.strip())
        if choice is None or not 1 <= choice <= len(self.entries):
            self.logger.debug(f"Invalid main menu choice: {choice}")
            return MenuChoice.INVALID
        return self.entries[choice - 1][1]

    def choose_player_count(self) -> Optional[int]:
        """
        Ask how many players will take part.

        Returns:
            Player count in 1..4, or None for invalid input
        """
        self.display.show_menu("SELECT NUMBER OF PLAYERS", PLAYER_MENU)
        self.display.show_prompt("Enter your choice: ")

        choice = self._read_number()
        if choice is None or not 1 <= choice <= MAX_PLAYERS:
            return None
        return choice

    def ask_player_names(self, count: int) -> List[str]:
        """Ask a name for each seat; blank input keeps the default name."""
        names = []
        if count <= 1:
            return names

        self.display.show_banner("ENTER PLAYER NAMES")
        for index in range(count):
            self.display.show_prompt(f"Enter name for Player {index + 1}: ")
            line = self.collector.read_line()
            name = line.strip() if line else ""
            names.append(name or Player.default_name(index))
        return names
