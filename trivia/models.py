"""
Core data models for the terminal trivia game.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


MAX_QUESTION_LEN = 512
MAX_OPTION_LEN = 256
MIN_OPTIONS = 2
MAX_OPTIONS = 4
MAX_PLAYERS = 4


class Difficulty(Enum):
    """Difficulty tier of a question, also used as the scoring input."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value) -> Optional["Difficulty"]:
        """
        Map a raw file value to a tier.

        Matching is case-sensitive: only "easy", "medium" and "hard" are
        recognised.

        Returns:
            The matching Difficulty, or None if the value is not recognised
        """
        for tier in cls:
            if tier.value == value:
                return tier
        return None


class Category(Enum):
    """Informational question category. Not used for scoring."""
    GENERAL = "general"
    SCIENCE = "science"
    HISTORY = "history"
    SPORTS = "sports"
    ENTERTAINMENT = "entertainment"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value) -> Optional["Category"]:
        for category in cls:
            if category.value == value:
                return category
        return None


@dataclass(frozen=True)
class Question:
    """Represents a single multiple-choice trivia question."""
    text: str
    options: Tuple[str, ...]
    correct_answer: int
    difficulty: Difficulty = Difficulty.EASY
    category: Category = Category.GENERAL

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))

        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError("Question text must be a non-empty string")
        if len(self.text) > MAX_QUESTION_LEN:
            raise ValueError(f"Question text exceeds {MAX_QUESTION_LEN} characters")

        if not MIN_OPTIONS <= len(self.options) <= MAX_OPTIONS:
            raise ValueError(
                f"Question must have {MIN_OPTIONS}-{MAX_OPTIONS} options, got {len(self.options)}"
            )
        for i, option in enumerate(self.options):
            if not isinstance(option, str) or not option.strip():
                raise ValueError(f"Option {i} must be a non-empty string")
            if len(option) > MAX_OPTION_LEN:
                raise ValueError(f"Option {i} exceeds {MAX_OPTION_LEN} characters")

        if isinstance(self.correct_answer, bool) or not isinstance(self.correct_answer, int):
            raise ValueError("Correct answer index must be an integer")
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"Correct answer index {self.correct_answer} is outside [0, {len(self.options)})"
            )

        if not isinstance(self.difficulty, Difficulty):
            raise ValueError(f"Invalid difficulty: {self.difficulty!r}")
        if not isinstance(self.category, Category):
            raise ValueError(f"Invalid category: {self.category!r}")

    @property
    def option_count(self) -> int:
        return len(self.options)

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]

    def is_correct(self, choice: int) -> bool:
        """
        Check a 1-based user choice against the 0-based correct index.

        Args:
            choice: Option number as entered by the player

        Returns:
            True if the choice names the correct option
        """
        return choice - 1 == self.correct_answer


@dataclass(frozen=True)
class GameConfig:
    """Settings for one game session, fixed once the session is created."""
    questions_per_game: int = 5
    time_per_question: int = 30
    difficulty: Optional[Difficulty] = None
    timer_enabled: bool = True
    player_count: int = 1

    def __post_init__(self):
        if not isinstance(self.questions_per_game, int) or self.questions_per_game < 1:
            raise ValueError("questions_per_game must be at least 1")
        if not isinstance(self.time_per_question, int) or self.time_per_question < 0:
            raise ValueError("time_per_question must be a non-negative integer")
        if self.timer_enabled and self.time_per_question <= 0:
            raise ValueError("time_per_question must be positive when the timer is enabled")
        if self.difficulty is not None and not isinstance(self.difficulty, Difficulty):
            raise ValueError(f"Invalid difficulty filter: {self.difficulty!r}")
        if not isinstance(self.player_count, int) or not 1 <= self.player_count <= MAX_PLAYERS:
            raise ValueError(f"player_count must be between 1 and {MAX_PLAYERS}")

    @property
    def total_rounds(self) -> int:
        """Rounds in a session: every player gets questions_per_game turns."""
        return self.questions_per_game * max(self.player_count, 1)

    @property
    def difficulty_label(self) -> str:
        return self.difficulty.label if self.difficulty is not None else "Any"


@dataclass
class Player:
    """Running statistics for one seat at the game."""
    name: str
    score: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    timeouts: int = 0

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Player name cannot be empty")

    @staticmethod
    def default_name(index: int) -> str:
        return f"Player {index + 1}"

    @classmethod
    def for_seat(cls, index: int, name: Optional[str] = None) -> "Player":
        """Create a player for a 0-based seat, falling back to "Player N"."""
        if name is None or not name.strip():
            return cls(cls.default_name(index))
        return cls(name.strip())

    def record_correct(self, points: int) -> None:
        if points < 0:
            raise ValueError("Points awarded cannot be negative")
        self.correct_answers += 1
        self.score += points

    def record_wrong(self) -> None:
        self.wrong_answers += 1

    def record_timeout(self) -> None:
        self.timeouts += 1

    @property
    def total_questions(self) -> int:
        return self.correct_answers + self.wrong_answers + self.timeouts

    @property
    def accuracy(self) -> float:
        """Percentage of asked questions answered correctly (0 if none asked)."""
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions * 100.0


class OutcomeKind(Enum):
    """How a single question round was resolved."""
    ANSWERED = "answered"
    TIMED_OUT = "timed_out"
    QUIT = "quit"


@dataclass(frozen=True)
class RoundOutcome:
    """Result of resolving one question: exactly one of answered, timed out or quit."""
    kind: OutcomeKind
    choice: Optional[int] = None
    time_remaining: int = 0

    def __post_init__(self):
        if self.kind is OutcomeKind.ANSWERED and self.choice is None:
            raise ValueError("An answered round must carry a choice")
        if self.kind is not OutcomeKind.ANSWERED and self.choice is not None:
            raise ValueError(f"A {self.kind.value} round cannot carry a choice")

    @classmethod
    def answered(cls, choice: int, time_remaining: int) -> "RoundOutcome":
        return cls(OutcomeKind.ANSWERED, choice, max(time_remaining, 0))

    @classmethod
    def timed_out(cls) -> "RoundOutcome":
        return cls(OutcomeKind.TIMED_OUT, None, 0)

    @classmethod
    def quit(cls, time_remaining: int = 0) -> "RoundOutcome":
        return cls(OutcomeKind.QUIT, None, max(time_remaining, 0))

    @property
    def is_answered(self) -> bool:
        return self.kind is OutcomeKind.ANSWERED

    @property
    def is_timeout(self) -> bool:
        return self.kind is OutcomeKind.TIMED_OUT

    @property
    def is_quit(self) -> bool:
        return self.kind is OutcomeKind.QUIT
