"""
Game session controller for the terminal trivia game.
Runs the rounds of one game, applies scores to players and builds the final report.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Set

from .answer_collector import AnswerCollector
from .countdown import Countdown
from .display import GameDisplay
from .models import GameConfig, Player, Question, RoundOutcome
from .question_bank import QuestionBank
from .question_round import QuestionRound
from .scoring import calculate_score
from .turns import TurnManager


class SessionState(Enum):
    """Enumeration of possible game session states."""
    READY = "ready"
    ACTIVE = "active"
    COMPLETED = "completed"


class SessionEndReason(Enum):
    """Why a session stopped asking questions."""
    COMPLETED = "completed"
    QUIT = "quit"
    QUESTIONS_EXHAUSTED = "questions_exhausted"


class GameSessionError(Exception):
    """Base exception for game session errors."""
    pass


class InvalidSessionStateError(GameSessionError):
    """Raised when a session is in the wrong state for the requested operation."""
    pass


@dataclass(frozen=True)
class RoundRecord:
    """What happened in one resolved (non-quit) round."""
    round_number: int
    player_index: int
    question: Question
    outcome: RoundOutcome
    correct: bool
    points: int


@dataclass
class GameReport:
    """Final statistics of a session."""
    players: List[Player]
    end_reason: SessionEndReason
    rounds_played: int
    total_rounds: int
    history: List[RoundRecord] = field(default_factory=list)

    @property
    def is_multiplayer(self) -> bool:
        return len(self.players) > 1

    @property
    def standings(self) -> List[Player]:
        """Players ordered by score, highest first; seat order breaks equal scores."""
        return sorted(self.players, key=lambda player: player.score, reverse=True)

    @property
    def top_score(self) -> int:
        return max((player.score for player in self.players), default=0)

    @property
    def leaders(self) -> List[Player]:
        top = self.top_score
        return [player for player in self.players if player.score == top]

    @property
    def is_tie(self) -> bool:
        return self.is_multiplayer and len(self.leaders) > 1

    @property
    def winner(self) -> Optional[Player]:
        """Sole top scorer of a multi-player game; None for ties and single-player."""
        if not self.is_multiplayer or self.is_tie:
            return None
        return self.leaders[0]

    @property
    def message(self) -> Optional[str]:
        if self.end_reason is SessionEndReason.QUIT:
            return "Game quit by user."
        if self.end_reason is SessionEndReason.QUESTIONS_EXHAUSTED:
            return "No more questions available for this difficulty."
        return None


class GameSession:
    """
    Orchestrates one game from the first question to the final report.

    Every seat, including the lone seat of a single-player game, is a Player
    in one list. The session is the only code that mutates players and turn
    state; the countdown thread never touches them.
    """

    def __init__(
        self,
        source: QuestionBank,
        config: GameConfig,
        collector: AnswerCollector,
        display: Optional[GameDisplay] = None,
        countdown: Optional[Countdown] = None,
        player_names: Optional[Sequence[Optional[str]]] = None,
        pause_between_rounds: bool = True,
        poll_interval: float = QuestionRound.POLL_INTERVAL
    ):
        """
        Initialize the game session.

        Args:
            source: Question bank to draw from
            config: Settings for this session
            collector: Source of player input
            display: Renderer for questions and feedback
            countdown: Countdown reused for each timed question
            player_names: Optional names per seat; blanks fall back to "Player N"
            pause_between_rounds: Wait for Enter after each round's feedback
            poll_interval: Seconds per input poll while the countdown runs
        """
        self.logger = logging.getLogger(__name__)
        self.source = source
        self.config = config
        self.collector = collector
        self.display = display if display is not None else GameDisplay()
        self.pause_between_rounds = pause_between_rounds

        names = list(player_names or [])
        if len(names) > config.player_count:
            raise GameSessionError(
                f"Got {len(names)} player names for {config.player_count} players"
            )
        names.extend([None] * (config.player_count - len(names)))
        self.players: List[Player] = [
            Player.for_seat(index, name) for index, name in enumerate(names)
        ]

        self.turns = TurnManager(self.players)
        self.question_round = QuestionRound(
            collector,
            countdown=countdown,
            display=self.display,
            poll_interval=poll_interval
        )

        self.state = SessionState.READY
        self.end_reason: Optional[SessionEndReason] = None
        self.history: List[RoundRecord] = []
        self._asked: Set[Question] = set()

    @property
    def rounds_played(self) -> int:
        return len(self.history)

    @property
    def current_player(self) -> Player:
        return self.turns.current_player

    def run(self) -> GameReport:
        """
        Play every round of the session and return the final report.

        Raises:
            InvalidSessionStateError: If the session has already been run
        """
        if self.state is not SessionState.READY:
            raise InvalidSessionStateError(
                f"Cannot run a session in state {self.state.value}"
            )

        self.state = SessionState.ACTIVE
        self.logger.info(
            f"Session started: {self.config.total_rounds} rounds, "
            f"{self.config.player_count} player(s), difficulty {self.config.difficulty_label}, "
            f"timer {'on' if self.config.timer_enabled else 'off'}"
        )
        self.display.show_config(self.config)

        try:
            while self.rounds_played < self.config.total_rounds:
                if self.play_round() is None:
                    break
            else:
                self.end_reason = SessionEndReason.COMPLETED
        finally:
            self.question_round.countdown.stop()
            self.state = SessionState.COMPLETED

        report = self.build_report()
        self.logger.info(
            f"Session finished ({report.end_reason.value}) after {report.rounds_played} rounds"
        )
        return report

    def play_round(self) -> Optional[RoundRecord]:
        """
        Play one round for the current player.

        Returns:
            The round record, or None if the session must end (quit or no
            questions left); end_reason says which
        """
        if self.state is not SessionState.ACTIVE:
            raise InvalidSessionStateError(
                f"Cannot play a round in state {self.state.value}"
            )

        question = self.source.get_random_unused(self.config.difficulty, self._asked)
        if question is None:
            self.logger.warning("Question source exhausted, ending session early")
            self.end_reason = SessionEndReason.QUESTIONS_EXHAUSTED
            return None
        self._asked.add(question)

        round_number = self.rounds_played + 1
        player_index = self.turns.current_index
        player = self.turns.current_player

        self.display.show_question(
            question,
            round_number,
            self.config.total_rounds,
            player.name if self.turns.is_multiplayer else None
        )
        outcome = self.question_round.run(question, self.config)

        if outcome.is_quit:
            self.logger.info(f"{player.name} quit during round {round_number}")
            self.end_reason = SessionEndReason.QUIT
            return None

        record = self._apply_outcome(round_number, player_index, player, question, outcome)
        self.history.append(record)

        self.display.show_round_result(question, outcome, record.correct, record.points)
        if self.turns.is_multiplayer:
            self.display.show_scores(self.players)
        if self.pause_between_rounds and self.rounds_played < self.config.total_rounds:
            self.display.show_prompt("Press Enter to continue...")
            self.collector.wait_for_enter()

        self.turns.advance()
        return record

    def _apply_outcome(
        self,
        round_number: int,
        player_index: int,
        player: Player,
        question: Question,
        outcome: RoundOutcome
    ) -> RoundRecord:
        if outcome.is_timeout:
            player.record_timeout()
            correct, points = False, 0
        else:
            correct = question.is_correct(outcome.choice)
            points = calculate_score(correct, outcome.time_remaining, question.difficulty)
            if correct:
                player.record_correct(points)
            else:
                player.record_wrong()

        self.logger.info(
            f"Round {round_number}: {player.name} {outcome.kind.value}, "
            f"correct={correct}, points={points}, score={player.score}"
        )
        return RoundRecord(
            round_number=round_number,
            player_index=player_index,
            question=question,
            outcome=outcome,
            correct=correct,
            points=points
        )

    def build_report(self) -> GameReport:
        return GameReport(
            players=list(self.players),
            end_reason=self.end_reason or SessionEndReason.COMPLETED,
            rounds_played=self.rounds_played,
            total_rounds=self.config.total_rounds,
            history=list(self.history)
        )
