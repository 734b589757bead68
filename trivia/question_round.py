"""
Resolution of a single question: races the countdown against player input.
"""
import logging
from enum import Enum
from typing import Optional

from .answer_collector import AnswerCollector, InputKind, classify_input
from .countdown import Countdown
from .display import GameDisplay
from .models import GameConfig, Question, RoundOutcome


class RoundState(Enum):
    """States a question round moves through."""
    PRESENTING = "presenting"
    WAITING = "waiting"
    ANSWERED = "answered"
    TIMED_OUT = "timed_out"
    QUIT = "quit"


class QuestionRound:
    """
    Resolves one question into an answer, a timeout or a quit.

    With the timer enabled, input is polled in short slices while the
    countdown runs on its own thread. A valid answer or a quit seen in a
    poll wins over an expiry detected at the same time. Invalid input is
    reprompted in both timed and untimed play and never ends the round.
    """

    POLL_INTERVAL = 0.1

    def __init__(
        self,
        collector: AnswerCollector,
        countdown: Optional[Countdown] = None,
        display: Optional[GameDisplay] = None,
        poll_interval: float = POLL_INTERVAL
    ):
        """
        Initialize the round runner.

        Args:
            collector: Source of player input
            countdown: Countdown reused (after reset) for every timed question
            display: Renderer for prompts and the time ticker
            poll_interval: Seconds to wait for input per poll
        """
        self.logger = logging.getLogger(__name__)
        self.collector = collector
        self.countdown = countdown if countdown is not None else Countdown()
        self.display = display if display is not None else GameDisplay()
        self.poll_interval = poll_interval
        self._state = RoundState.PRESENTING

    @property
    def state(self) -> RoundState:
        return self._state

    def run(self, question: Question, config: GameConfig) -> RoundOutcome:
        """
        Resolve one question.

        Args:
            question: Question already shown to the player
            config: Session settings (timer flag and time limit)

        Returns:
            Exactly one of answered, timed out or quit
        """
        self._transition(RoundState.PRESENTING, "round started")

        if config.timer_enabled:
            outcome = self._run_timed(question, config.time_per_question)
        else:
            outcome = self._run_untimed(question, config.time_per_question)

        self._transition(self._final_state(outcome), "round resolved")
        return outcome

    def _run_timed(self, question: Question, time_limit: int) -> RoundOutcome:
        option_count = question.option_count
        self.countdown.reset(time_limit)
        self.countdown.start(time_limit)
        self._transition(RoundState.WAITING, f"countdown {time_limit}s started")
        self.display.show_answer_prompt(option_count, time_limit)

        last_shown = time_limit
        try:
            while self.countdown.remaining() > 0 and not self.countdown.is_expired():
                result = self.collector.poll_nonblocking(self.poll_interval, option_count)

                if result.kind is InputKind.QUIT:
                    return RoundOutcome.quit(self.countdown.remaining())

                if result.kind is InputKind.CHOICE:
                    return RoundOutcome.answered(result.choice, self.countdown.remaining())

                if result.kind is InputKind.INVALID:
                    self.logger.debug(f"Invalid answer input {result.raw!r}, reprompting")
                    self.display.show_invalid_input(option_count)
                    continue

                remaining = self.countdown.remaining()
                if remaining != last_shown:
                    self.display.show_time_remaining(remaining)
                    last_shown = remaining

            return RoundOutcome.timed_out()
        finally:
            self.countdown.stop()

    def _run_untimed(self, question: Question, time_limit: int) -> RoundOutcome:
        option_count = question.option_count
        self._transition(RoundState.WAITING, "waiting without timer")
        self.display.show_answer_prompt(option_count)

        while True:
            line = self.collector.read_line()
            if line is None:
                self.logger.warning("Input closed while waiting for an answer")
                return RoundOutcome.timed_out()

            result = classify_input(line, option_count)
            if result.kind is InputKind.QUIT:
                return RoundOutcome.quit(time_limit)
            if result.kind is InputKind.CHOICE:
                return RoundOutcome.answered(result.choice, time_limit)

            self.logger.debug(f"Invalid answer input {result.raw!r}, reprompting")
            self.display.show_invalid_input(option_count)

    @staticmethod
    def _final_state(outcome: RoundOutcome) -> RoundState:
        if outcome.is_answered:
            return RoundState.ANSWERED
        if outcome.is_quit:
            return RoundState.QUIT
        return RoundState.TIMED_OUT

    def _transition(self, new_state: RoundState, reason: str) -> None:
        self.logger.debug(
            f"Round state: {self._state.value} -> {new_state.value} ({reason})",
            extra={
                'event_type': 'round_state_transition',
                'from_state': self._state.value,
                'to_state': new_state.value,
                'reason': reason
            }
        )
        self._state = new_state
