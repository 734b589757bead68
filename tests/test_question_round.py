"""
Unit tests for QuestionRound: the race between the countdown and player input.
"""
import time
import unittest
from unittest.mock import Mock

from trivia.answer_collector import InputKind, PollResult, classify_input
from trivia.countdown import Countdown
from trivia.display import GameDisplay
from trivia.models import GameConfig
from trivia.question_round import QuestionRound, RoundState
from tests.test_fixtures import ScriptedCollector, TestFixtures


class LateInputCollector:
    """Holds back a line until the countdown has already expired."""

    def __init__(self, countdown: Countdown, line: str):
        self.countdown = countdown
        self.line = line
        self.delivered = False

    def poll_nonblocking(self, timeout, option_count):
        if self.delivered:
            time.sleep(timeout)
            return PollResult(InputKind.PENDING)
        deadline = time.monotonic() + 2.0
        while not self.countdown.is_expired() and time.monotonic() < deadline:
            time.sleep(0.005)
        self.delivered = True
        return classify_input(self.line, option_count)


class TestTimedRound(unittest.TestCase):
    """Test cases for rounds played against the countdown."""

    def setUp(self):
        """Set up a question, a mocked display and a timed config."""
        self.question = TestFixtures.create_question()
        self.display = Mock(spec=GameDisplay)
        self.config = GameConfig(time_per_question=30, timer_enabled=True)

    def make_round(self, collector, tick_interval=1.0, countdown=None):
        countdown = countdown or Countdown("round", tick_interval=tick_interval)
        return QuestionRound(collector, countdown=countdown, display=self.display, poll_interval=0.005)

    def test_answer_before_expiry(self):
        """Test that a valid choice resolves the round with the time left."""
        question_round = self.make_round(ScriptedCollector(["2"]))
        outcome = question_round.run(self.question, self.config)

        self.assertTrue(outcome.is_answered)
        self.assertEqual(outcome.choice, 2)
        self.assertIn(outcome.time_remaining, (29, 30))
        self.assertIs(question_round.state, RoundState.ANSWERED)
        self.assertFalse(question_round.countdown.is_running())

    def test_quit(self):
        question_round = self.make_round(ScriptedCollector([None, "q"]))
        outcome = question_round.run(self.question, self.config)

        self.assertTrue(outcome.is_quit)
        self.assertIs(question_round.state, RoundState.QUIT)

    def test_timeout_without_input(self):
        """Test that silence until expiry resolves as a timeout."""
        config = GameConfig(time_per_question=5, timer_enabled=True)
        question_round = self.make_round(ScriptedCollector(), tick_interval=0.01)
        outcome = question_round.run(self.question, config)

        self.assertTrue(outcome.is_timeout)
        self.assertIsNone(outcome.choice)
        self.assertEqual(outcome.time_remaining, 0)
        self.assertIs(question_round.state, RoundState.TIMED_OUT)

    def test_invalid_input_reprompts(self):
        """Test that invalid lines are reprompted and never end the round."""
        question_round = self.make_round(ScriptedCollector(["abc", "9", "", "3"]))
        outcome = question_round.run(self.question, self.config)

        self.assertTrue(outcome.is_answered)
        self.assertEqual(outcome.choice, 3)
        self.assertEqual(self.display.show_invalid_input.call_count, 3)
        self.display.show_invalid_input.assert_called_with(4)

    def test_quit_wins_over_simultaneous_expiry(self):
        """Test that a quit seen in the same poll as expiry still quits."""
        countdown = Countdown("race", tick_interval=0.01)
        config = GameConfig(time_per_question=5, timer_enabled=True)
        question_round = self.make_round(LateInputCollector(countdown, "q"), countdown=countdown)

        outcome = question_round.run(self.question, config)
        self.assertTrue(outcome.is_quit)
        self.assertEqual(outcome.time_remaining, 0)

    def test_answer_wins_over_simultaneous_expiry(self):
        """Test that a choice seen in the same poll as expiry still counts."""
        countdown = Countdown("race", tick_interval=0.01)
        config = GameConfig(time_per_question=5, timer_enabled=True)
        question_round = self.make_round(LateInputCollector(countdown, "2"), countdown=countdown)

        outcome = question_round.run(self.question, config)
        self.assertTrue(outcome.is_answered)
        self.assertEqual(outcome.choice, 2)
        self.assertEqual(outcome.time_remaining, 0)

    def test_countdown_reused_between_rounds(self):
        """Test that one countdown serves consecutive rounds after reset."""
        countdown = Countdown("reused", tick_interval=1.0)
        question_round = self.make_round(ScriptedCollector(["1", "4"]), countdown=countdown)

        first = question_round.run(self.question, self.config)
        second = question_round.run(self.question, self.config)

        self.assertEqual(first.choice, 1)
        self.assertEqual(second.choice, 4)
        self.assertFalse(countdown.is_running())

    def test_prompt_shows_time_limit(self):
        question_round = self.make_round(ScriptedCollector(["1"]))
        question_round.run(self.question, self.config)
        self.display.show_answer_prompt.assert_called_once_with(4, 30)


class TestUntimedRound(unittest.TestCase):
    """Test cases for rounds played with the timer disabled."""

    def setUp(self):
        self.question = TestFixtures.create_question(options=("a", "b", "c"), correct_answer=0)
        self.display = Mock(spec=GameDisplay)
        self.config = GameConfig(time_per_question=20, timer_enabled=False)

    def make_round(self, lines):
        countdown = Mock(spec=Countdown)
        return QuestionRound(ScriptedCollector(lines), countdown=countdown, display=self.display)

    def test_answer_gets_full_time(self):
        """Test that untimed answers are credited with the whole time limit."""
        question_round = self.make_round(["1"])
        outcome = question_round.run(self.question, self.config)

        self.assertTrue(outcome.is_answered)
        self.assertEqual(outcome.choice, 1)
        self.assertEqual(outcome.time_remaining, 20)
        question_round.countdown.start.assert_not_called()

    def test_invalid_input_reprompts(self):
        """Test that untimed play also reprompts instead of counting a wrong answer."""
        question_round = self.make_round(["x", "4", "2"])
        outcome = question_round.run(self.question, self.config)

        self.assertEqual(outcome.choice, 2)
        self.assertEqual(self.display.show_invalid_input.call_count, 2)

    def test_quit(self):
        outcome = self.make_round(["Q"]).run(self.question, self.config)
        self.assertTrue(outcome.is_quit)

    def test_end_of_input_times_out(self):
        """Test that closed input resolves the round as a timeout."""
        question_round = self.make_round([])
        outcome = question_round.run(self.question, self.config)

        self.assertTrue(outcome.is_timeout)
        self.assertIs(question_round.state, RoundState.TIMED_OUT)

    def test_prompt_without_time_limit(self):
        self.make_round(["1"]).run(self.question, self.config)
        self.display.show_answer_prompt.assert_called_once_with(3)


if __name__ == '__main__':
    unittest.main()
