"""
Score calculation for answered questions.
"""
from typing import Dict

from .models import Difficulty


BASE_POINTS: Dict[Difficulty, int] = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 30,
}


def calculate_score(correct: bool, time_remaining: int, difficulty: Difficulty) -> int:
    """
    Calculate the points awarded for one answer.

    A wrong answer is worth nothing. A correct answer earns the difficulty's
    base points plus one bonus point for every two whole seconds left on the
    clock.

    Args:
        correct: Whether the chosen option was the correct one
        time_remaining: Seconds left when the round resolved
        difficulty: Difficulty tier of the question

    Returns:
        Points awarded, never negative
    """
    if not correct:
        return 0

    time_bonus = max(time_remaining, 0) // 2
    return BASE_POINTS[difficulty] + time_bonus
