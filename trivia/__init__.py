"""Terminal trivia quiz game."""

__version__ = "0.1.0"
