"""
Configuration manager for trivia game settings and logging parameters.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import MAX_PLAYERS, Difficulty, GameConfig

_USE_CONFIGURED = object()


class ConfigManager:
    """Manages game settings and builds per-session GameConfig values."""

    # Default configuration values
    DEFAULT_QUESTIONS_PER_GAME = 5
    DEFAULT_TIME_PER_QUESTION = 30
    DEFAULT_TIMER_ENABLED = True
    DEFAULT_DIFFICULTY: Optional[Difficulty] = None  # Any difficulty
    DEFAULT_PLAYER_COUNT = 1
    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_LOG_DIRECTORY = "./logs/"

    # Validation limits
    MIN_TIMER_DURATION = 5
    MAX_TIMER_DURATION = 300  # 5 minutes
    MIN_QUESTIONS_PER_GAME = 1
    MAX_QUESTIONS_PER_GAME = 50
    MIN_PLAYERS = 1
    MAX_PLAYERS = MAX_PLAYERS

    VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(self):
        """Initialize ConfigManager with default settings."""
        self.logger = logging.getLogger(__name__)
        self.reset_to_defaults()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values."""
        self._questions_per_game = self.DEFAULT_QUESTIONS_PER_GAME
        self._time_per_question = self.DEFAULT_TIME_PER_QUESTION
        self._timer_enabled = self.DEFAULT_TIMER_ENABLED
        self._difficulty = self.DEFAULT_DIFFICULTY
        self._player_count = self.DEFAULT_PLAYER_COUNT
        # Set explicitly (settings file); otherwise the menu asks each game.
        self._difficulty_fixed = False
        self._player_count_fixed = False
        self._log_level = self.DEFAULT_LOG_LEVEL
        self._log_directory = self.DEFAULT_LOG_DIRECTORY
        self.logger.debug("All settings reset to default values")

    def _ok(self, message: str, user_message: str) -> Dict[str, Any]:
        self.logger.info(message)
        return {
            'success': True,
            'message': message,
            'user_message': user_message
        }

    def _fail(self, error: str, user_message: str) -> Dict[str, Any]:
        self.logger.error(error)
        return {
            'success': False,
            'error': error,
            'user_message': user_message
        }

    @staticmethod
    def _is_int(value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def set_questions_per_game(self, count: int) -> Dict[str, Any]:
        """
        Set how many questions each player answers per game.

        Args:
            count: Questions per player

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not self._is_int(count):
            return self._fail(
                f"Questions per game must be an integer, got {type(count).__name__}",
                f"❌ Invalid input: Expected a number, got {type(count).__name__}"
            )

        if count < self.MIN_QUESTIONS_PER_GAME:
            return self._fail(
                f"Questions per game must be at least {self.MIN_QUESTIONS_PER_GAME}",
                f"❌ Too few questions: Minimum is {self.MIN_QUESTIONS_PER_GAME}"
            )

        if count > self.MAX_QUESTIONS_PER_GAME:
            return self._fail(
                f"Questions per game cannot exceed {self.MAX_QUESTIONS_PER_GAME}",
                f"❌ Too many questions: Maximum is {self.MAX_QUESTIONS_PER_GAME}"
            )

        self._questions_per_game = count
        return self._ok(
            f"Questions per game set to {count}",
            f"✅ Each player will answer {count} questions"
        )

    def get_questions_per_game(self) -> int:
        return self._questions_per_game

    def set_time_per_question(self, duration: int) -> Dict[str, Any]:
        """
        Set the time limit for each question.

        Args:
            duration: Time limit in seconds

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not self._is_int(duration):
            return self._fail(
                f"Timer duration must be an integer, got {type(duration).__name__}",
                f"❌ Invalid input: Expected a number, got {type(duration).__name__}"
            )

        if duration < self.MIN_TIMER_DURATION:
            return self._fail(
                f"Timer duration must be at least {self.MIN_TIMER_DURATION} seconds",
                f"❌ Timer too short: Minimum is {self.MIN_TIMER_DURATION} seconds"
            )

        if duration > self.MAX_TIMER_DURATION:
            return self._fail(
                f"Timer duration cannot exceed {self.MAX_TIMER_DURATION} seconds",
                f"❌ Timer too long: Maximum is {self.MAX_TIMER_DURATION} seconds "
                f"({self.MAX_TIMER_DURATION // 60} minutes)"
            )

        self._time_per_question = duration
        return self._ok(
            f"Timer duration set to {duration} seconds",
            f"✅ Timer set to {duration} seconds"
        )

    def get_time_per_question(self) -> int:
        return self._time_per_question

    def set_timer_enabled(self, enabled: bool) -> Dict[str, Any]:
        if not isinstance(enabled, bool):
            return self._fail(
                f"Timer flag must be a boolean, got {type(enabled).__name__}",
                f"❌ Invalid input: Expected true/false, got {type(enabled).__name__}"
            )

        self._timer_enabled = enabled
        state = "enabled" if enabled else "disabled"
        return self._ok(f"Question timer {state}", f"✅ Question timer {state}")

    def is_timer_enabled(self) -> bool:
        return self._timer_enabled

    def set_difficulty(self, difficulty: Union[Difficulty, str, None]) -> Dict[str, Any]:
        """
        Set the difficulty filter.

        Args:
            difficulty: A Difficulty, its file name ("easy", ...), or None / "any"
                for mixed difficulty

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if difficulty is None or difficulty == "any":
            self._difficulty = None
            self._difficulty_fixed = True
            return self._ok("Difficulty set to any", "✅ Questions of every difficulty")

        if isinstance(difficulty, str):
            parsed = Difficulty.parse(difficulty)
            if parsed is None:
                return self._fail(
                    f"Unknown difficulty: {difficulty!r}",
                    "❌ Difficulty must be one of: easy, medium, hard, any"
                )
            difficulty = parsed

        if not isinstance(difficulty, Difficulty):
            return self._fail(
                f"Difficulty must be a Difficulty or string, got {type(difficulty).__name__}",
                "❌ Difficulty must be one of: easy, medium, hard, any"
            )

        self._difficulty = difficulty
        self._difficulty_fixed = True
        return self._ok(
            f"Difficulty set to {difficulty.value}",
            f"✅ Difficulty set to {difficulty.label}"
        )

    def get_difficulty(self) -> Optional[Difficulty]:
        return self._difficulty

    def is_difficulty_fixed(self) -> bool:
        """True once a difficulty has been set, so the menu does not offer a choice."""
        return self._difficulty_fixed

    def set_player_count(self, count: int) -> Dict[str, Any]:
        if not self._is_int(count):
            return self._fail(
                f"Player count must be an integer, got {type(count).__name__}",
                f"❌ Invalid input: Expected a number, got {type(count).__name__}"
            )

        if not self.MIN_PLAYERS <= count <= self.MAX_PLAYERS:
            return self._fail(
                f"Player count must be between {self.MIN_PLAYERS} and {self.MAX_PLAYERS}",
                f"❌ Player count must be between {self.MIN_PLAYERS} and {self.MAX_PLAYERS}"
            )

        self._player_count = count
        self._player_count_fixed = True
        return self._ok(f"Player count set to {count}", f"✅ {count} player(s)")

    def get_player_count(self) -> int:
        return self._player_count

    def is_player_count_fixed(self) -> bool:
        return self._player_count_fixed

    def set_log_level(self, level: str) -> Dict[str, Any]:
        if not isinstance(level, str) or level.upper() not in self.VALID_LOG_LEVELS:
            return self._fail(
                f"Invalid log level: {level!r}",
                f"❌ Log level must be one of: {', '.join(self.VALID_LOG_LEVELS)}"
            )

        self._log_level = level.upper()
        return self._ok(f"Log level set to {self._log_level}", f"✅ Log level {self._log_level}")

    def set_log_directory(self, directory: str) -> Dict[str, Any]:
        if not isinstance(directory, str) or not directory.strip():
            return self._fail(
                "Log directory cannot be empty",
                "❌ Log directory path cannot be empty"
            )

        self._log_directory = directory
        return self._ok(f"Log directory set to {directory}", f"✅ Logging to {directory}")

    def get_logging_settings(self) -> Dict[str, str]:
        return {
            'level': self._log_level,
            'log_directory': self._log_directory
        }

    def load_from_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Apply settings from a JSON configuration file.

        Expected structure (every key optional):
        {
            "game": {
                "questions_per_game": int,
                "time_per_question": int,
                "timer_enabled": bool,
                "difficulty": "easy" | "medium" | "hard" | "any",
                "player_count": int
            },
            "logging": {
                "level": str,
                "log_directory": str
            }
        }

        Args:
            config_path: Path to the JSON configuration file

        Returns:
            List of error messages; settings that failed keep their previous value
        """
        path = Path(config_path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            error = f"Config file not found: {path}"
            self.logger.error(error)
            return [error]
        except json.JSONDecodeError as e:
            error = f"Invalid JSON in {path}: {e}"
            self.logger.error(error)
            return [error]
        except OSError as e:
            error = f"Failed to read config file {path}: {e}"
            self.logger.error(error)
            return [error]

        return self.load_from_dict(data)

    def load_from_dict(self, data: Dict[str, Any]) -> List[str]:
        """Apply settings from a parsed configuration mapping."""
        if not isinstance(data, dict):
            return ["Configuration must be a JSON object"]

        setters = {
            'questions_per_game': self.set_questions_per_game,
            'time_per_question': self.set_time_per_question,
            'timer_enabled': self.set_timer_enabled,
            'difficulty': self.set_difficulty,
            'player_count': self.set_player_count,
        }
        logging_setters = {
            'level': self.set_log_level,
            'log_directory': self.set_log_directory,
        }

        errors = []
        for section, section_setters in (('game', setters), ('logging', logging_setters)):
            values = data.get(section, {})
            if not isinstance(values, dict):
                errors.append(f"'{section}' section must be an object")
                continue
            for key, value in values.items():
                setter = section_setters.get(key)
                if setter is None:
                    self.logger.warning(f"Ignoring unknown setting {section}.{key}")
                    continue
                result = setter(value)
                if not result['success']:
                    errors.append(f"{section}.{key}: {result['error']}")
        return errors

    def validate_settings(self) -> Dict[str, Any]:
        """
        Validate current settings and return validation results.

        Returns:
            Dictionary with validation results and any issues found
        """
        validation_result = {
            "valid": True,
            "issues": []
        }

        if (not self._is_int(self._questions_per_game) or
                not self.MIN_QUESTIONS_PER_GAME <= self._questions_per_game <= self.MAX_QUESTIONS_PER_GAME):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid questions per game: {self._questions_per_game}"
            )

        if (not self._is_int(self._time_per_question) or
                not self.MIN_TIMER_DURATION <= self._time_per_question <= self.MAX_TIMER_DURATION):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid timer duration: {self._time_per_question}"
            )

        if (not self._is_int(self._player_count) or
                not self.MIN_PLAYERS <= self._player_count <= self.MAX_PLAYERS):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid player count: {self._player_count}"
            )

        return validation_result

    def build_game_config(
        self,
        difficulty: Any = _USE_CONFIGURED,
        player_count: Optional[int] = None
    ) -> GameConfig:
        """
        Build the immutable settings for one session.

        Args:
            difficulty: Difficulty for this session (None for any); the
                configured value is used when omitted
            player_count: Number of players; the configured value is used
                when omitted

        Returns:
            GameConfig for the session

        Raises:
            ValueError: If the resulting settings are invalid
        """
        return GameConfig(
            questions_per_game=self._questions_per_game,
            time_per_question=self._time_per_question,
            difficulty=self._difficulty if difficulty is _USE_CONFIGURED else difficulty,
            timer_enabled=self._timer_enabled,
            player_count=self._player_count if player_count is None else player_count
        )

    def get_settings_summary(self) -> str:
        """
        Get a formatted summary of current settings.

        Returns:
            Human-readable string describing current settings
        """
        timer_str = (
            f"{self._time_per_question} seconds"
            if self._timer_enabled
            else "disabled"
        )
        if not self._difficulty_fixed:
            difficulty_str = "chosen per game"
        else:
            difficulty_str = self._difficulty.label if self._difficulty else "Any"
        players_str = self._player_count if self._player_count_fixed else "chosen per game"

        return (
            f"Game Settings:\n"
            f"• Questions per player: {self._questions_per_game}\n"
            f"• Timer: {timer_str}\n"
            f"• Difficulty: {difficulty_str}\n"
            f"• Players: {players_str}\n"
            f"• Log Level: {self._log_level}"
        )
