"""
Unit tests for ConfigManager class.
"""
import json
import logging
import shutil
import tempfile
import unittest
from pathlib import Path

from trivia.config_manager import ConfigManager
from trivia.models import Difficulty, GameConfig


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager functionality."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.config_manager = ConfigManager()

        # Suppress logging during tests
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        """Clean up after each test method."""
        logging.disable(logging.NOTSET)

    def test_initialization_with_defaults(self):
        """Test that ConfigManager initializes with correct default values."""
        self.assertEqual(self.config_manager.get_questions_per_game(), 5)
        self.assertEqual(self.config_manager.get_time_per_question(), 30)
        self.assertTrue(self.config_manager.is_timer_enabled())
        self.assertIsNone(self.config_manager.get_difficulty())
        self.assertEqual(self.config_manager.get_player_count(), 1)
        self.assertEqual(
            self.config_manager.get_logging_settings(),
            {'level': 'INFO', 'log_directory': './logs/'}
        )

    def test_set_questions_per_game_valid_values(self):
        """Test setting valid question counts, including both limits."""
        for count in (1, 10, 50):
            result = self.config_manager.set_questions_per_game(count)
            self.assertTrue(result['success'])
            self.assertEqual(self.config_manager.get_questions_per_game(), count)
        self.assertIn("50", result['user_message'])

    def test_set_questions_per_game_invalid_values(self):
        """Test setting invalid question counts."""
        for value in ("5", 5.5, True, 0, -1, 51):
            result = self.config_manager.set_questions_per_game(value)
            self.assertFalse(result['success'], value)
            self.assertIn('error', result)
            self.assertTrue(result['user_message'].startswith("❌"))

        self.assertEqual(self.config_manager.get_questions_per_game(), 5)

    def test_set_time_per_question_limits(self):
        """Test the timer duration bounds."""
        self.assertTrue(self.config_manager.set_time_per_question(5)['success'])
        self.assertTrue(self.config_manager.set_time_per_question(300)['success'])

        result = self.config_manager.set_time_per_question(4)
        self.assertFalse(result['success'])
        self.assertIn("at least 5", result['error'])

        result = self.config_manager.set_time_per_question(301)
        self.assertFalse(result['success'])
        self.assertIn("5 minutes", result['user_message'])

        self.assertEqual(self.config_manager.get_time_per_question(), 300)

    def test_set_timer_enabled(self):
        self.assertTrue(self.config_manager.set_timer_enabled(False)['success'])
        self.assertFalse(self.config_manager.is_timer_enabled())
        self.assertFalse(self.config_manager.set_timer_enabled("no")['success'])
        self.assertFalse(self.config_manager.is_timer_enabled())

    def test_set_difficulty(self):
        """Test difficulty names, enum values and the any filter."""
        self.assertTrue(self.config_manager.set_difficulty("hard")['success'])
        self.assertIs(self.config_manager.get_difficulty(), Difficulty.HARD)

        self.assertTrue(self.config_manager.set_difficulty(Difficulty.MEDIUM)['success'])
        self.assertIs(self.config_manager.get_difficulty(), Difficulty.MEDIUM)

        self.assertTrue(self.config_manager.set_difficulty("any")['success'])
        self.assertIsNone(self.config_manager.get_difficulty())

        self.assertFalse(self.config_manager.set_difficulty("extreme")['success'])
        self.assertFalse(self.config_manager.set_difficulty(3)['success'])
        self.assertIsNone(self.config_manager.get_difficulty())

    def test_set_player_count(self):
        for count in (1, 4):
            self.assertTrue(self.config_manager.set_player_count(count)['success'])
        for count in (0, 5, "2"):
            self.assertFalse(self.config_manager.set_player_count(count)['success'])
        self.assertEqual(self.config_manager.get_player_count(), 4)

    def test_fixed_difficulty_and_player_count(self):
        """Test that only explicitly set values replace the per-game prompts."""
        self.assertFalse(self.config_manager.is_difficulty_fixed())
        self.assertFalse(self.config_manager.is_player_count_fixed())

        self.assertFalse(self.config_manager.set_difficulty("extreme")['success'])
        self.assertFalse(self.config_manager.set_player_count(7)['success'])
        self.assertFalse(self.config_manager.is_difficulty_fixed())
        self.assertFalse(self.config_manager.is_player_count_fixed())

        self.config_manager.set_difficulty("any")
        self.config_manager.set_player_count(3)
        self.assertTrue(self.config_manager.is_difficulty_fixed())
        self.assertTrue(self.config_manager.is_player_count_fixed())

        self.config_manager.reset_to_defaults()
        self.assertFalse(self.config_manager.is_difficulty_fixed())
        self.assertFalse(self.config_manager.is_player_count_fixed())

    def test_logging_settings(self):
        """Test log level normalisation and directory validation."""
        self.assertTrue(self.config_manager.set_log_level("debug")['success'])
        self.assertFalse(self.config_manager.set_log_level("VERBOSE")['success'])
        self.assertTrue(self.config_manager.set_log_directory("/tmp/trivia-logs")['success'])
        self.assertFalse(self.config_manager.set_log_directory("  ")['success'])

        self.assertEqual(
            self.config_manager.get_logging_settings(),
            {'level': 'DEBUG', 'log_directory': '/tmp/trivia-logs'}
        )

    def test_reset_to_defaults(self):
        self.config_manager.set_questions_per_game(20)
        self.config_manager.set_timer_enabled(False)
        self.config_manager.reset_to_defaults()

        self.assertEqual(self.config_manager.get_questions_per_game(), 5)
        self.assertTrue(self.config_manager.is_timer_enabled())

    def test_build_game_config_uses_settings(self):
        """Test that the session config mirrors current settings."""
        self.config_manager.set_questions_per_game(7)
        self.config_manager.set_time_per_question(15)
        self.config_manager.set_difficulty("easy")

        config = self.config_manager.build_game_config()

        self.assertIsInstance(config, GameConfig)
        self.assertEqual(config.questions_per_game, 7)
        self.assertEqual(config.time_per_question, 15)
        self.assertIs(config.difficulty, Difficulty.EASY)
        self.assertEqual(config.player_count, 1)

    def test_build_game_config_overrides(self):
        """Test per-session difficulty and player count overrides."""
        self.config_manager.set_difficulty("easy")

        config = self.config_manager.build_game_config(difficulty=None, player_count=3)
        self.assertIsNone(config.difficulty)
        self.assertEqual(config.player_count, 3)
        self.assertEqual(config.total_rounds, 15)

        config = self.config_manager.build_game_config(difficulty=Difficulty.HARD)
        self.assertIs(config.difficulty, Difficulty.HARD)

        with self.assertRaises(ValueError):
            self.config_manager.build_game_config(player_count=9)

    def test_validate_settings(self):
        validation = self.config_manager.validate_settings()
        self.assertTrue(validation['valid'])
        self.assertEqual(validation['issues'], [])

        self.config_manager._player_count = 9
        validation = self.config_manager.validate_settings()
        self.assertFalse(validation['valid'])
        self.assertEqual(len(validation['issues']), 1)

    def test_settings_summary(self):
        summary = self.config_manager.get_settings_summary()
        self.assertIn("Difficulty: chosen per game", summary)
        self.assertIn("Players: chosen per game", summary)

        self.config_manager.set_timer_enabled(False)
        self.config_manager.set_difficulty("medium")
        self.config_manager.set_player_count(2)
        summary = self.config_manager.get_settings_summary()

        self.assertIn("Timer: disabled", summary)
        self.assertIn("Difficulty: Medium", summary)
        self.assertIn("Players: 2", summary)
        self.assertIn("Questions per player: 5", summary)


class TestConfigManagerFiles(unittest.TestCase):
    """Test cases for loading settings from JSON files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_manager = ConfigManager()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write_config(self, data, name="config.json"):
        path = Path(self.temp_dir) / name
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f)
        return path

    def test_load_valid_file(self):
        """Test that every section of a valid file is applied."""
        path = self.write_config({
            "game": {
                "questions_per_game": 8,
                "time_per_question": 20,
                "timer_enabled": False,
                "difficulty": "hard",
                "player_count": 2
            },
            "logging": {"level": "warning", "log_directory": "/var/tmp/trivia"}
        })

        errors = self.config_manager.load_from_file(path)

        self.assertEqual(errors, [])
        self.assertEqual(self.config_manager.get_questions_per_game(), 8)
        self.assertEqual(self.config_manager.get_time_per_question(), 20)
        self.assertFalse(self.config_manager.is_timer_enabled())
        self.assertIs(self.config_manager.get_difficulty(), Difficulty.HARD)
        self.assertEqual(self.config_manager.get_player_count(), 2)
        self.assertTrue(self.config_manager.is_player_count_fixed())
        self.assertEqual(self.config_manager.get_logging_settings()['level'], "WARNING")

    def test_invalid_values_reported_and_skipped(self):
        """Test that bad values are reported while good ones still apply."""
        path = self.write_config({"game": {"questions_per_game": 0, "time_per_question": 45}})

        with self.assertLogs('trivia.config_manager', level='ERROR'):
            errors = self.config_manager.load_from_file(path)

        self.assertEqual(len(errors), 1)
        self.assertTrue(errors[0].startswith("game.questions_per_game"))
        self.assertEqual(self.config_manager.get_questions_per_game(), 5)
        self.assertEqual(self.config_manager.get_time_per_question(), 45)

    def test_unknown_keys_warned(self):
        path = self.write_config({"game": {"colour": "blue"}})
        with self.assertLogs('trivia.config_manager', level='WARNING') as captured:
            errors = self.config_manager.load_from_file(path)

        self.assertEqual(errors, [])
        self.assertTrue(any("game.colour" in line for line in captured.output))

    def test_missing_and_malformed_files(self):
        """Test that unreadable files produce a single error."""
        logging.disable(logging.CRITICAL)
        try:
            errors = self.config_manager.load_from_file(Path(self.temp_dir) / "missing.json")
            self.assertEqual(len(errors), 1)
            self.assertIn("not found", errors[0])

            path = Path(self.temp_dir) / "broken.json"
            path.write_text("{ not json", encoding='utf-8')
            errors = self.config_manager.load_from_file(path)
            self.assertEqual(len(errors), 1)
            self.assertIn("Invalid JSON", errors[0])

            self.assertEqual(self.config_manager.load_from_dict([1, 2]), ["Configuration must be a JSON object"])
            self.assertEqual(
                self.config_manager.load_from_dict({"game": "fast"}),
                ["'game' section must be an object"]
            )
        finally:
            logging.disable(logging.NOTSET)


if __name__ == '__main__':
    unittest.main()
