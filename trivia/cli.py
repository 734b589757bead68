"""
Command-line entry point: argument parsing, logging setup and the menu loop.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .answer_collector import AnswerCollector
from .config_manager import ConfigManager
from .countdown import Countdown
from .display import GameDisplay
from .menu import MainMenu, MenuChoice, configured_difficulty_menu
from .question_bank import QuestionBank, QuestionBankError
from .session import GameSession

DEFAULT_QUESTIONS_FILE = "data/questions.json"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trivia",
        description="Terminal trivia quiz game for 1-4 local players."
    )
    parser.add_argument(
        "questions_file",
        nargs="?",
        default=DEFAULT_QUESTIONS_FILE,
        help=f"Path to the JSON questions file (default: {DEFAULT_QUESTIONS_FILE})"
    )
    parser.add_argument("--config", help="Path to a JSON settings file")
    parser.add_argument("--questions", type=int, help="Questions per player")
    parser.add_argument("--time", type=int, help="Seconds allowed per question")
    parser.add_argument("--no-timer", action="store_true", help="Disable the question timer")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--log-dir", help="Directory for the log file")
    return parser


def apply_cli_overrides(config_manager: ConfigManager, args: argparse.Namespace) -> List[str]:
    """
    Apply command-line overrides on top of file settings.

    Returns:
        Error messages for overrides that were rejected
    """
    overrides = [
        (args.questions, config_manager.set_questions_per_game),
        (args.time, config_manager.set_time_per_question),
        (False if args.no_timer else None, config_manager.set_timer_enabled),
        (args.log_level, config_manager.set_log_level),
        (args.log_dir, config_manager.set_log_directory),
    ]

    errors = []
    for value, setter in overrides:
        if value is None:
            continue
        result = setter(value)
        if not result['success']:
            errors.append(result['error'])
    return errors


def setup_logging(settings: Dict[str, str]) -> None:
    """Set up logging to a file in the configured log directory."""
    log_level = getattr(logging, settings.get('level', 'INFO').upper(), logging.INFO)
    log_directory = Path(settings.get('log_directory', './logs/'))

    handlers: List[logging.Handler] = []
    try:
        log_directory.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_directory / "trivia.log", encoding='utf-8'))
    except OSError as e:
        # Game output owns the terminal, so file logging is simply disabled.
        print(f"Warning: cannot write logs to {log_directory}: {e}", file=sys.stderr)
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )


def run_menu_loop(
    bank: QuestionBank,
    config_manager: ConfigManager,
    collector: AnswerCollector,
    display: GameDisplay,
    countdown: Optional[Countdown] = None
) -> int:
    """
    Run games from the main menu until the player exits.

    Returns:
        Process exit code
    """
    entries = None
    if config_manager.is_difficulty_fixed():
        entries = configured_difficulty_menu(config_manager.get_difficulty())
    menu = MainMenu(collector, display, entries)
    countdown = countdown if countdown is not None else Countdown()

    while True:
        choice = menu.choose_difficulty()
        if choice is MenuChoice.EXIT:
            break
        if choice is MenuChoice.INVALID:
            display.show_info("\nInvalid choice. Please try again.")
            continue

        if config_manager.is_player_count_fixed():
            player_count = config_manager.get_player_count()
        else:
            player_count = menu.choose_player_count()
            if player_count is None:
                if collector.at_eof:
                    break
                display.show_info("\nInvalid choice. Returning to main menu.")
                continue

        difficulty = None if choice is MenuChoice.ANY else choice
        try:
            game_config = config_manager.build_game_config(
                difficulty=difficulty,
                player_count=player_count
            )
        except ValueError as e:
            logger.error(f"Invalid game configuration: {e}")
            display.show_error(f"Invalid game configuration: {e}")
            return 1

        names = menu.ask_player_names(player_count)
        session = GameSession(
            bank,
            game_config,
            collector,
            display=display,
            countdown=countdown,
            player_names=names
        )
        report = session.run()
        display.show_report(report)

        display.show_prompt("\nPress Enter to continue...")
        collector.wait_for_enter()

    display.show_info("\nThank you for playing Terminal Trivia!")
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    stdin=None,
    console: Optional[Console] = None
) -> int:
    """
    Run the trivia game.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        stdin: Input stream (defaults to sys.stdin)
        console: rich Console for output

    Returns:
        0 on normal termination, 1 if settings or the question file are unusable
    """
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager()
    errors = []
    if args.config:
        errors.extend(config_manager.load_from_file(args.config))
    errors.extend(apply_cli_overrides(config_manager, args))

    setup_logging(config_manager.get_logging_settings())
    display = GameDisplay(console)

    if errors:
        for error in errors:
            display.show_error(error)
        return 1

    validation = config_manager.validate_settings()
    if not validation['valid']:
        for issue in validation['issues']:
            display.show_error(issue)
        return 1
    logger.info(config_manager.get_settings_summary())

    bank = QuestionBank()
    display.show_info(f"Loading questions from: {escape(args.questions_file)}")
    try:
        loaded = bank.load_from_file(args.questions_file)
    except QuestionBankError as e:
        logger.error(f"Failed to load questions: {e}")
        display.show_error(str(e))
        display.show_error("Please ensure the questions file exists and is properly formatted")
        return 1

    display.show_success(f"Loaded {loaded} questions")
    if bank.load_errors:
        display.show_info(
            f"[yellow]Skipped {len(bank.load_errors)} invalid question(s); see the log for details.[/yellow]"
        )

    collector = AnswerCollector(stdin)
    return run_menu_loop(bank, config_manager, collector, display)
