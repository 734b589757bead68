"""
Console rendering for the trivia game, built on rich.
"""
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GameConfig, Player, Question, RoundOutcome

if TYPE_CHECKING:
    from .session import GameReport


class GameDisplay:
    """Renders menus, questions, feedback and reports to a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console(highlight=False)

    def show_banner(self, title: str) -> None:
        self.console.print()
        self.console.print(Panel(Text(title, justify="center", style="bold cyan"), expand=True))

    def show_menu(self, title: str, items: Sequence[str]) -> None:
        self.show_banner(title)
        for number, item in enumerate(items, start=1):
            self.console.print(f"  {number}. {escape(item)}")
        self.console.print()

    def show_prompt(self, prompt: str) -> None:
        self.console.print(f"  {prompt}", end="")

    def show_config(self, config: GameConfig) -> None:
        self.show_banner("WELCOME TO TERMINAL TRIVIA!")
        self.console.print("Game Configuration:")
        self.console.print(f"  Questions per player: {config.questions_per_game}")
        if config.timer_enabled:
            self.console.print(f"  Time per question: {config.time_per_question} seconds")
        else:
            self.console.print("  Time per question: unlimited")
        self.console.print(f"  Difficulty: {config.difficulty_label}")
        self.console.print(f"  Players: {config.player_count}")
        self.console.print()

    def show_question(
        self,
        question: Question,
        round_number: int,
        total_rounds: int,
        player_name: Optional[str] = None
    ) -> None:
        """
        Present a question with its numbered options.

        Args:
            question: Question to present
            round_number: Current round (1-based)
            total_rounds: Rounds in the session
            player_name: Active player, shown only in multi-player games
        """
        header = Text()
        if player_name:
            header.append(f"Player: {player_name}\n", style="bold magenta")
        header.append(f"Question {round_number}/{total_rounds}\n", style="dim")
        header.append(question.text, style="bold")
        header.append(
            f"\nDifficulty: {question.difficulty.label}  Category: {question.category.label}",
            style="dim"
        )
        self.console.print()
        self.console.print(Panel(header, expand=True))
        for number, option in enumerate(question.options, start=1):
            self.console.print(f"  {number}. {escape(option)}")
        self.console.print()

    def show_answer_prompt(self, option_count: int, time_limit: Optional[int] = None) -> None:
        if time_limit is not None:
            self.console.print(f"  Time remaining: {time_limit} seconds")
        self.show_prompt(f"Enter your answer (1-{option_count}) or 'q' to quit: ")

    def show_time_remaining(self, seconds: int) -> None:
        """Rewrite the ticker line in place; skipped when output is not a terminal."""
        if not self.console.is_terminal:
            return
        # rich strips carriage returns from renderables, so write the ticker raw.
        self.console.file.write(f"\r  Time remaining: {seconds} seconds   ")
        self.console.file.flush()

    def show_invalid_input(self, option_count: int) -> None:
        self.console.print()
        self.show_prompt(f"[yellow]Invalid input.[/yellow] Enter 1-{option_count} or 'q': ")

    def show_round_result(
        self,
        question: Question,
        outcome: RoundOutcome,
        correct: bool,
        points: int
    ) -> None:
        self.console.print()
        if outcome.is_timeout:
            self.console.print(
                f"[red]⏰ Time's up![/red] The correct answer was: "
                f"{question.correct_answer + 1}. {escape(question.correct_option)}"
            )
        elif correct:
            self.console.print(f"[green]✅ Correct![/green] +{points} points")
        else:
            self.console.print(
                f"[red]❌ Wrong![/red] The correct answer was: "
                f"{question.correct_answer + 1}. {escape(question.correct_option)}"
            )

    def show_scores(self, players: Iterable[Player]) -> None:
        self.console.print()
        self.console.print("Current Scores:")
        for player in players:
            self.console.print(f"  {escape(player.name)}: {player.score} points")

    def show_report(self, report: "GameReport") -> None:
        """Render final statistics: a ranking table, or one player's summary."""
        self.show_banner("GAME STATISTICS")

        if report.message:
            self.console.print(f"[yellow]{escape(report.message)}[/yellow]")
            self.console.print()

        if not report.is_multiplayer:
            player = report.players[0]
            self.console.print(f"  Total Questions: {player.total_questions}")
            self.console.print(f"  Correct Answers: {player.correct_answers}")
            self.console.print(f"  Wrong Answers: {player.wrong_answers}")
            self.console.print(f"  Timeouts: {player.timeouts}")
            self.console.print(f"  Final Score: {player.score} points")
            self.console.print(f"  Accuracy: {player.accuracy:.1f}%")
            return

        table = Table(title="Final Scores")
        table.add_column("Rank", justify="right")
        table.add_column("Player")
        table.add_column("Score", justify="right")
        table.add_column("Correct", justify="right")
        table.add_column("Wrong", justify="right")
        table.add_column("Timeouts", justify="right")
        table.add_column("Accuracy", justify="right")
        for rank, player in enumerate(report.standings, start=1):
            table.add_row(
                str(rank),
                Text(player.name),
                str(player.score),
                str(player.correct_answers),
                str(player.wrong_answers),
                str(player.timeouts),
                f"{player.accuracy:.1f}%"
            )
        self.console.print(table)
        self.console.print()

        if report.is_tie:
            names = ", ".join(escape(player.name) for player in report.leaders)
            self.console.print(f"🤝 It's a tie between {names} with {report.top_score} points!")
        elif report.winner is not None:
            self.console.print(f"🏆 Winner: {escape(report.winner.name)} with {report.top_score} points!")

    def show_info(self, message: str) -> None:
        self.console.print(message)

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]SUCCESS:[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]ERROR:[/red] {escape(message)}")
