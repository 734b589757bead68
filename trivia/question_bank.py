"""
Question bank: loading and validation of JSON question files, and random draws.
"""
import json
import logging
import os
import random
from pathlib import Path
from typing import Any, Collection, Dict, Iterable, List, Optional, Set, Union

from .models import Category, Difficulty, Question


class QuestionBankError(Exception):
    """Raised when the question source cannot provide a usable bank."""
    pass


class QuestionBank:
    """
    Holds the questions for the whole process and hands them out at random.

    Expected file structure, either a bare array or an object:
    {
        "questions": [
            {
                "question": str,
                "options": [str, ...],      # 2-4 entries
                "correct": int,             # index into options
                "difficulty": str,          # Optional: "easy" | "medium" | "hard"
                "category": str             # Optional
            }
        ]
    }
    """

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize an empty bank.

        Args:
            rng: Random source shared by every draw; created once if omitted
        """
        self.logger = logging.getLogger(__name__)
        self._questions: List[Question] = []
        self._known: Set[Question] = set()
        self._rng = rng if rng is not None else random.Random()
        self.load_errors: List[str] = []
        self.source_path: Optional[Path] = None

    def __len__(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    def add(self, question: Question) -> None:
        """
        Add one question to the bank.

        Raises:
            TypeError: If question is not a Question
            ValueError: If an equal question is already in the bank
        """
        if not isinstance(question, Question):
            raise TypeError(f"Expected Question, got {type(question).__name__}")
        # Draws exclude asked questions by value, so equal entries would share one slot.
        if question in self._known:
            raise ValueError("duplicate of a question already in the bank")
        self._known.add(question)
        self._questions.append(question)

    def load_from_file(self, file_path: Union[str, Path]) -> int:
        """
        Load questions from a JSON file.

        Records that fail validation are skipped and reported in load_errors.

        Args:
            file_path: Path to the JSON question file

        Returns:
            Number of questions accepted from the file

        Raises:
            QuestionBankError: If the file cannot be read or parsed, or holds
                no valid questions
        """
        path = Path(file_path)
        self.source_path = path
        self.load_errors.clear()

        if not path.exists():
            raise QuestionBankError(f"Questions file not found: {path}")
        if not path.is_file():
            raise QuestionBankError(f"Questions path is not a file: {path}")
        if not os.access(path, os.R_OK):
            raise QuestionBankError(f"Permission denied: Cannot read {path}")

        try:
            file_size = path.stat().st_size
        except OSError as e:
            raise QuestionBankError(f"Failed to inspect questions file {path}: {e}") from e

        if file_size > self.MAX_FILE_SIZE:
            raise QuestionBankError(
                f"Questions file too large ({file_size / 1024 / 1024:.1f}MB). "
                f"Maximum size is {self.MAX_FILE_SIZE / 1024 / 1024:.0f}MB"
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise QuestionBankError(f"Invalid JSON in {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise QuestionBankError(f"Questions file {path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise QuestionBankError(f"Failed to read questions file {path}: {e}") from e

        records = self._extract_records(data)
        loaded = self._load_records(records)

        if loaded <= 0:
            raise QuestionBankError(f"No valid questions found in {path}")

        self.logger.info(f"Loaded {loaded} questions from {path}")
        if self.load_errors:
            self.logger.warning(f"Rejected {len(self.load_errors)} question records from {path}")
        return loaded

    def load_from_records(self, records: Iterable[Any]) -> int:
        """
        Load questions from already-parsed records.

        Returns:
            Number of questions accepted
        """
        self.load_errors.clear()
        return self._load_records(list(records))

    def _extract_records(self, data: Any) -> List[Any]:
        if isinstance(data, list):
            return data

        if isinstance(data, dict):
            if "questions" not in data:
                raise QuestionBankError("Question data must contain a 'questions' key")
            records = data["questions"]
            if not isinstance(records, list):
                raise QuestionBankError("'questions' value must be an array")
            return records

        raise QuestionBankError("Question data must be a JSON array or object")

    def _load_records(self, records: List[Any]) -> int:
        loaded = 0
        for index, record in enumerate(records):
            try:
                self.add(self.parse_record(record))
            except ValueError as e:
                message = f"Question {index}: {e}"
                self.load_errors.append(message)
                self.logger.error(f"Rejected question record - {message}")
                continue

            loaded += 1
        return loaded

    def parse_record(self, record: Any) -> Question:
        """
        Validate one raw record and build a Question from it.

        Args:
            record: One entry of the questions array

        Returns:
            The validated Question

        Raises:
            ValueError: If the record breaks the schema or the Question invariants
        """
        if not isinstance(record, dict):
            raise ValueError("record must be an object")

        for field_name in ("question", "options", "correct"):
            if field_name not in record:
                raise ValueError(f"missing '{field_name}' field")

        text = record["question"]
        if not isinstance(text, str):
            raise ValueError("'question' field must be a string")

        options = record["options"]
        if not isinstance(options, list):
            raise ValueError("'options' field must be an array")
        if not all(isinstance(option, str) for option in options):
            raise ValueError("'options' entries must be strings")

        correct = record["correct"]
        if isinstance(correct, bool) or not isinstance(correct, int):
            raise ValueError("'correct' field must be an integer")
        if not 0 <= correct < len(options):
            raise ValueError(
                f"'correct' index {correct} is out of range for {len(options)} options"
            )

        difficulty = Difficulty.EASY
        if "difficulty" in record:
            parsed = Difficulty.parse(record["difficulty"])
            if parsed is None:
                self.logger.warning(
                    f"Unrecognised difficulty {record['difficulty']!r}, defaulting to easy"
                )
            else:
                difficulty = parsed

        category = Category.GENERAL
        if "category" in record:
            parsed_category = Category.parse(record["category"])
            if parsed_category is None:
                self.logger.debug(
                    f"Unrecognised category {record['category']!r}, defaulting to general"
                )
            else:
                category = parsed_category

        return Question(
            text=text,
            options=tuple(options),
            correct_answer=correct,
            difficulty=difficulty,
            category=category
        )

    def count(self, difficulty: Optional[Difficulty] = None) -> int:
        """Number of questions matching the filter (all if difficulty is None)."""
        return len(self.available(difficulty))

    def available(
        self,
        difficulty: Optional[Difficulty] = None,
        exclude: Collection[Question] = ()
    ) -> List[Question]:
        """
        List questions matching a difficulty filter that are not excluded.

        Args:
            difficulty: Tier to match, or None for any
            exclude: Questions already asked

        Returns:
            Matching questions in bank order
        """
        return [
            question for question in self._questions
            if (difficulty is None or question.difficulty is difficulty)
            and question not in exclude
        ]

    def get_random(self, difficulty: Optional[Difficulty] = None) -> Optional[Question]:
        """
        Draw a random question, repeats allowed.

        Returns:
            A matching question, or None if none match the filter
        """
        return self.get_random_unused(difficulty, ())

    def get_random_unused(
        self,
        difficulty: Optional[Difficulty],
        exclude: Collection[Question]
    ) -> Optional[Question]:
        """
        Draw a random question that has not been asked yet.

        Args:
            difficulty: Tier to match, or None for any
            exclude: Questions already asked in this session

        Returns:
            A matching unused question, or None once the filter is exhausted
        """
        candidates = self.available(difficulty, exclude)
        if not candidates:
            self.logger.info(
                f"No unused questions left for difficulty "
                f"{difficulty.value if difficulty else 'any'} ({len(exclude)} excluded)"
            )
            return None
        return self._rng.choice(candidates)

    def get_loading_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the bank and the last load operation.

        Returns:
            Dictionary with counts per difficulty and any load errors
        """
        return {
            'total_questions': len(self._questions),
            'by_difficulty': {
                tier.value: self.count(tier) for tier in Difficulty
            },
            'has_errors': bool(self.load_errors),
            'error_count': len(self.load_errors),
            'errors': list(self.load_errors),
            'source_path': str(self.source_path) if self.source_path else None
        }
