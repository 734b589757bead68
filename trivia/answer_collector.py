"""
Console input collection and answer classification.

Input is read straight from the stream's file descriptor with select() so a
round can wait for a line in short slices while the countdown keeps running.
"""
import logging
import os
import re
import select
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")
_READ_CHUNK_SIZE = 4096
_MAX_LINE_BYTES = 1024


class InputKind(Enum):
    """Classification of one poll for player input."""
    CHOICE = "choice"
    QUIT = "quit"
    INVALID = "invalid"
    PENDING = "pending"


@dataclass(frozen=True)
class PollResult:
    kind: InputKind
    choice: Optional[int] = None
    raw: str = ""


def parse_integer(text: str) -> Optional[int]:
    """
    Parse a whole string as a base-10 integer.

    Partial parses are rejected: "3", "+3" and "-3" parse, "3a", "3.0" and
    "1_000" do not.

    Returns:
        The integer value, or None if the string is not an integer
    """
    if not text or not _INTEGER_PATTERN.match(text):
        return None
    return int(text)


def classify_input(text: str, option_count: int) -> PollResult:
    """
    Classify one line of player input.

    Args:
        text: Raw line as typed
        option_count: Number of options on the current question

    Returns:
        QUIT for anything starting with q/Q, CHOICE for an option number in
        range, INVALID for everything else
    """
    sanitized = text.strip()

    if sanitized[:1] in ("q", "Q"):
        return PollResult(InputKind.QUIT, raw=sanitized)

    value = parse_integer(sanitized)
    if value is not None and 1 <= value <= option_count:
        return PollResult(InputKind.CHOICE, choice=value, raw=sanitized)

    return PollResult(InputKind.INVALID, raw=sanitized)


class AnswerCollector:
    """Reads player input lines without blocking past a caller-chosen timeout."""

    def __init__(self, stream=None, encoding: str = "utf-8"):
        """
        Initialize the collector.

        Args:
            stream: Any object with a fileno(); defaults to sys.stdin
            encoding: Encoding used to decode raw input bytes
        """
        self.logger = logging.getLogger(__name__)
        self._stream = stream if stream is not None else sys.stdin
        self._encoding = encoding
        self._buffer = b""
        self._pending_lines: List[str] = []
        self._eof = False
        self._discarding = False

    @property
    def at_eof(self) -> bool:
        """True once the input stream is closed and every buffered line is consumed."""
        return self._eof and not self._pending_lines and not self._buffer

    def poll_nonblocking(self, timeout: float, option_count: int) -> PollResult:
        """
        Check for a complete input line, waiting at most ``timeout`` seconds.

        Args:
            timeout: Maximum seconds to wait for input
            option_count: Number of options on the current question

        Returns:
            PENDING if no line was ready in time, otherwise the classified line
        """
        line = self._next_line(timeout)
        if line is None:
            return PollResult(InputKind.PENDING)
        return classify_input(line, option_count)

    def read_line(self) -> Optional[str]:
        """
        Block until a full line of input is available.

        Returns:
            The line without its trailing newline, or None at end of input
        """
        while True:
            line = self._next_line(None)
            if line is not None:
                return line
            if self.at_eof:
                return None

    def wait_for_enter(self) -> None:
        """Wait for the player to press Enter, ignoring what was typed."""
        self.read_line()

    def _next_line(self, timeout: Optional[float]) -> Optional[str]:
        if self._pending_lines:
            return self._pending_lines.pop(0)

        if self._eof:
            # A closed stream is always "readable"; sleep instead of spinning.
            if timeout:
                time.sleep(timeout)
            return None

        chunk = self._read_available(timeout)
        if chunk is None:
            return None

        if chunk == b"":
            self._eof = True
            self.logger.info("Input stream reached end of file")
            if self._buffer and not self._discarding:
                self._pending_lines.append(self._decode(self._buffer))
            self._buffer = b""
            self._discarding = False
        else:
            self._buffer += chunk
            *complete, self._buffer = self._buffer.split(b"\n")
            if complete and self._discarding:
                # Tail of a line that was already dropped.
                complete.pop(0)
                self._discarding = False
            for raw in complete:
                if len(raw) > _MAX_LINE_BYTES:
                    self._warn_long_line()
                else:
                    self._pending_lines.append(self._decode(raw))
            if len(self._buffer) > _MAX_LINE_BYTES:
                if not self._discarding:
                    self._warn_long_line()
                self._buffer = b""
                self._discarding = True

        if self._pending_lines:
            return self._pending_lines.pop(0)
        return None

    def _read_available(self, timeout: Optional[float]) -> Optional[bytes]:
        """Return bytes read from the stream, b"" at EOF, or None if nothing arrived."""
        try:
            fd = self._stream.fileno()
            ready, _, _ = select.select([fd], [], [], timeout)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Failed to poll input stream: {e}")
            return self._read_failed(timeout)

        if not ready:
            return None

        try:
            return os.read(fd, _READ_CHUNK_SIZE)
        except OSError as e:
            self.logger.warning(f"Failed to read input stream: {e}")
            return self._read_failed(timeout)

    def _read_failed(self, timeout: Optional[float]) -> Optional[bytes]:
        # A blocking read that fails would otherwise be retried forever.
        if timeout is None:
            return b""
        time.sleep(timeout)
        return None

    def _warn_long_line(self) -> None:
        self.logger.warning(f"Discarding input line longer than {_MAX_LINE_BYTES} bytes")

    def _decode(self, raw: bytes) -> str:
        return raw.decode(self._encoding, errors="replace").rstrip("\r")
