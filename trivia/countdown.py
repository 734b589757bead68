"""
Per-question countdown running on its own thread.

The ticking thread only decrements the shared counter and raises the expiry
flag. Everything it touches lives behind a single lock, and stop() joins the
thread so no tick can land after the caller has moved on to the next question.
"""
import logging
import threading
import time
from typing import Optional

logger = logging.getLogger(__name__)


class CountdownLifecycleLogger:
    """Structured logging for countdown lifecycle events."""

    @staticmethod
    def log_start(name: str, duration: int) -> None:
        logger.info(
            f"Countdown lifecycle: START - {name}, Duration {duration}s",
            extra={
                'event_type': 'countdown_start',
                'countdown': name,
                'duration': duration,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_tick(name: str, remaining: int, total: int) -> None:
        """Log tick events (throttled to avoid spam)."""
        if remaining % 10 == 0 or remaining <= 5:
            progress_percent = ((total - remaining) / total) * 100 if total else 100.0
            logger.debug(
                f"Countdown lifecycle: TICK - {name}, Remaining {remaining}s ({progress_percent:.1f}% complete)",
                extra={
                    'event_type': 'countdown_tick',
                    'countdown': name,
                    'remaining': remaining,
                    'total': total,
                    'progress_percent': progress_percent,
                    'timestamp': time.time()
                }
            )

    @staticmethod
    def log_completion(name: str, completion_type: str, total: int, remaining: int) -> None:
        """Log countdown completion (natural expiry or stop)."""
        logger.info(
            f"Countdown lifecycle: COMPLETED - {name}, Type {completion_type}, "
            f"Duration {total}s, Remaining {remaining}s",
            extra={
                'event_type': 'countdown_completed',
                'countdown': name,
                'completion_type': completion_type,
                'total': total,
                'remaining': remaining,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_state_transition(name: str, from_state: str, to_state: str, reason: str = None) -> None:
        logger.debug(
            f"Countdown lifecycle: STATE_TRANSITION - {name}, {from_state} -> {to_state}" +
            (f" ({reason})" if reason else ""),
            extra={
                'event_type': 'countdown_state_transition',
                'countdown': name,
                'from_state': from_state,
                'to_state': to_state,
                'reason': reason,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_error(name: str, error_type: str, error_message: str, operation: str) -> None:
        logger.error(
            f"Countdown lifecycle: ERROR - {name}, Operation {operation}, Type {error_type}: {error_message}",
            extra={
                'event_type': 'countdown_error',
                'countdown': name,
                'error_type': error_type,
                'error_message': error_message,
                'operation': operation,
                'timestamp': time.time()
            }
        )


class Countdown:
    """
    Cancellable countdown that can be polled from another thread.

    remaining(), is_expired() and is_running() are safe to call while the
    countdown ticks. A countdown must be reset (or started with a fresh
    duration) before it is reused for another question.
    """

    TICK_INTERVAL = 1.0

    def __init__(self, name: str = "question", tick_interval: float = TICK_INTERVAL):
        """
        Initialize the countdown.

        Args:
            name: Label used in log records
            tick_interval: Seconds between decrements; one second in play
        """
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")

        self._name = name
        self._tick_interval = tick_interval
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self._total = 0
        self._remaining = 0
        self._running = False
        self._expired = False

    def start(self, duration: Optional[int] = None) -> bool:
        """
        Begin counting down on a separate thread.

        Args:
            duration: Seconds to count down from; when omitted the duration
                set by the last reset() is used

        Returns:
            True if the countdown started, False if it was already running

        Raises:
            ValueError: If no positive duration is available
        """
        with self._lock:
            if self._running:
                CountdownLifecycleLogger.log_error(
                    self._name, "already_running", "start requested while running", "start"
                )
                return False

            if duration is not None:
                if duration <= 0:
                    raise ValueError("Countdown duration must be positive")
                self._total = duration
                self._remaining = duration
            elif self._remaining <= 0:
                raise ValueError("Countdown has no time left; reset it with a positive duration")

            self._expired = False
            self._running = True
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run,
                name=f"countdown-{self._name}",
                daemon=True
            )
            total = self._total

        CountdownLifecycleLogger.log_start(self._name, total)
        self._thread.start()
        return True

    def _run(self) -> None:
        completion_type = "stopped"
        try:
            while not self._stop_event.wait(self._tick_interval):
                with self._lock:
                    if not self._running:
                        break
                    self._remaining = max(self._remaining - 1, 0)
                    remaining, total = self._remaining, self._total
                    if remaining == 0:
                        self._expired = True
                        self._running = False
                        completion_type = "natural_expiry"

                CountdownLifecycleLogger.log_tick(self._name, remaining, total)
                if remaining == 0:
                    break
        except Exception as e:
            CountdownLifecycleLogger.log_error(self._name, "tick_error", str(e), "_run")
            raise
        finally:
            with self._lock:
                self._running = False
                remaining, total = self._remaining, self._total
            CountdownLifecycleLogger.log_completion(self._name, completion_type, total, remaining)

    def stop(self) -> bool:
        """
        Halt the countdown and wait for its thread to exit.

        Returns:
            True if a running countdown was stopped, False if it was idle
        """
        with self._lock:
            thread = self._thread
            self._thread = None
            was_running = self._running
            self._running = False

        if thread is None:
            return was_running

        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()

        if was_running:
            CountdownLifecycleLogger.log_state_transition(
                self._name, "running", "stopped", "stop requested"
            )
        return was_running

    def reset(self, duration: int) -> None:
        """
        Stop any running countdown and prepare it for a new question.

        Args:
            duration: Seconds for the next countdown
        """
        if duration <= 0:
            raise ValueError("Countdown duration must be positive")

        self.stop()
        with self._lock:
            self._total = duration
            self._remaining = duration
            self._expired = False
        CountdownLifecycleLogger.log_state_transition(
            self._name, "idle", "reset", f"duration {duration}s"
        )

    def remaining(self) -> int:
        """Seconds left, clamped at zero."""
        with self._lock:
            return self._remaining

    def is_expired(self) -> bool:
        """True once the countdown has run down to zero, until the next reset."""
        with self._lock:
            return self._expired

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def total(self) -> int:
        with self._lock:
            return self._total
