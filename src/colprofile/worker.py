"""Background execution of profiling runs.

A run emits PROGRESS messages followed by exactly one RESULT or ERROR
message. ``run_profile_job`` is the transport-independent boundary that
converts every failure into an ERROR message; ``ProfileWorker`` runs jobs
off the caller's thread and delivers their messages through a per-run
channel.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from collections.abc import Callable, Iterator, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from pydantic import ValidationError

from colprofile.config import DEFAULT_CONFIG, ProfilerConfig
from colprofile.engine import compute_profile
from colprofile.models.messages import (
    ErrorMessage,
    ErrorPayload,
    ProfileRequest,
    ProgressMessage,
    ProgressPayload,
    ResultMessage,
    StartMessage,
    is_terminal,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Profile computation failed"

Message = ProgressMessage | ResultMessage | ErrorMessage
TerminalMessage = ResultMessage | ErrorMessage
Emit = Callable[[Message], None]


def error_message(message: str | None) -> ErrorMessage:
    """Build an ERROR message, falling back to the generic text."""
    return ErrorMessage(payload=ErrorPayload(message=message or GENERIC_ERROR_MESSAGE))


def run_profile_job(
    request: ProfileRequest,
    emit: Emit,
    config: ProfilerConfig = DEFAULT_CONFIG,
) -> TerminalMessage:
    """Run one profile computation and emit its messages.

    Args:
    ----
        request: Records, schema descriptor and top-K of the run
        emit: Receives every message of the run, in order
        config: Profiler configuration

    Returns:
    -------
        The terminal RESULT or ERROR message, which has also been emitted

    """

    def report(processed: int, total: int) -> None:
        emit(
            ProgressMessage(
                payload=ProgressPayload(processed_records=processed, total_records=total)
            )
        )

    message: TerminalMessage
    try:
        profile = compute_profile(
            request.records,
            request.schema_,
            request.top_k,
            config=config,
            on_progress=report,
        )
    except Exception as e:
        logger.exception("Profile run failed")
        message = error_message(str(e))
    else:
        message = ResultMessage(payload=profile)

    emit(message)
    return message


def parse_start_message(data: Any) -> ProfileRequest | None:
    """Return the request carried by a raw START message.

    Returns None for anything that is not a START message.

    Raises:
    ------
        ValidationError: If a START message carries a malformed payload

    """
    if not isinstance(data, Mapping) or data.get("type") != "START":
        return None
    return StartMessage.model_validate(
        {"type": "START", "payload": data.get("payload") or {}}
    ).payload


def handle_message(
    data: Any, emit: Emit, config: ProfilerConfig = DEFAULT_CONFIG
) -> TerminalMessage | None:
    """Handle a raw ``{type, payload}`` message synchronously.

    Messages other than START are ignored and return None.
    """
    try:
        request = parse_start_message(data)
    except ValidationError as e:
        logger.warning(f"Rejected malformed START message: {e}")
        message = error_message(f"Invalid profile request: {e}")
        emit(message)
        return message

    if request is None:
        logger.warning(f"Ignoring message: {data!r:.80}")
        return None
    return run_profile_job(request, emit, config)


class ProfileRun:
    """Handle and message channel of one submitted run."""

    def __init__(self, run_id: int, total_records: int) -> None:
        self.run_id = run_id
        self.total_records = total_records
        self.future: Future[TerminalMessage] | None = None
        self._channel: queue.Queue[Message | None] = queue.Queue()
        self._discarded = threading.Event()
        self._terminal: TerminalMessage | None = None

    @property
    def discarded(self) -> bool:
        return self._discarded.is_set()

    @property
    def done(self) -> bool:
        return self._terminal is not None

    def post(self, message: Message) -> None:
        """Deliver a message unless the run was discarded."""
        if self.discarded:
            return
        self._channel.put(message)

    def discard(self) -> None:
        """Drop all further messages and release blocked consumers."""
        if self.discarded:
            return
        self._discarded.set()
        if self.future is not None:
            self.future.cancel()
        self._channel.put(None)
        logger.debug(f"Discarded profile run {self.run_id}")

    def messages(self, timeout: float | None = None) -> Iterator[Message]:
        """Yield messages in order until the terminal message.

        Ends early, without a terminal message, if the run is discarded.

        Raises:
        ------
            TimeoutError: If no message arrives within ``timeout`` seconds

        """
        while self._terminal is None:
            if self.discarded:
                return
            try:
                message = self._channel.get(timeout=timeout)
            except queue.Empty as e:
                msg = f"No message from profile run {self.run_id} within {timeout}s"
                raise TimeoutError(msg) from e
            if message is None:
                return
            if is_terminal(message):
                self._terminal = message
            yield message

    def wait(self, timeout: float | None = None) -> TerminalMessage | None:
        """Block until the run finishes and return its terminal message.

        Returns None if the run was discarded first.
        """
        for _ in self.messages(timeout):
            pass
        return self._terminal


class ProfileWorker:
    """Runs profiling jobs on a dedicated background thread.

    Only the most recently started run is live: starting a new run discards
    the previous one, whose remaining messages are dropped.
    """

    def __init__(self, config: ProfilerConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="colprofile-worker"
        )
        self._lock = threading.Lock()
        self._run_ids = itertools.count(1)
        self._current: ProfileRun | None = None

    @property
    def current(self) -> ProfileRun | None:
        return self._current

    def start(
        self,
        records: list[Mapping[str, Any] | None] | None = None,
        schema: Mapping[str, Any] | None = None,
        top_k: Any = None,
    ) -> ProfileRun:
        """Start profiling ``records`` in the background."""
        request = ProfileRequest(records=records, schema=schema, top_k=top_k)
        return self.submit(request)

    def submit(self, request: ProfileRequest) -> ProfileRun:
        """Start a run for an already-built request."""
        with self._lock:
            self._discard_current()
            run = ProfileRun(next(self._run_ids), len(request.records))
            self._current = run
            run.future = self._executor.submit(
                run_profile_job, request, run.post, self.config
            )
        logger.info(f"Started profile run {run.run_id} ({run.total_records} records)")
        return run

    def post_message(self, data: Any) -> ProfileRun | None:
        """Accept a raw ``{type, payload}`` message.

        START messages start a new run; other messages are ignored. A START
        message with a malformed payload yields a run that has already failed.
        """
        try:
            request = parse_start_message(data)
        except ValidationError as e:
            logger.warning(f"Rejected malformed START message: {e}")
            with self._lock:
                self._discard_current()
                run = ProfileRun(next(self._run_ids), 0)
                self._current = run
            run.post(error_message(f"Invalid profile request: {e}"))
            return run

        if request is None:
            logger.warning(f"Ignoring message: {data!r:.80}")
            return None
        return self.submit(request)

    def stop(self) -> None:
        """Discard the current run, if any."""
        with self._lock:
            self._discard_current()

    def shutdown(self, wait: bool = True) -> None:
        """Discard the current run and stop the background thread."""
        self.stop()
        self._executor.shutdown(wait=wait)

    def _discard_current(self) -> None:
        if self._current is not None:
            self._current.discard()
            self._current = None

    def __enter__(self) -> ProfileWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "ProfileRun",
    "ProfileWorker",
    "error_message",
    "handle_message",
    "parse_start_message",
    "run_profile_job",
]
