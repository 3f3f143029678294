"""Ordered delivery of remote commands over the control channel.

Exactly one command is in flight at a time. The next queued command is
written only after the transport confirms the previous write.
"""

import logging
import threading
from collections import deque
from typing import Callable, Deque, List

from .errors import CommandConversionToStringFailed, TVCommanderError
from .packets import RemoteCommand

_LOGGER = logging.getLogger(__name__)

WriteFunc = Callable[[str, Callable[[], None]], None]


class CommandQueue:
    """FIFO of remote commands waiting to be written."""

    def __init__(
        self,
        write: WriteFunc,
        on_written: Callable[[RemoteCommand], None],
        on_error: Callable[[TVCommanderError], None],
    ):
        """Initialize the queue.

        Args:
            write: Sends text over the transport; calls its second argument
                once the write completed
            on_written: Called with each command after its write completed
            on_error: Called when a command cannot be serialized
        """
        self._write = write
        self._on_written = on_written
        self._on_error = on_error
        self._pending: Deque[RemoteCommand] = deque()
        self._lock = threading.Lock()
        self._in_flight = False
        # Bumped by clear() so completions of abandoned writes are ignored
        self._generation = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def pending(self) -> List[RemoteCommand]:
        """Snapshot of queued commands, head first."""
        with self._lock:
            return list(self._pending)

    def enqueue(self, command: RemoteCommand) -> None:
        """Append a command, starting transmission if nothing is in flight."""
        with self._lock:
            self._pending.append(command)
            count = len(self._pending)
            start = not self._in_flight
            if start:
                self._in_flight = True
            generation = self._generation
        _LOGGER.debug("Queued %s (%d pending)", command.key.value, count)
        if start:
            self._send_head(generation)

    def clear(self) -> None:
        """Drop all queued commands, including one awaiting completion."""
        with self._lock:
            dropped = len(self._pending)
            self._pending.clear()
            self._in_flight = False
            self._generation += 1
        if dropped:
            _LOGGER.info("Abandoned %d queued command(s)", dropped)

    def _send_head(self, generation: int) -> None:
        # Caller owns the in-flight slot; it is released only when the queue drains
        while True:
            with self._lock:
                if generation != self._generation:
                    return
                if not self._pending:
                    self._in_flight = False
                    return
                command = self._pending[0]

            try:
                text = command.to_json()
            except (TypeError, ValueError) as err:
                _LOGGER.warning("Could not serialize %r: %s", command, err)
                with self._lock:
                    if generation != self._generation:
                        return
                    self._pending.popleft()
                self._on_error(CommandConversionToStringFailed(cause=err))
                continue

            self._write(text, lambda: self._on_write_complete(command, generation))
            return

    def _on_write_complete(self, command: RemoteCommand, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._pending or self._pending[0] is not command:
                return
            # The slot stays claimed so enqueues from on_written only append
            self._pending.popleft()
        _LOGGER.debug("Wrote %s", command.key.value)
        self._on_written(command)
        self._send_head(generation)
