"""One session's view of the pipes: local message buffers and waiting."""

from __future__ import annotations

import os
import time
from typing import Any, Callable, List, Optional, Union

from .message import ItemType, MessageBuffer
from .pipes import PipeError, PipeInfo, PipeRegistry, _require_name

RESULT_DATA = 0
RESULT_WAIT = 1

ONE_YEAR = 60 * 60 * 24 * 365
_POLL_INTERVAL = 0.01


class PipeSession:
    """Packs, sends, receives and unpacks messages for one user."""

    def __init__(
        self,
        registry: PipeRegistry,
        user: Optional[str] = None,
        lock_timeout: float = 10.0,
    ) -> None:
        self.registry = registry
        self.user = user
        self.lock_timeout = lock_timeout
        self.sid = registry.new_session_id()
        self._output: Optional[MessageBuffer] = None
        self._input: Optional[MessageBuffer] = None

    @staticmethod
    def _poll(timeout: float, attempt: Callable[[], bool]) -> bool:
        deadline = time.monotonic() + timeout
        while True:
            if attempt():
                return True
            now = time.monotonic()
            if now >= deadline or timeout == 0:
                return False
            time.sleep(min(_POLL_INTERVAL, deadline - now))

    def pack_message(self, value: Any) -> None:
        """Add ``value`` to the local outgoing message."""
        if self._output is None:
            self._output = MessageBuffer()
        self._output.pack(value)

    def unpack_message(self, item_type: Union[ItemType, int]) -> Optional[Any]:
        """Take the next item of the received message; None when none is left."""
        if self._input is None or len(self._input) == 0:
            return None
        value = self._input.unpack(item_type)
        if len(self._input) == 0:
            self._input = None
        return value

    def next_item_type(self) -> ItemType:
        """Return the type of the next received item."""
        if self._input is None:
            return ItemType.NO_MORE_ITEMS
        return self._input.next_item_type()

    def send_message(
        self,
        pipe_name: str,
        timeout: Optional[float] = None,
        maxpipesize: Optional[int] = None,
    ) -> int:
        """Send the local message; return RESULT_DATA, or RESULT_WAIT on timeout.

        On success the local message is cleared; after a timeout it is kept.
        """
        pipe_name = _require_name(pipe_name)
        if self._output is None:
            self._output = MessageBuffer()
        if timeout is None:
            timeout = ONE_YEAR
        self._input = None
        message = self._output

        sent = self._poll(
            timeout,
            lambda: self.registry.send(pipe_name, message, maxpipesize, self.user),
        )
        if not sent:
            return RESULT_WAIT
        self._output = MessageBuffer()
        return RESULT_DATA

    def receive_message(self, pipe_name: str, timeout: Optional[float] = None) -> int:
        """Wait for a message; return RESULT_DATA, or RESULT_WAIT on timeout."""
        pipe_name = _require_name(pipe_name)
        if timeout is None:
            timeout = ONE_YEAR
        self._input = None

        def attempt() -> bool:
            message = self.registry.receive(pipe_name, self.user)
            if message is None:
                return False
            self._input = message
            return True

        return RESULT_DATA if self._poll(timeout, attempt) else RESULT_WAIT

    def unique_session_name(self) -> str:
        """Return a name unique to this session."""
        return f"PG$PIPE${self.sid}${os.getpid()}"

    def list_pipes(self) -> List[PipeInfo]:
        """Describe every existing pipe."""
        return self.registry.list_pipes()

    def create_pipe(
        self,
        pipe_name: str,
        limit: Optional[int] = None,
        private: Optional[bool] = False,
    ) -> None:
        """Register a pipe, waiting up to ``lock_timeout`` for a free slot."""
        pipe_name = _require_name(pipe_name)
        created = self._poll(
            self.lock_timeout,
            lambda: self.registry.create_pipe(
                pipe_name, limit, bool(private), self.user
            ),
        )
        if not created:
            raise PipeError(
                "lock request error",
                "Failed exclusive locking of shared memory.",
                "Restart the server.",
            )

    def reset_buffer(self) -> None:
        """Discard the local outgoing and incoming messages."""
        self._output = None
        self._input = None

    def purge(self, pipe_name: str) -> None:
        """Drop all messages of the pipe."""
        self.registry.purge(pipe_name, self.user)

    def remove_pipe(self, pipe_name: str) -> None:
        """Remove the pipe."""
        self.registry.remove_pipe(pipe_name, self.user)