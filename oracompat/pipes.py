"""Named pipes shared by sessions: bounded queues of messages."""

from __future__ import annotations

import copy
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from .message import MAX_PIPES, SHMEMMSGSZ, MessageBuffer

_NO_LIMIT = -1


class PipeError(Exception):
    """An error of the pipe package, with an optional detail and hint."""

    def __init__(
        self, message: str, detail: Optional[str] = None, hint: Optional[str] = None
    ) -> None:
        super().__init__(f"{message}: {detail}" if detail else message)
        self.message = message
        self.detail = detail
        self.hint = hint


@dataclass(frozen=True)
class PipeInfo:
    """A snapshot of one pipe as shown by :meth:`PipeRegistry.list_pipes`."""

    name: str
    items: int
    size: int
    limit: Optional[int]
    private: bool
    owner: Optional[str]


@dataclass
class _Pipe:
    name: str
    registered: bool = False
    creator: Optional[str] = None
    limit: int = _NO_LIMIT
    size: int = 0
    items: Deque[MessageBuffer] = field(default_factory=deque)


def _require_name(pipe_name: Optional[str]) -> str:
    if pipe_name is None:
        raise ValueError("pipe name is NULL: Pipename may not be NULL.")
    return pipe_name


class PipeRegistry:
    """The shared table of pipes.

    It holds at most ``max_pipes`` pipes, and the messages stored in all
    pipes together may take at most ``capacity`` bytes. Every operation is
    guarded by one lock, so sessions in several threads may share it.
    """

    def __init__(self, max_pipes: int = MAX_PIPES, capacity: int = SHMEMMSGSZ) -> None:
        self.capacity = capacity
        self._slots: List[Optional[_Pipe]] = [None] * max_pipes
        self._sid = 0
        self._lock = threading.RLock()

    def _find(
        self, pipe_name: str, user: Optional[str], create: bool
    ) -> Tuple[Optional[_Pipe], bool]:
        for pipe in self._slots:
            if pipe is not None and pipe.name == pipe_name:
                if pipe.creator is not None and pipe.creator != user:
                    raise PipeError(
                        "insufficient privilege", "Insufficient privilege to access pipe"
                    )
                return pipe, False
        if not create:
            return None, False
        for index, pipe in enumerate(self._slots):
            if pipe is None:
                created = _Pipe(pipe_name)
                self._slots[index] = created
                return created, True
        return None, False

    def _release(self, pipe: _Pipe) -> None:
        for index, slot in enumerate(self._slots):
            if slot is pipe:
                self._slots[index] = None
                return

    def _used(self) -> int:
        return sum(pipe.size for pipe in self._slots if pipe is not None)

    def send(
        self,
        pipe_name: str,
        message: Optional[MessageBuffer] = None,
        limit: Optional[int] = None,
        user: Optional[str] = None,
    ) -> bool:
        """Append a copy of ``message`` to the pipe, creating it if needed.

        Without a message the pipe is only registered. A given ``limit``
        raises the pipe's item limit. Returns False when the pipe is full,
        memory is exhausted or no pipe slot is free.
        """
        pipe_name = _require_name(pipe_name)
        with self._lock:
            pipe, created = self._find(pipe_name, user, True)
            if pipe is None:
                return False
            if created:
                pipe.registered = message is None
            if limit is not None and (created or pipe.limit < limit):
                pipe.limit = limit
            if message is None:
                return True

            stored = copy.copy(message)
            full = pipe.limit != _NO_LIMIT and len(pipe.items) >= pipe.limit
            if not full and self._used() + stored.size <= self.capacity:
                pipe.items.append(stored)
                pipe.size += stored.size
                return True
            if created:
                self._release(pipe)
            return False

    def receive(
        self, pipe_name: str, user: Optional[str] = None
    ) -> Optional[MessageBuffer]:
        """Remove and return the oldest message, or None if there is none.

        An implicit pipe is dropped once its last message is taken.
        """
        pipe_name = _require_name(pipe_name)
        with self._lock:
            pipe, created = self._find(pipe_name, user, True)
            if pipe is None or created or not pipe.items:
                return None
            message = pipe.items.popleft()
            pipe.size -= message.size
            if not pipe.items and not pipe.registered:
                self._release(pipe)
            return message

    def create_pipe(
        self,
        pipe_name: str,
        limit: Optional[int] = None,
        private: bool = False,
        user: Optional[str] = None,
    ) -> bool:
        """Register a pipe explicitly; a private pipe belongs to ``user``.

        Returns False when no pipe slot is free.
        """
        pipe_name = _require_name(pipe_name)
        if private and user is None:
            raise ValueError("a private pipe needs an owner")
        with self._lock:
            pipe, created = self._find(pipe_name, user, True)
            if pipe is None:
                return False
            if not created:
                raise PipeError("pipe creation error", "Pipe is registered.")
            if private:
                pipe.creator = user
            pipe.limit = _NO_LIMIT if limit is None else limit
            pipe.registered = True
            return True

    def _remove(self, pipe_name: str, user: Optional[str], purge: bool) -> None:
        pipe_name = _require_name(pipe_name)
        with self._lock:
            pipe, _ = self._find(pipe_name, user, False)
            if pipe is None:
                return
            pipe.items.clear()
            pipe.size = 0
            if not (purge and pipe.registered):
                self._release(pipe)

    def purge(self, pipe_name: str, user: Optional[str] = None) -> None:
        """Drop all messages; an implicit pipe is removed as well."""
        self._remove(pipe_name, user, purge=True)

    def remove_pipe(self, pipe_name: str, user: Optional[str] = None) -> None:
        """Remove the pipe and its messages, if it exists."""
        self._remove(pipe_name, user, purge=False)

    def list_pipes(self) -> List[PipeInfo]:
        """Describe every existing pipe, in slot order."""
        with self._lock:
            return [
                PipeInfo(
                    name=pipe.name,
                    items=len(pipe.items),
                    size=pipe.size,
                    limit=None if pipe.limit == _NO_LIMIT else pipe.limit,
                    private=pipe.creator is not None,
                    owner=pipe.creator,
                )
                for pipe in self._slots
                if pipe is not None
            ]

    def new_session_id(self) -> int:
        """Return a new session number, counting from 1."""
        with self._lock:
            self._sid += 1
            return self._sid