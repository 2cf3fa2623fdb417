import datetime
import os
import threading
from decimal import Decimal

import pytest

from oracompat.message import ItemType
from oracompat.pipes import PipeError, PipeRegistry
from oracompat.session import RESULT_DATA, RESULT_WAIT, PipeSession


@pytest.fixture
def pair():
    registry = PipeRegistry()
    return PipeSession(registry), PipeSession(registry)


def test_round_trip_between_sessions(pair):
    sender, receiver = pair
    day = datetime.date(2024, 5, 17)
    sender.pack_message("text")
    sender.pack_message(Decimal("3.5"))
    sender.pack_message(day)
    assert sender.send_message("p") == RESULT_DATA
    assert receiver.receive_message("p", 0) == RESULT_DATA
    assert receiver.next_item_type() is ItemType.VARCHAR
    assert receiver.unpack_message(ItemType.VARCHAR) == "text"
    assert receiver.next_item_type() is ItemType.NUMBER
    assert receiver.unpack_message(ItemType.NUMBER) == Decimal("3.5")
    assert receiver.unpack_message(ItemType.DATE) == day
    assert receiver.next_item_type() is ItemType.NO_MORE_ITEMS
    assert receiver.unpack_message(ItemType.VARCHAR) is None


def test_unpack_wrong_type(pair):
    sender, receiver = pair
    sender.pack_message("text")
    sender.send_message("p")
    receiver.receive_message("p", 0)
    with pytest.raises(TypeError):
        receiver.unpack_message(ItemType.DATE)


def test_receive_timeout(pair):
    _, receiver = pair
    assert receiver.receive_message("empty", 0) == RESULT_WAIT
    assert receiver.unpack_message(ItemType.VARCHAR) is None


def test_send_timeout_keeps_message(pair):
    sender, receiver = pair
    sender.create_pipe("p", limit=1)
    sender.pack_message("one")
    sender.send_message("p")
    sender.pack_message("two")
    assert sender.send_message("p", 0) == RESULT_WAIT
    sender.purge("p")
    assert sender.send_message("p", 0) == RESULT_DATA
    receiver.receive_message("p", 0)
    assert receiver.unpack_message(ItemType.VARCHAR) == "two"


def test_send_clears_local_message(pair):
    sender, receiver = pair
    sender.pack_message("once")
    sender.send_message("p")
    sender.send_message("p")
    receiver.receive_message("p", 0)
    receiver.receive_message("p", 0)
    assert receiver.next_item_type() is ItemType.NO_MORE_ITEMS


def test_reset_buffer(pair):
    sender, receiver = pair
    sender.pack_message("dropped")
    sender.reset_buffer()
    sender.send_message("p")
    assert receiver.receive_message("p", 0) == RESULT_DATA
    assert receiver.unpack_message(ItemType.VARCHAR) is None


def test_waiting_receive_gets_message(pair):
    sender, receiver = pair
    results = []
    thread = threading.Thread(
        target=lambda: results.append(receiver.receive_message("p", 5))
    )
    thread.start()
    sender.pack_message("hi")
    sender.send_message("p")
    thread.join(10)
    assert results == [RESULT_DATA]
    assert receiver.unpack_message(ItemType.VARCHAR) == "hi"


def test_unique_session_name(pair):
    first, second = pair
    name = first.unique_session_name()
    assert name.startswith("PG$PIPE$")
    assert name.endswith(f"${os.getpid()}")
    assert name != second.unique_session_name()


def test_private_pipe_across_users():
    registry = PipeRegistry()
    owner = PipeSession(registry, user="alice")
    other = PipeSession(registry, user="bob")
    owner.create_pipe("mine", private=True)
    other.pack_message("x")
    with pytest.raises(PipeError):
        other.send_message("mine", 0)
    assert owner.list_pipes()[0].owner == "alice"


def test_create_pipe_without_free_slot():
    registry = PipeRegistry(max_pipes=1)
    session = PipeSession(registry, lock_timeout=0)
    session.create_pipe("a")
    with pytest.raises(PipeError) as info:
        session.create_pipe("b")
    assert info.value.message == "lock request error"


def test_remove_pipe(pair):
    sender, _ = pair
    sender.create_pipe("p")
    sender.remove_pipe("p")
    assert sender.list_pipes() == []


def test_null_pipe_name(pair):
    sender, _ = pair
    with pytest.raises(ValueError):
        sender.send_message(None)
    with pytest.raises(ValueError):
        sender.receive_message(None)