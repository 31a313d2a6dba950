import threading

import pytest

from tictactoe.services.broadcast import BroadcastHub, STATE_EVENT
from tictactoe.services.games import GameState, apply_move
from tictactoe.services.storage import PersistenceError

from conftest import FakeConnection


def make_hub(states=None):
    states = states if states is not None else {}
    return BroadcastHub(states.get)


def test_attach_sends_current_state_immediately():
    state = apply_move(GameState(), 4)
    hub = make_hub({'r1': state})
    conn = FakeConnection('a')
    hub.attach('r1', conn)
    assert conn.sent == [(STATE_EVENT, state.to_dict())]
    assert hub.observers('r1') == {conn}


def test_attach_to_unknown_room_sends_nothing():
    hub = make_hub()
    conn = FakeConnection('a')
    hub.attach('ghost', conn)
    assert conn.sent == []


def test_broadcast_reaches_every_observer_of_the_room():
    hub = make_hub()
    a, b, other = FakeConnection('a'), FakeConnection('b'), FakeConnection('c')
    hub.attach('r1', a)
    hub.attach('r1', b)
    hub.attach('r2', other)
    state = apply_move(GameState(), 0)
    assert hub.broadcast('r1', state) == 2
    assert a.sent == [(STATE_EVENT, state.to_dict())]
    assert b.sent == [(STATE_EVENT, state.to_dict())]
    assert other.sent == []


def test_closed_and_failing_observers_are_skipped():
    hub = make_hub()
    closed = FakeConnection('closed', open_=False)
    broken = FakeConnection('broken', fail=True)
    healthy = FakeConnection('healthy')
    for conn in (closed, broken, healthy):
        hub.attach('r1', conn)
    assert hub.broadcast('r1', GameState()) == 1
    assert closed.sent == []
    assert len(healthy.sent) == 1


def test_detach_removes_empty_rooms():
    hub = make_hub()
    a, b = FakeConnection('a'), FakeConnection('b')
    hub.attach('r1', a)
    hub.attach('r1', b)
    hub.detach('r1', a)
    assert hub.observers('r1') == {b}
    hub.detach('r1', b)
    assert 'r1' not in hub.rooms()
    # detaching again is harmless
    hub.detach('r1', b)


def test_detach_all_and_forget():
    hub = make_hub()
    a, b = FakeConnection('a'), FakeConnection('b')
    hub.attach('r1', a)
    hub.attach('r2', a)
    hub.attach('r2', b)
    hub.detach_all(a)
    assert hub.rooms() == {'r2'}
    hub.forget('r2')
    assert hub.rooms() == set()
    assert hub.broadcast('r2', GameState()) == 0


def test_failed_lookup_leaves_connection_detached():
    def lookup(room_id):
        raise PersistenceError('store unreadable')

    hub = BroadcastHub(lookup)
    conn = FakeConnection('a')
    with pytest.raises(PersistenceError):
        hub.attach('r1', conn)
    assert hub.observers('r1') == set()
    assert 'r1' not in hub.rooms()
    hub.broadcast('r1', GameState())
    assert conn.sent == []


def test_attach_never_sends_state_older_than_a_broadcast():
    old = GameState()
    new = apply_move(GameState(), 4)

    # A move lands and is broadcast while the joining observer reads the room
    def lookup(room_id):
        hub.broadcast(room_id, new)
        return old

    hub = BroadcastHub(lookup)
    conn = FakeConnection('a')
    hub.attach('r1', conn)
    assert [payload['board'][4] for _event, payload in conn.sent] == ['X']
    assert conn.sent[-1] == (STATE_EVENT, new.to_dict())


def test_attach_and_broadcast_from_threads_end_on_latest_state():
    old = GameState()
    new = apply_move(GameState(), 4)
    looked_up = threading.Event()
    broadcast_done = threading.Event()

    def lookup(room_id):
        looked_up.set()
        broadcast_done.wait(timeout=5)
        return old

    hub = BroadcastHub(lookup)
    conn = FakeConnection('a')
    joiner = threading.Thread(target=hub.attach, args=('r1', conn))
    joiner.start()
    assert looked_up.wait(timeout=5)
    hub.broadcast('r1', new)
    broadcast_done.set()
    joiner.join(timeout=5)
    assert conn.sent[-1] == (STATE_EVENT, new.to_dict())
