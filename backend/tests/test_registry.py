import random
import threading

import pytest

from buzzer.errors import InvalidConfig, RoomNotFound
from buzzer.models import ROOM_CODE_ALPHABET
from buzzer.services.session import registry as registry_module


def test_create_room_starts_empty(registry):
    room = registry.create_room(2, 'Alice')
    assert len(room.code) == 6
    assert set(room.code) <= set(ROOM_CODE_ALPHABET)
    assert room.team_count == 2
    assert room.host_name == 'Alice'
    assert room.players == []
    assert room.buzzer_locked is False
    assert room.first_buzz is None
    assert room.buzz_ledger == []
    assert registry.get_room(room.code) is room


def test_codes_are_distinct(registry):
    codes = {registry.create_room(1, 'Host').code for _ in range(200)}
    assert len(codes) == 200
    assert len(registry) == 200


def test_collision_is_retried(registry, monkeypatch):
    candidates = iter(['AAAAAA', 'AAAAAA', 'AAAAAA', 'BBBBBB'])
    monkeypatch.setattr(registry_module, 'generate_room_code', lambda length=6: next(candidates))
    first = registry.create_room(1, 'Host')
    second = registry.create_room(1, 'Host')
    assert first.code == 'AAAAAA'
    assert second.code == 'BBBBBB'


@pytest.mark.parametrize('team_count', [0, -1, None, 'two', 1.5, True])
def test_bad_team_count_is_rejected(registry, team_count):
    with pytest.raises(InvalidConfig):
        registry.create_room(team_count, 'Alice')
    assert len(registry) == 0


def test_blank_host_name_is_rejected(registry):
    with pytest.raises(InvalidConfig):
        registry.create_room(2, '   ')


def test_max_team_count():
    capped = registry_module.RoomRegistry(max_team_count=4)
    assert capped.create_room(4, 'Alice').team_count == 4
    with pytest.raises(InvalidConfig):
        capped.create_room(5, 'Alice')


def test_lookup_is_case_insensitive(registry):
    room = registry.create_room(2, 'Alice')
    assert registry.get_room(room.code.lower()) is room
    assert registry.get_room(f'  {room.code} ') is room


def test_get_room_missing(registry):
    assert registry.get_room('ZZZZZZ') is None
    with pytest.raises(RoomNotFound):
        registry.require_room('ZZZZZZ')


def test_delete_room_is_idempotent(registry):
    room = registry.create_room(2, 'Alice')
    seen = []
    registry.add_delete_listener(lambda code, r: seen.append(code))
    assert registry.delete_room(room.code) is True
    assert registry.delete_room(room.code) is False
    assert registry.get_room(room.code) is None
    assert seen == [room.code]


def test_locked_rejects_deleted_room(registry):
    room = registry.create_room(2, 'Alice')
    registry.delete_room(room.code)
    with pytest.raises(RoomNotFound):
        with registry.locked(room.code):
            pass


@pytest.mark.parametrize('host_name', [None, 7, ['Alice'], {'name': 'Alice'}])
def test_non_string_host_name_is_rejected(registry, host_name):
    with pytest.raises(InvalidConfig):
        registry.create_room(2, host_name)


def test_concurrent_creates_get_distinct_codes(registry, monkeypatch):
    # A tiny alphabet forces collisions between threads
    candidates = ['AAAAAA', 'BBBBBB', 'CCCCCC', 'DDDDDD']
    monkeypatch.setattr(
        registry_module, 'generate_room_code', lambda length=6: random.choice(candidates)
    )
    start = threading.Barrier(len(candidates))
    created = []

    def create():
        start.wait()
        created.append(registry.create_room(2, 'Host').code)

    threads = [threading.Thread(target=create) for _ in candidates]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(created) == candidates
    assert len(registry) == len(candidates)
