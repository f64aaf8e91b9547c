from buzzer.errors import RoomNotFound, Unauthorized
from buzzer.results import Err, Ok, run_command


def test_ok_ack_uses_key():
    assert Ok({'code': 'ABC123'}).to_ack('room') == {'success': True, 'room': {'code': 'ABC123'}}


def test_err_ack_carries_kind_and_message():
    err = Err.from_error(Unauthorized('Only the host can reset the buzzer'))
    assert err.to_ack() == {
        'success': False,
        'error': 'Only the host can reset the buzzer',
        'kind': 'unauthorized',
    }


def test_run_command_tags_outcome():
    assert run_command(lambda x: x * 2, 21) == Ok(42)

    def missing():
        raise RoomNotFound()

    assert run_command(missing) == Err(kind='room_not_found', message='Room not found')
