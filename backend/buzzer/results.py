from dataclasses import dataclass
from typing import Any, Callable, Union

from buzzer.errors import SessionError


@dataclass(frozen=True)
class Ok:
    value: Any = None

    def to_ack(self, key: str) -> dict:
        return {'success': True, key: self.value}


@dataclass(frozen=True)
class Err:
    kind: str
    message: str

    @classmethod
    def from_error(cls, exc: SessionError) -> 'Err':
        return cls(kind=exc.kind, message=exc.message)

    def to_ack(self) -> dict:
        return {'success': False, 'error': self.message, 'kind': self.kind}


Result = Union[Ok, Err]


def run_command(fn: Callable[..., Any], *args, **kwargs) -> Result:
    """Call an engine operation and tag its outcome."""
    try:
        return Ok(fn(*args, **kwargs))
    except SessionError as exc:
        return Err.from_error(exc)
