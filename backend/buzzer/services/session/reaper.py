import logging
import threading
import time
from typing import List, Optional

from .registry import RoomRegistry

logger = logging.getLogger(__name__)


class RoomReaper:
    """Periodically delete empty rooms older than the TTL.

    - Rooms with at least one player are never touched, whatever their age
    - Each candidate is re-checked under its room lock before deletion
    - start() runs sweeps on a Socket.IO background task until stop()
    """

    def __init__(self, registry: RoomRegistry, socketio=None, ttl_sec: float = 7200, interval_sec: float = 3600):
        self.registry = registry
        self.socketio = socketio
        self.ttl_sec = ttl_sec
        self.interval_sec = interval_sec
        self._stopped = threading.Event()
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._stopped.is_set()

    def sweep(self, now: Optional[float] = None) -> List[str]:
        now = time.time() if now is None else now
        reaped = []
        for room in self.registry.rooms():
            if room.players:
                continue
            with room.lock:
                if room.players or room.age_seconds(now) <= self.ttl_sec:
                    continue
                if self.registry.delete_room(room.code):
                    reaped.append(room.code)
                    logger.info(f"[room-reaped] code={room.code} age={int(room.age_seconds(now))}s")
        return reaped

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._task = self.socketio.start_background_task(self._run)
        logger.info(f"[reaper-start] interval={self.interval_sec}s ttl={self.ttl_sec}s")

    def stop(self) -> None:
        if self._task is None:
            return
        self._stopped.set()
        self._task = None
        logger.info("[reaper-stop]")

    def _run(self) -> None:
        while not self._stopped.wait(self.interval_sec):
            try:
                self.sweep()
            except Exception:
                logger.exception("[reaper-error] sweep failed")
