from buzzer.models import BuzzerEvent, Player, Room


class SessionBroadcaster:
    """Fan-out of room updates over Socket.IO rooms named by room code.

    Callers hold the room lock while broadcasting, so emission order
    matches the order mutations were applied.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def subscribe(self, connection_id: str, code: str) -> None:
        self.socketio.server.enter_room(connection_id, code, namespace=self.namespace)

    def unsubscribe(self, connection_id: str, code: str) -> None:
        self.socketio.server.leave_room(connection_id, code, namespace=self.namespace)

    def send_player(self, connection_id: str, player: Player) -> None:
        self.socketio.emit('player-joined', player.to_dict(), to=connection_id, namespace=self.namespace)

    def broadcast_state(self, room: Room) -> None:
        self.socketio.emit('room-state', room.to_dict(), to=room.code, namespace=self.namespace)

    def broadcast_event(self, room: Room, event: BuzzerEvent) -> None:
        self.socketio.emit('buzzer-pressed', event.to_dict(), to=room.code, namespace=self.namespace)

    def notify_deleted(self, code: str) -> None:
        self.socketio.emit('room-deleted', to=code, namespace=self.namespace)
        self.socketio.close_room(code, namespace=self.namespace)
