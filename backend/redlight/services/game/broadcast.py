class SocketIOBroadcaster:
    """Delivers session messages to Socket.IO rooms.

    ``to`` is either a named room (the display) or a connection sid, which
    Socket.IO treats as a private room.
    """

    def __init__(self, socketio, namespace: str = '/ws'):
        self._socketio = socketio
        self._namespace = namespace

    def send(self, message, to: str) -> None:
        payload = message.payload()
        args = () if payload is None else (payload,)
        self._socketio.emit(message.event, *args, to=to, namespace=self._namespace)
