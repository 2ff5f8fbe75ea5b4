from flask import current_app, request
from flask_socketio import join_room

from redlight import socketio
from redlight.messages import (
    Disconnect, HoldEnd, HoldStart, JoinDisplay, JoinGame, KickPlayer, ResetLobby, StartGame,
)


def _session():
    return current_app.extensions['redlight']


def _get_sid() -> str:
    # request.sid only exists inside Socket.IO handlers
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    current_app.logger.info(f"[socket-closed] sid={_get_sid()} reason={reason}")
    _session().dispatch(_get_sid(), Disconnect())


def handle_join_tv(data=None):
    join_room(current_app.config['DISPLAY_ROOM'])
    _session().dispatch(_get_sid(), JoinDisplay())


def handle_join_game(data=None):
    _session().dispatch(_get_sid(), JoinGame.from_payload(data))


def handle_hold_start(data=None):
    _session().dispatch(_get_sid(), HoldStart())


def handle_hold_end(data=None):
    _session().dispatch(_get_sid(), HoldEnd())


def handle_start_game(data=None):
    _session().dispatch(_get_sid(), StartGame())


def handle_reset_lobby(data=None):
    _session().dispatch(_get_sid(), ResetLobby())


def handle_kick_player(data=None):
    _session().dispatch(_get_sid(), KickPlayer.from_payload(data))


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinTV', handle_join_tv, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('holdStart', handle_hold_start, namespace=namespace)
    socketio.on_event('holdEnd', handle_hold_end, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('resetLobby', handle_reset_lobby, namespace=namespace)
    socketio.on_event('kickPlayer', handle_kick_player, namespace=namespace)
