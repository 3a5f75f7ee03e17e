from flask_socketio import join_room, leave_room, emit
from league import socketio

LEAGUE_ROOM = 'league'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_league(data=None):
    """Subscribe this socket to league-wide updates such as points_update."""
    join_room(LEAGUE_ROOM)
    emit('joined', {'room': LEAGUE_ROOM})


def handle_leave_league(data=None):
    leave_room(LEAGUE_ROOM)
    emit('left', {'room': LEAGUE_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_league', handle_join_league, namespace='/ws')
    socketio.on_event('leave_league', handle_leave_league, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_league', handle_join_league, namespace='/')
        socketio.on_event('leave_league', handle_leave_league, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
