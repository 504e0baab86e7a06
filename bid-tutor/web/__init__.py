"""
Web Module
Practice-table server: REST session API with Socket.IO updates
"""

from .dashboard import (
    app,
    socketio,
    sessions,
    engine,
    start_server
)
from .state import Session, SessionNotFoundError, SessionStore

__all__ = [
    'app',
    'socketio',
    'sessions',
    'engine',
    'start_server',
    'Session',
    'SessionNotFoundError',
    'SessionStore'
]
