import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '3000'))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Socket.IO transport
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    SOCKETIO_PING_INTERVAL = int(os.environ.get('SOCKETIO_PING_INTERVAL', '10'))
    SOCKETIO_PING_TIMEOUT = int(os.environ.get('SOCKETIO_PING_TIMEOUT', '5'))
    DISPLAY_ROOM = os.environ.get('DISPLAY_ROOM', 'tv')
    # Game timing (milliseconds)
    PROGRESS_TO_WIN = int(os.environ.get('PROGRESS_TO_WIN', '100'))
    PROGRESS_TICK_MS = int(os.environ.get('PROGRESS_TICK_MS', '100'))
    COUNTDOWN_FROM = int(os.environ.get('COUNTDOWN_FROM', '3'))
    COUNTDOWN_INTERVAL_MS = int(os.environ.get('COUNTDOWN_INTERVAL_MS', '1000'))
    NAME_MAX_LENGTH = int(os.environ.get('NAME_MAX_LENGTH', '15'))
    # Optional: fixed seed for light durations. Unset means nondeterministic.
    RANDOM_SEED = os.environ.get('RANDOM_SEED')
    # 'socketio' runs timers as background tasks; 'manual' uses a virtual clock
    SCHEDULER = os.environ.get('SCHEDULER', 'socketio')
    # Onboarding QR code
    PLAYER_PAGE = os.environ.get('PLAYER_PAGE', '/phone.html')
    QR_BOX_SIZE = int(os.environ.get('QR_BOX_SIZE', '10'))
    QR_BORDER = int(os.environ.get('QR_BORDER', '2'))
    QR_DARK_COLOR = os.environ.get('QR_DARK_COLOR', '#1a1a2e')
    QR_LIGHT_COLOR = os.environ.get('QR_LIGHT_COLOR', '#ffffff')
