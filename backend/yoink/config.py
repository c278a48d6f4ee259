import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list of origins allowed to open a socket
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
    ).split(',') if o.strip()]
    # Word list sources: http(s) URLs or local paths, comma-separated.
    # Empty means the bundled demo list.
    DICTIONARY_SOURCES = os.environ.get('DICTIONARY_SOURCES', '')
    # Round defaults applied to every newly created room
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '120'))
    MIN_WORD_LEN = int(os.environ.get('MIN_WORD_LEN', '3'))
    UNIQUE_WORDS = os.environ.get('UNIQUE_WORDS', 'allow_with_decay')
    DECAY_MODEL = os.environ.get('DECAY_MODEL', 'linear')
    ROUND_TILES = int(os.environ.get('ROUND_TILES', '100'))
    OPENING_TILES = int(os.environ.get('OPENING_TILES', '20'))
    DRIP_PER_SEC = int(os.environ.get('DRIP_PER_SEC', '2'))
    SURGE_AT_SEC = int(os.environ.get('SURGE_AT_SEC', '60'))
    SURGE_AMOUNT = int(os.environ.get('SURGE_AMOUNT', '10'))
    # Arbitration window width (ms) and scheduler tick interval (sec)
    WINDOW_MS = int(os.environ.get('WINDOW_MS', '150'))
    TICK_SEC = float(os.environ.get('TICK_SEC', '1'))
    # Per-connection submit limiter: bucket size and refill per second
    RATE_LIMIT_CAPACITY = int(os.environ.get('RATE_LIMIT_CAPACITY', '10'))
    RATE_LIMIT_PER_SEC = float(os.environ.get('RATE_LIMIT_PER_SEC', '5'))
    # Destroy rooms that stayed empty this long (sec). 0 disables the sweep.
    ROOM_IDLE_GRACE_SEC = int(os.environ.get('ROOM_IDLE_GRACE_SEC', '0'))
    # Optional: heartbeat interval for round driver logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
