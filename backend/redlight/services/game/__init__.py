"""Game domain services: difficulty, leaderboard, timers and the session engine.

This package contains pure(ish) domain logic that is driven by socket
handlers and HTTP routes, keeping transport concerns separated from the
core game mechanics.
"""
from .broadcast import SocketIOBroadcaster
from .difficulty import DIFFICULTY, DifficultyProfile, DurationRange, difficulty_for, round_label
from .leaderboard import build_leaderboard, player_position
from .scheduler import ManualScheduler, SocketIOScheduler, TimerGroup
from .session import GameSession
