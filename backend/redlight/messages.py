"""Wire messages exchanged with players and the shared display.

Every outbound event is a dataclass with a fixed Socket.IO event name and
a ``payload()`` producing the exact wire shape. Inbound actions are parsed
from raw Socket.IO arguments into small dataclasses before they reach the
session.
"""
from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Optional


# ---- Outbound ----

@dataclass
class Message:
    event: ClassVar[str] = ''

    def payload(self) -> Any:
        return None


@dataclass
class GameState(Message):
    event: ClassVar[str] = 'gameState'
    phase: str
    light: str
    players: List[dict]
    round: int
    tournament_active: bool
    difficulty: dict
    leaderboard: List[dict]

    def payload(self):
        return {
            'phase': self.phase,
            'light': self.light,
            'players': self.players,
            'round': self.round,
            'tournamentActive': self.tournament_active,
            'difficulty': self.difficulty,
            'leaderboard': self.leaderboard,
        }


@dataclass
class PlayerState(Message):
    event: ClassVar[str] = 'playerState'
    phase: str
    light: str
    progress: float
    alive: bool
    holding: bool
    round: int
    position: Optional[dict]
    tournament_active: bool

    def payload(self):
        return {
            'phase': self.phase,
            'light': self.light,
            'progress': self.progress,
            'alive': self.alive,
            'holding': self.holding,
            'round': self.round,
            'position': self.position,
            'tournamentActive': self.tournament_active,
        }


@dataclass
class Eliminations(Message):
    event: ClassVar[str] = 'eliminations'
    players: List[dict] = field(default_factory=list)

    def payload(self):
        return self.players


@dataclass
class Eliminated(Message):
    event: ClassVar[str] = 'eliminated'
    position: Optional[dict]

    def payload(self):
        return {'position': self.position}


@dataclass
class Countdown(Message):
    event: ClassVar[str] = 'countdown'
    value: int

    def payload(self):
        return self.value


@dataclass
class RoundInfo(Message):
    event: ClassVar[str] = 'roundInfo'
    round: int
    label: str
    grace_period_ms: int

    def payload(self):
        return {'round': self.round, 'label': self.label, 'gracePeriodMs': self.grace_period_ms}


@dataclass
class GameOver(Message):
    event: ClassVar[str] = 'gameOver'
    winner: Optional[dict]
    players: List[dict]
    round: int
    leaderboard: List[dict]

    def payload(self):
        return {
            'winner': self.winner,
            'players': self.players,
            'round': self.round,
            'leaderboard': self.leaderboard,
        }


@dataclass
class LobbyReset(Message):
    event: ClassVar[str] = 'lobbyReset'


@dataclass
class Kicked(Message):
    event: ClassVar[str] = 'kicked'


@dataclass
class JoinError(Message):
    event: ClassVar[str] = 'joinError'
    reason: str

    def payload(self):
        return self.reason


@dataclass
class PlayerJoined(Message):
    event: ClassVar[str] = 'playerJoined'
    id: str
    name: str

    def payload(self):
        return {'id': self.id, 'name': self.name}


@dataclass
class Joined(PlayerJoined):
    event: ClassVar[str] = 'joined'


# ---- Inbound ----

def _text(data, key):
    if isinstance(data, dict):
        data = data.get(key)
    return data if isinstance(data, str) else ''


@dataclass(frozen=True)
class JoinGame:
    name: str

    @classmethod
    def from_payload(cls, data):
        return cls(name=_text(data, 'name'))


@dataclass(frozen=True)
class KickPlayer:
    player_id: str

    @classmethod
    def from_payload(cls, data):
        return cls(player_id=_text(data, 'id'))


@dataclass(frozen=True)
class HoldStart:
    pass


@dataclass(frozen=True)
class HoldEnd:
    pass


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class ResetLobby:
    pass


@dataclass(frozen=True)
class JoinDisplay:
    pass


@dataclass(frozen=True)
class Disconnect:
    pass
