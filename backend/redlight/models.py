from dataclasses import dataclass
from typing import Optional


@dataclass
class Player:
    id: str
    name: str
    progress: float = 0.0
    alive: bool = True
    holding: bool = False
    eliminated: bool = False
    finished_at: Optional[int] = None
    eliminated_in_round: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    def reset_for_round(self):
        self.progress = 0.0
        self.holding = False
        self.finished_at = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'progress': self.progress,
            'alive': self.alive,
            'holding': self.holding,
            'finishedAt': self.finished_at,
            'eliminatedInRound': self.eliminated_in_round,
        }


@dataclass(frozen=True)
class LogEntry:
    """One line of the finish or elimination log."""
    id: str
    name: str
    round: int

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'round': self.round}
