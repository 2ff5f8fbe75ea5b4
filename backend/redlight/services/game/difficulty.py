"""Round-indexed difficulty profiles.

Later rounds shorten the grace window and the light phases and slow the
runners down. Rounds past the end of the table reuse the last profile.
"""
from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class DurationRange:
    min: int
    max: int

    def to_dict(self):
        return {'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class DifficultyProfile:
    grace_period_ms: int
    green_duration: DurationRange
    red_duration: DurationRange
    progress_rate: float

    def to_dict(self):
        return {
            'gracePeriodMs': self.grace_period_ms,
            'greenDuration': self.green_duration.to_dict(),
            'redDuration': self.red_duration.to_dict(),
            'progressRate': self.progress_rate,
        }


DIFFICULTY: List[DifficultyProfile] = [
    DifficultyProfile(1000, DurationRange(3000, 5500), DurationRange(2000, 3500), 1.2),
    DifficultyProfile(850, DurationRange(2500, 5000), DurationRange(1800, 3200), 1.1),
    DifficultyProfile(700, DurationRange(2000, 4000), DurationRange(1500, 3000), 1.0),
    DifficultyProfile(600, DurationRange(1500, 3500), DurationRange(1500, 2800), 0.9),
    DifficultyProfile(500, DurationRange(1000, 2500), DurationRange(1200, 2500), 0.8),
]

ROUND_LABELS = ['WARM-UP', 'GETTING HARDER', 'SERIOUS', 'INTENSE', 'MAXIMUM']


def _clamp_index(round_number: int, size: int) -> int:
    return min(max(round_number - 1, 0), size - 1)


def difficulty_for(round_number: int, table: Sequence[DifficultyProfile] = DIFFICULTY) -> DifficultyProfile:
    return table[_clamp_index(round_number, len(table))]


def round_label(round_number: int) -> str:
    return ROUND_LABELS[_clamp_index(round_number, len(ROUND_LABELS))]
