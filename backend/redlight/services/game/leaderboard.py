from typing import Dict, List, Optional, Sequence

from redlight.models import LogEntry, Player


def _entry(entry_id: str, name: str, position: int, status: str, round_number: Optional[int]) -> dict:
    return {
        'id': entry_id,
        'name': name,
        'position': position,
        'status': status,
        'round': round_number,
    }


def build_leaderboard(
    players: Dict[str, Player],
    finish_order: Sequence[LogEntry],
    elimination_order: Sequence[LogEntry],
) -> List[dict]:
    """Rank every registered player, best first.

    Finishers come first in the order they crossed the line, then the
    players still racing by descending progress (registry order breaks
    ties), then the eliminated ones with the most recent elimination
    highest. The first player ever eliminated is last.
    """
    entries: List[dict] = []
    for f in finish_order:
        entries.append(_entry(f.id, f.name, len(entries) + 1, 'winner', f.round))

    racing = [p for p in players.values() if p.alive and not p.finished]
    racing.sort(key=lambda p: p.progress, reverse=True)
    for p in racing:
        entries.append(_entry(p.id, p.name, len(entries) + 1, 'alive', None))

    for e in reversed(elimination_order):
        entries.append(_entry(e.id, e.name, len(entries) + 1, 'eliminated', e.round))
    return entries


def player_position(leaderboard: List[dict], player_id: str) -> Optional[dict]:
    for entry in leaderboard:
        if entry['id'] == player_id:
            return {'position': entry['position'], 'total': len(leaderboard), 'status': entry['status']}
    return None
