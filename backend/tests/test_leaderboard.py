from redlight.models import LogEntry, Player
from redlight.services.game import build_leaderboard, player_position


def registry(*players):
    return {p.id: p for p in players}


def test_groups_are_ranked_finishers_alive_eliminated():
    players = registry(
        Player('a', 'Ann', progress=100, finished_at=5),
        Player('b', 'Ben', progress=40),
        Player('c', 'Cat', alive=False, eliminated=True, eliminated_in_round=1),
        Player('d', 'Dan', progress=70),
        Player('e', 'Eve', alive=False, eliminated=True, eliminated_in_round=1),
    )
    board = build_leaderboard(
        players,
        [LogEntry('a', 'Ann', 1)],
        [LogEntry('c', 'Cat', 1), LogEntry('e', 'Eve', 1)],
    )
    assert [(e['id'], e['position'], e['status']) for e in board] == [
        ('a', 1, 'winner'),
        ('d', 2, 'alive'),
        ('b', 3, 'alive'),
        ('e', 4, 'eliminated'),
        ('c', 5, 'eliminated'),
    ]
    assert board[0]['round'] == 1
    assert board[1]['round'] is None


def test_progress_ties_keep_registry_order():
    players = registry(Player('x', 'X', progress=10), Player('y', 'Y', progress=10), Player('z', 'Z', progress=20))
    board = build_leaderboard(players, [], [])
    assert [e['id'] for e in board] == ['z', 'x', 'y']


def test_positions_are_continuous():
    players = registry(*[Player(str(i), f"P{i}", progress=i) for i in range(6)])
    board = build_leaderboard(players, [], [])
    assert sorted(e['position'] for e in board) == [1, 2, 3, 4, 5, 6]


def test_player_position_lookup():
    players = registry(Player('a', 'Ann', progress=100, finished_at=1), Player('b', 'Ben'))
    board = build_leaderboard(players, [LogEntry('a', 'Ann', 2)], [])
    assert player_position(board, 'a') == {'position': 1, 'total': 2, 'status': 'winner'}
    assert player_position(board, 'b') == {'position': 2, 'total': 2, 'status': 'alive'}
    assert player_position(board, 'nobody') is None


def test_empty_registry():
    assert build_leaderboard({}, [], []) == []
