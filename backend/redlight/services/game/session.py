import functools
import logging
import random
import threading
from typing import Dict, List, Optional, Sequence

from redlight.messages import (
    Countdown, Disconnect, Eliminated, Eliminations, GameOver, GameState, HoldEnd, HoldStart,
    JoinDisplay, JoinError, Joined, JoinGame, KickPlayer, Kicked, LobbyReset, Message,
    PlayerJoined, PlayerState, ResetLobby, RoundInfo, StartGame,
)
from redlight.models import LogEntry, Player
from .difficulty import DIFFICULTY, DifficultyProfile, difficulty_for, round_label
from .leaderboard import build_leaderboard, player_position
from .scheduler import TimerGroup


LOBBY = 'lobby'
COUNTDOWN = 'countdown'
PLAYING = 'playing'
GAME_OVER = 'gameOver'

RED = 'red'
GREEN = 'green'


def synchronized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)
    return wrapper


class GameSession:
    """The single shared red light / green light session.

    Owns the player registry, the finish and elimination logs and every
    timer. Client actions and timer callbacks all run under ``lock`` and
    each mutation is followed by a broadcast through ``broadcaster``.
    """

    def __init__(
        self,
        broadcaster,
        scheduler,
        difficulty: Sequence[DifficultyProfile] = DIFFICULTY,
        progress_to_win: int = 100,
        tick_ms: int = 100,
        countdown_from: int = 3,
        countdown_interval_ms: int = 1000,
        name_max_length: int = 15,
        display_room: str = 'tv',
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.difficulty_table = list(difficulty)
        self.progress_to_win = progress_to_win
        self.tick_ms = tick_ms
        self.countdown_from = countdown_from
        self.countdown_interval_ms = countdown_interval_ms
        self.name_max_length = name_max_length
        self.display_room = display_room
        self.rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)

        self.lock = threading.RLock()
        self.timers = TimerGroup(scheduler, self.lock)

        self.phase = LOBBY
        self.light = RED
        self.round = 0
        self.tournament_active = False
        self.elimination_pending = False
        self.players: Dict[str, Player] = {}
        self.elimination_order: List[LogEntry] = []
        self.finish_order: List[LogEntry] = []
        self.round_history: List[dict] = []
        self._countdown_value = 0
        self._ended_round = 0

        self._actions = {
            JoinGame: lambda sid, a: self.join(sid, a.name),
            JoinDisplay: lambda sid, a: self.broadcast_game_state(),
            HoldStart: lambda sid, a: self.hold_start(sid),
            HoldEnd: lambda sid, a: self.hold_end(sid),
            StartGame: lambda sid, a: self.start_game(),
            ResetLobby: lambda sid, a: self.reset_lobby(),
            KickPlayer: lambda sid, a: self.kick(a.player_id),
            Disconnect: lambda sid, a: self.disconnect(sid),
        }

    @synchronized
    def dispatch(self, sid: str, action) -> None:
        self._actions[type(action)](sid, action)

    # ---- Queries ----

    @property
    def difficulty(self) -> DifficultyProfile:
        return difficulty_for(self.round or 1, self.difficulty_table)

    def alive_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.alive]

    def alive_unfinished(self) -> List[Player]:
        return [p for p in self.players.values() if p.alive and not p.finished]

    def leaderboard(self) -> List[dict]:
        return build_leaderboard(self.players, self.finish_order, self.elimination_order)

    def players_payload(self) -> List[dict]:
        return [p.to_dict() for p in self.players.values()]

    def game_state(self, leaderboard: Optional[List[dict]] = None) -> GameState:
        return GameState(
            phase=self.phase,
            light=self.light,
            players=self.players_payload(),
            round=self.round,
            tournament_active=self.tournament_active,
            difficulty={
                'gracePeriodMs': self.difficulty.grace_period_ms,
                'roundLabel': round_label(self.round),
            },
            leaderboard=leaderboard if leaderboard is not None else self.leaderboard(),
        )

    # ---- Broadcasting ----

    def _send(self, message: Message, to: str) -> None:
        self.broadcaster.send(message, to)

    def broadcast_game_state(self, leaderboard: Optional[List[dict]] = None) -> None:
        self._send(self.game_state(leaderboard), self.display_room)

    def _player_state(self, player: Player, leaderboard: List[dict]) -> PlayerState:
        return PlayerState(
            phase=self.phase,
            light=self.light,
            progress=player.progress,
            alive=player.alive,
            holding=player.holding,
            round=self.round,
            position=player_position(leaderboard, player.id),
            tournament_active=self.tournament_active,
        )

    def broadcast_to_players(self, leaderboard: Optional[List[dict]] = None) -> None:
        if leaderboard is None:
            leaderboard = self.leaderboard()
        for player in self.players.values():
            self._send(self._player_state(player, leaderboard), player.id)

    def broadcast_all(self) -> None:
        leaderboard = self.leaderboard()
        self.broadcast_game_state(leaderboard)
        self.broadcast_to_players(leaderboard)

    # ---- Lobby ----

    @synchronized
    def join(self, sid: str, name: str) -> Optional[Player]:
        name = (name or '').strip()
        if not name:
            return self._reject_join(sid, 'Please enter a name!')
        clean_name = name[:self.name_max_length]
        if self.tournament_active:
            return self._reject_join(sid, 'Tournament in progress! Wait for a new game.')
        if self.phase != LOBBY:
            return self._reject_join(sid, 'Game in progress. Wait for next game!')
        taken = {p.name.lower() for p in self.players.values()}
        if clean_name.lower() in taken:
            return self._reject_join(sid, 'Name already taken! Pick another.')

        player = Player(id=sid, name=clean_name)
        self.players[sid] = player
        self._send(Joined(player.id, player.name), sid)
        self._send(PlayerJoined(player.id, player.name), self.display_room)
        self.broadcast_game_state()
        self.logger.info(f"[join] player={player.name} sid={sid} registered={len(self.players)}")
        return player

    def _reject_join(self, sid: str, reason: str) -> None:
        self._send(JoinError(reason), sid)
        self.logger.info(f"[join-rejected] sid={sid} reason={reason!r}")

    @synchronized
    def kick(self, player_id: str) -> None:
        player = self.players.pop(player_id, None)
        if not player:
            return
        self.finish_order = [f for f in self.finish_order if f.id != player_id]
        self.elimination_order = [e for e in self.elimination_order if e.id != player_id]
        self._send(Kicked(), player_id)
        self.logger.info(f"[kick] player={player.name} sid={player_id}")
        self.broadcast_game_state()
        self._evaluate_termination()

    @synchronized
    def disconnect(self, sid: str) -> None:
        player = self.players.get(sid)
        if not player:
            return
        self.logger.info(f"[disconnect] player={player.name} phase={self.phase}")
        if self.phase == LOBBY and not self.tournament_active:
            del self.players[sid]
        else:
            if player.alive:
                if player.finished:
                    self._forfeit_finish(player)
                self._eliminate(player)
                self._send(Eliminations([{'id': player.id, 'name': player.name}]), self.display_room)
            self._evaluate_termination()
        self.broadcast_all()

    def _forfeit_finish(self, player: Player) -> None:
        self.finish_order = [f for f in self.finish_order if f.id != player.id]
        player.finished_at = None

    @synchronized
    def reset_lobby(self) -> None:
        self.timers.cancel_all()
        self.phase = LOBBY
        self.light = RED
        self.round = 0
        self.tournament_active = False
        self.elimination_pending = False
        self.elimination_order = []
        self.finish_order = []
        self.round_history = []
        self._ended_round = 0
        for player in self.players.values():
            self._send(LobbyReset(), player.id)
        self.players.clear()
        self.logger.info("[lobby-reset] registry and logs cleared")
        self.broadcast_all()

    # ---- Round lifecycle ----

    @synchronized
    def start_game(self) -> None:
        if self.phase not in (LOBBY, GAME_OVER):
            return
        alive = self.alive_players()
        if len(alive) >= 2:
            self._begin_round()
        elif len(alive) == 1:
            # Nobody left to race against: default win.
            winner = alive[0]
            self._retire_finishes()
            self.tournament_active = True
            self.round += 1
            self._award_finish(winner)
            self.logger.info(f"[default-win] round={self.round} winner={winner.name}")
            self._end_game(winner)

    def _begin_round(self) -> None:
        self.timers.cancel_all()
        self._retire_finishes()
        self.tournament_active = True
        self.phase = COUNTDOWN
        self.round += 1
        self.light = RED
        self.elimination_pending = False
        for player in self.alive_players():
            player.reset_for_round()

        diff = self.difficulty
        self._send(RoundInfo(self.round, round_label(self.round), diff.grace_period_ms), self.display_room)
        self.broadcast_all()
        self.logger.info(f"[round-start] round={self.round} alive={len(self.alive_players())}")

        self._countdown_value = self.countdown_from
        self._emit_countdown()
        self.timers.call_every('countdown', self.countdown_interval_ms, self._countdown_tick)

    def _retire_finishes(self) -> None:
        # Finishers race again next round; round_history already holds their entries.
        self.finish_order = []

    def _emit_countdown(self) -> None:
        message = Countdown(self._countdown_value)
        self._send(message, self.display_room)
        for player in self.alive_players():
            self._send(message, player.id)

    def _countdown_tick(self) -> None:
        if self.phase != COUNTDOWN:
            return
        self._countdown_value -= 1
        if self._countdown_value > 0:
            self._emit_countdown()
            return
        self.timers.cancel('countdown')
        self.phase = PLAYING
        self.timers.call_every('progress', self.tick_ms, self._progress_tick)
        self._switch_to_green()

    def _end_game(self, winner: Optional[Player]) -> None:
        if self._ended_round == self.round:
            return
        self._ended_round = self.round
        self.phase = GAME_OVER
        self.timers.cancel_all()
        self.light = RED
        self.elimination_pending = False
        for player in self.players.values():
            player.holding = False

        self.round_history.append({
            'round': self.round,
            'winner': {'id': winner.id, 'name': winner.name} if winner else None,
            'finishers': [f.to_dict() for f in self.finish_order if f.round == self.round],
            'eliminated': [e.to_dict() for e in self.elimination_order if e.round == self.round],
        })

        leaderboard = self.leaderboard()
        self._send(GameOver(
            winner={'id': winner.id, 'name': winner.name} if winner else None,
            players=self.players_payload(),
            round=self.round,
            leaderboard=leaderboard,
        ), self.display_room)
        self.broadcast_to_players(leaderboard)
        self.logger.info(f"[game-over] round={self.round} winner={winner.name if winner else None}")

    # ---- Light cycle ----

    def _switch_to_green(self) -> None:
        if self.phase != PLAYING:
            return
        if not self.alive_unfinished():
            self._check_round_end()
            return
        self.light = GREEN
        self.elimination_pending = False
        self.broadcast_all()
        span = self.difficulty.green_duration
        self.timers.call_later('light', self.rng.randint(span.min, span.max), self._switch_to_red)

    def _switch_to_red(self) -> None:
        if self.phase != PLAYING:
            return
        self.light = RED
        self.elimination_pending = True
        self.broadcast_all()
        self.timers.call_later('grace', self.difficulty.grace_period_ms, self._eliminate_holders)

    # ---- Progress ----

    def _progress_tick(self) -> None:
        if self.phase != PLAYING or self.light != GREEN:
            return
        rate = self.difficulty.progress_rate
        someone_finished = False
        for player in self.players.values():
            if not (player.alive and player.holding and not player.finished):
                continue
            player.progress = min(self.progress_to_win, round(player.progress + rate, 6))
            if player.progress >= self.progress_to_win:
                self._award_finish(player)
                someone_finished = True
        self.broadcast_all()
        if someone_finished:
            self._check_round_end()

    def _award_finish(self, player: Player) -> None:
        player.finished_at = self.scheduler.now_ms()
        player.holding = False
        self.finish_order.append(LogEntry(player.id, player.name, self.round))
        self.logger.info(f"[finish] round={self.round} player={player.name}")

    # ---- Eliminations ----

    def _eliminate(self, player: Player) -> None:
        player.alive = False
        player.eliminated = True
        player.holding = False
        player.eliminated_in_round = self.round
        self.elimination_order.append(LogEntry(player.id, player.name, self.round))
        self.logger.info(f"[eliminated] round={self.round} player={player.name}")

    @synchronized
    def hold_start(self, sid: str) -> None:
        player = self.players.get(sid)
        if not player or not player.alive or player.finished or self.phase != PLAYING:
            return
        player.holding = True
        if self.light == RED and not self.elimination_pending:
            self._eliminate(player)
            self._send(Eliminations([{'id': player.id, 'name': player.name}]), self.display_room)
            self._send(Eliminated(player_position(self.leaderboard(), player.id)), sid)
            self.broadcast_all()
            self._evaluate_termination()

    @synchronized
    def hold_end(self, sid: str) -> None:
        player = self.players.get(sid)
        if player:
            player.holding = False

    def _eliminate_holders(self) -> None:
        if self.phase != PLAYING or self.light != RED:
            return
        self.elimination_pending = False
        caught = [p for p in self.players.values() if p.alive and p.holding and not p.finished]
        for player in caught:
            self._eliminate(player)
        if caught:
            self._send(Eliminations([{'id': p.id, 'name': p.name} for p in caught]), self.display_room)
            leaderboard = self.leaderboard()
            for player in caught:
                self._send(Eliminated(player_position(leaderboard, player.id)), player.id)
        self.broadcast_all()

        if self._evaluate_termination():
            return
        span = self.difficulty.red_duration
        self.timers.call_later('light', self.rng.randint(span.min, span.max), self._switch_to_green)

    def _evaluate_termination(self) -> bool:
        """End the round if too few players remain to keep it going."""
        if self.phase not in (COUNTDOWN, PLAYING):
            return False
        alive = self.alive_players()
        if not alive:
            self._end_game(None)
            return True
        if len(alive) == 1:
            last = alive[0]
            if not last.finished:
                self._award_finish(last)
            self._end_game(last)
            return True
        if not self.alive_unfinished():
            self._check_round_end()
            return True
        return False

    def _check_round_end(self) -> None:
        alive = self.alive_players()
        if not alive:
            self._end_game(None)
            return
        round_finishers = [f for f in self.finish_order if f.round == self.round]
        if round_finishers:
            self._end_game(self.players.get(round_finishers[0].id))
            return
        unfinished = self.alive_unfinished()
        if len(unfinished) == 1 and len(alive) == 1:
            self._award_finish(unfinished[0])
            self._end_game(unfinished[0])
