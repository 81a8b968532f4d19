"""
Game state management for Kingdoms & Castles.

GameState is the single authoritative snapshot: the board, both players,
turn/round counters and the append-only log. Intents never change a snapshot
they receive; they copy it with ``GameState.copy()`` and return the copy.

Config: config.json next to this module (board size, nations, unlock cap).
"""

from __future__ import annotations
import copy
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from map_gen import find_hex, index_hexes, initialize_board
from models import Hex, PlayerState, Unit, capital_template_for, nation_name
from phases import Phase

DEFAULT_CONFIG: Dict[str, Any] = {
    'board_width': 15,
    'board_height': 11,
    'player1_nation': 'altaria',
    'player2_nation': 'cartasia',
    'max_unlocked_hexes': 6,
    'log_tail': 20,
}


def load_config() -> Dict[str, Any]:
    """Load config.json, falling back to defaults for a missing or invalid file."""
    config = dict(DEFAULT_CONFIG)
    config_path = os.path.join(os.path.dirname(__file__), 'config.json')
    try:
        with open(config_path, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        pass
    return config


@dataclass
class GameState:
    """
    Complete game snapshot.

    ``current_phase`` holds a phases.Phase; ``winner`` stays None on a draw.
    ``resource_hexes`` keeps the capital neighbours unlocked by each player's
    last resource step, for highlighting.
    """
    players: Dict[str, PlayerState]
    current_player: str = 'player1'
    current_phase: Any = None
    turn: int = 0
    round: int = 0
    hexes: List[Hex] = field(default_factory=list)
    log: List[Dict[str, Any]] = field(default_factory=list)
    game_over: bool = False
    winner: Optional[str] = None
    last_action: str = ''
    last_rejection: Optional[Dict[str, str]] = None
    resource_hexes: Dict[str, List[Tuple[int, int, int]]] = field(default_factory=dict)

    def copy(self) -> 'GameState':
        """Deep copy used as the starting point of every transition."""
        new_state = copy.deepcopy(self)
        new_state.last_rejection = None
        return new_state

    def get_player(self, player_id: str) -> PlayerState:
        return self.players[player_id]

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.current_player]

    def get_opponent_id(self, player_id: str) -> str:
        return 'player2' if player_id == 'player1' else 'player1'

    def get_hex(self, hex_ref: Any) -> Optional[Hex]:
        """
        Resolve a hex against this snapshot's board.

        Args:
            hex_ref: A Hex (matched by coordinates), a hex id string, or a (q, r[, s]) tuple
        """
        if hex_ref is None:
            return None
        if isinstance(hex_ref, tuple):
            return find_hex(self.hexes, *hex_ref)
        key = hex_ref.id if isinstance(hex_ref, Hex) else str(hex_ref)
        return index_hexes(self.hexes).get(key)

    def get_capital_hex(self, player_id: str) -> Optional[Hex]:
        """The hex holding the player's capital, looked up on the live board."""
        player = self.players.get(player_id)
        if player is None or player.capital_hex_id is None:
            return None
        return self.get_hex(player.capital_hex_id)

    def get_capital(self, player_id: str) -> Optional[Unit]:
        """The player's capital unit, or None if it was never founded."""
        capital_hex = self.get_capital_hex(player_id)
        if capital_hex is None or capital_hex.unit is None:
            return None
        if capital_hex.unit.id != self.players[player_id].capital_unit_id:
            return None
        return capital_hex.unit

    def player_for_faction(self, faction: str) -> Optional[str]:
        for player_id, player in self.players.items():
            if player.nation == faction:
                return player_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'players': {pid: p.to_dict() for pid, p in self.players.items()},
            'current_player': self.current_player,
            'current_phase': getattr(self.current_phase, 'value', self.current_phase),
            'turn': self.turn,
            'round': self.round,
            'hexes': [h.to_dict() for h in self.hexes],
            'game_over': self.game_over,
            'winner': self.winner,
            'last_action': self.last_action,
            'last_rejection': self.last_rejection,
            'resource_hexes': {pid: [list(c) for c in coords] for pid, coords in self.resource_hexes.items()},
        }


def log_event(game_state: GameState, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Only call this on a snapshot the caller owns (a fresh copy).

    Args:
        game_state: Snapshot being built
        event: Human-readable description
        **kwargs: Additional event data to include
    """
    log_entry = {
        'turn': game_state.turn,
        'round': game_state.round,
        'phase': getattr(game_state.current_phase, 'value', game_state.current_phase),
        'player': game_state.current_player,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)
    game_state.last_action = event


def reject_action(game_state: GameState, error: Exception) -> GameState:
    """
    Rejection snapshot: same board and players, one more log entry.

    Args:
        game_state: Snapshot the intent was applied to
        error: The orders.ActionRejected describing why
    """
    new_state = game_state.copy()
    category = getattr(error, 'category', 'rejected')
    log_event(new_state, str(error), error_type=category)
    new_state.last_rejection = {'category': category, 'reason': str(error)}
    return new_state


def get_log_tail(game_state: GameState, count: Optional[int] = None) -> List[Dict[str, Any]]:
    """Last ``count`` log entries for a scrolling history view (config log_tail by default)."""
    if count is None:
        count = load_config().get('log_tail', 20)
    if count <= 0:
        return []
    return [dict(entry) for entry in game_state.log[-count:]]


def player_label(game_state: GameState, player_id: str) -> str:
    """Display name of a player's nation, e.g. 'Altaria'."""
    return nation_name(game_state.players[player_id].nation)


def validate_nations(player1_nation: str, player2_nation: str) -> None:
    """Each player needs a distinct nation that can found a capital."""
    if player1_nation == player2_nation:
        raise ValueError(f"Both players cannot play {nation_name(player1_nation)}")
    for nation in (player1_nation, player2_nation):
        if capital_template_for(nation) is None:
            raise ValueError(f"Nation {nation} has no capital to found")


def create_initial_game_state(player1_nation: Optional[str] = None,
                              player2_nation: Optional[str] = None) -> GameState:
    """
    Create the SETUP snapshot: empty board, zero resources, turn and round 0.

    Args:
        player1_nation: Nation for player1 (config player1_nation by default)
        player2_nation: Nation for player2 (config player2_nation by default)

    Raises:
        ValueError: If both players share a nation or a nation has no capital
    """
    config = load_config()
    player1_nation = player1_nation or config['player1_nation']
    player2_nation = player2_nation or config['player2_nation']
    validate_nations(player1_nation, player2_nation)
    players = {
        'player1': PlayerState(id='player1', nation=player1_nation),
        'player2': PlayerState(id='player2', nation=player2_nation),
    }
    game_state = GameState(
        players=players,
        current_player='player1',
        current_phase=Phase.SETUP,
        turn=0,
        round=0,
        hexes=[],
    )
    log_event(game_state, 'Game initialized')
    return game_state


def attach_board(game_state: GameState, hexes: List[Hex]) -> GameState:
    """Return a new SETUP snapshot carrying the given board."""
    new_state = game_state.copy()
    new_state.hexes = copy.deepcopy(hexes)
    log_event(new_state, f"Board generated with {len(hexes)} hexes", hex_count=len(hexes))
    return new_state


def new_game(width: Optional[int] = None, height: Optional[int] = None,
             player1_nation: Optional[str] = None, player2_nation: Optional[str] = None) -> GameState:
    """Initial state with a freshly generated board, ready for capital placement."""
    config = load_config()
    width = width if width is not None else config['board_width']
    height = height if height is not None else config['board_height']
    game_state = create_initial_game_state(player1_nation, player2_nation)
    return attach_board(game_state, initialize_board(width, height))
