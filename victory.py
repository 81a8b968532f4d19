"""
Victory checks for Kingdoms & Castles, run once per turn at the End Phase.

Conditions, first match wins:
- Capital destruction: a capital at 0 hit points or less loses the game
  (both capitals down is a draw)
- Border domination: every central-row hex is owned by a player or holds one
  of that player's units
"""

from typing import Optional, Tuple

from map_gen import central_row
from models import PLAYER_IDS
from state import GameState, log_event, player_label


def capital_destroyed(game_state: GameState, player_id: str) -> bool:
    capital = game_state.get_capital(player_id)
    return capital is not None and capital.hit_points <= 0


def dominates_border(game_state: GameState, player_id: str) -> bool:
    """
    True if every r == 0 hex is owned by the player or occupied by one of their units.

    Ownership and occupation are OR-ed: units on enemy-owned border hexes count.
    """
    border = central_row(game_state.hexes)
    if not border:
        return False
    nation = game_state.get_player(player_id).nation
    return all(
        h.owner == player_id or (h.unit is not None and h.unit.faction == nation)
        for h in border
    )


def check_victory(game_state: GameState) -> Optional[Tuple[Optional[str], str]]:
    """
    Evaluate terminal conditions.

    Returns:
        (winner id or None for a draw, victory type), or None if play continues
    """
    destroyed = [pid for pid in PLAYER_IDS if capital_destroyed(game_state, pid)]
    if len(destroyed) == 2:
        return None, 'mutual_destruction'
    if destroyed:
        return game_state.get_opponent_id(destroyed[0]), 'capital_destruction'

    # Every central-row hex counts, not a fixed six; the row grows with board width
    for player_id in PLAYER_IDS:
        if dominates_border(game_state, player_id):
            return player_id, 'border_domination'

    return None


def apply_victory(game_state: GameState) -> None:
    """Run check_victory on a snapshot the caller owns and record any result."""
    result = check_victory(game_state)
    if result is None:
        return

    winner, victory_type = result
    game_state.game_over = True
    game_state.winner = winner
    if victory_type == 'mutual_destruction':
        log_event(game_state, "Both capitals destroyed - the game ends in a draw!",
                  victory_type=victory_type, winner_id=None)
    elif victory_type == 'capital_destruction':
        loser = game_state.get_opponent_id(winner)
        log_event(game_state,
                  f"Player {winner[-1]} wins - {player_label(game_state, loser)} capital destroyed!",
                  victory_type=victory_type, winner_id=winner, loser_id=loser)
    else:
        log_event(game_state,
                  f"Player {winner[-1]} wins - Border domination achieved!",
                  victory_type=victory_type, winner_id=winner)
