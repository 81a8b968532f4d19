"""
Resource phase for Kingdoms & Castles.

Each round the capital unlocks one more of its six neighbours, clockwise from
the top, up to all six. Every unlocked neighbour yields 1 of the nation's
primary resource per turn, whatever stands on it. There is no flat stipend.
"""

from typing import List, Optional, Tuple

from map_gen import get_hex_neighbors
from models import ResourcePool, nation_name, primary_resource
from state import GameState, load_config, log_event

Coords = Tuple[int, int, int]


def unlocked_count(round_number: int, cap: Optional[int] = None) -> int:
    """Number of capital neighbours generating income in ``round_number``."""
    if cap is None:
        cap = load_config().get('max_unlocked_hexes', 6)
    return max(0, min(round_number, cap, 6))


def unlocked_capital_hexes(game_state: GameState, player_id: str) -> List[Coords]:
    """
    Coordinates unlocked around the player's capital for the current round.

    Args:
        game_state: Current snapshot
        player_id: 'player1' or 'player2'

    Returns:
        Neighbour coordinates in clockwise order from the top; empty without a capital
    """
    capital_hex = game_state.get_capital_hex(player_id)
    if capital_hex is None:
        return []
    ring = get_hex_neighbors(capital_hex.q, capital_hex.r, capital_hex.s)
    return ring[:unlocked_count(game_state.round)]


def calculate_income(game_state: GameState, player_id: str) -> Tuple[ResourcePool, List[Coords]]:
    """
    Compute the player's pool after this turn's income, without touching the state.

    Returns:
        (new resource pool, unlocked coordinates)
    """
    player = game_state.get_player(player_id)
    resource = primary_resource(player.nation)
    coords = unlocked_capital_hexes(game_state, player_id)
    if resource is None or not coords:
        return player.resources, []
    return player.resources.add(resource, len(coords)), coords


def collect_resources(game_state: GameState) -> None:
    """
    Apply the active player's income to a snapshot the caller owns.

    No capital yet means no income and no log line.
    """
    player_id = game_state.current_player
    player = game_state.get_player(player_id)
    new_pool, coords = calculate_income(game_state, player_id)
    if not coords:
        return

    resource = primary_resource(player.nation)
    generated = new_pool.get(resource) - player.resources.get(resource)
    player.resources = new_pool
    game_state.resource_hexes[player_id] = list(coords)
    log_event(game_state,
              f"{nation_name(player.nation)} generated {generated} {resource.title()} "
              f"from {len(coords)} hexes around capital (round {game_state.round})",
              resource=resource, amount=generated, unlocked_hexes=[list(c) for c in coords])
