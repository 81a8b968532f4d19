"""
Capital founding for Kingdoms & Castles, the one-time SETUP sub-phase.

A capital needs a fully enclosed ring: all six neighbours must exist, be
passable, be empty and belong to the same player. player1 founds first,
then player2; the second founding starts turn 1 in the Resource Phase.
"""

from dataclasses import replace
from typing import Any, Iterable, List

from map_gen import get_adjacent_hexes
from models import Hex, IMPASSABLE_TERRAIN, Unit
from orders import ActionRejected, SetupViolation, stamp_unit_id
from phases import Phase
from state import GameState, log_event, player_label, reject_action
from turns import enter_phase


def is_valid_capital_position(hexes: Iterable[Hex], candidate: Hex, player: str) -> bool:
    """
    Check whether ``player`` may found a capital on ``candidate``.

    Args:
        hexes: The current board
        candidate: Hex to test
        player: 'player1' or 'player2'

    Returns:
        True only when exactly six qualifying neighbours surround the hex
    """
    if candidate.owner != player:
        return False
    qualifying = [
        neighbor for neighbor in get_adjacent_hexes(hexes, candidate)
        if neighbor.terrain != IMPASSABLE_TERRAIN
        and neighbor.unit is None
        and neighbor.owner == player
    ]
    return len(qualifying) == 6


def valid_capital_placements(game_state: GameState, player: str) -> List[str]:
    """Ids of every hex where ``player`` may found a capital on this board."""
    return [h.id for h in game_state.hexes
            if h.owner == player and is_valid_capital_position(game_state.hexes, h, player)]


def validate_capital_placement(game_state: GameState, hex_ref: Any, capital_unit: Unit) -> Hex:
    if game_state.current_phase != Phase.SETUP:
        raise SetupViolation("Capitals can only be placed during the Setup Phase")
    if not capital_unit.is_capital:
        raise SetupViolation(f"{capital_unit.name} is not a capital")
    player = game_state.active_player
    if capital_unit.faction != player.nation:
        raise SetupViolation(f"{capital_unit.name} is not the capital of {player_label(game_state, player.id)}")
    if player.capital_hex_id is not None:
        raise SetupViolation(f"{player_label(game_state, player.id)} already has a capital")
    target = game_state.get_hex(hex_ref)
    if target is None or not is_valid_capital_position(game_state.hexes, target, player.id):
        raise SetupViolation("Invalid capital position")
    return target


def place_capital(game_state: GameState, hex_ref: Any, capital_unit: Unit) -> GameState:
    """
    Found the active player's capital.

    Args:
        game_state: SETUP snapshot
        hex_ref: Hex, hex id or (q, r, s) to found on
        capital_unit: Capital template; it receives a stamped id

    Returns:
        New snapshot; rejection snapshot for an invalid position or phase
    """
    if game_state.game_over:
        return game_state
    try:
        validate_capital_placement(game_state, hex_ref, capital_unit)
    except ActionRejected as e:
        return reject_action(game_state, e)

    new_state = game_state.copy()
    target = new_state.get_hex(hex_ref)
    placed = replace(capital_unit, id=stamp_unit_id(new_state, capital_unit.id),
                     abilities=list(capital_unit.abilities))
    target.unit = placed

    player = new_state.active_player
    player.capital_hex_id = target.id
    player.capital_unit_id = placed.id
    log_event(new_state, f"{player_label(new_state, player.id)} placed their capital",
              hex_id=target.id, unit_id=placed.id)

    if player.id == 'player1':
        new_state.current_player = 'player2'
        log_event(new_state, f"{player_label(new_state, 'player2')}'s turn to place capital")
    else:
        new_state.current_player = 'player1'
        new_state.turn = 1
        new_state.round = 1
        enter_phase(new_state, Phase.RESOURCE)
        log_event(new_state, f"Setup complete. Starting game with {player_label(new_state, 'player1')}'s turn")

    return new_state
