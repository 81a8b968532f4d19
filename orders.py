"""
Placement, movement and attack orders for Kingdoms & Castles.

Validators are pure and raise an ActionRejected subclass; the intent functions
catch it and hand back a rejection snapshot, so no illegal order ever reaches
the board or escapes to the caller.
"""

import time
from dataclasses import replace
from typing import Any, List

from map_gen import hex_distance, hex_id
from models import Building, Hex, IMPASSABLE_TERRAIN, Unit
from phases import ActionKind, can_perform_action, display_name
from resolution import resolve_combat
from state import GameState, log_event, player_label, reject_action


class ActionRejected(Exception):
    """Base class for recoverable rule violations."""
    category = 'rejected'


class PhaseViolation(ActionRejected):
    """Action attempted outside the phases that allow it."""
    category = 'phase'


class PlacementViolation(ActionRejected):
    """Target hex occupied, owned by someone else, or impassable."""
    category = 'placement'


class MovementViolation(ActionRejected):
    """Destination unreachable, occupied, or the unit is not ours."""
    category = 'movement'


class CombatViolation(ActionRejected):
    """Attack with missing units, friendly target, or out of range."""
    category = 'combat'


class SetupViolation(ActionRejected):
    """Capital placement outside the enclosed friendly ring, or out of turn."""
    category = 'setup'


PHASE_VERBS = {
    ActionKind.PLACE_UNIT: 'place units',
    ActionKind.PLACE_BUILDING: 'place buildings',
    ActionKind.MOVE_UNIT: 'move units',
    ActionKind.ATTACK: 'attack',
    ActionKind.PLAY_CARD: 'play cards',
}


def require_phase(game_state: GameState, action: ActionKind) -> None:
    """Raise PhaseViolation unless the current phase allows ``action``."""
    if not can_perform_action(game_state, action):
        raise PhaseViolation(
            f"Cannot {PHASE_VERBS[action]} during {display_name(game_state.current_phase)}")


def resolve_hex(game_state: GameState, hex_ref: Any, error_cls=ActionRejected) -> Hex:
    """Look ``hex_ref`` up on the snapshot's own board."""
    target = game_state.get_hex(hex_ref)
    if target is None:
        label = hex_id(*hex_ref) if isinstance(hex_ref, tuple) else getattr(hex_ref, 'id', hex_ref)
        raise error_cls(f"Hex {label} is not on the board")
    return target


def is_valid_placement(hex_obj: Hex, current_player: str) -> bool:
    """True if ``current_player`` may put a unit on ``hex_obj``."""
    return (hex_obj.owner == current_player
            and hex_obj.unit is None
            and hex_obj.terrain != IMPASSABLE_TERRAIN)


def is_valid_move(from_hex: Hex, to_hex: Hex) -> bool:
    """True if the unit on ``from_hex`` can reach ``to_hex`` this phase."""
    if from_hex.unit is None:
        return False
    if to_hex.unit is not None:
        return False
    if to_hex.terrain == IMPASSABLE_TERRAIN:
        return False
    return hex_distance(from_hex, to_hex) <= from_hex.unit.movement


def is_valid_attack(attacker_hex: Hex, defender_hex: Hex) -> bool:
    """Both hexes hold units of different factions and the target is within range."""
    attacker = attacker_hex.unit
    defender = defender_hex.unit
    if attacker is None or defender is None:
        return False
    if attacker.is_capital or attacker.faction == defender.faction:
        return False
    return hex_distance(attacker_hex, defender_hex) <= attacker.range


def movement_range(game_state: GameState, hex_ref: Any) -> List[str]:
    """Ids of every hex the unit on ``hex_ref`` could move to."""
    origin = game_state.get_hex(hex_ref)
    if origin is None or origin.unit is None:
        return []
    return [target.id for target in game_state.hexes if is_valid_move(origin, target)]


def attack_targets(game_state: GameState, hex_ref: Any) -> List[str]:
    """Ids of enemy-held hexes the unit on ``hex_ref`` can attack."""
    origin = game_state.get_hex(hex_ref)
    if origin is None or origin.unit is None:
        return []
    return [target.id for target in game_state.hexes if is_valid_attack(origin, target)]


def stamp_unit_id(game_state: GameState, template_id: str) -> str:
    """Template id plus placement timestamp, unique on this board."""
    taken = {h.unit.id for h in game_state.hexes if h.unit is not None}
    unit_id = f"{template_id}_{time.time_ns()}"
    suffix = 1
    candidate = unit_id
    while candidate in taken:
        candidate = f"{unit_id}_{suffix}"
        suffix += 1
    return candidate


def _own_unit(game_state: GameState, unit: Unit) -> bool:
    return game_state.player_for_faction(unit.faction) == game_state.current_player


def validate_unit_placement(game_state: GameState, hex_ref: Any, unit: Unit) -> Hex:
    require_phase(game_state, ActionKind.PLACE_UNIT)
    target = resolve_hex(game_state, hex_ref, PlacementViolation)
    if unit.is_capital:
        raise PlacementViolation("Capitals can only be founded during setup")
    if not _own_unit(game_state, unit):
        raise PlacementViolation(f"{unit.name} does not answer to {player_label(game_state, game_state.current_player)}")
    if target.owner != game_state.current_player:
        raise PlacementViolation(f"Hex {target.id} is not in your territory")
    if target.unit is not None:
        raise PlacementViolation(f"Hex {target.id} is already occupied")
    if target.terrain == IMPASSABLE_TERRAIN:
        raise PlacementViolation(f"Cannot place units on {target.terrain} terrain")
    return target


def validate_building_placement(game_state: GameState, hex_ref: Any, building: Building) -> Hex:
    require_phase(game_state, ActionKind.PLACE_BUILDING)
    target = resolve_hex(game_state, hex_ref, PlacementViolation)
    if target.owner != game_state.current_player:
        raise PlacementViolation(f"Hex {target.id} is not in your territory")
    if target.terrain == IMPASSABLE_TERRAIN:
        raise PlacementViolation(f"Cannot build on {target.terrain} terrain")
    if target.building is not None:
        raise PlacementViolation(f"Hex {target.id} already has a building")
    capital_hex = game_state.get_capital_hex(game_state.current_player)
    if capital_hex is None or hex_distance(capital_hex, target) != 1:
        raise PlacementViolation("Buildings must be raised next to your capital")
    return target


def validate_move(game_state: GameState, from_ref: Any, to_ref: Any) -> tuple:
    require_phase(game_state, ActionKind.MOVE_UNIT)
    origin = resolve_hex(game_state, from_ref, MovementViolation)
    destination = resolve_hex(game_state, to_ref, MovementViolation)
    if origin.unit is None:
        raise MovementViolation(f"No unit on hex {origin.id}")
    if not _own_unit(game_state, origin.unit):
        raise MovementViolation(f"{origin.unit.name} does not answer to {player_label(game_state, game_state.current_player)}")
    if destination.unit is not None:
        raise MovementViolation(f"Hex {destination.id} is occupied")
    if destination.terrain == IMPASSABLE_TERRAIN:
        raise MovementViolation(f"Cannot move onto {destination.terrain} terrain")
    distance = hex_distance(origin, destination)
    if distance > origin.unit.movement:
        raise MovementViolation(
            f"{origin.unit.name} can move {origin.unit.movement} hexes, {destination.id} is {distance} away")
    return origin, destination


def validate_attack(game_state: GameState, attacker_ref: Any, defender_ref: Any) -> tuple:
    require_phase(game_state, ActionKind.ATTACK)
    attacker_hex = resolve_hex(game_state, attacker_ref, CombatViolation)
    defender_hex = resolve_hex(game_state, defender_ref, CombatViolation)
    if attacker_hex.unit is None or defender_hex.unit is None:
        raise CombatViolation("Combat needs a unit on both hexes")
    if not _own_unit(game_state, attacker_hex.unit):
        raise CombatViolation(f"{attacker_hex.unit.name} does not answer to {player_label(game_state, game_state.current_player)}")
    if not attacker_hex.unit.alive or not defender_hex.unit.alive:
        raise CombatViolation("Destroyed units cannot fight")
    if not is_valid_attack(attacker_hex, defender_hex):
        raise CombatViolation(f"{attacker_hex.unit.name} cannot attack {defender_hex.unit.name}")
    return attacker_hex, defender_hex


def place_unit(game_state: GameState, hex_ref: Any, unit: Unit) -> GameState:
    """
    Deploy a unit onto a hex of the active player's territory.

    Args:
        game_state: Current snapshot
        hex_ref: Target Hex, hex id, or (q, r, s)
        unit: Template to copy; the placed unit receives a stamped id

    Returns:
        New snapshot, or a rejection snapshot with an explanatory log entry
    """
    if game_state.game_over:
        return game_state
    try:
        validate_unit_placement(game_state, hex_ref, unit)
    except ActionRejected as e:
        return reject_action(game_state, e)

    new_state = game_state.copy()
    target = new_state.get_hex(hex_ref)
    placed = replace(unit, id=stamp_unit_id(new_state, unit.id), abilities=list(unit.abilities))
    target.unit = placed
    new_state.active_player.units_placed += 1
    log_event(new_state, f"{player_label(new_state, new_state.current_player)} placed {unit.name}",
              hex_id=target.id, unit_id=placed.id)
    return new_state


def place_building(game_state: GameState, hex_ref: Any, building: Building) -> GameState:
    """Raise a building next to the active player's capital."""
    if game_state.game_over:
        return game_state
    try:
        validate_building_placement(game_state, hex_ref, building)
    except ActionRejected as e:
        return reject_action(game_state, e)

    new_state = game_state.copy()
    target = new_state.get_hex(hex_ref)
    target.building = Building(id=building.id, name=building.name, type=building.type,
                               owner=new_state.current_player, effects=list(building.effects))
    new_state.active_player.buildings_placed += 1
    log_event(new_state, f"{player_label(new_state, new_state.current_player)} built {building.name}",
              hex_id=target.id, building_id=building.id)
    return new_state


def move_unit(game_state: GameState, from_ref: Any, to_ref: Any) -> GameState:
    """Move one of the active player's units during the Movement Phase."""
    if game_state.game_over:
        return game_state
    try:
        validate_move(game_state, from_ref, to_ref)
    except ActionRejected as e:
        return reject_action(game_state, e)

    new_state = game_state.copy()
    origin = new_state.get_hex(from_ref)
    destination = new_state.get_hex(to_ref)
    unit = origin.unit
    destination.unit = unit
    origin.unit = None
    log_event(new_state, f"{unit.name} moved from {origin.id} to {destination.id}",
              unit_id=unit.id, from_hex=origin.id, to_hex=destination.id)
    return new_state


def attack(game_state: GameState, attacker_ref: Any, defender_ref: Any) -> GameState:
    """
    Resolve an attack and write the outcome back onto a new board.

    Fallen units leave their hex, except capitals, which stay with
    hit_points <= 0 for the end-of-turn victory check.
    """
    if game_state.game_over:
        return game_state
    try:
        validate_attack(game_state, attacker_ref, defender_ref)
    except ActionRejected as e:
        return reject_action(game_state, e)

    new_state = game_state.copy()
    attacker_hex = new_state.get_hex(attacker_ref)
    defender_hex = new_state.get_hex(defender_ref)
    result = resolve_combat(attacker_hex.unit, defender_hex.unit)

    attacker_hex.unit.hit_points = result.attacker_hp
    defender_hex.unit.hit_points = result.defender_hp
    for line in result.log:
        log_event(new_state, line, combat=True)

    if result.attacker_removed and not attacker_hex.unit.is_capital:
        attacker_hex.unit = None
    if result.defender_removed and not defender_hex.unit.is_capital:
        defender_hex.unit = None

    log_event(new_state, f"Combat at {defender_hex.id} ended: {result.outcome}",
              outcome=result.outcome, attacker_hex=attacker_hex.id, defender_hex=defender_hex.id,
              attacker_damage=result.attacker_damage, defender_damage=result.defender_damage)
    return new_state
