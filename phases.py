"""
Phase table for Kingdoms & Castles.

Each phase declares which action classes it allows. can_perform_action is the
only place legality-by-phase is decided; every intent asks it first.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class Phase(Enum):
    SETUP = "SETUP"
    RESOURCE = "RESOURCE"
    DRAW = "DRAW"
    DEVELOPMENT_1 = "DEVELOPMENT_1"
    MOVEMENT = "MOVEMENT"
    COMBAT = "COMBAT"
    DEVELOPMENT_2 = "DEVELOPMENT_2"
    END = "END"


class ActionKind(Enum):
    PLACE_UNIT = "placeUnit"
    PLACE_BUILDING = "placeBuilding"
    MOVE_UNIT = "moveUnit"
    ATTACK = "attack"
    PLAY_CARD = "playCard"


@dataclass(frozen=True)
class PhaseData:
    id: Phase
    display_name: str
    description: str
    can_place_units: bool = False
    can_place_buildings: bool = False
    can_move_units: bool = False
    can_attack: bool = False
    can_play_cards: bool = False
    can_end_phase: bool = True

    def allows(self, action: ActionKind) -> bool:
        return {
            ActionKind.PLACE_UNIT: self.can_place_units,
            ActionKind.PLACE_BUILDING: self.can_place_buildings,
            ActionKind.MOVE_UNIT: self.can_move_units,
            ActionKind.ATTACK: self.can_attack,
            ActionKind.PLAY_CARD: self.can_play_cards,
        }[action]


PHASES: Dict[Phase, PhaseData] = {
    Phase.SETUP: PhaseData(
        Phase.SETUP, 'Setup Phase', 'Place your capital to start the game.'),
    Phase.RESOURCE: PhaseData(
        Phase.RESOURCE, 'Resource Phase', 'Collect resources from your capital.'),
    Phase.DRAW: PhaseData(
        Phase.DRAW, 'Draw Phase', 'Draw a card from your deck.'),
    Phase.DEVELOPMENT_1: PhaseData(
        Phase.DEVELOPMENT_1, 'Development Phase', 'Deploy units and buildings to your kingdom.',
        can_place_units=True, can_place_buildings=True, can_play_cards=True),
    Phase.MOVEMENT: PhaseData(
        Phase.MOVEMENT, 'Movement Phase', 'Move your units across the battlefield.',
        can_move_units=True),
    Phase.COMBAT: PhaseData(
        Phase.COMBAT, 'Combat Phase', 'Declare attacks against enemy units.',
        can_attack=True),
    Phase.DEVELOPMENT_2: PhaseData(
        Phase.DEVELOPMENT_2, 'Second Development Phase', 'Deploy additional units and buildings.',
        can_place_units=True, can_place_buildings=True, can_play_cards=True),
    Phase.END: PhaseData(
        Phase.END, 'End Phase', 'Resolve end-of-turn effects and check for victory.'),
}

# Turn order after setup; END wraps to RESOURCE.
PHASE_CYCLE = [
    Phase.RESOURCE,
    Phase.DRAW,
    Phase.DEVELOPMENT_1,
    Phase.MOVEMENT,
    Phase.COMBAT,
    Phase.DEVELOPMENT_2,
    Phase.END,
]


def get_next_phase(current_phase: Phase) -> Phase:
    """Phase that follows ``current_phase``. SETUP leads into RESOURCE."""
    if current_phase == Phase.SETUP:
        return Phase.RESOURCE
    index = PHASE_CYCLE.index(current_phase)
    return PHASE_CYCLE[(index + 1) % len(PHASE_CYCLE)]


def display_name(phase: Phase) -> str:
    return PHASES[phase].display_name


def can_perform_action(game_state: Any, action: Union[ActionKind, str]) -> bool:
    """
    Whether the current phase allows an action class. Pure lookup.

    Args:
        game_state: Snapshot to inspect (only current_phase is read)
        action: ActionKind or its string value ('placeUnit', 'moveUnit', ...)

    Returns:
        False for unknown action names
    """
    try:
        kind = action if isinstance(action, ActionKind) else ActionKind(action)
    except ValueError:
        return False
    phase_data = PHASES.get(game_state.current_phase)
    if phase_data is None:
        return False
    return phase_data.allows(kind)
