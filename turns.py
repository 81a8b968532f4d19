"""
Turn and phase progression for Kingdoms & Castles.

advance_phase moves the game one step through
RESOURCE -> DRAW -> DEVELOPMENT_1 -> MOVEMENT -> COMBAT -> DEVELOPMENT_2 -> END
and back to RESOURCE for the other player. Entering a phase runs its
bookkeeping:
- RESOURCE: capital income for the active player
- DRAW: marks the card draw (no deck yet)
- END: resets the ending player's per-turn counters, then checks victory
"""

from economy import collect_resources
from orders import SetupViolation
from phases import Phase, display_name, get_next_phase
from state import GameState, log_event, player_label, reject_action
from victory import apply_victory


def enter_phase(game_state: GameState, new_phase: Phase) -> None:
    """
    Switch a snapshot the caller owns into ``new_phase`` and run its entry effects.

    Handles the END -> RESOURCE hand-over: the other player becomes active,
    turn increments, and round increments when control returns to player1.
    """
    old_phase = game_state.current_phase
    player_name = player_label(game_state, game_state.current_player)

    if old_phase == Phase.END and new_phase == Phase.RESOURCE:
        game_state.current_player = game_state.get_opponent_id(game_state.current_player)
        game_state.turn += 1
        if game_state.current_player == 'player1':
            game_state.round += 1
        player_name = player_label(game_state, game_state.current_player)
        game_state.current_phase = new_phase
        log_event(game_state, f"Turn {game_state.turn} begins",
                  previous_player=game_state.get_opponent_id(game_state.current_player))
    else:
        game_state.current_phase = new_phase

    log_event(game_state, f"Phase changed to {display_name(new_phase)}",
              previous_phase=old_phase.value, new_phase=new_phase.value)

    if new_phase == Phase.RESOURCE:
        collect_resources(game_state)
    elif new_phase == Phase.DRAW:
        game_state.active_player.has_drawn_card = True
        log_event(game_state, f"{player_name} drew a card")
    elif new_phase == Phase.END:
        player = game_state.active_player
        player.units_placed = 0
        player.buildings_placed = 0
        player.has_drawn_card = False
        log_event(game_state, f"{player_name} ends their turn")
        apply_victory(game_state)


def advance_phase(game_state: GameState) -> GameState:
    """
    Advance to the next phase.

    Args:
        game_state: Current snapshot

    Returns:
        New snapshot. During SETUP this is a rejection (capitals are placed
        with capital.place_capital). Once the game is over the same snapshot
        is returned untouched.
    """
    if game_state.game_over:
        return game_state
    if game_state.current_phase == Phase.SETUP:
        return reject_action(game_state, SetupViolation(
            "Both capitals must be placed before the game starts"))

    new_state = game_state.copy()
    enter_phase(new_state, get_next_phase(game_state.current_phase))
    return new_state
