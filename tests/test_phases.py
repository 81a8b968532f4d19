import pytest

from orders import place_unit
from models import create_unit
from phases import PHASE_CYCLE, PHASES, ActionKind, Phase, can_perform_action, display_name, get_next_phase
from state import GameState
from tests.helpers import advance_to, make_phase_state, make_started_game
from turns import advance_phase


ALLOWED = {
    Phase.SETUP: set(),
    Phase.RESOURCE: set(),
    Phase.DRAW: set(),
    Phase.DEVELOPMENT_1: {ActionKind.PLACE_UNIT, ActionKind.PLACE_BUILDING, ActionKind.PLAY_CARD},
    Phase.MOVEMENT: {ActionKind.MOVE_UNIT},
    Phase.COMBAT: {ActionKind.ATTACK},
    Phase.DEVELOPMENT_2: {ActionKind.PLACE_UNIT, ActionKind.PLACE_BUILDING, ActionKind.PLAY_CARD},
    Phase.END: set(),
}


class TestPhaseTable:

    def test_every_phase_has_metadata(self):
        assert set(PHASES) == set(Phase)

    def test_display_names(self):
        assert display_name(Phase.DEVELOPMENT_1) == 'Development Phase'
        assert display_name(Phase.DEVELOPMENT_2) == 'Second Development Phase'
        assert display_name(Phase.END) == 'End Phase'

    def test_cycle(self):
        assert get_next_phase(Phase.SETUP) == Phase.RESOURCE
        assert [get_next_phase(p) for p in PHASE_CYCLE] == PHASE_CYCLE[1:] + [Phase.RESOURCE]

    @pytest.mark.parametrize("phase", list(Phase))
    @pytest.mark.parametrize("action", list(ActionKind))
    def test_can_perform_action(self, phase, action):
        state = GameState(players={}, current_phase=phase)
        assert can_perform_action(state, action) == (action in ALLOWED[phase])

    def test_string_action_names(self):
        state = GameState(players={}, current_phase=Phase.MOVEMENT)
        assert can_perform_action(state, 'moveUnit')
        assert not can_perform_action(state, 'attack')
        assert not can_perform_action(state, 'teleport')

    def test_query_is_idempotent_and_pure(self, started_game):
        before = started_game.to_dict()
        log_size = len(started_game.log)
        answers = [can_perform_action(started_game, ActionKind.PLACE_UNIT) for _ in range(3)]
        assert answers == [False, False, False]
        assert started_game.to_dict() == before
        assert len(started_game.log) == log_size


class TestAdvancePhase:
    """Phase transitions and their entry effects."""

    def test_walk_through_turn(self, started_game):
        state = started_game
        seen = [state.current_phase]
        for _ in range(6):
            state = advance_phase(state)
            seen.append(state.current_phase)
        assert seen == PHASE_CYCLE
        assert state.current_player == 'player1'

    def test_phase_change_logged(self, started_game):
        state = advance_phase(started_game)
        assert state.current_phase == Phase.DRAW
        events = [entry['event'] for entry in state.log[len(started_game.log):]]
        assert events == ['Phase changed to Draw Phase', 'Altaria drew a card']
        assert state.players['player1'].has_drawn_card

    def test_input_snapshot_untouched(self, started_game):
        advance_phase(started_game)
        assert started_game.current_phase == Phase.RESOURCE

    def test_end_hands_over_to_player2(self):
        state = make_phase_state(Phase.END)
        turn, round_number = state.turn, state.round
        state = advance_phase(state)
        assert state.current_phase == Phase.RESOURCE
        assert state.current_player == 'player2'
        assert state.turn == turn + 1
        assert state.round == round_number

    def test_round_increments_when_player1_resumes(self):
        state = make_phase_state(Phase.END, player='player2')
        turn, round_number = state.turn, state.round
        state = advance_phase(state)
        assert state.current_player == 'player1'
        assert state.turn == turn + 1
        assert state.round == round_number + 1

    def test_turn_begins_logged(self):
        state = advance_phase(make_phase_state(Phase.END))
        events = [entry['event'] for entry in state.log]
        assert 'Turn 2 begins' in events

    def test_end_resets_only_ending_player(self):
        state = make_phase_state(Phase.DEVELOPMENT_2)
        for player in state.players.values():
            player.units_placed = 3
            player.buildings_placed = 1
        state = advance_phase(state)
        assert state.current_phase == Phase.END
        assert state.players['player1'].units_placed == 0
        assert state.players['player1'].buildings_placed == 0
        assert state.players['player2'].units_placed == 3
        assert state.players['player2'].buildings_placed == 1
        assert state.last_action == 'Altaria ends their turn'

    def test_setup_cannot_be_skipped(self, game):
        state = advance_phase(game)
        assert state.current_phase == Phase.SETUP
        assert state.last_rejection == {
            'category': 'setup', 'reason': 'Both capitals must be placed before the game starts'}

    def test_full_round(self):
        state = make_started_game()
        state = advance_to(state, Phase.END)
        state = advance_phase(state)
        state = advance_to(state, Phase.END)
        state = advance_phase(state)
        assert (state.current_player, state.turn, state.round) == ('player1', 3, 2)

    def test_development_allows_placement_after_transition(self, started_game):
        state = advance_to(started_game, Phase.DEVELOPMENT_1)
        state = place_unit(state, (2, -3, 1), create_unit('altaria_mage'))
        assert state.last_rejection is None
        assert state.get_hex((2, -3, 1)).unit.name == 'Divine Mage'
