"""Builders shared by the test modules."""

from capital import place_capital
from models import Hex, Unit, create_unit
from state import new_game
from turns import advance_phase

# Standard capital sites on the 15x11 board
P1_CAPITAL = (0, -3, 3)
P2_CAPITAL = (0, 3, -3)


def make_started_game(width=15, height=11):
    """Create a game with both capitals on their standard sites."""
    state = new_game(width, height)
    state = place_capital(state, P1_CAPITAL, create_unit('altaria_capital'))
    state = place_capital(state, P2_CAPITAL, create_unit('cartasia_capital'))
    return state


def advance_to(state, phase, max_steps=20):
    """Advance phases until ``phase`` is reached."""
    for _ in range(max_steps):
        if state.current_phase == phase:
            return state
        state = advance_phase(state)
    raise AssertionError(f"Never reached {phase}")


def make_phase_state(phase, player='player1'):
    """Started game copied and forced into ``phase`` for ``player``."""
    state = make_started_game().copy()
    state.current_phase = phase
    state.current_player = player
    return state


def put_unit(state, coords, template_key, **overrides):
    """Drop a template unit straight onto a hex of a state the test owns."""
    unit = create_unit(template_key)
    unit.id = f"{unit.id}_{'_'.join(str(c) for c in coords)}"
    for name, value in overrides.items():
        setattr(unit, name, value)
    state.get_hex(coords).unit = unit
    return unit


def make_unit(name='Test Unit', faction='altaria', attack_power=2, hit_points=3,
              max_hit_points=None, movement=2, range=1, unit_type='infantry'):
    return Unit(
        id=name.lower().replace(' ', '-'),
        name=name,
        type=unit_type,
        faction=faction,
        attack_power=attack_power,
        hit_points=hit_points,
        max_hit_points=max_hit_points if max_hit_points is not None else hit_points,
        movement=movement,
        range=range,
    )


def make_ring(center=(0, 0, 0), owner='player1', terrain='plain'):
    """A centre hex and its six neighbours, all with the same owner and terrain."""
    q, r, s = center
    hexes = [Hex(q=q, r=r, s=s, terrain=terrain, owner=owner)]
    for dq, dr, ds in [(0, -1, 1), (1, -1, 0), (1, 0, -1), (0, 1, -1), (-1, 1, 0), (-1, 0, 1)]:
        hexes.append(Hex(q=q + dq, r=r + dr, s=s + ds, terrain=terrain, owner=owner))
    return hexes
