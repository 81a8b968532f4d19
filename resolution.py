from dataclasses import dataclass, field
from typing import List

from models import Unit


@dataclass
class CombatResult:
    """Outcome of one exchange. attacker_damage is the damage the attacker takes."""
    attacker_damage: int
    defender_damage: int
    attacker_hp: int
    defender_hp: int
    outcome: str  # 'attacker', 'defender' or 'draw'
    attacker_removed: bool = False
    defender_removed: bool = False
    log: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'attacker_damage': self.attacker_damage,
            'defender_damage': self.defender_damage,
            'attacker_hp': self.attacker_hp,
            'defender_hp': self.defender_hp,
            'outcome': self.outcome,
            'attacker_removed': self.attacker_removed,
            'defender_removed': self.defender_removed,
            'log': list(self.log),
        }


def resolve_combat(attacker: Unit, defender: Unit) -> CombatResult:
    """Resolve a simultaneous exchange of blows between two units.

    Both units strike with their own attack power in the same exchange; new hit
    points are computed for both sides before the outcome is classified.
    Neither unit is modified; the caller writes the result back to the board.
    """
    attacker_damage = defender.attack_power
    defender_damage = attacker.attack_power
    attacker_hp = attacker.hit_points - attacker_damage
    defender_hp = defender.hit_points - defender_damage

    log = [
        f"{attacker.name} attacks {defender.name}.",
        f"{attacker.name} deals {defender_damage} damage to {defender.name}.",
        f"{defender.name} retaliates with {attacker_damage} damage to {attacker.name}.",
        f"{attacker.name} has {attacker_hp} HP remaining.",
        f"{defender.name} has {defender_hp} HP remaining.",
    ]

    result = CombatResult(
        attacker_damage=attacker_damage,
        defender_damage=defender_damage,
        attacker_hp=attacker_hp,
        defender_hp=defender_hp,
        outcome='draw',
        log=log,
    )

    if defender_hp <= 0 and attacker_hp > 0:
        result.outcome = 'attacker'
        result.defender_removed = True
        log.append(f"{defender.name} is defeated!")
    elif attacker_hp <= 0 and defender_hp > 0:
        result.outcome = 'defender'
        result.attacker_removed = True
        log.append(f"{attacker.name} is defeated!")
    elif attacker_hp <= 0 and defender_hp <= 0:
        result.outcome = 'draw'
        result.attacker_removed = True
        result.defender_removed = True
        log.append("Both units were defeated in combat!")
    else:
        result.outcome = determine_winner_by_health(attacker_hp / attacker.max_hit_points,
                                                    defender_hp / defender.max_hit_points)
        if result.outcome == 'attacker':
            log.append(f"{attacker.name} won the combat!")
        elif result.outcome == 'defender':
            log.append(f"{defender.name} won the combat!")
        else:
            log.append("The combat ended in a draw!")

    return result


def determine_winner_by_health(attacker_ratio: float, defender_ratio: float) -> str:
    """Both survived: the side with the strictly higher remaining health ratio wins.

    Returns:
        "attacker", "defender", or "draw"
    """
    if attacker_ratio > defender_ratio:
        return "attacker"
    elif defender_ratio > attacker_ratio:
        return "defender"
    else:
        return "draw"
