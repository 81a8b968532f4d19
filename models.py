# Models for game elements of Kingdoms & Castles

from dataclasses import dataclass, field, replace
from typing import List, Dict, Optional, Tuple

PLAYER_IDS = ('player1', 'player2')
NEUTRAL = 'neutral'

IMPASSABLE_TERRAIN = 'mountain'

BUILDING_TYPES = ('resource', 'defense', 'utility')

RESOURCE_TYPES = ('faith', 'chaos', 'gold', 'magic', 'blood')

# First entry is the nation's primary resource.
NATION_RESOURCES: Dict[str, List[str]] = {
    'altaria': ['faith'],
    'belaklara': ['gold'],
    'void': ['chaos'],
    'durandur': ['magic'],
    'cartasia': ['blood'],
    'celestial_empire': ['faith', 'magic'],
    'black_council': ['blood', 'chaos'],
    'mercenary_guild': ['gold', 'blood'],
    'chaos_scholars': ['chaos', 'magic'],
    'divine_commerce': ['faith', 'gold'],
}

NATION_NAMES: Dict[str, str] = {
    'altaria': 'Altaria',
    'belaklara': 'Belaklara',
    'void': 'Void',
    'durandur': 'Durandur',
    'cartasia': 'Cartasia',
    'celestial_empire': 'Celestial Empire',
    'black_council': 'Black Council',
    'mercenary_guild': 'Mercenary Guild',
    'chaos_scholars': 'Chaos Scholars',
    'divine_commerce': 'Divine Commerce',
}


def primary_resource(nation: str) -> Optional[str]:
    """Return the resource a nation's capital generates, or None for unknown nations."""
    kinds = NATION_RESOURCES.get(nation, [])
    return kinds[0] if kinds else None


def nation_name(nation: str) -> str:
    return NATION_NAMES.get(nation, nation.replace('_', ' ').title())


@dataclass
class Unit:
    """
    A unit standing on a hex.

    Templates carry the base id (e.g. 'altaria-infantry'); placed units get a
    stamped id so several copies of one template can share the board.
    """
    id: str
    name: str
    type: str  # infantry, archer, cavalry, mage, hero or capital
    faction: str  # Nation of the unit ('altaria', 'cartasia', ...) or 'neutral'
    attack_power: int
    hit_points: int
    max_hit_points: int
    movement: int
    range: int
    abilities: List[str] = field(default_factory=list)
    description: str = ''

    @property
    def is_capital(self) -> bool:
        return self.type == 'capital'

    @property
    def alive(self) -> bool:
        return self.hit_points > 0

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'faction': self.faction,
            'attack_power': self.attack_power,
            'hit_points': self.hit_points,
            'max_hit_points': self.max_hit_points,
            'movement': self.movement,
            'range': self.range,
            'abilities': list(self.abilities),
            'description': self.description,
        }


@dataclass
class Building:
    """A structure raised next to a capital. Recorded on the board, no income effect."""
    id: str
    name: str
    type: str  # One of BUILDING_TYPES
    owner: str
    effects: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'owner': self.owner,
            'effects': list(self.effects),
        }


@dataclass
class Hex:
    """Represents a board hex in cube coordinates with terrain and territory owner."""
    q: int
    r: int
    s: int
    terrain: str = 'plain'
    owner: str = NEUTRAL  # Territory owner, fixed at generation
    unit: Optional[Unit] = None
    building: Optional[Building] = None

    @property
    def id(self) -> str:
        return f"{self.q},{self.r},{self.s}"

    @property
    def coords(self) -> Tuple[int, int, int]:
        return (self.q, self.r, self.s)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'q': self.q,
            'r': self.r,
            's': self.s,
            'terrain': self.terrain,
            'owner': self.owner,
            'unit': self.unit.to_dict() if self.unit else None,
            'building': self.building.to_dict() if self.building else None,
        }


@dataclass
class ResourcePool:
    """Fixed-shape pool over the five resource kinds. Arithmetic returns new pools."""
    faith: int = 0
    chaos: int = 0
    gold: int = 0
    magic: int = 0
    blood: int = 0

    def get(self, kind: str) -> int:
        if kind not in RESOURCE_TYPES:
            raise KeyError(f"Unknown resource kind: {kind}")
        return getattr(self, kind)

    def add(self, kind: str, amount: int) -> 'ResourcePool':
        return replace(self, **{kind: self.get(kind) + amount})

    def total(self) -> int:
        return sum(self.get(kind) for kind in RESOURCE_TYPES)

    def to_dict(self) -> Dict[str, int]:
        return {kind: self.get(kind) for kind in RESOURCE_TYPES}


@dataclass
class PlayerState:
    """
    Per-player bookkeeping.

    The capital is stored as ids only; GameState resolves them against the
    live board so the reference cannot go stale.
    """
    id: str
    nation: str
    resources: ResourcePool = field(default_factory=ResourcePool)
    units_placed: int = 0
    buildings_placed: int = 0
    capital_hex_id: Optional[str] = None
    capital_unit_id: Optional[str] = None
    has_drawn_card: bool = False

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'nation': self.nation,
            'resources': self.resources.to_dict(),
            'units_placed': self.units_placed,
            'buildings_placed': self.buildings_placed,
            'capital_hex_id': self.capital_hex_id,
            'capital_unit_id': self.capital_unit_id,
            'has_drawn_card': self.has_drawn_card,
        }


UNIT_TEMPLATES: Dict[str, Unit] = {
    # Altaria (faith)
    'altaria_infantry': Unit(
        id='altaria-infantry', name='Faith Warrior', type='infantry', faction='altaria',
        attack_power=2, hit_points=3, max_hit_points=3, movement=2, range=1,
        abilities=['divine_shield'],
        description='Basic Altaria infantry protected by divine light'),
    'altaria_archer': Unit(
        id='altaria-archer', name='Lightbringer Archer', type='archer', faction='altaria',
        attack_power=3, hit_points=2, max_hit_points=2, movement=2, range=2,
        description='Ranged unit blessed with the power of light'),
    'altaria_mage': Unit(
        id='altaria-mage', name='Divine Mage', type='mage', faction='altaria',
        attack_power=3, hit_points=2, max_hit_points=2, movement=1, range=2,
        abilities=['healing_light'],
        description='Can heal adjacent friendly units'),
    # Cartasia (blood)
    'cartasia_infantry': Unit(
        id='cartasia-infantry', name='Blood Warrior', type='infantry', faction='cartasia',
        attack_power=3, hit_points=2, max_hit_points=2, movement=2, range=1,
        abilities=['bloodthirst'],
        description='Basic Cartasia infantry with aggressive tactics'),
    'cartasia_archer': Unit(
        id='cartasia-archer', name='Shadow Archer', type='archer', faction='cartasia',
        attack_power=2, hit_points=2, max_hit_points=2, movement=2, range=3,
        description='Long-range unit that can attack from the shadows'),
    'cartasia_mage': Unit(
        id='cartasia-mage', name='Blood Mage', type='mage', faction='cartasia',
        attack_power=4, hit_points=1, max_hit_points=1, movement=1, range=2,
        abilities=['life_drain'],
        description='Can drain life from enemies to heal itself'),
    # Capitals
    'altaria_capital': Unit(
        id='altaria-capital', name='Divine Citadel', type='capital', faction='altaria',
        attack_power=0, hit_points=15, max_hit_points=15, movement=0, range=0,
        abilities=['faith_generation'],
        description='The sacred capital of Altaria'),
    'cartasia_capital': Unit(
        id='cartasia-capital', name='Bloodkeep', type='capital', faction='cartasia',
        attack_power=0, hit_points=15, max_hit_points=15, movement=0, range=0,
        abilities=['blood_generation'],
        description='The dark capital of Cartasia'),
}


def create_unit(template_key: str) -> Unit:
    """
    Return a fresh copy of a unit template.

    Raises:
        KeyError: If the template key is unknown
    """
    template = UNIT_TEMPLATES[template_key]
    return replace(template, abilities=list(template.abilities))


def capital_template_for(nation: str) -> Optional[str]:
    """Template key of a nation's capital, if the nation has one."""
    key = f"{nation}_capital"
    return key if key in UNIT_TEMPLATES else None
