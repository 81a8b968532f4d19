"""
Board generation module for Kingdoms & Castles.
Builds the hexagonal battlefield in cube coordinates with fixed terrain features.

Territory banding: rows above r = -1 belong to player1, rows below r = 1 to
player2, and the three rows in between are a neutral buffer.
"""

from typing import Dict, Iterable, List, Optional, Tuple
from models import Hex, NEUTRAL

Coords = Tuple[int, int, int]

# Clockwise from the top neighbour of a flat-topped hex.
HEX_DIRECTIONS: List[Coords] = [
    (0, -1, 1),   # top
    (1, -1, 0),   # top right
    (1, 0, -1),   # bottom right
    (0, 1, -1),   # bottom
    (-1, 1, 0),   # bottom left
    (-1, 0, 1),   # top left
]

# Hand-placed terrain stamped over the plain board.
TERRAIN_FEATURES: List[Tuple[Coords, str]] = [
    ((-4, -1, 5), 'mountain'),
    ((-3, -2, 5), 'mountain'),
    ((3, 2, -5), 'forest'),
    ((4, 1, -5), 'forest'),
] + [((i, 0, -i), 'river') for i in range(-2, 3)]


class BoardInvariantError(Exception):
    """Raised when a generated hex breaks the q + r + s == 0 rule."""
    pass


def hex_id(q: int, r: int, s: int) -> str:
    """Stable string id for a cube coordinate."""
    return f"{q},{r},{s}"


def get_hex_neighbors(q: int, r: int, s: int) -> List[Coords]:
    """
    Get the 6 neighbouring cube coordinates, clockwise from the top.

    Args:
        q, r, s: Cube coordinates of the centre hex

    Returns:
        List of (q, r, s) tuples, whether or not they lie on a board
    """
    return [(q + dq, r + dr, s + ds) for dq, dr, ds in HEX_DIRECTIONS]


def hex_distance(a: Hex, b: Hex) -> int:
    """Number of steps between two hexes."""
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def territory_owner(r: int) -> str:
    if r < -1:
        return 'player1'
    if r > 1:
        return 'player2'
    return NEUTRAL


def index_hexes(hexes: Iterable[Hex]) -> Dict[str, Hex]:
    """Map hex id to hex. Rebuilt on demand, never cached across snapshots."""
    return {h.id: h for h in hexes}


def get_adjacent_hexes(hexes: Iterable[Hex], center: Hex) -> List[Hex]:
    """Neighbours of ``center`` that exist on the board, in clockwise order."""
    by_id = index_hexes(hexes)
    adjacent = []
    for coords in get_hex_neighbors(center.q, center.r, center.s):
        neighbor = by_id.get(hex_id(*coords))
        if neighbor is not None:
            adjacent.append(neighbor)
    return adjacent


def central_row(hexes: Iterable[Hex]) -> List[Hex]:
    """The border hexes (r == 0) used by the domination check."""
    return [h for h in hexes if h.r == 0]


def initialize_board(width: int, height: int) -> List[Hex]:
    """
    Generate the battlefield.

    Same inputs always produce the same board; there is no randomness.

    Args:
        width: Number of columns (odd values give a symmetric board)
        height: Number of rows through the centre column

    Returns:
        List of Hex objects ordered by q, then r

    Raises:
        BoardInvariantError: If a generated coordinate breaks q + r + s == 0
    """
    half_w = width // 2
    half_h = height // 2
    hexes: List[Hex] = []

    for q in range(-half_w, half_w + 1):
        r1 = max(-half_h, -q - half_h)
        r2 = min(half_h, -q + half_h)
        for r in range(r1, r2 + 1):
            s = -q - r
            if q + r + s != 0:
                raise BoardInvariantError(f"Hex ({q}, {r}, {s}) breaks q + r + s == 0")
            hexes.append(Hex(q=q, r=r, s=s, terrain='plain', owner=territory_owner(r)))

    by_id = index_hexes(hexes)
    for coords, terrain in TERRAIN_FEATURES:
        target = by_id.get(hex_id(*coords))
        if target is not None:
            target.terrain = terrain

    return hexes


def get_map_stats(hexes: List[Hex]) -> Dict[str, Dict[str, int]]:
    """
    Count hexes by terrain and by territory owner.

    Returns:
        {'total': {...}, 'terrain': {terrain: count}, 'territory': {owner: count}}
    """
    terrain_counts: Dict[str, int] = {}
    territory_counts: Dict[str, int] = {}
    for h in hexes:
        terrain_counts[h.terrain] = terrain_counts.get(h.terrain, 0) + 1
        territory_counts[h.owner] = territory_counts.get(h.owner, 0) + 1
    return {
        'total': {'hexes': len(hexes)},
        'terrain': terrain_counts,
        'territory': territory_counts,
    }


def find_hex(hexes: Iterable[Hex], q: int, r: int, s: Optional[int] = None) -> Optional[Hex]:
    """Look up a hex by coordinates; ``s`` is derived when omitted."""
    if s is None:
        s = -q - r
    return index_hexes(hexes).get(hex_id(q, r, s))
