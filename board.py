"""
Board model for the hexagonal tree-growing game.
Holds the 37 cells, their neighbour links and a hop-distance matrix,
and builds the standard spiral-indexed board for local play and tests.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from models import NO_NEIGHBOR, Cell

# 6 directions in axial coordinates: E, NE, NW, W, SW, SE
DIRECTIONS = [(1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1)]
BOARD_RADIUS = 3
UNREACHABLE = 99  # Distance stored for cells with no path between them


def get_hex_neighbors(q: int, r: int) -> List[Tuple[int, int]]:
    """
    Get the 6 neighbouring hex coordinates in axial system.

    Args:
        q: Axial coordinate q
        r: Axial coordinate r

    Returns:
        List of (q, r) coordinates, one per direction in DIRECTIONS order
    """
    return [(q + dq, r + dr) for dq, dr in DIRECTIONS]


def hex_distance(q1: int, r1: int, q2: int, r2: int) -> int:
    """Distance between two hexes in axial coordinates."""
    return max(abs(q1 - q2), abs(r1 - r2), abs(-(q1 + r1) + (q2 + r2)))


def ring_richness(ring: int) -> int:
    """Richness of a standard board cell by its ring: centre and ring 1 are richest."""
    return {0: 3, 1: 3, 2: 2}.get(ring, 1)


class Board:
    """
    Immutable board topology.

    Cells are stored by index. Hop distances over the neighbour links are
    computed once at construction, so range queries never search.
    """

    def __init__(self, cells: Iterable[Cell]):
        self.cells: Tuple[Cell, ...] = tuple(sorted(cells, key=lambda c: c.index))
        for position, cell in enumerate(self.cells):
            if cell.index != position:
                raise ValueError(f"Cell indices must be contiguous from 0, found {cell.index} at {position}")
            for neighbor in cell.neighbor_indexes():
                if not 0 <= neighbor < len(self.cells):
                    raise ValueError(f"Cell {cell.index} has unknown neighbour {neighbor}")
        self.distances = self._compute_distances()

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[int]]) -> "Board":
        """Build a board from startup rows of (index, richness, n0, ..., n5)."""
        return cls(Cell(index=row[0], richness=row[1], neighbors=tuple(row[2:8])) for row in rows)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self):
        return iter(self.cells)

    def is_usable(self, index: int) -> bool:
        return self.cells[index].richness > 0

    def _compute_distances(self) -> np.ndarray:
        n = len(self.cells)
        dist = np.full((n, n), UNREACHABLE, dtype=np.int32)
        np.fill_diagonal(dist, 0)
        for cell in self.cells:
            for neighbor in cell.neighbor_indexes():
                dist[cell.index, neighbor] = 1
        # Floyd-Warshall; the board is tiny
        for k in range(n):
            dist = np.minimum(dist, dist[:, k, None] + dist[None, k, :])
        return dist

    def distance(self, a: int, b: int) -> int:
        return int(self.distances[a, b])

    def cells_within(self, index: int, radius: int) -> List[int]:
        """Indices of cells 1..radius hops away from index, ascending."""
        row = self.distances[index]
        return [int(i) for i in np.nonzero((row > 0) & (row <= radius))[0]]

    def to_rows(self) -> List[List[int]]:
        """Startup rows as sent by the judge: index, richness, then 6 neighbours."""
        return [[c.index, c.richness, *c.neighbors] for c in self.cells]


def spiral_coordinates(radius: int = BOARD_RADIUS) -> List[Tuple[int, int]]:
    """
    Axial coordinates of a hexagonal board in cell index order.

    Index 0 is the centre; each ring starts `ring` steps east of the centre
    and walks the ring counter-clockwise.
    """
    coords = [(0, 0)]
    for ring in range(1, radius + 1):
        q, r = DIRECTIONS[0][0] * ring, DIRECTIONS[0][1] * ring
        for orientation in range(6):
            for _ in range(ring):
                coords.append((q, r))
                dq, dr = DIRECTIONS[(orientation + 2) % 6]
                q, r = q + dq, r + dr
    return coords


def generate_board(seed: Optional[int] = None, holes: int = 0) -> Board:
    """
    Generate the standard 37-cell board.

    Args:
        seed: Random seed used when picking unusable cells
        holes: Number of centre-symmetric cell pairs made unusable

    Returns:
        Board with spiral indexing and ring-based richness
    """
    coords = spiral_coordinates()
    index_of: Dict[Tuple[int, int], int] = {pos: i for i, pos in enumerate(coords)}
    richness = [ring_richness(hex_distance(0, 0, q, r)) for q, r in coords]

    if holes:
        rng = np.random.default_rng(seed)
        # One representative per symmetric pair, centre excluded
        pairs = [i for i, (q, r) in enumerate(coords) if i > 0 and i < index_of[(-q, -r)]]
        chosen = rng.choice(len(pairs), size=min(holes, len(pairs)), replace=False)
        for pick in chosen:
            i = pairs[int(pick)]
            q, r = coords[i]
            richness[i] = 0
            richness[index_of[(-q, -r)]] = 0

    cells = []
    for i, (q, r) in enumerate(coords):
        neighbors = tuple(index_of.get(pos, NO_NEIGHBOR) for pos in get_hex_neighbors(q, r))
        cells.append(Cell(index=i, richness=richness[i], neighbors=neighbors))
    return Board(cells)
