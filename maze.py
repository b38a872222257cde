"""Topology model shared by the maze generators and solvers.

A maze is a table of `Cell` objects. Every cell keeps two parallel arrays of
`NUM_DIR` slots indexed by compass direction: `neigh` (adjacent cells) and
`walls` (the `Wall` between the cell and that neighbour). Square and hexagonal
grids share one direction table:

    EAST=0, NORTHEAST=1, NORTHWEST=2, WEST=3, SOUTHWEST=4, SOUTHEAST=5

Square grids use EAST, NORTH (=NORTHWEST), WEST and SOUTH (=SOUTHEAST) and leave
the other two slots empty. Rows grow northwards.

Basic usage:

    from maze import Maze, NORMAL

    maze = Maze(NORMAL, 10, 10, entrance=(0, 0), exit_=(9, 9))
    cell = maze.locate(3, 4)

A wall between two cells is a single object referenced by both of them, so
clearing it from one side is visible from the other.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import (
    Callable,
    Deque,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
)


logger = logging.getLogger(__name__)


Coord = Tuple[int, int]  # (row, col)

T = TypeVar("T")


NORMAL = "normal"
HEX = "hex"
TUNNEL = "tunnel"
KINDS: Tuple[str, ...] = (NORMAL, HEX, TUNNEL)


NUM_DIR = 6

EAST = 0
NORTHEAST = 1
NORTHWEST = 2
WEST = 3
SOUTHWEST = 4
SOUTHEAST = 5
NORTH = NORTHWEST
SOUTH = SOUTHEAST

DELTA_R: Tuple[int, ...] = (0, 1, 1, 0, -1, -1)
DELTA_C: Tuple[int, ...] = (1, 1, 0, -1, -1, 0)

SQUARE_DIRECTIONS: Tuple[int, ...] = (EAST, NORTH, WEST, SOUTH)
HEX_DIRECTIONS: Tuple[int, ...] = (
    EAST,
    NORTHEAST,
    NORTHWEST,
    WEST,
    SOUTHWEST,
    SOUTHEAST,
)


class MazeConfigError(ValueError):
    """Malformed maze detected before any algorithm step."""

    pass


class MazeStallError(RuntimeError):
    """An algorithm stopped making progress."""

    pass


class MazeUnreachableError(RuntimeError):
    """A solver exhausted its search space without reaching its target."""

    pass


def opposite(direction: int) -> int:
    """Return the direction pointing back along `direction`."""

    return (direction + NUM_DIR // 2) % NUM_DIR


def rotate(order: Sequence[T], by: int) -> List[T]:
    """Return `order` rotated left by `by` positions."""

    if not order:
        return []
    by %= len(order)
    return list(order[by:]) + list(order[:by])


@dataclass(eq=False)
class Wall:
    """An edge of a cell. `present` means impassable."""

    present: bool = True


@dataclass(eq=False)
class Cell:
    """A single maze cell, addressed by its table coordinates."""

    row: int
    col: int
    neigh: List[Optional["Cell"]]
    walls: List[Optional[Wall]]
    visited: bool
    tunnel_to: Optional["Cell"]

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        self.neigh = [None] * NUM_DIR
        self.walls = [None] * NUM_DIR
        self.visited = False
        self.tunnel_to = None

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    def __repr__(self) -> str:
        return f"Cell({self.row}, {self.col})"


class Maze:
    """Grid container for NORMAL, HEX and TUNNEL topologies.

    Entrance, exit and tunnel endpoints are given in logical coordinates:
    `col` counts cells from the start of the row, which differs from the table
    column on HEX grids.
    """

    kind: str
    rows: int
    cols: int
    table_cols: int
    grid: List[List[Optional[Cell]]]
    entrance: Optional[Cell]
    exit: Optional[Cell]
    _on_footprint: Optional[Callable[[Cell], None]]

    def __init__(
        self,
        kind: str,
        rows: int,
        cols: int,
        *,
        entrance: Optional[Coord] = None,
        exit_: Optional[Coord] = None,
        tunnels: Iterable[Tuple[Coord, Coord]] = (),
        on_footprint: Optional[Callable[[Cell], None]] = None,
    ) -> None:
        if kind not in KINDS:
            raise MazeConfigError(f"Unknown maze type: {kind!r}")
        if rows <= 0 or cols <= 0:
            raise MazeConfigError("Maze rows and cols must be > 0")

        self.kind = kind
        self.rows = rows
        self.cols = cols
        if kind == HEX:
            self.table_cols = (rows + 1) // 2 + cols
        else:
            self.table_cols = cols
        self._on_footprint = on_footprint

        self.grid = [[None] * self.table_cols for _ in range(rows)]
        for r in range(rows):
            start = self.row_offset(r)
            for c in range(start, start + cols):
                self.grid[r][c] = Cell(r, c)
        self._link()

        self.entrance = None if entrance is None else self.locate(*entrance)
        self.exit = None if exit_ is None else self.locate(*exit_)

        for a, b in tunnels:
            self.add_tunnel(a, b)

        logger.debug("Built %s maze %dx%d", kind, rows, cols)

    @property
    def directions(self) -> Tuple[int, ...]:
        """Directions used by this topology, counter-clockwise from EAST."""

        return HEX_DIRECTIONS if self.kind == HEX else SQUARE_DIRECTIONS

    def row_offset(self, row: int) -> int:
        """Table column holding the first cell of `row`."""

        return (row + 1) // 2 if self.kind == HEX else 0

    def _at(self, row: int, col: int) -> Optional[Cell]:
        if 0 <= row < self.rows and 0 <= col < self.table_cols:
            return self.grid[row][col]
        return None

    def _link(self) -> None:
        for cell in self.cells():
            for d in self.directions:
                neighbour = self._at(cell.row + DELTA_R[d], cell.col + DELTA_C[d])
                cell.neigh[d] = neighbour
                if cell.walls[d] is None:
                    wall = Wall()
                    cell.walls[d] = wall
                    if neighbour is not None:
                        neighbour.walls[opposite(d)] = wall

    def locate(self, row: int, col: int) -> Cell:
        """Return the cell at logical `(row, col)`."""

        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise MazeConfigError(
                f"Coordinate ({row},{col}) is outside the "
                f"{self.rows}x{self.cols} maze"
            )
        cell = self.grid[row][col + self.row_offset(row)]
        if cell is None:
            raise MazeConfigError(f"No cell at ({row},{col})")
        return cell

    def add_tunnel(self, a: Coord, b: Coord) -> None:
        """Wire a two-way tunnel between the cells at logical `a` and `b`."""

        if self.kind != TUNNEL:
            raise MazeConfigError("Tunnels are only allowed in TUNNEL mazes")
        first = self.locate(*a)
        second = self.locate(*b)
        if first is second:
            raise MazeConfigError(f"Tunnel at {a} leads to itself")
        if first.tunnel_to is not None or second.tunnel_to is not None:
            raise MazeConfigError(f"Cell already has a tunnel: {a} or {b}")
        first.tunnel_to = second
        second.tunnel_to = first

    def cells(self) -> Iterator[Cell]:
        """Yield every non-null cell in table order."""

        for row in self.grid:
            for cell in row:
                if cell is not None:
                    yield cell

    def cell_count(self) -> int:
        return sum(1 for _ in self.cells())

    def reset_visited(self) -> None:
        for cell in self.cells():
            cell.visited = False

    def draw_footprint(self, cell: Cell) -> None:
        """Hand `cell` to the footprint hook, if any."""

        if self._on_footprint is not None:
            self._on_footprint(cell)

    def carve(self, cell: Cell, direction: int) -> Cell:
        """Remove the wall between `cell` and its neighbour at `direction`.

        Returns the neighbour.
        """

        neighbour = cell.neigh[direction]
        wall = cell.walls[direction]
        if neighbour is None or wall is None:
            raise MazeConfigError(
                f"{cell!r} has no neighbour in direction {direction}"
            )
        wall.present = False
        return neighbour

    def open_neighbours(self, cell: Cell) -> Iterator[Tuple[int, Cell]]:
        """Yield `(direction, neighbour)` pairs not separated by a wall."""

        for d in self.directions:
            neighbour = cell.neigh[d]
            wall = cell.walls[d]
            if neighbour is not None and wall is not None and not wall.present:
                yield d, neighbour

    def removed_walls(self) -> int:
        """Count the distinct absent walls between two cells."""

        removed: Set[Wall] = set()
        for cell in self.cells():
            for d, _ in self.open_neighbours(cell):
                wall = cell.walls[d]
                if wall is not None:
                    removed.add(wall)
        return len(removed)

    def validate(self) -> None:
        """Check the structural invariants generators and solvers rely on.

        Raises MazeConfigError on the first violation found.
        """

        if self.entrance is None:
            raise MazeConfigError("Maze has no entrance")
        if self.exit is None:
            raise MazeConfigError("Maze has no exit")

        for cell in self.cells():
            if len(cell.neigh) != NUM_DIR or len(cell.walls) != NUM_DIR:
                raise MazeConfigError(
                    f"{cell!r}: neighbour/wall arrays must have "
                    f"{NUM_DIR} slots"
                )

        for cell in self.cells():
            for d in self.directions:
                neighbour = cell.neigh[d]
                wall = cell.walls[d]
                if neighbour is None:
                    continue
                if wall is None:
                    raise MazeConfigError(
                        f"{cell!r}: neighbour in direction {d} has no wall"
                    )
                back = opposite(d)
                if neighbour.neigh[back] is not cell:
                    raise MazeConfigError(
                        f"{cell!r}: asymmetric neighbour in direction {d}"
                    )
                if neighbour.walls[back] is not wall:
                    raise MazeConfigError(
                        f"{cell!r}: wall in direction {d} is not shared"
                    )
            if cell.tunnel_to is not None:
                if self.kind != TUNNEL:
                    raise MazeConfigError(
                        f"{cell!r}: tunnel in a {self.kind} maze"
                    )
                if cell.tunnel_to.tunnel_to is not cell:
                    raise MazeConfigError(f"{cell!r}: asymmetric tunnel")


def is_perfect(maze: Maze) -> bool:
    """Return True if the open passages form a spanning tree of all cells."""

    cells = list(maze.cells())
    if not cells:
        return False
    if maze.removed_walls() != len(cells) - 1:
        return False

    seen: Set[Cell] = {cells[0]}
    q: Deque[Cell] = deque([cells[0]])
    while q:
        cur = q.popleft()
        for _, nxt in maze.open_neighbours(cur):
            if nxt not in seen:
                seen.add(nxt)
                q.append(nxt)
    return len(seen) == len(cells)
