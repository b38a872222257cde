"""Perfect maze generators working on the shared topology model.

Each generator takes an all-walled `Maze` and removes walls until the open
passages form a spanning tree over every cell. Tunnels are wired by whoever
builds the maze; only the recursive backtracker follows them.

Basic usage:

    from maze import Maze, NORMAL
    from mazegen import GrowingTreeGenerator

    maze = Maze(NORMAL, 15, 20, entrance=(0, 0), exit_=(14, 19))
    GrowingTreeGenerator(seed=42).generate(maze)

Randomness comes from a `random.Random` built from `seed`, or from the `rng`
passed in, so runs are reproducible.
"""

import logging
import random
from typing import Callable, Dict, List, Optional, Set, Tuple, Type

from maze import Cell, Coord, Maze, MazeStallError, TUNNEL, opposite


logger = logging.getLogger(__name__)


# Iterations allowed per cell before a run counts as stalled.
ITERATION_FACTOR = 4


class MazeGenerator:
    """Base class: bookkeeping shared by all generators."""

    seed: Optional[int]
    rng: random.Random
    carved: List[Tuple[Coord, Coord]]
    _on_step: Optional[Callable[["MazeGenerator"], None]]

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        on_step: Optional[Callable[["MazeGenerator"], None]] = None,
    ) -> None:
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.carved = []
        self._on_step = on_step

    def generate(self, maze: Maze) -> None:
        """Carve a perfect maze into `maze` in place."""

        maze.validate()
        maze.reset_visited()
        self.carved = []
        logger.debug(
            "%s: generating %s maze %dx%d",
            type(self).__name__, maze.kind, maze.rows, maze.cols,
        )
        self._generate(maze)
        logger.debug(
            "%s: removed %d walls", type(self).__name__, len(self.carved)
        )

    def _generate(self, maze: Maze) -> None:
        raise NotImplementedError

    def _mark(self, maze: Maze, cell: Cell) -> None:
        cell.visited = True
        maze.draw_footprint(cell)

    def _carve_between(self, maze: Maze, cell: Cell, direction: int) -> Cell:
        neighbour = maze.carve(cell, direction)
        self.carved.append((cell.coord, neighbour.coord))
        if self._on_step is not None:
            self._on_step(self)
        return neighbour

    @staticmethod
    def _budget(cell_count: int) -> int:
        return ITERATION_FACTOR * cell_count + ITERATION_FACTOR


class GrowingTreeGenerator(MazeGenerator):
    """Growing tree: usually extend the newest cell, sometimes a random one.

    The active list starts with one random cell. Each iteration picks a cell
    from it (a random member with probability `random_pick`, the newest member
    otherwise). If that cell still has unmarked neighbours, a random one is
    carved into and appended; if not, the cell is dropped from the list.
    """

    DEFAULT_RANDOM_PICK = 0.1

    random_pick: float

    def __init__(
        self,
        random_pick: float = DEFAULT_RANDOM_PICK,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        on_step: Optional[Callable[[MazeGenerator], None]] = None,
    ) -> None:
        super().__init__(seed=seed, rng=rng, on_step=on_step)
        if not 0.0 <= random_pick <= 1.0:
            raise ValueError("random_pick must be between 0 and 1")
        self.random_pick = random_pick

    def _generate(self, maze: Maze) -> None:
        cells = list(maze.cells())
        start = self.rng.choice(cells)
        unmarked: Set[Cell] = set(cells)
        unmarked.discard(start)
        self._mark(maze, start)
        active: List[Cell] = [start]

        budget = self._budget(len(cells))
        iterations = 0
        while unmarked:
            iterations += 1
            if iterations > budget:
                raise MazeStallError(
                    f"Growing tree exceeded {budget} iterations"
                )
            if not active:
                raise MazeStallError(
                    "Maze generation produced disconnected cells"
                )

            if self.rng.random() < self.random_pick:
                index = self.rng.randrange(len(active))
            else:
                index = len(active) - 1
            ref = active[index]

            candidates = [
                d for d in maze.directions
                if ref.neigh[d] is not None and ref.neigh[d] in unmarked
            ]
            if not candidates:
                active.pop(index)
                continue

            nxt = self._carve_between(maze, ref, self.rng.choice(candidates))
            unmarked.discard(nxt)
            self._mark(maze, nxt)
            active.append(nxt)


class ModifiedPrimGenerator(MazeGenerator):
    """Prim's algorithm with random frontier selection.

    After a run `done` holds every cell while `frontier` and `remaining`
    are empty.
    """

    done: Set[Cell]
    frontier: List[Cell]
    remaining: Set[Cell]

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        on_step: Optional[Callable[[MazeGenerator], None]] = None,
    ) -> None:
        super().__init__(seed=seed, rng=rng, on_step=on_step)
        self.done = set()
        self.frontier = []
        self.remaining = set()

    def _grow_frontier(self, maze: Maze, cell: Cell) -> None:
        for d in maze.directions:
            neighbour = cell.neigh[d]
            if neighbour is not None and neighbour in self.remaining:
                self.remaining.discard(neighbour)
                self.frontier.append(neighbour)

    def _take_frontier(self) -> Cell:
        # Swap-remove.
        i = self.rng.randrange(len(self.frontier))
        self.frontier[i], self.frontier[-1] = self.frontier[-1], self.frontier[i]
        return self.frontier.pop()

    def _generate(self, maze: Maze) -> None:
        cells = list(maze.cells())
        self.done = set()
        self.frontier = []
        self.remaining = set(cells)

        start = self.rng.choice(cells)
        self.remaining.discard(start)
        self.done.add(start)
        self._mark(maze, start)
        self._grow_frontier(maze, start)

        while self.frontier:
            c = self._take_frontier()
            inside = [
                d for d in maze.directions
                if c.neigh[d] is not None and c.neigh[d] in self.done
            ]
            if not inside:
                raise MazeStallError(f"Frontier cell {c!r} touches no done cell")
            # Carved from the done side.
            d = self.rng.choice(inside)
            b = c.neigh[d]
            assert b is not None
            self._carve_between(maze, b, opposite(d))
            self._grow_frontier(maze, c)
            self.done.add(c)
            self._mark(maze, c)

        if self.remaining:
            raise MazeStallError("Maze generation produced disconnected cells")


class RecursiveBacktrackerGenerator(MazeGenerator):
    """Depth-first carving from the entrance with an explicit stack.

    In TUNNEL mazes an unvisited tunnel target is entered before any wall is
    considered; the tunnel itself replaces the carved passage.
    """

    def _generate(self, maze: Maze) -> None:
        assert maze.entrance is not None
        cells = list(maze.cells())
        unvisited: Set[Cell] = set(cells)
        stack: List[Cell] = [maze.entrance]

        budget = self._budget(len(cells))
        iterations = 0
        while unvisited:
            iterations += 1
            if iterations > budget:
                raise MazeStallError(
                    f"Recursive backtracker exceeded {budget} iterations"
                )
            if not stack:
                raise MazeStallError(
                    "Maze generation produced disconnected cells"
                )

            current = stack[-1]
            if not current.visited:
                self._mark(maze, current)
                unvisited.discard(current)
                if not unvisited:
                    break

            target = current.tunnel_to
            if maze.kind == TUNNEL and target is not None and not target.visited:
                stack.append(target)
                continue

            candidates = [
                d for d in maze.directions
                if current.neigh[d] is not None and not current.neigh[d].visited
            ]
            if candidates:
                stack.append(
                    self._carve_between(maze, current, self.rng.choice(candidates))
                )
            else:
                stack.pop()


GENERATORS: Dict[str, Type[MazeGenerator]] = {
    "growingtree": GrowingTreeGenerator,
    "modifiedprim": ModifiedPrimGenerator,
    "recursivebacktracker": RecursiveBacktrackerGenerator,
}
