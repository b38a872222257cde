"""Maze solvers: bidirectional depth-first search and a right-hand wall follower.

Both solvers reset the `visited` flags of the maze they are given, leave its
walls untouched, and leave a footprint on every cell the first time they reach
it, in visitation order.

Basic usage:

    from mazesolve import WallFollowerSolver

    result = WallFollowerSolver().solve(maze)
    if result.solved:
        print(result.cells_explored)
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple, Type

from maze import (
    Cell,
    Maze,
    MazeStallError,
    MazeUnreachableError,
    TUNNEL,
    opposite,
    rotate,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    """Outcome of a single solver run."""

    solved: bool
    cells_explored: int


class MazeSolver:
    """Base class: visited bookkeeping and the result of the last run."""

    _on_footprint: Optional[Callable[[Cell], None]]
    _solved: bool
    _cells_explored: int

    def __init__(
        self,
        *,
        on_footprint: Optional[Callable[[Cell], None]] = None,
    ) -> None:
        self._on_footprint = on_footprint
        self._solved = False
        self._cells_explored = 0

    def solve(self, maze: Maze) -> SolveResult:
        """Walk `maze` from its entrance towards its exit."""

        maze.validate()
        maze.reset_visited()
        self._solved = False
        self._cells_explored = 0
        logger.debug(
            "%s: solving %s maze %dx%d",
            type(self).__name__, maze.kind, maze.rows, maze.cols,
        )
        self._solve(maze)
        logger.debug(
            "%s: solved=%s after %d cells",
            type(self).__name__, self._solved, self._cells_explored,
        )
        return SolveResult(self._solved, self._cells_explored)

    def is_solved(self) -> bool:
        return self._solved

    def cells_explored(self) -> int:
        return self._cells_explored

    def _solve(self, maze: Maze) -> None:
        raise NotImplementedError

    def _visit(self, maze: Maze, cell: Cell) -> None:
        cell.visited = True
        self._cells_explored += 1
        maze.draw_footprint(cell)
        if self._on_footprint is not None:
            self._on_footprint(cell)

    @staticmethod
    def _open_tunnel(maze: Maze, cell: Cell) -> Optional[Cell]:
        """Return the unvisited tunnel target of `cell`, if there is one."""

        target = cell.tunnel_to
        if maze.kind == TUNNEL and target is not None and not target.visited:
            return target
        return None


class _Trail:
    """A DFS stack with constant-time membership tests."""

    def __init__(self, start: Cell) -> None:
        self.stack: List[Cell] = [start]
        self.members: Set[Cell] = {start}

    def __bool__(self) -> bool:
        return bool(self.stack)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self.members

    @property
    def top(self) -> Cell:
        return self.stack[-1]

    def push(self, cell: Cell) -> None:
        self.stack.append(cell)
        self.members.add(cell)

    def pop(self) -> Cell:
        cell = self.stack.pop()
        self.members.discard(cell)
        return cell


class BidirectionalBacktrackerSolver(MazeSolver):
    """Two depth-first searches, one from each end, stepped in turn.

    The maze is solved when one search looks through an open wall (or a
    tunnel) at a cell sitting on the other search's stack.
    """

    def _solve(self, maze: Maze) -> None:
        entrance, exit_ = maze.entrance, maze.exit
        assert entrance is not None and exit_ is not None

        self._visit(maze, entrance)
        if entrance is exit_:
            self._solved = True
            return
        self._visit(maze, exit_)

        from_start = _Trail(entrance)
        from_end = _Trail(exit_)
        met = False
        while not met and from_start and from_end:
            met = self._step(maze, from_start, from_end)
            if not met:
                met = self._step(maze, from_end, from_start)

        if not met:
            raise MazeUnreachableError(
                "Bidirectional search exhausted without the two ends meeting"
            )
        self._solved = True

    def _step(self, maze: Maze, same: _Trail, other: _Trail) -> bool:
        """Advance `same` by one cell; return True once it touches `other`."""

        top = same.top
        target = self._open_tunnel(maze, top)
        if target is not None:
            self._visit(maze, target)
            same.push(target)
            return False
        partner = top.tunnel_to
        if maze.kind == TUNNEL and partner is not None and partner in other:
            return True

        for _, neighbour in maze.open_neighbours(top):
            if neighbour.visited:
                if neighbour in other:
                    return True
                continue
            self._visit(maze, neighbour)
            same.push(neighbour)
            return False

        same.pop()
        return False


class WallFollowerSolver(MazeSolver):
    """Right-hand rule walker.

    From the current heading the walker tries the direction just past the
    reverse heading first, then keeps turning the same way, so the first
    open unvisited direction found is the one furthest to the right. An
    unvisited tunnel target always wins. Dead ends are left by backing up
    along the stack, turning the heading around.
    """

    _turns: Dict[Optional[int], List[int]]

    def __init__(
        self,
        *,
        on_footprint: Optional[Callable[[Cell], None]] = None,
    ) -> None:
        super().__init__(on_footprint=on_footprint)
        self._turns = {}

    @staticmethod
    def turn_orders(directions: Tuple[int, ...]) -> Dict[Optional[int], List[int]]:
        """Map every heading to the order its directions are checked in.

        `None` stands for the undefined heading before the first move.
        """

        order = list(directions)
        turns: Dict[Optional[int], List[int]] = {None: order}
        for heading in order:
            turns[heading] = rotate(order, order.index(opposite(heading)) + 1)
        return turns

    def _solve(self, maze: Maze) -> None:
        assert maze.entrance is not None
        self._turns = self.turn_orders(maze.directions)

        heading: Optional[int] = None
        stack: List[Tuple[Cell, Optional[int]]] = [(maze.entrance, None)]
        while stack:
            current, _ = stack[-1]
            if not current.visited:
                self._visit(maze, current)
            if current is maze.exit:
                self._solved = True
                return

            if self._is_dead_end(maze, current):
                _, arrived = stack.pop()
                if arrived is not None:
                    heading = opposite(arrived)
                continue

            target = self._open_tunnel(maze, current)
            if target is not None:
                stack.append((target, None))
                continue

            direction = self._next_direction(maze, current, heading)
            if direction is None:
                raise MazeStallError(f"{current!r} is open but has no way out")
            nxt = current.neigh[direction]
            assert nxt is not None
            stack.append((nxt, direction))
            heading = direction

        raise MazeUnreachableError("Wall follower backed out of the entrance")

    def _is_dead_end(self, maze: Maze, cell: Cell) -> bool:
        if self._open_tunnel(maze, cell) is not None:
            return False
        return all(
            neighbour.visited for _, neighbour in maze.open_neighbours(cell)
        )

    def _next_direction(
        self, maze: Maze, cell: Cell, heading: Optional[int]
    ) -> Optional[int]:
        for d in self._turns[heading]:
            neighbour = cell.neigh[d]
            wall = cell.walls[d]
            if neighbour is None or wall is None or wall.present:
                continue
            if not neighbour.visited:
                return d
        return None


SOLVERS: Dict[str, Type[MazeSolver]] = {
    "bidirectional": BidirectionalBacktrackerSolver,
    "wallfollower": WallFollowerSolver,
}
