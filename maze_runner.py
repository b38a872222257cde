"""Command-line driver: build a maze, generate it, then solve it.

Usage: python3 maze_runner.py config.txt
"""

import logging
import sys
from pathlib import Path
from typing import Sequence

from maze import Maze, MazeConfigError, MazeStallError, MazeUnreachableError
from mazegen import GENERATORS
from mazesolve import SOLVERS
from parsing import Config, ConfigError, read_config


logger = logging.getLogger(__name__)


def build_maze(config: Config) -> Maze:
    """Build the all-walled maze described by `config`."""

    return Maze(
        config.kind,
        config.rows,
        config.cols,
        entrance=config.entry,
        exit_=config.exit,
        tunnels=config.tunnels,
    )


def run(config: Config) -> int:
    """Generate the maze, solve it and print a one-line summary."""

    maze = build_maze(config)
    generator = GENERATORS[config.generator](seed=config.seed)
    generator.generate(maze)
    logger.info("%s removed %d walls", config.generator, len(generator.carved))

    solver = SOLVERS[config.solver]()
    result = solver.solve(maze)

    print(
        f"type={config.kind} size={config.rows}x{config.cols} "
        f"generator={config.generator} solver={config.solver} "
        f"solved={result.solved} cells_explored={result.cells_explored} "
        f"cells={maze.cell_count()}"
    )
    return 0 if result.solved else 1


def main(argv: Sequence[str]) -> int:
    """CLI entrypoint."""

    if len(argv) != 2:
        print("Usage: python3 maze_runner.py config.txt", file=sys.stderr)
        return 2

    try:
        config = read_config(Path(argv[1]))
        logging.basicConfig(
            level=config.log_level,
            format="%(levelname)s %(name)s: %(message)s",
        )
        return run(config)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except (
        ConfigError,
        MazeConfigError,
        MazeStallError,
        MazeUnreachableError,
        OSError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
