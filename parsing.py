"""Parsing module for maze run configuration files.

This module validates and parses a KEY=VALUE config file into a `Config`.
It checks TYPE, ROWS, COLS, ENTRY, EXIT, TUNNELS, GENERATOR, SOLVER, SEED
and LOG_LEVEL keys.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from maze import Coord, KINDS, TUNNEL
from mazegen import GENERATORS
from mazesolve import SOLVERS


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

REQUIRED_KEYS = ("TYPE", "ROWS", "COLS", "ENTRY", "EXIT", "GENERATOR", "SOLVER")
ACCEPTED_KEYS = REQUIRED_KEYS + ("TUNNELS", "SEED", "LOG_LEVEL")


@dataclass(frozen=True)
class Config:
    """Parsed configuration for one generate-then-solve run."""

    kind: str
    rows: int
    cols: int
    entry: Coord
    exit: Coord
    tunnels: Tuple[Tuple[Coord, Coord], ...]
    generator: str
    solver: str
    seed: Optional[int]
    log_level: int


class ConfigError(ValueError):
    """Configuration and validation error."""

    pass


def parse_int(value: str, *, key: str) -> int:
    """Parse an integer from a config value."""

    try:
        return int(value.strip())
    except ValueError as exc:
        msg = f"Invalid integer for {key}: {value!r}"
        raise ConfigError(msg) from exc


def parse_coord(value: str, *, key: str) -> Coord:
    """Parse coordinates written as 'row,col'."""

    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise ConfigError(
            f"Invalid coordinate for {key}: {value!r} (expected 'row,col')"
        )
    return (parse_int(parts[0], key=key), parse_int(parts[1], key=key))


def parse_tunnels(value: str) -> Tuple[Tuple[Coord, Coord], ...]:
    """Parse 'r,c:r,c;r,c:r,c' into pairs of coordinates."""

    tunnels: List[Tuple[Coord, Coord]] = []
    for chunk in value.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        ends = chunk.split(":")
        if len(ends) != 2:
            raise ConfigError(
                f"Invalid tunnel: {chunk!r} (expected 'row,col:row,col')"
            )
        tunnels.append(
            (
                parse_coord(ends[0], key="TUNNELS"),
                parse_coord(ends[1], key="TUNNELS"),
            )
        )
    return tuple(tunnels)


def parse_choice(value: str, *, key: str, choices: Tuple[str, ...]) -> str:
    """Parse a case-insensitive value from a fixed set of names."""

    v = value.strip().lower()
    if v not in choices:
        raise ConfigError(
            f"Invalid {key}: {value!r} (expected one of {', '.join(choices)})"
        )
    return v


def read_config(path: Path) -> Config:
    """Read and validate the configuration file.

    Raises ConfigError if any key is missing, unknown, invalid, or out of
    bounds.
    """

    raw: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                stripped = line.split("#", 1)[0].strip()
                if not stripped:
                    continue
                if "=" not in stripped:
                    raise ConfigError(
                        f"Line {line_no}: Invalid syntax"
                        f" (expected KEY=VALUE)\n→ {stripped}"
                    )
                k, v = stripped.split("=", 1)
                key = k.strip().upper()
                if key not in ACCEPTED_KEYS:
                    raise ConfigError(
                        f"Line {line_no}: Unknown configuration "
                        f"key '{key}'\n→ {stripped}"
                    )
                raw[key] = v.strip()
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read"
                          f" config file: {path}: {exc}") from exc

    missing = [key for key in REQUIRED_KEYS if key not in raw]
    if missing:
        raise ConfigError(
            f"Missing required config keys: {', '.join(missing)}"
        )

    kind = parse_choice(raw["TYPE"], key="TYPE", choices=KINDS)
    rows = parse_int(raw["ROWS"], key="ROWS")
    cols = parse_int(raw["COLS"], key="COLS")
    entry = parse_coord(raw["ENTRY"], key="ENTRY")
    exit_ = parse_coord(raw["EXIT"], key="EXIT")
    tunnels = parse_tunnels(raw.get("TUNNELS", ""))
    generator = parse_choice(
        raw["GENERATOR"], key="GENERATOR", choices=tuple(GENERATORS)
    )
    solver = parse_choice(raw["SOLVER"], key="SOLVER", choices=tuple(SOLVERS))
    seed = parse_int(raw["SEED"], key="SEED") if "SEED" in raw else None
    level_name = parse_choice(
        raw.get("LOG_LEVEL", "WARNING"),
        key="LOG_LEVEL",
        choices=tuple(n.lower() for n in LOG_LEVELS),
    )

    if rows <= 0 or cols <= 0:
        raise ConfigError("ROWS and COLS must be > 0")

    for point_key, (r, c) in (("ENTRY", entry), ("EXIT", exit_)):
        if not (0 <= r < rows and 0 <= c < cols):
            raise ConfigError(
                f"{point_key} coordinates out of bounds "
                f"(0 ≤ row < ROWS, 0 ≤ col < COLS)"
            )

    if tunnels and kind != TUNNEL:
        raise ConfigError("TUNNELS is only allowed with TYPE=tunnel")
    for a, b in tunnels:
        for r, c in (a, b):
            if not (0 <= r < rows and 0 <= c < cols):
                raise ConfigError(f"Tunnel end ({r},{c}) is out of bounds")

    return Config(
        kind=kind,
        rows=rows,
        cols=cols,
        entry=entry,
        exit=exit_,
        tunnels=tunnels,
        generator=generator,
        solver=solver,
        seed=seed,
        log_level=getattr(logging, level_name.upper()),
    )

