import logging
from pathlib import Path

import pytest

from parsing import Config, ConfigError, parse_coord, parse_tunnels, read_config


VALID = """\
# maze run
TYPE=tunnel
ROWS=6
COLS=8   # columns
ENTRY=0,0
EXIT=5,7
TUNNELS=0,7:5,0; 2,2:3,5
GENERATOR=RecursiveBacktracker
SOLVER=wallfollower
SEED=42
log_level=debug
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.txt"
    path.write_text(text, encoding="utf-8")
    return path


def _minimal(**overrides: str) -> str:
    values = {
        "TYPE": "normal",
        "ROWS": "4",
        "COLS": "4",
        "ENTRY": "0,0",
        "EXIT": "3,3",
        "GENERATOR": "growingtree",
        "SOLVER": "bidirectional",
    }
    values.update(overrides)
    return "".join(f"{k}={v}\n" for k, v in values.items() if v is not None)


def test_read_full_config(tmp_path):
    config = read_config(_write(tmp_path, VALID))

    assert config == Config(
        kind="tunnel",
        rows=6,
        cols=8,
        entry=(0, 0),
        exit=(5, 7),
        tunnels=(((0, 7), (5, 0)), ((2, 2), (3, 5))),
        generator="recursivebacktracker",
        solver="wallfollower",
        seed=42,
        log_level=logging.DEBUG,
    )


def test_optional_keys_default(tmp_path):
    config = read_config(_write(tmp_path, _minimal()))

    assert config.seed is None
    assert config.tunnels == ()
    assert config.log_level == logging.WARNING


def test_missing_key(tmp_path):
    text = _minimal().replace("SOLVER=bidirectional\n", "")

    with pytest.raises(ConfigError, match="SOLVER"):
        read_config(_write(tmp_path, text))


def test_unknown_key(tmp_path):
    with pytest.raises(ConfigError, match="Unknown configuration key 'WIDTH'"):
        read_config(_write(tmp_path, _minimal() + "WIDTH=3\n"))


def test_bad_syntax(tmp_path):
    with pytest.raises(ConfigError, match="KEY=VALUE"):
        read_config(_write(tmp_path, _minimal() + "oops\n"))


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"ROWS": "four"}, "Invalid integer for ROWS"),
        ({"COLS": "0"}, "must be > 0"),
        ({"ENTRY": "1"}, "Invalid coordinate for ENTRY"),
        ({"EXIT": "4,0"}, "EXIT coordinates out of bounds"),
        ({"TYPE": "triangle"}, "Invalid TYPE"),
        ({"GENERATOR": "kruskal"}, "Invalid GENERATOR"),
        ({"SOLVER": "astar"}, "Invalid SOLVER"),
        ({"LOG_LEVEL": "loud"}, "Invalid LOG_LEVEL"),
        ({"TUNNELS": "0,1:2,2"}, "only allowed with TYPE=tunnel"),
        ({"TYPE": "tunnel", "TUNNELS": "0,1:9,9"}, "out of bounds"),
    ],
)
def test_invalid_values(tmp_path, overrides, message):
    with pytest.raises(ConfigError, match=message):
        read_config(_write(tmp_path, _minimal(**overrides)))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        read_config(tmp_path / "nope.txt")


def test_parse_helpers():
    assert parse_coord(" 3 , 4 ", key="ENTRY") == (3, 4)
    assert parse_tunnels("") == ()
    assert parse_tunnels("1,1:2,2;") == (((1, 1), (2, 2)),)
    with pytest.raises(ConfigError):
        parse_tunnels("1,1-2,2")
