from pathlib import Path

from maze import HEX, TUNNEL
from maze_runner import build_maze, main
from parsing import read_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.txt"
    path.write_text(text, encoding="utf-8")
    return path


HEX_CONFIG = """\
TYPE=hex
ROWS=6
COLS=5
ENTRY=0,0
EXIT=5,4
GENERATOR=modifiedprim
SOLVER=wallfollower
SEED=3
"""


def test_build_maze_from_config(tmp_path):
    text = HEX_CONFIG.replace("TYPE=hex", "TYPE=tunnel") + "TUNNELS=0,4:5,0\n"
    maze = build_maze(read_config(_write(tmp_path, text)))

    assert maze.kind == TUNNEL
    assert maze.locate(0, 4).tunnel_to is maze.locate(5, 0)
    assert maze.entrance is maze.locate(0, 0)
    assert maze.exit is maze.locate(5, 4)


def test_main_runs_generate_then_solve(tmp_path, capsys):
    code = main(["maze_runner.py", str(_write(tmp_path, HEX_CONFIG))])

    out = capsys.readouterr().out
    assert code == 0
    assert f"type={HEX}" in out
    assert "generator=modifiedprim solver=wallfollower solved=True" in out
    assert "cells=30" in out


def test_main_usage(capsys):
    assert main(["maze_runner.py"]) == 2
    assert "Usage" in capsys.readouterr().err


def test_main_reports_config_errors(tmp_path, capsys):
    code = main(["maze_runner.py", str(_write(tmp_path, "TYPE=hex\n"))])

    assert code == 1
    assert "Missing required config keys" in capsys.readouterr().err
