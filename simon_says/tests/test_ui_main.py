from __future__ import annotations

from pathlib import Path

import pytest

from simon_says.game import Action, LevelLoader
from simon_says.ui.main import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    Directories,
    build_plan,
    main,
    resolve_directories,
)


def test_resolve_directories_returns_package_defaults():
    directories = resolve_directories()

    assert isinstance(directories, Directories)
    assert directories.level_root.exists()
    assert directories.solution_root.exists()


def test_resolve_directories_honours_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    level_dir = tmp_path / "levels"
    solution_dir = tmp_path / "solutions"
    level_dir.mkdir()
    solution_dir.mkdir()

    monkeypatch.setenv(LEVEL_ENV_VAR, str(level_dir))
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(solution_dir))

    directories = resolve_directories()

    assert directories.level_root == level_dir
    assert directories.solution_root == solution_dir


def test_resolve_directories_errors_on_missing_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(LEVEL_ENV_VAR, str(tmp_path / "missing_levels"))

    with pytest.raises(FileNotFoundError):
        resolve_directories()

    directories = resolve_directories(check_exists=False)
    assert directories.level_root == tmp_path / "missing_levels"


def test_bootstrap_prints_message(capsys: pytest.CaptureFixture[str]):
    exit_code = main([])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Simon Says bootstrap" in output
    assert str(resolve_directories().level_root) in output


def test_cli_lists_levels(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--list-levels"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Available levels" in output
    assert "level_turnstile" in output


def test_cli_shows_level(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--show", "level_waiting_game"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "##F\nS..#" in output
    assert "Circuity: Take 7 or more steps" in output


def test_cli_solves_level(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--solve", "level_waiting_game"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "8 solution(s)" in output
    assert "Fastest: [Forward, Forward, Left] size=3 steps=3" in output
    assert "suggested waste_challenge: 7" in output


def test_cli_solve_distinct_and_max_length(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--solve", "level_waiting_game", "--max-length", "2", "--distinct"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "1 solution(s)" in output


def test_cli_validates_solution(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--validate", "level_glacier"])

    assert exit_code == 0
    assert "level_glacier: valid" in capsys.readouterr().out


def test_cli_reports_missing_level(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--show", "does_not_exist"])

    assert exit_code == 1
    assert "error" in capsys.readouterr().out


def test_build_plan_accepts_legal_plan():
    level = LevelLoader(resolve_directories().level_root).load("level_first_steps")

    plan = build_plan(level, ["F"])

    assert plan == [Action.FORWARD]
    assert plan.limit == level.action_limit


def test_build_plan_rejects_plans_beyond_the_level_rules():
    level = LevelLoader(resolve_directories().level_root).load("level_first_steps")

    with pytest.raises(ValueError, match="at most 2"):
        build_plan(level, ["F", "F", "F"])
    with pytest.raises(ValueError, match="Backward"):
        build_plan(level, ["B"])


def test_cli_play_refuses_illegal_plan(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--play", "level_first_steps", "--plan", "F,B,F,F,F"])

    assert exit_code == 1
    assert "error: Plan has 5 actions" in capsys.readouterr().out


def test_cli_info_prints_directories(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--info"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert str(resolve_directories().solution_root) in output
    assert "--help" not in output
