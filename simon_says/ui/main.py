"""Command line entry point and playback window launcher for Simon Says."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..game import Level, LevelLoader
from ..plan import ActionPlan
from ..simulation import CyclicExecutor, describe_challenges
from ..solver import SolutionValidator, classify, solve, suggest_challenges

LEVEL_ENV_VAR = "SIMON_SAYS_LEVEL_ROOT"
SOLUTION_ENV_VAR = "SIMON_SAYS_SOLUTION_ROOT"


@dataclass(frozen=True)
class Directories:
    """Bundle with resolved data directories."""

    level_root: Path
    solution_root: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parents[1] / "levels"


def _default_solution_root() -> Path:
    return Path(__file__).resolve().parents[1] / "solutions"


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> Directories:
    """Resolve data directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory does
        not exist on disk.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, _default_level_root())
    solution_root = _read_directory(SOLUTION_ENV_VAR, _default_solution_root())

    if check_exists:
        missing = [path for path in (level_root, solution_root) if not path.exists()]
        if missing:
            missing_str = ", ".join(str(path) for path in missing)
            raise FileNotFoundError(
                f"Required data directories do not exist: {missing_str}"
            )

    return Directories(level_root=level_root, solution_root=solution_root)


def build_plan(level: Level, plan_names: Sequence[str]) -> ActionPlan:
    """Parse ``plan_names`` into a plan that is legal on ``level``.

    Raises :class:`ValueError` when the plan is longer than the level's action
    limit or uses an action outside the level's vocabulary.
    """

    plan = ActionPlan.from_names(plan_names, limit=level.action_limit)
    if len(plan) > level.action_limit:
        raise ValueError(
            f"Plan has {len(plan)} actions but {level.name!r} allows at most {level.action_limit}"
        )
    disallowed = [action.label for action in plan if action not in level.actions]
    if disallowed:
        raise ValueError(f"Actions not allowed in {level.name!r}: {', '.join(disallowed)}")
    return plan


def run(level_name: str, plan_names: Sequence[str], directories: Optional[Directories] = None) -> None:
    """Open a window and play ``plan_names`` on the named level until closed."""

    from .toolkit import PlaybackUI, ensure_pygame

    directories = directories or resolve_directories()
    level = LevelLoader(directories.level_root).load(level_name)
    plan = build_plan(level, plan_names)
    pygame = ensure_pygame()
    ui = PlaybackUI(CyclicExecutor(level, plan), use_display=True)
    pygame.display.set_caption(f"Simon Says - {level.name}")

    clock = pygame.time.Clock()
    running = True
    while running:
        events = pygame.event.get()
        for event in events:
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
        ui.process_events(events)
        ui.update(clock.tick(60) / 1000.0)
        ui.render()
    pygame.quit()


def _print_level(loader: LevelLoader, name: str) -> None:
    level = loader.load(name)
    print(f"{level.name} ({level.difficulty})")
    print(level.render_ascii())
    print(f"Actions: {', '.join(action.label for action in level.actions)}")
    print(f"Action limit: {level.action_limit}")
    for line in describe_challenges(level):
        print(f"  {line}")


def _print_solutions(loader: LevelLoader, name: str, max_length: Optional[int], distinct: bool) -> None:
    level = loader.load(name)
    solutions = solve(level, max_length, distinct=distinct)
    print(f"{level.name}: {len(solutions)} solution(s)")
    summary = classify(solutions)
    for title, group in (
        ("Smallest", summary.smallest),
        ("Fastest", summary.fastest),
        ("Slowest", summary.slowest),
    ):
        for solution in group:
            print(f"  {title}: {solution.describe()}")
    for key, value in suggest_challenges(solutions).items():
        print(f"  suggested {key}: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simon-says", description="Simon Says puzzle tools")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--info", action="store_true", help="Print resolved data directories.")
    group.add_argument("--list-levels", action="store_true", help="List bundled levels.")
    group.add_argument("--show", metavar="LEVEL", help="Print a level map and its rules.")
    group.add_argument("--solve", metavar="LEVEL", help="Enumerate every solving plan.")
    group.add_argument("--validate", metavar="LEVEL", help="Check the stored solution of a level.")
    group.add_argument("--play", metavar="LEVEL", help="Open the playback window.")
    parser.add_argument("--plan", default="", help="Comma separated actions, e.g. F,F,L.")
    parser.add_argument("--max-length", type=int, default=None, help="Override the action limit.")
    parser.add_argument(
        "--distinct",
        action="store_true",
        help="Keep one solution per symmetry class when solving.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    plan_names = [name for name in args.plan.split(",") if name.strip()]

    try:
        directories = resolve_directories()
        loader = LevelLoader(directories.level_root)
        if args.list_levels:
            print("Available levels:")
            for name in loader.available():
                print(f"  {name}")
        elif args.show:
            _print_level(loader, args.show)
        elif args.solve:
            _print_solutions(loader, args.solve, args.max_length, args.distinct)
        elif args.validate:
            validator = SolutionValidator(loader, directories.solution_root)
            valid = validator.validate(args.validate)
            print(f"{args.validate}: {'valid' if valid else 'INVALID'}")
            return 0 if valid else 1
        elif args.play:
            run(args.play, plan_names, directories)
        elif args.info:
            _print_info(directories)
        else:
            _print_info(directories)
            print("Run with --help to list the available commands.")
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}")
        return 1
    return 0


def _print_info(directories: Directories) -> None:
    print(
        "Simon Says bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  solutions: {directories.solution_root}\n"
        "Set the environment variables to point to custom directories if needed."
    )


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
