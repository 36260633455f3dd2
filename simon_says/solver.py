"""Exhaustive search over action plans and validation of stored solutions."""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .game import Action, Level, LevelLoader, Player, SimulationEvent, simulate_step, spawn_players
from .plan import ActionPlan


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Solution:
    path: Tuple[Action, ...]
    solution_size: int
    steps: int

    @property
    def plan(self) -> ActionPlan:
        return ActionPlan(self.path)

    def describe(self) -> str:
        names = ", ".join(action.label for action in self.path)
        return f"[{names}] size={self.solution_size} steps={self.steps}"


class PlanOutcome(Enum):
    FINISHED = "finished"
    DIED = "died"
    CYCLE = "cycle"


@dataclass(frozen=True)
class RunResult:
    outcome: PlanOutcome
    steps: int

    @property
    def solved(self) -> bool:
        return self.outcome is PlanOutcome.FINISHED


def run_plan(level: Level, plan: Sequence[Action]) -> RunResult:
    """Execute ``plan`` cyclically until every player finishes, one dies,
    or a ``(phase, players)`` configuration repeats."""

    plan = list(plan)
    if not plan:
        return RunResult(PlanOutcome.CYCLE, 0)

    players: List[Player] = spawn_players(level)
    visited: Set[Tuple[int, Tuple[Player, ...]]] = set()
    for step_count, (phase, action) in enumerate(itertools.cycle(enumerate(plan))):
        signature = (phase, tuple(players))
        if signature in visited:
            return RunResult(PlanOutcome.CYCLE, step_count)
        visited.add(signature)

        results = simulate_step(level, players, action)
        players = [player for player, _ in results]
        events = [event for _, event in results]
        if all(event is SimulationEvent.FINISHED for event in events):
            return RunResult(PlanOutcome.FINISHED, step_count + 1)
        if any(event is SimulationEvent.DIED for event in events):
            return RunResult(PlanOutcome.DIED, step_count + 1)
    raise AssertionError("unreachable")  # pragma: no cover


def candidate_plans(level: Level, max_length: Optional[int] = None) -> Iterator[Tuple[Action, ...]]:
    limit = level.action_limit if max_length is None else max_length
    for length in range(1, limit + 1):
        yield from itertools.product(level.actions, repeat=length)


def solve(
    level: Level, max_length: Optional[int] = None, *, distinct: bool = False
) -> List[Solution]:
    """Return every plan up to the length limit that finishes the level.

    With ``distinct`` only the first solution of each canonical symmetry
    class is kept.
    """

    solutions: List[Solution] = []
    seen: Set[Tuple[Action, ...]] = set()
    examined = 0
    for path in candidate_plans(level, max_length):
        examined += 1
        result = run_plan(level, path)
        if not result.solved:
            continue
        if distinct:
            key = ActionPlan(path).canonicalize().key()
            if key in seen:
                continue
            seen.add(key)
        solutions.append(Solution(path=path, solution_size=len(path), steps=result.steps))
    logger.debug(
        "level %r: %d candidate plans, %d solutions", level.name, examined, len(solutions)
    )
    return solutions


@dataclass
class SolutionSummary:
    smallest: List[Solution] = field(default_factory=list)
    fastest: List[Solution] = field(default_factory=list)
    slowest: List[Solution] = field(default_factory=list)

    @property
    def solvable(self) -> bool:
        return bool(self.smallest)


def classify(solutions: Sequence[Solution]) -> SolutionSummary:
    if not solutions:
        return SolutionSummary()
    min_size = min(solution.solution_size for solution in solutions)
    min_steps = min(solution.steps for solution in solutions)
    max_steps = max(solution.steps for solution in solutions)
    return SolutionSummary(
        smallest=[s for s in solutions if s.solution_size == min_size],
        fastest=[s for s in solutions if s.steps == min_steps],
        slowest=[s for s in solutions if s.steps == max_steps],
    )


def suggest_challenges(solutions: Sequence[Solution]) -> Dict[str, int]:
    """Derive challenge thresholds that the best known plans just meet."""

    summary = classify(solutions)
    if not summary.solvable:
        return {}
    return {
        "command_challenge": summary.smallest[0].solution_size,
        "step_challenge": summary.fastest[0].steps,
        "waste_challenge": summary.slowest[0].steps,
    }


class SolutionValidator:
    """Validate that a solution file finishes its level as recorded."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Dict:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text())

    def plan_for(self, solution: Dict) -> ActionPlan:
        return ActionPlan.from_names(solution.get("plan", []))

    def run(self, level_name: str, solution_name: Optional[str] = None) -> RunResult:
        level = self.level_loader.load(level_name)
        solution = self.load_solution(solution_name or level_name)
        return run_plan(level, self.plan_for(solution))

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        level = self.level_loader.load(level_name)
        solution = self.load_solution(solution_name or level_name)
        plan = self.plan_for(solution)
        if not plan or len(plan) > level.action_limit:
            return False
        if any(action not in level.actions for action in plan):
            return False
        result = run_plan(level, plan)
        if not result.solved:
            return False
        expected_steps = solution.get("expected_steps")
        if expected_steps is not None and result.steps != int(expected_steps):
            return False
        return True
