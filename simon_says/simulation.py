"""Cyclic plan execution and challenge bookkeeping for a running level."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .game import (
    Action,
    Level,
    Player,
    SimulationEvent,
    StepResult,
    simulate_step,
    spawn_players,
)
from .plan import ActionPlan


logger = logging.getLogger(__name__)


class SimulationState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class StepReport:
    """Everything one fired action produced."""

    program_counter: int
    action: Action
    results: List[StepResult] = field(default_factory=list)

    @property
    def events(self) -> List[Optional[SimulationEvent]]:
        return [event for _, event in self.results]

    @property
    def all_finished(self) -> bool:
        return bool(self.results) and all(
            event is SimulationEvent.FINISHED for event in self.events
        )

    @property
    def any_died(self) -> bool:
        return any(event is SimulationEvent.DIED for event in self.events)


class CyclicExecutor:
    """Runs an action plan forever, one action per external tick.

    ``start`` fires the first action, every ``tick`` advances the program
    counter modulo the plan length. Finishing or dying is reported through
    the returned :class:`StepReport`; stopping is up to the caller.
    """

    def __init__(self, level: Level, plan: Optional[ActionPlan] = None):
        self.level = level
        self.plan = plan if plan is not None else ActionPlan(limit=level.action_limit)
        self.state = SimulationState.STOPPED
        self.program_counter = 0
        self.step_count = 0
        self.players: List[Player] = spawn_players(level)

    @property
    def running(self) -> bool:
        return self.state is SimulationState.RUNNING

    def respawn(self) -> None:
        self.players = spawn_players(self.level)

    def start(self) -> Optional[StepReport]:
        if self.state is not SimulationState.STOPPED:
            logger.warning("cannot start simulation while %s", self.state.value)
            return None
        if not self.plan:
            logger.warning("cannot start simulation with an empty plan")
            return None
        logger.info("simulation started")
        self.program_counter = 0
        self.step_count = 0
        self.state = SimulationState.RUNNING
        return self._fire()

    def tick(self) -> Optional[StepReport]:
        if self.state is not SimulationState.RUNNING:
            return None
        if not self.plan:
            logger.warning("plan emptied while running; stopping simulation")
            self.stop()
            return None
        self.program_counter = (self.program_counter + 1) % len(self.plan)
        return self._fire()

    def pause(self) -> None:
        if self.state is not SimulationState.RUNNING:
            logger.warning("cannot pause simulation while %s", self.state.value)
            return
        logger.info("simulation paused")
        self.state = SimulationState.PAUSED

    def resume(self) -> None:
        if self.state is not SimulationState.PAUSED:
            logger.warning("cannot resume simulation while %s", self.state.value)
            return
        logger.info("simulation resumed")
        self.state = SimulationState.RUNNING

    def stop(self) -> None:
        if self.state is SimulationState.STOPPED:
            return
        logger.info("simulation stopped")
        self.state = SimulationState.STOPPED
        self.step_count = 0

    def _fire(self) -> StepReport:
        action = self.plan[self.program_counter]
        results = simulate_step(self.level, self.players, action)
        self.players = [player for player, _ in results]
        self.step_count += 1
        return StepReport(self.program_counter, action, results)


@dataclass
class ChallengeRecord:
    """Outcome of the optional challenges of a level.

    ``None`` means the level does not define that challenge.
    """

    commands: Optional[bool] = None
    steps: Optional[bool] = None
    waste: Optional[bool] = None
    level_completed: bool = False


def evaluate_challenges(level: Level, plan_length: int, step_count: int) -> ChallengeRecord:
    """Score a completed run against the level's challenge thresholds."""

    record = ChallengeRecord(level_completed=True)
    if level.command_challenge is not None:
        record.commands = plan_length <= level.command_challenge
    if level.step_challenge is not None:
        record.steps = step_count <= level.step_challenge
    if level.waste_challenge is not None:
        record.waste = step_count >= level.waste_challenge
    return record


def describe_challenges(level: Level) -> List[str]:
    descriptions = []
    if level.step_challenge is not None:
        descriptions.append(f"Alacrity: Take {level.step_challenge} or fewer steps")
    if level.command_challenge is not None:
        descriptions.append(f"Parsimony: Use {level.command_challenge} or fewer commands")
    if level.waste_challenge is not None:
        descriptions.append(f"Circuity: Take {level.waste_challenge} or more steps")
    return descriptions
