"""Minimal pygame playback UI for running action plans.

Rendering is kept deterministic so it can be exercised in automated tests
using the SDL ``dummy`` video driver.
"""

from __future__ import annotations

import os
from typing import Iterable, List, Optional, Tuple

from ..game import Action, CWRotation, SimulationEvent
from ..simulation import (
    ChallengeRecord,
    CyclicExecutor,
    SimulationState,
    StepReport,
    evaluate_challenges,
)
from . import layout


# Pygame is optional for the library but required for the UI helpers.  The
# import is performed lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration (e.g. select the ``dummy`` video driver).
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
    return _PYGAME


# Facing marker direction on screen for every rotation: +x is right, +y is down.
_FACING_VECTORS = {
    CWRotation.ZERO: (1, 0),
    CWRotation.CW_90: (0, 1),
    CWRotation.CW_180: (-1, 0),
    CWRotation.CW_270: (0, -1),
}


class PlaybackUI:
    """Small pygame wrapper that edits a plan and plays it back on a timer."""

    def __init__(
        self,
        executor: CyclicExecutor,
        *,
        cell_size: int = layout.TILE_SIZE,
        surface=None,
        use_display: bool = False,
        interval: float = layout.SIMULATION_INTERVAL,
    ) -> None:
        pygame = ensure_pygame()
        self.executor = executor
        self.geometry = layout.compute_geometry(executor.level, cell_size)
        self.surface = surface or pygame.Surface(self.geometry.size)
        self.screen = None
        if use_display:
            self.screen = pygame.display.set_mode(self.geometry.size)
        self.interval = interval
        self.elapsed = 0.0
        self.last_event: Optional[SimulationEvent] = None
        self.challenges: Optional[ChallengeRecord] = None
        self.key_actions = {
            pygame.K_UP: Action.FORWARD,
            pygame.K_RIGHT: Action.RIGHT,
            pygame.K_DOWN: Action.BACKWARD,
            pygame.K_LEFT: Action.LEFT,
        }

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> None:
        pygame = ensure_pygame()
        for event in events:
            if event.type != pygame.KEYDOWN:
                continue
            if event.key in self.key_actions:
                self._edit_plan(self.key_actions[event.key])
            elif event.key == pygame.K_BACKSPACE:
                if self.executor.state is SimulationState.STOPPED and self.executor.plan:
                    self.executor.plan.remove(len(self.executor.plan) - 1)
            elif event.key == pygame.K_SPACE:
                self.toggle_running()
            elif event.key == pygame.K_p:
                if self.executor.state is SimulationState.PAUSED:
                    self.executor.resume()
                else:
                    self.executor.pause()

    def _edit_plan(self, action: Action) -> None:
        if self.executor.state is not SimulationState.STOPPED:
            return
        if action not in self.executor.level.actions:
            return
        self.executor.plan.add(action)

    def toggle_running(self) -> None:
        if self.executor.state is SimulationState.STOPPED:
            self.last_event = None
            self.challenges = None
            self.executor.respawn()
            self.elapsed = 0.0
            self._handle_report(self.executor.start())
        else:
            self.executor.stop()

    # ------------------------------------------------------------------
    # Timing
    def update(self, dt: float) -> List[StepReport]:
        """Advance the playback clock, firing one action per elapsed interval."""

        reports: List[StepReport] = []
        if not self.executor.running:
            return reports
        self.elapsed += dt
        while self.elapsed >= self.interval and self.executor.running:
            self.elapsed -= self.interval
            report = self.executor.tick()
            if report is not None:
                reports.append(report)
                self._handle_report(report)
        return reports

    def _handle_report(self, report: Optional[StepReport]) -> None:
        if report is None:
            return
        if report.all_finished:
            self.last_event = SimulationEvent.FINISHED
            self.challenges = evaluate_challenges(
                self.executor.level, len(self.executor.plan), self.executor.step_count
            )
            self.executor.stop()
        elif report.any_died:
            self.last_event = SimulationEvent.DIED
            self.executor.stop()

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        pygame = ensure_pygame()
        self.surface.fill(layout.BACKGROUND_COLOR)
        self._draw_tiles()
        self._draw_players()
        if self.screen:
            self.screen.blit(self.surface, (0, 0))
            pygame.display.flip()
        return self.surface

    def _draw_tiles(self) -> None:
        pygame = ensure_pygame()
        for position, tile in self.executor.level.tiles.items():
            rect = pygame.Rect(self.geometry.cell_rect(position))
            self.surface.fill(layout.TILE_COLORS[tile.kind], rect)
            pygame.draw.rect(self.surface, layout.GRID_LINE_COLOR, rect, 1)

    def _draw_players(self) -> None:
        pygame = ensure_pygame()
        for player in self.executor.players:
            center = self.cell_center(player.position)
            radius = max(2, self.geometry.cell_size // 3)
            pygame.draw.circle(self.surface, layout.PLAYER_COLOR, center, radius)
            dx, dy = _FACING_VECTORS[player.rotation]
            tip = (center[0] + dx * radius, center[1] + dy * radius)
            pygame.draw.line(self.surface, layout.FACING_COLOR, center, tip, 2)

    def cell_center(self, position: Tuple[int, int]) -> Tuple[int, int]:
        x, y, width, height = self.geometry.cell_rect(position)
        return x + width // 2, y + height // 2


__all__ = ["PlaybackUI", "ensure_pygame"]
