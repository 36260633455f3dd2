"""Simon Says puzzle engine."""

from .game import Action, CWRotation, Level, LevelBuilder, LevelLoader, Player, Tile, TileKind
from .plan import ActionPlan
from .simulation import CyclicExecutor
from .solver import Solution, SolutionValidator, classify, solve

__all__ = [
    "Action",
    "ActionPlan",
    "CWRotation",
    "CyclicExecutor",
    "Level",
    "LevelBuilder",
    "LevelLoader",
    "Player",
    "Solution",
    "SolutionValidator",
    "Tile",
    "TileKind",
    "classify",
    "solve",
]
