"""Command line and playback interface for Simon Says."""

from .main import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    Directories,
    main,
    resolve_directories,
    run,
)

__all__ = [
    "LEVEL_ENV_VAR",
    "SOLUTION_ENV_VAR",
    "Directories",
    "main",
    "resolve_directories",
    "run",
]
