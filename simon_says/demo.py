"""Simple command line demo for the Simon Says solver."""

from pathlib import Path

from .game import LevelLoader
from .simulation import describe_challenges
from .solver import SolutionValidator, classify, solve


def main() -> None:
    package_root = Path(__file__).resolve().parent
    level_loader = LevelLoader(package_root / "levels")
    validator = SolutionValidator(level_loader, package_root / "solutions")

    level_name = "level_waiting_game"
    level = level_loader.load(level_name)
    solutions = solve(level)
    summary = classify(solutions)

    print("=== Simon Says Demo ===")
    print(f"Level: {level.metadata['name']} ({level.metadata['difficulty']})")
    print(level.render_ascii())
    for line in describe_challenges(level):
        print(f"  {line}")
    print(f"Solving plans: {len(solutions)}")
    print(f"Smallest: {', '.join(s.describe() for s in summary.smallest)}")
    print(f"Fastest: {', '.join(s.describe() for s in summary.fastest)}")
    print(f"Slowest: {', '.join(s.describe() for s in summary.slowest)}")
    print(f"Stored solution valid: {validator.validate(level_name)}")


if __name__ == "__main__":
    main()
