"""Core rules for the Simon Says grid puzzle: actions, tiles, levels and movement."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple


Position = Tuple[int, int]


class Action(IntEnum):
    """Movement intents, ordered so plans compare lexicographically."""

    FORWARD = 0
    RIGHT = 1
    BACKWARD = 2
    LEFT = 3
    NOTHING = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def is_movement(self) -> bool:
        return self is not Action.NOTHING

    @staticmethod
    def from_name(name: str) -> "Action":
        key = str(name).strip().upper()
        aliases = {"F": "FORWARD", "R": "RIGHT", "B": "BACKWARD", "L": "LEFT", "N": "NOTHING"}
        key = aliases.get(key, key)
        try:
            return Action[key]
        except KeyError as exc:
            raise ValueError(f"Unknown action: {name}") from exc

    def rotate_cw(self) -> "Action":
        if self is Action.NOTHING:
            return self
        return Action((self.value + 1) % 4)

    def rotate_ccw(self) -> "Action":
        if self is Action.NOTHING:
            return self
        return Action((self.value + 3) % 4)

    def rotate_180(self) -> "Action":
        if self is Action.NOTHING:
            return self
        return Action((self.value + 2) % 4)

    def mirror(self) -> "Action":
        mapping = {Action.LEFT: Action.RIGHT, Action.RIGHT: Action.LEFT}
        return mapping.get(self, self)

    def cw_rotation(self, other: "Action") -> "CWRotation":
        """Return the rotation that turns this action into ``other``.

        ``NOTHING`` is fixed by every rotation, so any pair involving it is
        reported as ``CWRotation.ZERO``.
        """

        if self is Action.NOTHING or other is Action.NOTHING:
            return CWRotation.ZERO
        return CWRotation((other.value - self.value) % 4)

    @property
    def delta(self) -> Position:
        return _ACTION_DELTAS[self]


_ACTION_DELTAS: Dict[Action, Position] = {
    Action.FORWARD: (1, 0),
    Action.BACKWARD: (-1, 0),
    Action.LEFT: (0, -1),
    Action.RIGHT: (0, 1),
    Action.NOTHING: (0, 0),
}


class CWRotation(IntEnum):
    """Facing of a player, expressed as a clockwise quarter-turn count."""

    ZERO = 0
    CW_90 = 1
    CW_180 = 2
    CW_270 = 3

    @staticmethod
    def from_name(name: str) -> "CWRotation":
        key = str(name).strip().upper()
        aliases = {
            "0": "ZERO",
            "90": "CW_90",
            "180": "CW_180",
            "270": "CW_270",
            "CW": "CW_90",
            "CCW": "CW_270",
            "HALF": "CW_180",
        }
        key = aliases.get(key, key)
        try:
            return CWRotation[key]
        except KeyError as exc:
            raise ValueError(f"Unknown rotation: {name}") from exc

    def rotate_cw(self) -> "CWRotation":
        return CWRotation((self.value + 1) % 4)

    def rotate_ccw(self) -> "CWRotation":
        return CWRotation((self.value + 3) % 4)

    def inverse(self) -> "CWRotation":
        return CWRotation((4 - self.value) % 4)

    def compose(self, other: "CWRotation") -> "CWRotation":
        return CWRotation((self.value + other.value) % 4)

    def apply(self, action: Action) -> Action:
        return self.to_combinator()(action)

    def to_combinator(self) -> Callable[[Action], Action]:
        combinators = {
            CWRotation.ZERO: lambda action: action,
            CWRotation.CW_90: Action.rotate_cw,
            CWRotation.CW_180: Action.rotate_180,
            CWRotation.CW_270: Action.rotate_ccw,
        }
        return combinators[self]


class TileKind(Enum):
    START = "start"
    BASIC = "basic"
    ICE = "ice"
    WALL = "wall"
    CW_ROT = "cw_rot"
    CCW_ROT = "ccw_rot"
    FINISH = "finish"

    @staticmethod
    def from_name(name: str) -> "TileKind":
        key = str(name).strip().lower()
        try:
            return TileKind(key)
        except ValueError as exc:
            raise ValueError(f"Unknown tile type: {name}") from exc


@dataclass(frozen=True)
class Tile:
    """A single grid cell. ``facing`` only matters for start tiles."""

    kind: TileKind
    facing: CWRotation = CWRotation.ZERO

    @classmethod
    def start(cls, facing: CWRotation = CWRotation.ZERO) -> "Tile":
        return cls(TileKind.START, facing)

    @property
    def symbol(self) -> str:
        return _TILE_SYMBOLS[self.kind]


BASIC = Tile(TileKind.BASIC)
ICE = Tile(TileKind.ICE)
WALL = Tile(TileKind.WALL)
CW_ROT = Tile(TileKind.CW_ROT)
CCW_ROT = Tile(TileKind.CCW_ROT)
FINISH = Tile(TileKind.FINISH)

_TILE_SYMBOLS: Dict[TileKind, str] = {
    TileKind.START: "S",
    TileKind.BASIC: ".",
    TileKind.ICE: "*",
    TileKind.WALL: "#",
    TileKind.CW_ROT: ">",
    TileKind.CCW_ROT: "<",
    TileKind.FINISH: "F",
}
_SYMBOL_TILES: Dict[str, TileKind] = {symbol: kind for kind, symbol in _TILE_SYMBOLS.items()}


@dataclass
class Level:
    """Sparse grid of tiles plus the plan vocabulary and limits for one puzzle."""

    name: str
    tiles: Dict[Position, Tile]
    actions: Tuple[Action, ...] = (Action.FORWARD, Action.RIGHT, Action.BACKWARD, Action.LEFT)
    action_limit: int = 4
    command_challenge: Optional[int] = None
    step_challenge: Optional[int] = None
    waste_challenge: Optional[int] = None
    difficulty: str = "Unknown"

    def __post_init__(self) -> None:
        self.tiles = {
            (int(position[0]), int(position[1])): tile
            for position, tile in self.tiles.items()
        }
        self.actions = tuple(self.actions)
        if not any(tile.kind is TileKind.START for tile in self.tiles.values()):
            raise ValueError(f"Level {self.name!r} has no start tile")
        if not self.actions:
            raise ValueError(f"Level {self.name!r} allows no actions")
        if len(set(self.actions)) != len(self.actions):
            raise ValueError(f"Level {self.name!r} lists an action more than once")
        if self.action_limit < 1:
            raise ValueError(f"Level {self.name!r} needs an action limit of at least 1")
        for label, value in (
            ("command_challenge", self.command_challenge),
            ("step_challenge", self.step_challenge),
            ("waste_challenge", self.waste_challenge),
        ):
            if value is not None and value < 0:
                raise ValueError(f"Level {self.name!r} has a negative {label}")

    def get(self, position: Position) -> Optional[Tile]:
        return self.tiles.get(position)

    def start_tiles(self) -> List[Tuple[Position, Tile]]:
        return sorted(
            (position, tile)
            for position, tile in self.tiles.items()
            if tile.kind is TileKind.START
        )

    def bounds(self) -> Tuple[int, int, int, int]:
        """Return ``(min_x, min_y, max_x, max_y)`` over every tile."""

        xs = [position[0] for position in self.tiles]
        ys = [position[1] for position in self.tiles]
        return min(xs), min(ys), max(xs), max(ys)

    @property
    def metadata(self) -> Dict[str, object]:
        min_x, min_y, max_x, max_y = self.bounds()
        metadata: Dict[str, object] = {
            "name": self.name,
            "difficulty": self.difficulty,
            "dimensions": f"{max_x - min_x + 1}x{max_y - min_y + 1}",
            "actions": [action.label for action in self.actions],
            "action_limit": self.action_limit,
        }
        if self.command_challenge is not None:
            metadata["command_challenge"] = self.command_challenge
        if self.step_challenge is not None:
            metadata["step_challenge"] = self.step_challenge
        if self.waste_challenge is not None:
            metadata["waste_challenge"] = self.waste_challenge
        return metadata

    def render_ascii(self) -> str:
        min_x, min_y, max_x, max_y = self.bounds()
        rows = []
        for y in range(min_y, max_y + 1):
            row = "".join(
                self.tiles[(x, y)].symbol if (x, y) in self.tiles else " "
                for x in range(min_x, max_x + 1)
            )
            rows.append(row.rstrip())
        return "\n".join(rows)


class LevelBuilder:
    """Assemble a tile template before freezing it into a :class:`Level`."""

    def __init__(self, tiles: Optional[Dict[Position, Tile]] = None):
        self.tiles: Dict[Position, Tile] = dict(tiles or {})

    def fill(self, corner_a: Position, corner_b: Position, tile: Tile) -> "LevelBuilder":
        x0, x1 = sorted((corner_a[0], corner_b[0]))
        y0, y1 = sorted((corner_a[1], corner_b[1]))
        for x in range(x0, x1 + 1):
            for y in range(y0, y1 + 1):
                self.tiles[(x, y)] = tile
        return self

    def place(self, position: Position, tile: Tile) -> "LevelBuilder":
        self.tiles[tuple(position)] = tile
        return self

    def remove(self, position: Position) -> "LevelBuilder":
        self.tiles.pop(tuple(position), None)
        return self

    def rotated(self, rotation: CWRotation) -> "LevelBuilder":
        """Return a copy with the whole template turned about the origin.

        One clockwise quarter turn maps the forward axis (+x) onto the right
        axis (+y); start facings turn with the grid so solutions carry over.
        """

        rotated: Dict[Position, Tile] = {}
        for position, tile in self.tiles.items():
            x, y = position
            for _ in range(rotation.value):
                x, y = -y, x
            if tile.kind is TileKind.START:
                tile = Tile.start(tile.facing.compose(rotation))
            rotated[(x, y)] = tile
        return LevelBuilder(rotated)

    def build(self, name: str, **options: object) -> Level:
        return Level(name=name, tiles=dict(self.tiles), **options)


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def available(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> Level:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"Level file {path} is not valid JSON: {exc}") from exc
        return self._parse_level(data, default_name=name)

    def _parse_level(self, data: Dict, default_name: str = "") -> Level:
        builder = LevelBuilder()
        start_facing = CWRotation.from_name(data.get("start_facing", "zero"))
        for y, row in enumerate(data.get("map", [])):
            for x, symbol in enumerate(row):
                if symbol == " ":
                    continue
                if symbol not in _SYMBOL_TILES:
                    raise ValueError(f"Unknown map symbol {symbol!r} at {(x, y)}")
                kind = _SYMBOL_TILES[symbol]
                tile = Tile.start(start_facing) if kind is TileKind.START else Tile(kind)
                builder.place((x, y), tile)
        for fill in data.get("fills", []):
            builder.fill(tuple(fill["from"]), tuple(fill["to"]), self._parse_tile(fill))
        for entry in data.get("tiles", []):
            builder.place(tuple(entry["position"]), self._parse_tile(entry))
        for position in data.get("remove", []):
            builder.remove(tuple(position))
        if data.get("rotate"):
            builder = builder.rotated(CWRotation.from_name(data["rotate"]))

        actions = tuple(
            Action.from_name(name)
            for name in data.get("actions", ["Forward", "Right", "Backward", "Left"])
        )
        return builder.build(
            name=data.get("name", default_name),
            difficulty=data.get("difficulty", "Unknown"),
            actions=actions,
            action_limit=int(data.get("action_limit", 4)),
            command_challenge=_optional_int(data.get("command_challenge")),
            step_challenge=_optional_int(data.get("step_challenge")),
            waste_challenge=_optional_int(data.get("waste_challenge")),
        )

    @staticmethod
    def _parse_tile(entry: Dict) -> Tile:
        kind = TileKind.from_name(entry.get("type", "basic"))
        if kind is TileKind.START:
            return Tile.start(CWRotation.from_name(entry.get("facing", "zero")))
        return Tile(kind)


def _optional_int(value: object) -> Optional[int]:
    return int(value) if value is not None else None


class SimulationEvent(Enum):
    """Terminal outcome of a single move."""

    FINISHED = "finished"
    DIED = "died"


@dataclass(frozen=True, order=True)
class Player:
    position: Position
    rotation: CWRotation = CWRotation.ZERO


def spawn_players(level: Level) -> List[Player]:
    return [Player(position, tile.facing) for position, tile in level.start_tiles()]


StepResult = Tuple[Player, Optional[SimulationEvent]]


def move_player(level: Level, player: Player, action: Action) -> StepResult:
    """Resolve one action for one player, sliding over ice and stopping at walls."""

    local_action = player.rotation.to_combinator()(action)
    dx, dy = local_action.delta
    if (dx, dy) == (0, 0):
        return player, None

    position = player.position
    entered: Optional[Tile] = None
    moved = False
    # Every slide crosses distinct tiles, so the tile count bounds the loop.
    for _ in range(len(level.tiles) + 1):
        candidate = (position[0] + dx, position[1] + dy)
        tile = level.get(candidate)
        if tile is not None and tile.kind is TileKind.WALL:
            break
        position = candidate
        entered = tile
        moved = True
        if tile is None or tile.kind is not TileKind.ICE:
            break

    if not moved:
        return player, None

    rotation = player.rotation
    if entered is not None and entered.kind is TileKind.CW_ROT:
        rotation = rotation.rotate_cw()
    elif entered is not None and entered.kind is TileKind.CCW_ROT:
        rotation = rotation.rotate_ccw()

    event: Optional[SimulationEvent] = None
    if entered is None:
        event = SimulationEvent.DIED
    elif entered.kind is TileKind.FINISH:
        event = SimulationEvent.FINISHED
    return Player(position, rotation), event


def simulate_step(
    level: Level, players: Sequence[Player], action: Action
) -> List[StepResult]:
    """Apply ``action`` to every player independently, preserving order."""

    return [move_player(level, player, action) for player in players]


def parse_actions(names: Iterable[str]) -> List[Action]:
    return [Action.from_name(name) for name in names]
