"""Action plans and their reduction to a canonical symmetry representative."""

from __future__ import annotations

import logging
from functools import total_ordering
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .game import Action, CWRotation


logger = logging.getLogger(__name__)


@total_ordering
class ActionPlan:
    """Ordered list of actions that the player repeats forever.

    Plans compare structurally and lexicographically, which is what the
    canonical reductions rely on. ``limit`` only guards authoring through
    :meth:`add`; transforms and the solver ignore it.
    """

    def __init__(self, actions: Iterable[Action] = (), limit: Optional[int] = None):
        self.actions: List[Action] = [Action(action) for action in actions]
        self.limit = limit

    @classmethod
    def from_names(cls, names: Iterable[str], limit: Optional[int] = None) -> "ActionPlan":
        return cls((Action.from_name(name) for name in names), limit=limit)

    def names(self) -> List[str]:
        return [action.label for action in self.actions]

    # ------------------------------------------------------------------
    # Sequence protocol
    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __getitem__(self, index: int) -> Action:
        return self.actions[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ActionPlan):
            return self.actions == other.actions
        if isinstance(other, (list, tuple)):
            return self.actions == list(other)
        return NotImplemented

    def __lt__(self, other: Union["ActionPlan", Sequence[Action]]) -> bool:
        if isinstance(other, ActionPlan):
            return self.actions < other.actions
        if isinstance(other, (list, tuple)):
            return self.actions < list(other)
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"ActionPlan([{', '.join(self.names())}])"

    def key(self) -> Tuple[Action, ...]:
        return tuple(self.actions)

    def copy(self) -> "ActionPlan":
        return ActionPlan(self.actions, limit=self.limit)

    # ------------------------------------------------------------------
    # Authoring
    def add(self, action: Action) -> bool:
        if self.limit is not None and len(self.actions) >= self.limit:
            logger.warning(
                "refusing to add %s: plan already holds %d of %d actions",
                Action(action).label,
                len(self.actions),
                self.limit,
            )
            return False
        self.actions.append(Action(action))
        return True

    def remove(self, index: int) -> Optional[Action]:
        if not 0 <= index < len(self.actions):
            logger.warning(
                "attempted to remove action from invalid index: %s, bounds: [0, %d)",
                index,
                len(self.actions),
            )
            return None
        return self.actions.pop(index)

    def move(self, source: int, target: int) -> bool:
        size = len(self.actions)
        if not (0 <= source < size and 0 <= target < size):
            logger.warning(
                "attempted to move action %s -> %s, bounds: [0, %d)", source, target, size
            )
            return False
        action = self.actions.pop(source)
        self.actions.insert(target, action)
        return True

    def clear(self) -> None:
        self.actions.clear()

    # ------------------------------------------------------------------
    # Symmetry transforms
    def rotated(self, rotation: CWRotation) -> "ActionPlan":
        combinator = rotation.to_combinator()
        return ActionPlan((combinator(action) for action in self.actions), limit=self.limit)

    def mirrored(self) -> "ActionPlan":
        return ActionPlan((action.mirror() for action in self.actions), limit=self.limit)

    def shifted(self, count: int) -> "ActionPlan":
        """Rotate the plan right by ``count`` positions."""

        if not self.actions:
            return self.copy()
        count %= len(self.actions)
        actions = self.actions[-count:] + self.actions[:-count] if count else list(self.actions)
        return ActionPlan(actions, limit=self.limit)

    # ------------------------------------------------------------------
    # Canonical reductions
    def canonical_rotation(self) -> "ActionPlan":
        """Turn the plan so that its first action reads as ``FORWARD``."""

        if not self.actions:
            return self.copy()
        return self.rotated(self.actions[0].cw_rotation(Action.FORWARD))

    def canonical_mirror(self) -> "ActionPlan":
        return min(self.copy(), self.mirrored())

    def canonical_phase(self) -> "ActionPlan":
        if not self.actions:
            return self.copy()
        return min(self.shifted(count) for count in range(1, len(self.actions) + 1))

    def canonicalize(self) -> "ActionPlan":
        """Return the representative of this plan's symmetry class.

        Rotation and mirror reduction depend on the first action, so every
        phase that starts on a movement is reduced in turn and the smallest
        result wins. Plans made only of ``NOTHING`` are already canonical.
        """

        if not self.actions:
            return self.copy()
        phases = [self.shifted(count) for count in range(len(self.actions))]
        moving = [phase for phase in phases if phase[0].is_movement]
        candidates = [
            phase.canonical_rotation().canonical_mirror().canonical_phase()
            for phase in (moving or phases)
        ]
        return min(candidates)

    def is_canonical(self) -> bool:
        return self == self.canonicalize()
