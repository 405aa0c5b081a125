# Models for board cells, trees and actions

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

NO_NEIGHBOR = -1  # Sentinel for "no cell in that direction"


class ActionParseError(ValueError):
    """Exception raised when an action descriptor cannot be parsed."""
    pass


@dataclass(frozen=True)
class Cell:
    """A board cell with its richness tier and six directional neighbours."""
    index: int  # 0 is the centre, indices spiral outwards
    richness: int  # 0 if unusable, 1-3 for usable cells
    neighbors: tuple = (NO_NEIGHBOR,) * 6  # Neighbour index per direction (E, NE, NW, W, SW, SE)

    def neighbor_indexes(self) -> List[int]:
        """Indices of the existing neighbours, skipping the sentinel."""
        return [n for n in self.neighbors if n != NO_NEIGHBOR]


@dataclass
class Tree:
    """
    A tree standing on a cell.
    Size 0 is a seed, 3 is mature and can be completed.
    Dormant trees have already acted this day.
    """
    cell_index: int
    size: int = 0
    is_mine: bool = True
    is_dormant: bool = False


class ActionType(Enum):
    WAIT = "WAIT"
    SEED = "SEED"
    GROW = "GROW"
    COMPLETE = "COMPLETE"


@dataclass(frozen=True)
class Action:
    """A single turn decision: the action kind plus up to two cell indices."""
    type: ActionType
    target: Optional[int] = None  # Target cell for SEED, GROW and COMPLETE
    source: Optional[int] = None  # Source tree cell for SEED only

    @classmethod
    def wait(cls) -> "Action":
        return cls(ActionType.WAIT)

    @classmethod
    def seed(cls, source: int, target: int) -> "Action":
        return cls(ActionType.SEED, target=target, source=source)

    @classmethod
    def grow(cls, target: int) -> "Action":
        return cls(ActionType.GROW, target=target)

    @classmethod
    def complete(cls, target: int) -> "Action":
        return cls(ActionType.COMPLETE, target=target)

    @classmethod
    def parse(cls, text: str) -> "Action":
        """
        Parse a textual action descriptor.

        Accepted forms: 'WAIT', 'SEED <source> <target>', 'GROW <cell>',
        'COMPLETE <cell>'. Anything else raises ActionParseError.
        """
        parts = text.split()
        if not parts:
            raise ActionParseError("Empty action descriptor")
        try:
            action_type = ActionType(parts[0])
        except ValueError:
            raise ActionParseError(f"Unknown action type: {parts[0]}")

        expected = {ActionType.WAIT: 1, ActionType.SEED: 3}.get(action_type, 2)
        if len(parts) != expected:
            raise ActionParseError(f"{action_type.value} expects {expected - 1} argument(s), got '{text}'")
        try:
            args = [int(p) for p in parts[1:]]
        except ValueError:
            raise ActionParseError(f"Non-integer cell index in '{text}'")

        if action_type == ActionType.WAIT:
            return cls.wait()
        if action_type == ActionType.SEED:
            return cls.seed(args[0], args[1])
        return cls(action_type, target=args[0])

    def __str__(self) -> str:
        if self.type == ActionType.WAIT:
            return ActionType.WAIT.value
        if self.type == ActionType.SEED:
            return f"{self.type.value} {self.source} {self.target}"
        return f"{self.type.value} {self.target}"

