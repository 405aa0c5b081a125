"""
Game state for the tree-growing agent.
Implements the per-turn snapshot, derived tree views, policy rules loaded
from config.json, and the decision event log.

Day counter: 0-23, the game ends after day 23
Trees: replaced wholesale every turn from the judge's input
"""

from __future__ import annotations
import copy
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from board import Board
from models import Action, Tree

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'complete_min_sun': 4,
    'complete_after_day': 10,
    'last_day': 23,
    'low_nutrients': 12,
    'grow_base_costs': [1, 3, 7],
    'max_size': 3,
}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load policy settings, falling back to defaults.

    Args:
        path: Config file to read (default: config.json beside this module)

    Returns:
        Dictionary with every DEFAULT_CONFIG key present
    """
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path or CONFIG_PATH, 'r') as f:
            loaded = json.load(f)
        if isinstance(loaded, dict):
            config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


@dataclass(frozen=True)
class Rules:
    """Thresholds used by the policy chain."""
    complete_min_sun: int = 4  # Sun needed before completing a tree
    complete_after_day: int = 10  # Completing on size advantage only after this day
    last_day: int = 23  # Final day of the game
    low_nutrients: int = 12  # Nutrient pool below this makes completing urgent
    grow_base_costs: Tuple[int, ...] = (1, 3, 7)  # Base grow cost from size 0, 1, 2
    max_size: int = 3


def load_rules(path: Optional[str] = None) -> Rules:
    """Build Rules from config.json (or the given path)."""
    config = load_config(path)
    return Rules(
        complete_min_sun=int(config['complete_min_sun']),
        complete_after_day=int(config['complete_after_day']),
        last_day=int(config['last_day']),
        low_nutrients=int(config['low_nutrients']),
        grow_base_costs=tuple(int(c) for c in config['grow_base_costs']),
        max_size=int(config['max_size']),
    )


@dataclass
class GameState:
    """
    Snapshot of one turn.

    The board is shared for the whole match; everything else is rebuilt
    from the judge's input each turn. Own/opponent views are computed on
    demand so they stay correct after in-turn tree changes.
    """
    board: Board
    day: int = 0  # Current day (0-23)
    nutrients: int = 20  # Base score of the next COMPLETE
    my_sun: int = 0
    my_score: int = 0
    opponent_sun: int = 0
    opponent_score: int = 0
    opponent_is_waiting: bool = False  # Opponent is asleep until the next day
    trees: List[Tree] = field(default_factory=list)
    possible_actions: List[Action] = field(default_factory=list)  # As declared by the judge
    rules: Rules = field(default_factory=Rules)
    log: List[Dict[str, Any]] = field(default_factory=list)  # Decision events for this turn

    def my_trees(self) -> List[Tree]:
        return [t for t in self.trees if t.is_mine]

    def opponent_trees(self) -> List[Tree]:
        return [t for t in self.trees if not t.is_mine]

    def count_my_trees(self, size: int) -> int:
        return sum(1 for t in self.trees if t.is_mine and t.size == size)

    def count_opponent_trees(self, size: int) -> int:
        return sum(1 for t in self.trees if not t.is_mine and t.size == size)

    def tree_at(self, cell_index: int) -> Optional[Tree]:
        """Get the tree on a specific cell, if any."""
        for tree in self.trees:
            if tree.cell_index == cell_index:
                return tree
        return None

    def occupied_cells(self) -> set:
        return {t.cell_index for t in self.trees}

    def richness_of(self, tree: Tree) -> int:
        return self.board[tree.cell_index].richness

    def working_copy(self) -> GameState:
        """
        Copy used by the policy chain while deciding a turn.

        Shares the board, rules and legal actions; trees are copied so that
        growing, seeding or completing changes only the copy.
        """
        return GameState(
            board=self.board,
            day=self.day,
            nutrients=self.nutrients,
            my_sun=self.my_sun,
            my_score=self.my_score,
            opponent_sun=self.opponent_sun,
            opponent_score=self.opponent_score,
            opponent_is_waiting=self.opponent_is_waiting,
            trees=[copy.copy(t) for t in self.trees],
            possible_actions=list(self.possible_actions),
            rules=self.rules,
            log=[],
        )


def log_event(game_state: GameState, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'day': game_state.day,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def get_state_summary(game_state: GameState) -> Dict[str, Any]:
    """
    Get a summary of the game state for API responses and debugging.

    Args:
        game_state: Current game state

    Returns:
        Dictionary with summary information
    """
    return {
        'day': game_state.day,
        'nutrients': game_state.nutrients,
        'my_sun': game_state.my_sun,
        'my_score': game_state.my_score,
        'opponent_sun': game_state.opponent_sun,
        'opponent_score': game_state.opponent_score,
        'opponent_is_waiting': game_state.opponent_is_waiting,
        'trees': [
            {
                'cell_index': tree.cell_index,
                'size': tree.size,
                'is_mine': tree.is_mine,
                'is_dormant': tree.is_dormant
            }
            for tree in game_state.trees
        ],
    }
