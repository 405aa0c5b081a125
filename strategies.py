"""
Action-selection policy for the tree-growing agent.

Four strategies are tried in a fixed order, and the first one that returns
an action wins:

1. complete_strategy: harvest a mature tree when the timing is right
2. grow_strategy: advance the most mature affordable tree
3. seed_strategy: plant away from our own trees
4. wait_strategy: always applies

Every strategy has the signature (GameState) -> Optional[Action]. They run
against a working copy of the turn's state, so a tree completed or seeded
by one strategy is visible to the ones after it, and the caller's snapshot
is left untouched.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from costs import cost_to_grow, cost_to_seed
from models import Action, Tree
from state import GameState, log_event

Strategy = Callable[[GameState], Optional[Action]]


def _active_trees(game_state: GameState) -> List[Tree]:
    """Own trees that can still act today."""
    return [t for t in game_state.my_trees() if not t.is_dormant]


def complete_strategy(game_state: GameState) -> Optional[Action]:
    """Complete the mature tree on the richest cell once completing pays off."""
    rules = game_state.rules
    by_richness = sorted(_active_trees(game_state), key=lambda t: -game_state.richness_of(t))
    target = next((t for t in by_richness if t.size == rules.max_size), None)
    if target is None:
        return None

    if game_state.my_sun < rules.complete_min_sun:
        log_event(game_state, "Complete skipped: not enough sun", sun=game_state.my_sun)
        return None

    mature = game_state.count_my_trees(rules.max_size)
    size_advantage = mature > game_state.count_opponent_trees(rules.max_size)
    late_with_advantage = game_state.day > rules.complete_after_day and size_advantage
    running_out_of_days = game_state.day >= rules.last_day - mature
    low_nutrients = game_state.nutrients < rules.low_nutrients

    if not (late_with_advantage or running_out_of_days or low_nutrients):
        log_event(game_state, "Complete skipped: too early", mature_trees=mature,
                  nutrients=game_state.nutrients)
        return None

    game_state.trees = [t for t in game_state.trees if t is not target]
    log_event(game_state, f"Completing tree on cell {target.cell_index}",
              late_with_advantage=late_with_advantage,
              running_out_of_days=running_out_of_days,
              low_nutrients=low_nutrients)
    return Action.complete(target.cell_index)


def grow_strategy(game_state: GameState) -> Optional[Action]:
    """Grow the largest affordable tree, preferring the cheaper one on ties."""
    rules = game_state.rules
    by_richness = sorted(
        _active_trees(game_state),
        key=lambda t: (-game_state.richness_of(t), -t.size),
    )
    costs = {id(t): cost_to_grow(game_state, t) for t in by_richness}
    affordable = [
        t for t in by_richness
        if t.size < rules.max_size and costs[id(t)] <= game_state.my_sun
    ]
    if not affordable:
        return None

    # Stable sort keeps the richness order among equal size and cost
    target = sorted(affordable, key=lambda t: (-t.size, costs[id(t)]))[0]
    log_event(game_state, f"Growing tree on cell {target.cell_index}",
              size=target.size, cost=costs[id(target)])
    target.size += 1
    return Action.grow(target.cell_index)


def find_seed_target(game_state: GameState) -> Optional[Tuple[int, int]]:
    """
    Pick a (source, target) cell pair for planting a seed.

    Candidates are empty usable cells within range of an active tree, where
    the range equals the tree's size. They are ranked by richness, then by
    cell index. Only cells with no own tree next to them are accepted; when
    none exist there is no target, even if nearer cells are free.

    Returns:
        (source_cell, target_cell) or None
    """
    board = game_state.board
    candidates = []
    for tree in _active_trees(game_state):
        if tree.size == 0:
            continue
        for cell_index in board.cells_within(tree.cell_index, tree.size):
            candidates.append((tree.cell_index, cell_index))

    occupied = game_state.occupied_cells()
    available = [c for c in candidates if c[1] not in occupied and board.is_usable(c[1])]
    available.sort(key=lambda c: (-board[c[1]].richness, c[1]))

    my_cells = {t.cell_index for t in game_state.my_trees()}
    for source, target in available:
        if not any(n in my_cells for n in board[target].neighbor_indexes()):
            return source, target
    return None


def seed_strategy(game_state: GameState) -> Optional[Action]:
    """Plant a seed on a free cell away from our own trees."""
    if game_state.count_my_trees(0) != 0:
        return None
    if cost_to_seed(game_state) > game_state.my_sun:
        return None

    pair = find_seed_target(game_state)
    if pair is None:
        log_event(game_state, "Seed skipped: no distant cell in range")
        return None

    source, target = pair
    game_state.trees.append(Tree(cell_index=target, size=0, is_mine=True, is_dormant=True))
    log_event(game_state, f"Seeding cell {target} from cell {source}")
    return Action.seed(source, target)


def wait_strategy(game_state: GameState) -> Optional[Action]:
    """Fallback: pass for the rest of the day."""
    log_event(game_state, "Waiting")
    return Action.wait()


POLICY_CHAIN: Tuple[Strategy, ...] = (
    complete_strategy,
    grow_strategy,
    seed_strategy,
    wait_strategy,
)


def first_applicable(strategies: Sequence[Strategy], game_state: GameState) -> Action:
    """
    Run strategies in order and return the first action produced.

    Later strategies are not called once one applies. If none applies the
    result is WAIT, so a decision always exists.
    """
    for strategy in strategies:
        action = strategy(game_state)
        if action is not None:
            log_event(game_state, f"Chose {action}", strategy=strategy.__name__)
            return action
    log_event(game_state, "No strategy applied, waiting")
    return Action.wait()


def decide(game_state: GameState,
           strategies: Sequence[Strategy] = POLICY_CHAIN) -> Tuple[Action, GameState]:
    """
    Choose the action for this turn.

    Args:
        game_state: The turn's snapshot; it is not modified
        strategies: Strategies in priority order

    Returns:
        The chosen action and the working copy the strategies acted on
    """
    working = game_state.working_copy()
    action = first_applicable(strategies, working)
    return action, working


def get_next_action(game_state: GameState) -> Action:
    """Choose the action for this turn with the default policy chain."""
    action, _ = decide(game_state)
    return action
