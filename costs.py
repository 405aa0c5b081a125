"""
Sun costs of growing and seeding.

Each tree already at the destination size makes the next one dearer.
"""

from models import Tree
from state import GameState


def cost_to_grow(game_state: GameState, tree: Tree) -> int:
    """
    Sun needed to grow a tree one size class.

    Size 0->1 costs 1 + own size-1 trees, 1->2 costs 3 + own size-2 trees,
    2->3 costs 7 + own size-3 trees. A mature tree cannot grow and costs 0.
    """
    base_costs = game_state.rules.grow_base_costs
    if tree.size < 0 or tree.size >= len(base_costs):
        return 0
    return base_costs[tree.size] + game_state.count_my_trees(tree.size + 1)


def cost_to_seed(game_state: GameState) -> int:
    """Sun needed to plant a seed: one per seed already on the board."""
    return game_state.count_my_trees(0)
