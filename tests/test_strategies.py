"""Tests for the policy chain and its four strategies."""

from models import Action, ActionType
from state import Rules
from strategies import (
    POLICY_CHAIN,
    complete_strategy,
    decide,
    find_seed_target,
    first_applicable,
    get_next_action,
    grow_strategy,
    seed_strategy,
    wait_strategy,
)
from tests.factories import RING_1, RING_2, board_with_richness, make_state, mine, random_state, theirs


def _run(strategy, state):
    """Run a single strategy on a working copy, as the chain does."""
    working = state.working_copy()
    return strategy(working), working


class TestCompleteStrategy:
    def test_low_nutrients_completes(self):
        state = make_state(nutrients=10, my_sun=4, trees=[mine(5, 3)])
        action, _ = _run(complete_strategy, state)
        assert action == Action.complete(5)
        assert str(get_next_action(state)) == "COMPLETE 5"

    def test_needs_four_sun(self):
        state = make_state(nutrients=10, my_sun=3, trees=[mine(5, 3)])
        assert _run(complete_strategy, state)[0] is None

    def test_early_game_does_not_complete(self):
        state = make_state(day=5, nutrients=15, my_sun=20, trees=[mine(0, 3)])
        assert _run(complete_strategy, state)[0] is None
        assert get_next_action(state).type != ActionType.COMPLETE

    def test_after_day_ten_with_more_mature_trees(self):
        state = make_state(day=11, my_sun=4, trees=[mine(0, 3)])
        assert _run(complete_strategy, state)[0] == Action.complete(0)

    def test_after_day_ten_without_advantage(self):
        state = make_state(day=11, my_sun=4, trees=[mine(0, 3), theirs(20, 3)])
        assert _run(complete_strategy, state)[0] is None

    def test_day_ten_is_not_late_enough(self):
        state = make_state(day=10, my_sun=4, trees=[mine(0, 3)])
        assert _run(complete_strategy, state)[0] is None

    def test_running_out_of_days(self):
        trees = [mine(0, 3), theirs(20, 3)]
        assert _run(complete_strategy, make_state(day=22, my_sun=4, trees=trees))[0] == Action.complete(0)
        assert _run(complete_strategy, make_state(day=21, my_sun=4, trees=trees))[0] is None

    def test_more_mature_trees_start_completing_earlier(self):
        trees = [mine(0, 3), mine(1, 3), theirs(20, 3), theirs(21, 3)]
        state = make_state(day=21, my_sun=4, trees=trees)
        assert _run(complete_strategy, state)[0] is not None

    def test_ignores_dormant_tree(self):
        state = make_state(nutrients=5, my_sun=10, trees=[mine(0, 3, dormant=True)])
        assert _run(complete_strategy, state)[0] is None

    def test_ignores_opponent_tree(self):
        state = make_state(nutrients=5, my_sun=10, trees=[theirs(0, 3)])
        assert _run(complete_strategy, state)[0] is None

    def test_prefers_richest_cell(self):
        state = make_state(nutrients=5, my_sun=10, trees=[mine(20, 3), mine(3, 3)])
        assert _run(complete_strategy, state)[0] == Action.complete(3)

    def test_skips_dormant_richest(self):
        state = make_state(nutrients=5, my_sun=10, trees=[mine(3, 3, dormant=True), mine(20, 3)])
        assert _run(complete_strategy, state)[0] == Action.complete(20)

    def test_removes_tree_from_working_copy(self):
        state = make_state(nutrients=5, my_sun=10, trees=[mine(5, 3), mine(6, 1)])
        _, working = _run(complete_strategy, state)
        assert working.tree_at(5) is None
        assert working.tree_at(6) is not None
        assert state.tree_at(5) is not None

    def test_configured_threshold(self):
        state = make_state(nutrients=10, my_sun=4, trees=[mine(5, 3)], rules=Rules(low_nutrients=8))
        assert _run(complete_strategy, state)[0] is None


class TestGrowStrategy:
    def test_prefers_largest_tree(self):
        state = make_state(my_sun=100, trees=[mine(1, 1), mine(20, 2)])
        assert _run(grow_strategy, state)[0] == Action.grow(20)

    def test_richer_cell_breaks_ties(self):
        state = make_state(my_sun=100, trees=[mine(20, 1), mine(7, 1)])
        assert _run(grow_strategy, state)[0] == Action.grow(7)

    def test_only_affordable_trees(self):
        state = make_state(my_sun=5, trees=[mine(0, 2), mine(20, 0)])
        assert _run(grow_strategy, state)[0] == Action.grow(20)

    def test_nothing_affordable(self):
        state = make_state(my_sun=6, trees=[mine(0, 2)])
        assert _run(grow_strategy, state)[0] is None

    def test_congestion_makes_tree_unaffordable(self):
        # 7 base + 1 for the mature tree already standing
        state = make_state(my_sun=7, trees=[mine(0, 2), mine(1, 3)])
        assert _run(grow_strategy, state)[0] is None

    def test_skips_dormant_and_mature(self):
        state = make_state(my_sun=100, trees=[mine(0, 1, dormant=True), mine(1, 3)])
        assert _run(grow_strategy, state)[0] is None

    def test_skips_opponent_trees(self):
        state = make_state(my_sun=100, trees=[theirs(0, 1)])
        assert _run(grow_strategy, state)[0] is None

    def test_increments_size_in_working_copy(self):
        state = make_state(my_sun=100, trees=[mine(20, 2)])
        _, working = _run(grow_strategy, state)
        assert working.tree_at(20).size == 3
        assert state.tree_at(20).size == 2


class TestSeedStrategy:
    def test_seeds_distant_cell_from_size_two_tree(self):
        state = make_state(my_sun=0, trees=[mine(0, 2)])
        assert str(get_next_action(state)) == "SEED 0 7"

    def test_no_distant_cell_means_no_seed(self):
        # Every cell a size-1 tree reaches is next to that tree
        state = make_state(my_sun=0, trees=[mine(0, 1)])
        assert _run(seed_strategy, state)[0] is None
        assert get_next_action(state) == Action.wait()

    def test_size_one_tree_never_seeds(self, board):
        for cell in board:
            state = make_state(board=board, my_sun=10, trees=[mine(cell.index, 1)])
            assert find_seed_target(state) is None

    def test_own_seed_blocks_seeding(self):
        state = make_state(my_sun=10, trees=[mine(0, 2), mine(30, 0)])
        assert _run(seed_strategy, state)[0] is None

    def test_opponent_seed_does_not_block(self):
        state = make_state(my_sun=0, trees=[mine(0, 2), theirs(30, 0)])
        assert _run(seed_strategy, state)[0] == Action.seed(0, 7)

    def test_skips_occupied_cell(self):
        state = make_state(trees=[mine(0, 2), theirs(7, 1)])
        assert _run(seed_strategy, state)[0] == Action.seed(0, 8)

    def test_skips_unusable_cell(self):
        state = make_state(board=board_with_richness({7: 0}), trees=[mine(0, 2)])
        assert _run(seed_strategy, state)[0] == Action.seed(0, 8)

    def test_richness_before_index(self):
        state = make_state(board=board_with_richness({12: 3}), trees=[mine(0, 2)])
        assert _run(seed_strategy, state)[0] == Action.seed(0, 12)

    def test_avoids_cells_next_to_any_own_tree(self):
        # Cell 7 borders the tree on 19
        state = make_state(trees=[mine(0, 2), mine(19, 1)])
        assert _run(seed_strategy, state)[0] == Action.seed(0, 8)

    def test_range_follows_tree_size(self):
        board = board_with_richness({i: 0 for i in RING_1 + RING_2})
        assert _run(seed_strategy, make_state(board=board, trees=[mine(0, 3)]))[0] == Action.seed(0, 19)
        assert _run(seed_strategy, make_state(board=board, trees=[mine(0, 2)]))[0] is None

    def test_dormant_tree_cannot_be_source(self):
        state = make_state(trees=[mine(0, 2, dormant=True)])
        assert _run(seed_strategy, state)[0] is None

    def test_appends_dormant_seed(self):
        state = make_state(trees=[mine(0, 2)])
        _, working = _run(seed_strategy, state)
        seed = working.tree_at(7)
        assert seed.size == 0
        assert seed.is_mine and seed.is_dormant
        assert state.tree_at(7) is None


class TestWaitStrategy:
    def test_always_waits(self):
        assert _run(wait_strategy, make_state())[0] == Action.wait()


class TestPolicyChain:
    def test_order(self):
        assert POLICY_CHAIN == (complete_strategy, grow_strategy, seed_strategy, wait_strategy)

    def test_stops_at_first_action(self):
        calls = []

        def declines(state):
            calls.append('declines')
            return None

        def grows(state):
            calls.append('grows')
            return Action.grow(3)

        def never_called(state):
            calls.append('never_called')
            return Action.wait()

        action = first_applicable([declines, grows, never_called], make_state())
        assert action == Action.grow(3)
        assert calls == ['declines', 'grows']

    def test_empty_chain_waits(self):
        assert first_applicable([], make_state()) == Action.wait()

    def test_complete_beats_grow(self):
        state = make_state(nutrients=5, my_sun=10, trees=[mine(5, 3), mine(0, 1)])
        assert get_next_action(state) == Action.complete(5)

    def test_grow_beats_seed(self):
        state = make_state(my_sun=7, trees=[mine(0, 2)])
        assert get_next_action(state) == Action.grow(0)

    def test_later_strategies_see_earlier_changes(self):
        def plant(state):
            state.trees.append(mine(30, 0, dormant=True))
            return None

        working = make_state(trees=[mine(0, 2)]).working_copy()
        assert first_applicable([plant, seed_strategy, wait_strategy], working) == Action.wait()

    def test_decide_leaves_snapshot_untouched(self):
        state = make_state(nutrients=5, my_sun=10, trees=[mine(5, 3)])
        action, working = decide(state)
        assert action == Action.complete(5)
        assert [t.cell_index for t in state.trees] == [5]
        assert working.trees == []
        assert state.log == []

    def test_log_names_winning_strategy(self):
        state = make_state(my_sun=100, trees=[mine(0, 1)])
        _, working = decide(state)
        assert working.log[-1]['strategy'] == 'grow_strategy'
        assert working.log[-1]['event'] == "Chose GROW 0"


class TestPolicyProperties:
    def test_always_returns_an_action(self, rng):
        for _ in range(300):
            action = get_next_action(random_state(rng))
            assert isinstance(action, Action)
            assert action.type in ActionType

    def test_complete_targets_active_mature_tree(self, rng):
        for _ in range(300):
            state = random_state(rng)
            action, _ = _run(complete_strategy, state)
            if action is not None:
                tree = state.tree_at(action.target)
                assert tree.is_mine and tree.size == 3 and not tree.is_dormant

    def test_grow_targets_active_growable_tree(self, rng):
        for _ in range(300):
            state = random_state(rng)
            action, _ = _run(grow_strategy, state)
            if action is not None:
                tree = state.tree_at(action.target)
                assert tree.is_mine and tree.size < 3 and not tree.is_dormant

    def test_seed_targets_free_usable_cell(self, rng):
        for _ in range(300):
            state = random_state(rng)
            action, _ = _run(seed_strategy, state)
            if action is not None:
                assert action.target not in state.occupied_cells()
                assert state.board[action.target].richness > 0
                source = state.tree_at(action.source)
                assert source.is_mine and not source.is_dormant
                assert 0 < state.board.distance(action.source, action.target) <= source.size
