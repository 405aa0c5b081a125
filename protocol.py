"""
Line protocol adapters between the judge and the policy.

Startup block:
    <cell count>
    <index> <richness> <n0> <n1> <n2> <n3> <n4> <n5>   (one per cell, -1 = none)

Turn block:
    <day>
    <nutrients>
    <my sun> <my score>
    <opponent sun> <opponent score> <opponent is waiting>
    <tree count>
    <cell index> <size> <is mine> <is dormant>        (one per tree)
    <legal action count>
    <action>                                         (one per legal action)

Output: one action per turn, e.g. 'WAIT', 'SEED 1 8', 'GROW 3', 'COMPLETE 0'.
"""

from typing import Callable, List, Optional

from board import Board
from models import Action, ActionParseError, Tree
from state import GameState, Rules, get_state_summary

ReadLine = Callable[[], str]


class ProtocolError(Exception):
    """Exception raised when judge input does not match the protocol."""
    pass


def _next_line(readline: ReadLine, what: str) -> str:
    line = readline()
    if not line:
        raise ProtocolError(f"Unexpected end of input while reading {what}")
    return line.strip()


def _read_ints(readline: ReadLine, what: str, count: int) -> List[int]:
    line = _next_line(readline, what)
    parts = line.split()
    if len(parts) != count:
        raise ProtocolError(f"Expected {count} value(s) for {what}, got '{line}'")
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise ProtocolError(f"Non-integer value in {what}: '{line}'")


def read_board(readline: ReadLine) -> Board:
    """Read the startup topology dump and build the board."""
    (cell_count,) = _read_ints(readline, "cell count", 1)
    rows = [_read_ints(readline, f"cell {i}", 8) for i in range(cell_count)]
    try:
        return Board.from_rows(rows)
    except ValueError as e:
        raise ProtocolError(str(e))


def read_turn(readline: ReadLine, board: Board, rules: Optional[Rules] = None) -> Optional[GameState]:
    """
    Read one turn block into a fresh GameState.

    Returns:
        The new state, or None if input ended cleanly before the turn began
    """
    first = readline()
    if not first or not first.strip():
        return None
    try:
        day = int(first.strip())
    except ValueError:
        raise ProtocolError(f"Non-integer value in day: '{first.strip()}'")

    (nutrients,) = _read_ints(readline, "nutrients", 1)
    my_sun, my_score = _read_ints(readline, "own sun and score", 2)
    opponent_sun, opponent_score, opponent_waiting = _read_ints(
        readline, "opponent sun, score and waiting flag", 3)

    (tree_count,) = _read_ints(readline, "tree count", 1)
    trees = []
    for i in range(tree_count):
        cell_index, size, is_mine, is_dormant = _read_ints(readline, f"tree {i}", 4)
        if not 0 <= cell_index < len(board):
            raise ProtocolError(f"Tree {i} is on unknown cell {cell_index}")
        trees.append(Tree(cell_index=cell_index, size=size,
                          is_mine=is_mine != 0, is_dormant=is_dormant != 0))

    (action_count,) = _read_ints(readline, "legal action count", 1)
    possible_actions = []
    for i in range(action_count):
        line = _next_line(readline, f"legal action {i}")
        try:
            possible_actions.append(Action.parse(line))
        except ActionParseError as e:
            raise ProtocolError(f"Bad legal action {i}: {e}")

    return GameState(
        board=board,
        day=day,
        nutrients=nutrients,
        my_sun=my_sun,
        my_score=my_score,
        opponent_sun=opponent_sun,
        opponent_score=opponent_score,
        opponent_is_waiting=opponent_waiting != 0,
        trees=trees,
        possible_actions=possible_actions,
        rules=rules or Rules(),
    )


def format_action(action: Action) -> str:
    return str(action)


def state_from_json(data: dict, board: Board, rules: Optional[Rules] = None) -> GameState:
    """
    Build a GameState from a JSON turn payload.

    Raises:
        ProtocolError: on missing fields, wrong types or unknown cells
    """
    try:
        trees = []
        for t in data.get('trees', []):
            cell_index = int(t['cell_index'])
            if not 0 <= cell_index < len(board):
                raise ProtocolError(f"Tree on unknown cell {cell_index}")
            trees.append(Tree(cell_index=cell_index, size=int(t['size']),
                              is_mine=bool(t['is_mine']), is_dormant=bool(t.get('is_dormant', False))))
        return GameState(
            board=board,
            day=int(data['day']),
            nutrients=int(data['nutrients']),
            my_sun=int(data['my_sun']),
            my_score=int(data.get('my_score', 0)),
            opponent_sun=int(data.get('opponent_sun', 0)),
            opponent_score=int(data.get('opponent_score', 0)),
            opponent_is_waiting=bool(data.get('opponent_is_waiting', False)),
            trees=trees,
            possible_actions=[Action.parse(a) for a in data.get('possible_actions', [])],
            rules=rules or Rules(),
        )
    except KeyError as e:
        raise ProtocolError(f"Missing field: {e.args[0]}")
    except (TypeError, ValueError) as e:
        # ActionParseError is a ValueError
        raise ProtocolError(f"Invalid turn data: {e}")


def board_from_json(cells: list) -> Board:
    """Build a board from [{'index', 'richness', 'neighbors'}, ...]."""
    try:
        rows = []
        for c in cells:
            neighbors = [int(n) for n in c['neighbors']]
            if len(neighbors) != 6:
                raise ProtocolError(f"Cell {c['index']} must list 6 neighbours")
            rows.append([int(c['index']), int(c['richness']), *neighbors])
        return Board.from_rows(rows)
    except KeyError as e:
        raise ProtocolError(f"Missing field: {e.args[0]}")
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Invalid board data: {e}")


def board_to_json(board: Board) -> list:
    return [
        {'index': c.index, 'richness': c.richness, 'neighbors': list(c.neighbors)}
        for c in board
    ]


def state_to_json(game_state: GameState) -> dict:
    """Turn payload accepted by state_from_json."""
    data = get_state_summary(game_state)
    data['possible_actions'] = [str(a) for a in game_state.possible_actions]
    return data
