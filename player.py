"""
Turn driver for the tree-growing agent.

Reads the judge's startup and per-turn blocks from stdin and answers each
turn with one action on stdout. Debug output goes to stderr.

Usage:
    python player.py [--config PATH] [--verbose] [--remote URL]
"""

import argparse
import json
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple

import requests

from board import Board
from models import Action
from protocol import board_to_json, format_action, read_board, read_turn, state_to_json
from state import GameState, Rules, load_rules, log_event
from strategies import decide

Decider = Callable[[GameState], Tuple[Action, List[Dict[str, Any]]]]


def local_decider(game_state: GameState) -> Tuple[Action, List[Dict[str, Any]]]:
    """Decide with the in-process policy chain."""
    action, working = decide(game_state)
    return action, working.log


class RemoteDecider:
    """Forwards turns to a running agent service (see app.py)."""

    def __init__(self, base_url: str, timeout: float = 1.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.game_id: Optional[str] = None

    def register(self, board: Board) -> None:
        """Send the board once; the service keeps it for the whole match."""
        response = self.session.post(f"{self.base_url}/game/new",
                                     json={'cells': board_to_json(board)}, timeout=self.timeout)
        response.raise_for_status()
        self.game_id = response.json()['game_id']

    def __call__(self, game_state: GameState) -> Tuple[Action, List[Dict[str, Any]]]:
        if self.game_id is None:
            raise RuntimeError("Board must be registered before the first turn")
        response = self.session.post(f"{self.base_url}/game/{self.game_id}/turn",
                                     json=state_to_json(game_state), timeout=self.timeout)
        response.raise_for_status()
        result = response.json()
        return Action.parse(result['action']), result.get('log', [])


def play(stdin: TextIO, stdout: TextIO, stderr: TextIO,
         rules: Optional[Rules] = None, verbose: bool = False,
         decider: Optional[Decider] = None) -> int:
    """
    Run the match loop until input ends.

    Args:
        stdin: Judge input
        stdout: Action output, one line per turn
        stderr: Debug output
        rules: Policy thresholds (default: built-in values)
        verbose: Print each turn's decision log to stderr
        decider: Turn decision function (default: local policy chain)

    Returns:
        Number of turns played
    """
    board = read_board(stdin.readline)
    if decider is None:
        decider = local_decider
    elif isinstance(decider, RemoteDecider):
        decider.register(board)

    turns = 0
    while True:
        game_state = read_turn(stdin.readline, board, rules)
        if game_state is None:
            break

        action, log = decider(game_state)
        if game_state.possible_actions and action not in game_state.possible_actions:
            log_event(game_state, f"{action} is not in the legal action list",
                      legal_actions=len(game_state.possible_actions))
            log = log + game_state.log

        print(format_action(action), file=stdout, flush=True)
        if verbose:
            for entry in log:
                print(json.dumps(entry), file=stderr)
        turns += 1

    return turns


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Tree-growing game agent")
    parser.add_argument('--config', help="Path to a config.json with policy thresholds")
    parser.add_argument('--verbose', action='store_true', help="Print decision logs to stderr")
    parser.add_argument('--remote', metavar='URL',
                        help="Agent service base URL, e.g. http://localhost:5000/api")
    args = parser.parse_args(argv)

    decider = RemoteDecider(args.remote) if args.remote else None
    play(sys.stdin, sys.stdout, sys.stderr, rules=load_rules(args.config),
         verbose=args.verbose, decider=decider)
    return 0


if __name__ == "__main__":
    sys.exit(main())
