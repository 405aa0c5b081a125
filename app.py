from flask import Flask, request, jsonify
from flask_cors import CORS
from board import Board, generate_board
from protocol import ProtocolError, board_from_json, board_to_json, state_from_json
from state import Rules, load_rules
from strategies import decide
from typing import Dict
import uuid

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, Board] = {}  # In-memory storage for match boards
rules: Rules = load_rules()


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Register a match board: either explicit cells or a generated standard board."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        if 'cells' in data:
            try:
                board = board_from_json(data['cells'])
            except ProtocolError as e:
                return jsonify({'error': str(e)}), 400
        else:
            try:
                seed = int(data.get('seed', 42))
                holes = int(data.get('holes', 0))
            except (ValueError, TypeError):
                return jsonify({'error': 'Seed and holes must be integers'}), 400
            board = generate_board(seed, holes)

        game_id = str(uuid.uuid4())
        games[game_id] = board

        return jsonify({'game_id': game_id})

    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/board', methods=['GET'])
def get_board(game_id: str):
    """Retrieve the cells of a registered board."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify({'game_id': game_id, 'cells': board_to_json(games[game_id])})


@app.route('/api/game/<game_id>/turn', methods=['POST'])
def submit_turn(game_id: str):
    """Decide the action for one turn snapshot."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        try:
            game_state = state_from_json(data, games[game_id], rules)
        except ProtocolError as e:
            return jsonify({'error': str(e)}), 400

        action, working = decide(game_state)

        return jsonify({
            'game_id': game_id,
            'action': str(action),
            'type': action.type.value,
            'source': action.source,
            'target': action.target,
            'log': working.log,
        })

    except Exception as e:
        return jsonify({'error': f'Failed to decide turn: {str(e)}'}), 500


if __name__ == '__main__':
    app.run(debug=True)
