from flask import Flask, request, jsonify
from flask_cors import CORS
from capital import place_capital, valid_capital_placements
from map_gen import get_map_stats
from models import Building, BUILDING_TYPES, UNIT_TEMPLATES, capital_template_for, create_unit
from orders import attack, attack_targets, move_unit, movement_range, place_building, place_unit
from phases import PHASES, ActionKind, can_perform_action
from resolution import resolve_combat
from state import GameState, get_log_tail, new_game
from turns import advance_phase
from typing import Any, Dict, Optional, Tuple
import uuid

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, GameState] = {}  # Current snapshot per game id


class RequestError(Exception):
    """Malformed request body or unknown reference (HTTP 400)."""
    pass


def serialize_state(game_id: str, game_state: GameState) -> Dict[str, Any]:
    """Snapshot plus the read-only data a renderer needs for the current phase."""
    state_json = game_state.to_dict()
    state_json['game_id'] = game_id
    state_json['phase_info'] = {
        'display_name': PHASES[game_state.current_phase].display_name,
        'description': PHASES[game_state.current_phase].description,
        'allowed_actions': [kind.value for kind in ActionKind if can_perform_action(game_state, kind)],
    }
    state_json['log_tail'] = get_log_tail(game_state)
    return state_json


def parse_hex_ref(data: Any, key: str) -> Any:
    """Accept a hex id string or a {'q', 'r'[, 's']} object."""
    value = data.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and 'q' in value and 'r' in value:
        try:
            q, r = int(value['q']), int(value['r'])
            s = int(value['s']) if 's' in value else -q - r
        except (TypeError, ValueError):
            raise RequestError(f'{key} coordinates must be integers')
        return (q, r, s)
    raise RequestError(f'{key} must be a hex id or an object with q and r coordinates')


def parse_template(data: Any, key: str = 'template'):
    template_key = data.get(key)
    if template_key not in UNIT_TEMPLATES:
        raise RequestError(f'Unknown unit template: {template_key}')
    return create_unit(template_key)


def get_json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestError('Invalid JSON data')
    return data


def lookup_game(game_id: str) -> Optional[GameState]:
    return games.get(game_id)


def apply_intent(game_id: str, new_state: GameState) -> Tuple[Any, int]:
    """Store the new snapshot; rejections answer 409 with the reason."""
    games[game_id] = new_state
    body = {'game_id': game_id, 'state': serialize_state(game_id, new_state)}
    if new_state.last_rejection:
        body['error'] = new_state.last_rejection['reason']
        body['category'] = new_state.last_rejection['category']
        return jsonify(body), 409
    return jsonify(body), 200


@app.errorhandler(RequestError)
def handle_request_error(e: RequestError):
    return jsonify({'error': str(e)}), 400


@app.errorhandler(500)
def handle_internal_error(e):
    original = getattr(e, 'original_exception', None) or e
    app.logger.error('Request failed: %s', original)
    return jsonify({'error': f'Failed to process request: {str(original)}'}), 500


@app.route('/api/game/new', methods=['POST'])
def create_game():
    """Create a new game; width/height/nations are optional and fall back to config."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON data'}), 400

    try:
        width = int(data['width']) if 'width' in data else None
        height = int(data['height']) if 'height' in data else None
    except (ValueError, TypeError):
        return jsonify({'error': 'Width and height must be integers'}), 400

    nations = [data.get('player1_nation'), data.get('player2_nation')]
    if any(nation is not None and not isinstance(nation, str) for nation in nations):
        return jsonify({'error': 'Nations must be strings'}), 400

    try:
        game_state = new_game(width, height, *nations)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    game_id = str(uuid.uuid4())
    games[game_id] = game_state
    return jsonify({'game_id': game_id, 'map_stats': get_map_stats(game_state.hexes)})


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current snapshot for the given game ID."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(serialize_state(game_id, game_state))


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Full game log, or its last ``tail`` entries."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404

    tail = request.args.get('tail')
    if tail is None:
        entries = game_state.log
    else:
        try:
            entries = get_log_tail(game_state, int(tail))
        except ValueError:
            return jsonify({'error': 'tail must be an integer'}), 400

    return jsonify({
        'game_id': game_id,
        'turn': game_state.turn,
        'round': game_state.round,
        'phase': game_state.current_phase.value,
        'log': entries,
    })


@app.route('/api/game/<game_id>/capital/options', methods=['GET'])
def get_capital_options(game_id: str):
    """Hexes where the active player may found a capital."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify({
        'player': game_state.current_player,
        'template': capital_template_for(game_state.active_player.nation),
        'valid_hexes': valid_capital_placements(game_state, game_state.current_player),
    })


@app.route('/api/game/<game_id>/capital', methods=['POST'])
def post_capital(game_id: str):
    """Found the active player's capital. The template defaults to the nation's capital."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404

    data = get_json_body()
    hex_ref = parse_hex_ref(data, 'hex')
    if 'template' not in data:
        data = dict(data, template=capital_template_for(game_state.active_player.nation))
    capital_unit = parse_template(data)
    return apply_intent(game_id, place_capital(game_state, hex_ref, capital_unit))


@app.route('/api/game/<game_id>/units', methods=['POST'])
def post_unit(game_id: str):
    """Deploy a unit template onto a hex."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404

    data = get_json_body()
    hex_ref = parse_hex_ref(data, 'hex')
    unit = parse_template(data)
    return apply_intent(game_id, place_unit(game_state, hex_ref, unit))


@app.route('/api/game/<game_id>/buildings', methods=['POST'])
def post_building(game_id: str):
    """Raise a building next to the active player's capital."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404

    data = get_json_body()
    hex_ref = parse_hex_ref(data, 'hex')
    building_type = data.get('type', 'resource')
    if building_type not in BUILDING_TYPES:
        raise RequestError(f'Unknown building type: {building_type}')
    building = Building(
        id=str(data.get('id') or f'building_{uuid.uuid4().hex[:8]}'),
        name=str(data.get('name') or building_type.title()),
        type=building_type,
        owner=game_state.current_player,
    )
    return apply_intent(game_id, place_building(game_state, hex_ref, building))


@app.route('/api/game/<game_id>/move', methods=['POST'])
def post_move(game_id: str):
    """Move a unit from one hex to another."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404

    data = get_json_body()
    from_ref = parse_hex_ref(data, 'from')
    to_ref = parse_hex_ref(data, 'to')
    return apply_intent(game_id, move_unit(game_state, from_ref, to_ref))


@app.route('/api/game/<game_id>/attack', methods=['POST'])
def post_attack(game_id: str):
    """Attack the unit on ``defender`` with the unit on ``attacker``."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404

    data = get_json_body()
    attacker_ref = parse_hex_ref(data, 'attacker')
    defender_ref = parse_hex_ref(data, 'defender')
    return apply_intent(game_id, attack(game_state, attacker_ref, defender_ref))


@app.route('/api/game/<game_id>/phase', methods=['POST'])
def post_phase(game_id: str):
    """Advance to the next phase."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404
    return apply_intent(game_id, advance_phase(game_state))


@app.route('/api/game/<game_id>/units/<hex_id>/range', methods=['GET'])
def get_unit_range(game_id: str, hex_id: str):
    """Move destinations and attack targets for the unit on ``hex_id``."""
    game_state = lookup_game(game_id)
    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404
    if game_state.get_hex(hex_id) is None:
        return jsonify({'error': f'Hex {hex_id} is not on the board'}), 400
    return jsonify({
        'hex': hex_id,
        'movement_range': movement_range(game_state, hex_id),
        'attack_targets': attack_targets(game_state, hex_id),
    })


@app.route('/api/game/combat/preview', methods=['POST'])
def preview_combat():
    """Resolve two unit templates against each other without touching any game."""
    data = get_json_body()
    attacker = parse_template(data, 'attacker')
    defender = parse_template(data, 'defender')
    return jsonify(resolve_combat(attacker, defender).to_dict())


if __name__ == '__main__':
    app.run(debug=True, port=5000)
