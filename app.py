import logging
import os
import time

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from core.combo_engine import discovery, report
from core.combo_engine.exceptions import ConfigurationError, DataUnavailable, UnsupportedFormat

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logging.getLogger("pymongo").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

app = Flask(__name__)

VALID_COLORS = ['W', 'U', 'B', 'R', 'G']
MAX_SEED_CARDS = 10


def _error(message, status):
    return jsonify({'ok': False, 'error': message}), status


def _format_param(body):
    format_name = body.get('format') or 'standard'
    return format_name if isinstance(format_name, str) else None


def _is_id_list(value):
    return isinstance(value, list) and all(isinstance(v, str) and v for v in value)


def _int_param(body, name, default):
    value = body.get(name)
    if value in (None, ''):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _combos_json(combos):
    return [combo.to_dict() for combo in combos]


def _grouped_json(combos):
    return {combo_type: _combos_json(group) for combo_type, group in report.group_by_type(combos).items()}


@app.errorhandler(UnsupportedFormat)
@app.errorhandler(ConfigurationError)
def handle_bad_request(e):
    return _error(e.message, 400)


@app.errorhandler(DataUnavailable)
def handle_data_unavailable(e):
    logger.error(f"Card store unavailable: {e}")
    return _error(e.message, 503)


@app.errorhandler(Exception)
def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception(f"Unhandled error: {e}")
    return _error(str(e) or "Internal server error", 500)


@app.route('/api/health')
def api_health():
    return jsonify({'ok': True})


@app.route('/api/discover/combo-from-cards', methods=['POST'])
def api_combo_from_cards():
    body = request.get_json(silent=True) or {}
    seed_ids = body.get('seed_card_ids') or []
    if not isinstance(seed_ids, list) or not seed_ids:
        return _error('Provide at least one seed card', 400)
    if not _is_id_list(seed_ids):
        return _error('seed_card_ids must be a list of card id strings', 400)
    if len(seed_ids) > MAX_SEED_CARDS:
        return _error(f'At most {MAX_SEED_CARDS} seed cards per search', 400)

    format_name = _format_param(body)
    if format_name is None:
        return _error('format must be a string', 400)
    max_combos = _int_param(body, 'max_combos', 15)
    min_power_level = _int_param(body, 'min_power_level', 5)
    logger.info(f"Combo search from {len(seed_ids)} cards in {format_name}")

    session = discovery.initialize(format_name)
    start = time.time()
    discovered = discovery.discover_from_seeds(session, seed_ids)
    elapsed_ms = int((time.time() - start) * 1000)
    filtered = [c for c in discovered if c.power_level >= min_power_level]
    limited = filtered[:max_combos]
    synergies = discovery.find_synergies_between_cards(session, seed_ids)

    return jsonify({
        'ok': True,
        'combos': _combos_json(limited),
        'combos_by_type': _grouped_json(limited),
        'synergies': _combos_json(synergies['synergies']),
        'explanations': synergies['explanations'],
        'stats': report.summarize(discovered, filtered, limited, elapsed_ms),
        'suggestions': report.seed_suggestions(limited),
    })


@app.route('/api/discover/combo-from-cards', methods=['GET'])
def api_combo_from_cards_quick():
    card_ids = [c for c in request.args.get('cards', '').split(',') if c]
    format_name = request.args.get('format') or 'standard'
    if not card_ids:
        return _error('Provide cards as ?cards=id1,id2,id3&format=standard', 400)

    combos = discovery.discover_combos_from_cards(card_ids, format_name)
    return jsonify({'ok': True, 'combos': _combos_json(combos[:5]), 'found': len(combos)})


@app.route('/api/discover/combo-by-archetype', methods=['POST'])
def api_combo_by_archetype():
    body = request.get_json(silent=True) or {}
    colors = body.get('colors') or []
    archetype = body.get('archetype') or ''
    if not isinstance(colors, list):
        return _error('colors must be a list', 400)
    if not isinstance(archetype, str):
        return _error('archetype must be a string', 400)
    if not colors and not archetype:
        return _error('Specify at least one color or an archetype', 400)
    invalid = [c for c in colors if c not in VALID_COLORS]
    if invalid:
        return _error(f"Invalid colors: {', '.join(str(c) for c in invalid)}", 400)

    format_name = _format_param(body)
    if format_name is None:
        return _error('format must be a string', 400)
    max_combos = min(_int_param(body, 'max_combos', 20), 50)
    min_power_level = _int_param(body, 'min_power_level', 4)
    logger.info(f"Combo search for colors {''.join(colors)} and archetype {archetype!r} in {format_name}")

    session = discovery.initialize(format_name)
    start = time.time()
    discovered = discovery.discover_by_archetype(session, colors, archetype)
    elapsed_ms = int((time.time() - start) * 1000)

    filtered = [c for c in discovered if c.power_level >= min_power_level]
    limited = filtered[:max_combos]
    stats = report.summarize(discovered, filtered, limited, elapsed_ms)
    return jsonify({
        'ok': True,
        'combos': _combos_json(limited),
        'combos_by_type': _grouped_json(limited),
        'stats': stats,
        'suggestions': report.archetype_suggestions(limited, colors, archetype, stats),
        'search_params': {'colors': colors, 'archetype': archetype, 'format': format_name},
    })


@app.route('/api/discover/combo-by-archetype', methods=['GET'])
def api_combo_by_archetype_quick():
    colors = list(request.args.get('colors', ''))
    archetype = request.args.get('archetype', '')
    format_name = request.args.get('format') or 'standard'
    if not colors and not archetype:
        return _error('Provide colors or an archetype: ?colors=WU&archetype=artifacts&format=standard', 400)

    combos = discovery.discover_combos_by_archetype(colors, archetype, format_name)
    return jsonify({
        'ok': True,
        'combos': _combos_json(combos[:10]),
        'found': len(combos),
        'search': {'colors': colors, 'archetype': archetype, 'format': format_name},
    })


@app.route('/api/synergies', methods=['POST'])
def api_synergies():
    body = request.get_json(silent=True) or {}
    card_ids = body.get('card_ids') or []
    if not _is_id_list(card_ids) or len(card_ids) < 2:
        return _error('Provide at least two card id strings', 400)
    format_name = _format_param(body)
    if format_name is None:
        return _error('format must be a string', 400)

    session = discovery.initialize(format_name)
    result = discovery.find_synergies_between_cards(session, card_ids)
    return jsonify({
        'ok': True,
        'synergies': _combos_json(result['synergies']),
        'explanations': result['explanations'],
    })
