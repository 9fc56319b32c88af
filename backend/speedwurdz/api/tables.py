from flask import Blueprint, jsonify, request
from speedwurdz import get_dictionary, get_registry
from speedwurdz.lobby import TableNotFoundError


tables = Blueprint('tables', __name__)


@tables.route('', methods=['GET'])
def list_tables():
    return jsonify({'tables': get_registry().tables_payload()})


@tables.route('/<string:table_id>', methods=['GET'])
def get_table(table_id):
    """
    Returns a table and, once its game has been entered, the full game state.
    """
    try:
        table = get_registry().get(table_id)
    except TableNotFoundError as exc:
        return jsonify({'error': exc.message}), 404
    payload = table.to_dict()
    payload['gameState'] = table.session.to_dict() if table.session else None
    return jsonify(payload)


@tables.route('/dictionary/validate', methods=['GET'])
def validate_word():
    word = (request.args.get('word') or '').strip()
    if not word:
        return jsonify({'error': 'word is required'}), 400
    return jsonify({'word': word.upper(), 'valid': get_dictionary().is_valid_word(word)})
