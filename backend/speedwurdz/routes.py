from flask import Blueprint, jsonify
from speedwurdz import get_dictionary, get_registry

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the SpeedWurdz game server!'})

@main.route('/health')
def health():
    registry = get_registry()
    return jsonify({
        'status': 'ok',
        'dictionaryWords': get_dictionary().word_count(),
        'users': len(registry.users),
        'tables': len(registry.tables),
    })
