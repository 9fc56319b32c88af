from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def get_registry():
    return current_app.extensions['table_registry']


def get_dictionary():
    return current_app.extensions['dictionary']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', '*')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # The dictionary must be loaded before any submission is handled
    from speedwurdz.dictionary import Dictionary
    dictionary = Dictionary()
    try:
        dictionary.load(flask_app.config['DICTIONARY_PATH'])
    except OSError as exc:
        flask_app.logger.error(f"[startup-abort] dictionary load failed: {exc}")
        raise

    from speedwurdz.lobby import TableRegistry
    flask_app.extensions['dictionary'] = dictionary
    flask_app.extensions['table_registry'] = TableRegistry.from_config(flask_app.config, dictionary)

    from speedwurdz.routes import main
    flask_app.register_blueprint(main)

    from speedwurdz.api.tables import tables
    flask_app.register_blueprint(tables, url_prefix='/api/tables')

    from speedwurdz.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('check-dictionary')
    @click.argument('words', nargs=-1)
    def check_dictionary_command(words):
        """Reports the loaded word count and checks any WORDS given."""
        with flask_app.app_context():
            d = get_dictionary()
            click.echo(f"Dictionary {d.path}: {d.word_count()} words")
            for word in words:
                verdict = 'valid' if d.is_valid_word(word) else 'invalid'
                click.echo(f"{word.upper()}: {verdict}")

    flask_app.cli.add_command(check_dictionary_command)

    flask_app.logger.info(f"[startup] dictionary_words={dictionary.word_count()}")
    return flask_app
