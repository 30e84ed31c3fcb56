"""
ProofreadCompare - Main Flask Application
Serves the comparison engine behind a small JSON API.
"""
from flask import Flask, jsonify

from config_logging import APP_NAME, VERSION, get_config, get_logger
from proofread_compare import pc_blueprint

logger = get_logger('app')


def create_app() -> Flask:
    """Build the Flask application with the comparison blueprint mounted."""
    config = get_config()
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.warning(f"Configuration problem: {error}")

    flask_app = Flask(__name__)
    flask_app.config['DEBUG'] = config.debug
    # JSON bodies carry two texts plus framing
    flask_app.config['MAX_CONTENT_LENGTH'] = config.max_text_chars * 8 + 4096
    flask_app.register_blueprint(pc_blueprint, url_prefix='/api/compare')

    @flask_app.route('/')
    def index():
        """Describe the service"""
        return jsonify({
            'name': APP_NAME,
            'version': VERSION,
            'endpoints': [
                'POST /api/compare/diff',
                'POST /api/compare/side-by-side',
                'POST /api/compare/similarity',
                'GET /api/compare/health'
            ]
        })

    return flask_app


app = create_app()


if __name__ == '__main__':
    config = get_config()
    logger.info(f"Starting {APP_NAME} {VERSION} on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=config.debug)
