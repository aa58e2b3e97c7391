# -*- coding: utf-8 -*-
"""
ER Diagram Web Application - Flask Backend
"""
import logging

from flask import Flask
from flask_cors import CORS

from ..app_config import config
from .diagram_routes import create_diagram_blueprint

logger = logging.getLogger(__name__)


def create_app(config_class=None):
    """Build the Flask application"""
    config_class = config_class or config

    app = Flask(__name__)
    CORS(app)
    app.config.update(config_class.get_flask_config())

    app.register_blueprint(create_diagram_blueprint(config_class.WATERMARK))
    logger.info("Diagram API ready")
    return app


app = create_app()


if __name__ == '__main__':
    app.run(debug=config.DEBUG, host=config.HOST, port=config.PORT, use_reloader=False)
