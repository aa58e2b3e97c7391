"""
WSGI entry point
e.g. gunicorn wsgi:application
"""
import os
import logging

from ddl_to_er.app_config import get_config
from ddl_to_er.web_app.app import create_app

config = get_config()
if os.getenv('FLASK_ENV') == 'production':
    config.validate()

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

application = create_app(config)

if __name__ == "__main__":
    application.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
