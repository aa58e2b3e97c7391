# -*- coding: utf-8 -*-
"""
Configuration - loaded from environment variables (and .env when present)
"""
import os
from dotenv import load_dotenv

# Load .env if it exists
load_dotenv()


class Config:
    """Base configuration"""

    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = False
    TESTING = False

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Input discovery
    SQL_GLOB = os.getenv('SQL_GLOB', '*.sql')
    RELATIONS_GLOB = os.getenv('RELATIONS_GLOB', '*.dbml')

    # Appended to exported diagram files
    WATERMARK = os.getenv('WATERMARK', '%% Generated by ddl-to-er')

    # Web server
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', '5000'))
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(16 * 1024 * 1024)))

    @classmethod
    def get_flask_config(cls):
        """Settings handed to app.config"""
        return {
            'SECRET_KEY': cls.SECRET_KEY,
            'DEBUG': cls.DEBUG,
            'TESTING': cls.TESTING,
            'MAX_CONTENT_LENGTH': cls.MAX_CONTENT_LENGTH,
        }


class DevelopmentConfig(Config):
    """Development settings"""
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production settings"""
    DEBUG = False
    HOST = os.getenv('HOST', '0.0.0.0')

    @classmethod
    def validate(cls):
        """Refuse to start with the development secret"""
        if cls.SECRET_KEY == 'dev-secret-key-change-in-production':
            raise ValueError("SECRET_KEY must be set in production")


class TestingConfig(Config):
    """Test settings"""
    TESTING = True


def get_config():
    """Pick the configuration class from FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')

    config_map = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_map.get(env, DevelopmentConfig)


config = get_config()
