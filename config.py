# config.py
# Flask application configuration

import os


class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "instance", "hackathon.db")}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get('SECRET_KEY', 'your-secret-key-change-me')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Rounds a judge can be assigned to
    JUDGING_ROUNDS = (1, 2)


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test'
    LOG_LEVEL = 'DEBUG'
