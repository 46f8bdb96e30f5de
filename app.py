# app.py
# Flask application, built with the Application Factory pattern

import logging

from flask import Flask, jsonify
from config import Config
from extensions import db, migrate

# Import the models here so Alembic (Migrate) can see them
from models import (User, Hackathon, OrganizerMember, Team, TeamMember, Application, Project,
                    Rubric, Judge, JudgeAssignment, JudgeScore, JudgeFeedback, Notification)
from errors import register_error_handlers
from cache import init_cache


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    app.logger.setLevel(level)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # --- Bind the extensions to this app instance ---
    db.init_app(app)
    migrate.init_app(app, db)

    # One query cache per app, fed by the change signals
    init_cache(app)
    register_error_handlers(app)

    # --- Blueprints ---
    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    return app
