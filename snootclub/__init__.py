import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate, upgrade
from dotenv import load_dotenv
from pydantic import ValidationError

# Load environment variables (override=True ensures .env values take precedence)
load_dotenv(override=True)

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(config_name=None):
    """Application factory pattern."""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-me')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///snootclub.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Shared secrets: admin PIN for operators, cron secret for the reminder trigger
    app.config['ADMIN_PIN'] = os.environ.get('ADMIN_PIN', '123456')
    app.config['CRON_SECRET'] = os.environ.get('CRON_SECRET', 'changeme')

    # Twilio SMS (optional - channel is disabled when unset)
    app.config['TWILIO_ACCOUNT_SID'] = os.environ.get('TWILIO_ACCOUNT_SID', '')
    app.config['TWILIO_AUTH_TOKEN'] = os.environ.get('TWILIO_AUTH_TOKEN', '')
    app.config['TWILIO_FROM'] = os.environ.get('TWILIO_FROM', '')

    # Expo push (access token only needed when enhanced push security is on)
    app.config['EXPO_ACCESS_TOKEN'] = os.environ.get('EXPO_ACCESS_TOKEN', '')

    app.config['CLUB_NAME'] = os.environ.get('CLUB_NAME', 'Snoot Club')
    app.config['CLUB_TIMEZONE'] = os.environ.get('CLUB_TIMEZONE', 'UTC')

    # Login codes
    app.config['OTP_TTL_MINUTES'] = int(os.environ.get('OTP_TTL_MINUTES', '10'))
    # Returns the code in the response when SMS is unavailable. Test/ops
    # escape hatch only: turn it off wherever the code must stay secret.
    app.config['OTP_DEMO_FALLBACK'] = _env_flag('OTP_DEMO_FALLBACK', True)
    app.config['OTP_RATE_LIMIT_MAX'] = int(os.environ.get('OTP_RATE_LIMIT_MAX', '5'))
    app.config['OTP_RATE_LIMIT_WINDOW_MINUTES'] = int(os.environ.get('OTP_RATE_LIMIT_WINDOW_MINUTES', '15'))
    app.config['OTP_VERIFY_MAX_FAILURES'] = int(os.environ.get('OTP_VERIFY_MAX_FAILURES', '5'))

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['ADMIN_PIN'] = 'test-pin'
        app.config['CRON_SECRET'] = 'test-cron'
        app.config['TWILIO_ACCOUNT_SID'] = ''
        app.config['TWILIO_AUTH_TOKEN'] = ''
        app.config['TWILIO_FROM'] = ''
        app.config['EXPO_ACCESS_TOKEN'] = ''
        app.config['OTP_DEMO_FALLBACK'] = True

    # Fix for postgres:// vs postgresql:// (some providers use older postgres:// format)
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # Register blueprints
    from snootclub.routes.main import main_bp
    from snootclub.routes.auth import auth_bp
    from snootclub.routes.members import members_bp
    from snootclub.routes.meetings import meetings_bp
    from snootclub.routes.tasks import tasks_bp
    from snootclub.routes.chat import chat_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(members_bp)
    app.register_blueprint(meetings_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(chat_bp)

    register_error_handlers(app)

    # Import models so they're known to Flask-Migrate
    from snootclub import models

    if config_name == 'testing':
        with app.app_context():
            db.create_all()

    # Auto-run migrations in production (Railway)
    if os.environ.get('RAILWAY_ENVIRONMENT'):
        with app.app_context():
            upgrade()

    return app


def register_error_handlers(app):
    """Render club errors and schema failures as the JSON error envelope."""
    from snootclub.errors import ClubError

    @app.errorhandler(ClubError)
    def handle_club_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        first = error.errors()[0] if error.errors() else {}
        field = '.'.join(str(part) for part in first.get('loc', ()))
        message = f"{field}: {first.get('msg', 'invalid')}" if field else 'invalid request'
        return jsonify({'ok': False, 'error': message}), 400
