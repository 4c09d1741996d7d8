from flask import Blueprint, current_app

main_bp = Blueprint('main', __name__)


@main_bp.route('/healthz')
def health():
    """Health check endpoint for the hosting platform."""
    return {'ok': True, 'app': current_app.config['CLUB_NAME']}
