"""
Routes called by the external scheduler (cron).

Authenticated with CRON_SECRET (?secret= or X-Cron-Secret). The admin PIN is
not accepted here.
"""

from flask import Blueprint, current_app, jsonify, request

from snootclub.errors import Unauthorized
from snootclub.services import reminder_scheduler, sessions

tasks_bp = Blueprint('tasks', __name__, url_prefix='/tasks')


@tasks_bp.route('/notify-24h', methods=['POST'])
def notify_24h():
    """Run one 24-hour reminder sweep."""
    secret = request.args.get('secret') or request.headers.get('X-Cron-Secret', '')
    if not sessions.is_cron_secret(secret):
        raise Unauthorized('unauthorized')

    result = reminder_scheduler.sweep()

    purged = sessions.housekeeping()
    if purged['codes'] or purged['rate_limits']:
        current_app.logger.info(
            f"Purged {purged['codes']} expired login codes, {purged['rate_limits']} rate-limit records")

    return jsonify({
        'ok': True,
        'meetingsNotified': result['meetings_notified'],
        'smsCount': result['sms_count'],
        'pushCount': result['push_count'],
    })
