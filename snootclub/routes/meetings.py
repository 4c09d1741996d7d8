from flask import Blueprint, jsonify

from snootclub.routes.auth import admin_required, member_required
from snootclub.schemas import MeetingCreate, parse_body
from snootclub.services import meeting_service

meetings_bp = Blueprint('meetings', __name__)


@meetings_bp.route('/meetings')
@member_required
def list_meetings():
    """Meetings ordered by start time."""
    return jsonify([m.to_dict() for m in meeting_service.list_meetings()])


@meetings_bp.route('/meetings', methods=['POST'])
@admin_required
def create_meeting():
    """
    Create a meeting and announce it.

    Body: title, startsAt (ISO-8601), description?, location?,
    reminderMinutes?, sendSms? (default true), sendPush? (default true)
    """
    body = parse_body(MeetingCreate)
    meeting, delivery = meeting_service.create_meeting(
        title=body.title,
        starts_at=body.starts_at,
        description=body.description,
        location=body.location,
        reminder_minutes=body.reminder_minutes,
        send_sms=body.send_sms,
        send_push=body.send_push,
    )
    return jsonify({
        **meeting.to_dict(),
        'delivery': {
            'smsAttempted': delivery['sms_attempted'],
            'smsSent': delivery['sms_sent'],
            'pushAttempted': delivery['push_attempted'],
            'pushSent': delivery['push_sent'],
        },
    })
