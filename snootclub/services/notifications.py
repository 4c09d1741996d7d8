"""
Meeting announcements over SMS and Expo push.

Delivery is best-effort: every recipient (SMS) or batch (push) is attempted
once, a failure is logged and recorded in the delivery log, and the fan-out
moves on. Nothing here raises because a provider failed; meetings and chat
stay the source of truth.
"""

from datetime import timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from flask import current_app

from snootclub.errors import DeliveryError
from snootclub.models import DeliveryLog


def format_start(starts_at, tz_name='UTC') -> str:
    """Render a naive-UTC start time in the club's timezone."""
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc
    local = starts_at.replace(tzinfo=timezone.utc).astimezone(tz)
    return local.strftime('%a %b %d, %Y %I:%M %p %Z')


def compose_announcement(meeting, reminder=False, club_name=None, tz_name=None) -> dict:
    """
    Build the message text for a meeting.

    Returns:
        dict with 'sms_body', 'push_title', 'push_body'
    """
    config = current_app.config
    club_name = club_name or config.get('CLUB_NAME', 'Snoot Club')
    when = format_start(meeting.starts_at, tz_name or config.get('CLUB_TIMEZONE', 'UTC'))
    location = meeting.location_label

    return {
        'sms_body': f"{club_name}: {meeting.title} at {location} on {when}. Reply STOP to opt out.",
        'push_title': f"{club_name} - 24h Reminder" if reminder else f"{club_name} Reminder",
        'push_body': f"{meeting.title} @ {location}",
    }


class NotificationDispatcher:
    """Fans one announcement out to every approved member."""

    def __init__(self, store, sms_channel, push_channel):
        self.store = store
        self.sms = sms_channel
        self.push = push_channel

    def _log(self, channel, kind, recipient, meeting, error=None):
        self.store.add(DeliveryLog(
            channel=channel,
            kind=kind,
            recipient=recipient,
            meeting_id=meeting.id,
            status='failed' if error else 'sent',
            error_message=error,
        ))

    def broadcast(self, meeting, send_sms=True, send_push=True, reminder=False) -> dict:
        """
        Attempt delivery of one meeting announcement.

        The approved-member set is a snapshot taken at call time.

        Returns:
            dict with 'sms_attempted', 'sms_sent', 'sms_failed',
            'push_attempted', 'push_sent', 'push_failed'
        """
        result = {
            'sms_attempted': 0,
            'sms_sent': 0,
            'sms_failed': 0,
            'push_attempted': 0,
            'push_sent': 0,
            'push_failed': 0,
        }

        approved = self.store.members(status='approved')
        message = compose_announcement(meeting, reminder=reminder)
        kind = 'reminder' if reminder else 'announcement'

        if send_sms:
            if self.sms.is_configured():
                self._send_sms(meeting, approved, message['sms_body'], kind, result)
            else:
                current_app.logger.warning(f"SMS not configured - skipped {kind} for meeting {meeting.id}")

        if send_push:
            self._send_push(meeting, approved, message, kind, result)

        self.store.write()

        current_app.logger.info(
            f"Broadcast {kind} for meeting {meeting.id}: "
            f"sms {result['sms_sent']}/{result['sms_attempted']}, "
            f"push {result['push_sent']}/{result['push_attempted']}"
        )
        return result

    def _send_sms(self, meeting, members, body, kind, result):
        for member in members:
            result['sms_attempted'] += 1
            try:
                self.sms.send(member.phone, body)
            except DeliveryError as e:
                result['sms_failed'] += 1
                current_app.logger.error(f"SMS error: {e}")
                self._log('sms', kind, member.phone, meeting, error=e.message)
                continue
            result['sms_sent'] += 1
            self._log('sms', kind, member.phone, meeting)

    def _send_push(self, meeting, members, message, kind, result):
        tokens = [token for member in members for token in member.expo_tokens]
        messages = [
            {
                'to': token,
                'sound': 'default',
                'title': message['push_title'],
                'body': message['push_body'],
                'data': {'meetingId': meeting.id},
            }
            for token in tokens
            if self.push.is_valid_token(token)
        ]

        skipped = len(tokens) - len(messages)
        if skipped:
            current_app.logger.warning(f"Skipped {skipped} invalid push tokens")

        for chunk in self.push.chunk(messages):
            result['push_attempted'] += len(chunk)
            try:
                outcomes = self.push.send_chunk(chunk)
            except DeliveryError as e:
                result['push_failed'] += len(chunk)
                current_app.logger.error(f"Push error: {e}")
                for item in chunk:
                    self._log('push', kind, item['to'], meeting, error=e.message)
                continue

            for outcome in outcomes:
                if outcome['success']:
                    result['push_sent'] += 1
                    self._log('push', kind, outcome['to'], meeting)
                else:
                    result['push_failed'] += 1
                    self._log('push', kind, outcome['to'], meeting, error=outcome['error'])
