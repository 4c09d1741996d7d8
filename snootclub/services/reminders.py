"""
24-hour meeting reminders.

There is no timer in-process: an external scheduler calls
POST /tasks/notify-24h every 5-15 minutes and each call runs one sweep.

Window: meetings starting in [now + 24h - 10m, now + 24h + 10m). The
tolerance only has to cover irregular trigger intervals; did_notify_24h is
what guarantees a meeting is reminded at most once.
"""

from datetime import datetime, timedelta
from flask import current_app

from snootclub.errors import Conflict


REMINDER_LEAD = timedelta(hours=24)
WINDOW_TOLERANCE = timedelta(minutes=10)


def reminder_window(now: datetime) -> tuple:
    """Return (start, end) of the half-open window of start times due a reminder."""
    target = now + REMINDER_LEAD
    return (target - WINDOW_TOLERANCE, target + WINDOW_TOLERANCE)


class ReminderScheduler:
    """Finds meetings entering the reminder window and notifies each once."""

    def __init__(self, store, dispatcher):
        self.store = store
        self.dispatcher = dispatcher

    def due_meetings(self, now: datetime) -> list:
        start, end = reminder_window(now)
        return [m for m in self.store.meetings_starting_between(start, end) if not m.did_notify_24h]

    def _claim(self, meeting) -> bool:
        """Set the flag and persist it before sending. False if another sweep already did."""
        if meeting.did_notify_24h:
            return False
        meeting.did_notify_24h = True
        try:
            self.store.write()
        except Conflict:
            current_app.logger.info(f"Meeting {meeting.id} already claimed by another sweep")
            return False
        return True

    def _release(self, meeting):
        self.store.rollback()
        meeting.did_notify_24h = False
        self.store.write()

    def sweep(self, now: datetime = None) -> dict:
        """
        Run one reminder pass.

        Returns:
            dict with 'meetings_notified' (ids), 'sms_count', 'push_count'
        """
        now = now or datetime.utcnow()
        result = {
            'meetings_notified': [],
            'sms_count': 0,
            'push_count': 0,
        }

        # Start from persisted state
        self.store.read()

        for meeting in self.due_meetings(now):
            if not self._claim(meeting):
                continue

            try:
                outcome = self.dispatcher.broadcast(meeting, send_sms=True, send_push=True, reminder=True)
            except Exception as e:
                current_app.logger.error(f"Reminder broadcast for meeting {meeting.id} failed: {e}")
                self._release(meeting)
                continue

            result['meetings_notified'].append(meeting.id)
            result['sms_count'] += outcome['sms_sent']
            result['push_count'] += outcome['push_sent']

        current_app.logger.info(
            f"Reminder sweep at {now.isoformat()}: {len(result['meetings_notified'])} meetings, "
            f"{result['sms_count']} sms, {result['push_count']} push"
        )
        return result
