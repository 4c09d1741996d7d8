"""Meeting listing and admin-only creation."""

from flask import current_app

from snootclub.models import Meeting


class MeetingService:

    def __init__(self, store, dispatcher):
        self.store = store
        self.dispatcher = dispatcher

    def list_meetings(self) -> list:
        self.store.read()
        return self.store.meetings()

    def create_meeting(self, title, starts_at, description='', location='', reminder_minutes=60,
                       send_sms=True, send_push=True):
        """
        Persist a meeting, then announce it.

        The meeting is committed before any notification is attempted, and
        creation succeeds whatever happens to the deliveries.

        Returns:
            tuple: (meeting, broadcast result dict)
        """
        meeting = Meeting(
            title=title,
            description=description or '',
            location=location or '',
            starts_at=starts_at,
            reminder_minutes=reminder_minutes or 60,
            did_notify_24h=False,
        )
        self.store.add(meeting)
        self.store.write()
        current_app.logger.info(f"Created meeting {meeting.id} '{meeting.title}' at {meeting.starts_at}")

        delivery = self.dispatcher.broadcast(meeting, send_sms=send_sms, send_push=send_push)
        return meeting, delivery
