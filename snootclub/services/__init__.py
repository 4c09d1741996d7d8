# Business logic services
from snootclub import db
from snootclub.services.store import ClubStore
from snootclub.services.otp import otp_registry
from snootclub.services.sms_service import sms_channel
from snootclub.services.push_service import push_channel
from snootclub.services.directory import MemberDirectory, normalize_phone
from snootclub.services.sessions import SessionManager
from snootclub.services.notifications import NotificationDispatcher, compose_announcement
from snootclub.services.reminders import ReminderScheduler
from snootclub.services.meetings import MeetingService
from snootclub.services.chat_service import ChatService

# Global instances, all sharing one store
store = ClubStore(db)
directory = MemberDirectory(store)
sessions = SessionManager(store, directory, otp_registry, sms_channel)
dispatcher = NotificationDispatcher(store, sms_channel, push_channel)
reminder_scheduler = ReminderScheduler(store, dispatcher)
meeting_service = MeetingService(store, dispatcher)
chat_service = ChatService(store)

__all__ = [
    'store',
    'otp_registry',
    'sms_channel',
    'push_channel',
    'directory',
    'sessions',
    'dispatcher',
    'reminder_scheduler',
    'meeting_service',
    'chat_service',
    'normalize_phone',
    'compose_announcement',
]
