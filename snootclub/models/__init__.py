# Import all models here so they're registered with SQLAlchemy
from snootclub.models.member import Member, PushToken, SessionToken, MEMBER_STATUSES
from snootclub.models.meeting import Meeting
from snootclub.models.chat_message import ChatMessage
from snootclub.models.delivery_log import DeliveryLog
from snootclub.models.rate_limit import RateLimit

__all__ = ['Member', 'PushToken', 'SessionToken', 'MEMBER_STATUSES', 'Meeting', 'ChatMessage',
           'DeliveryLog', 'RateLimit']
