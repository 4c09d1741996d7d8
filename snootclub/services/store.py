"""
Document store for club data.

Services never touch ``db.session`` directly; they go through a ClubStore,
which gives them typed lookups plus the two persistence calls the rest of
the core is written against:

- ``read()`` drops everything cached in the session, so the next lookup sees
  the latest committed rows.
- ``write()`` commits. Members and meetings carry a revision counter, so a
  write based on a stale read fails with ``Conflict`` instead of silently
  overwriting someone else's change.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from snootclub.errors import Conflict
from snootclub.models import Member, SessionToken, Meeting, ChatMessage, DeliveryLog


class ClubStore:
    """Typed accessors over a Flask-SQLAlchemy session."""

    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    # ---------- persistence ----------

    def read(self):
        """Forget cached state so the next access reloads from the database."""
        self.session.expire_all()

    def write(self):
        """Persist pending changes; raise Conflict if another writer got there first."""
        try:
            self.session.commit()
        except StaleDataError as e:
            self.session.rollback()
            raise Conflict('record was modified concurrently, retry') from e
        except IntegrityError as e:
            self.session.rollback()
            raise Conflict('duplicate record') from e

    def rollback(self):
        self.session.rollback()

    def add(self, obj):
        self.session.add(obj)
        return obj

    def delete(self, obj):
        self.session.delete(obj)

    # ---------- members ----------

    def member(self, member_id):
        if not member_id:
            return None
        return self.session.get(Member, member_id)

    def member_by_phone(self, phone):
        if not phone:
            return None
        return Member.query.filter_by(phone=phone).first()

    def member_by_session_token(self, token):
        if not token:
            return None
        record = SessionToken.query.filter_by(token=token).first()
        return record.member if record else None

    def session_token(self, token):
        if not token:
            return None
        return SessionToken.query.filter_by(token=token).first()

    def members(self, status=None):
        query = Member.query
        if status:
            query = query.filter_by(status=status)
        return query.order_by(Member.created_at.asc(), Member.id).all()

    # ---------- meetings ----------

    def meetings(self):
        return Meeting.query.order_by(Meeting.starts_at.asc()).all()

    def meetings_starting_between(self, start, end):
        """Meetings with start >= ``start`` and start < ``end``."""
        return Meeting.query.filter(
            Meeting.starts_at >= start,
            Meeting.starts_at < end
        ).order_by(Meeting.starts_at.asc()).all()

    # ---------- chat ----------

    def chat_messages(self, room_id, after=None, limit=200):
        query = ChatMessage.query.filter_by(room_id=room_id)
        if after is not None:
            query = query.filter(ChatMessage.created_at > after)
        # Newest `limit` messages, handed back oldest first
        newest = query.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc()).limit(limit).all()
        return list(reversed(newest))

    # ---------- delivery log ----------

    def delivery_logs(self, limit=100):
        return DeliveryLog.query.order_by(DeliveryLog.created_at.desc(), DeliveryLog.id.desc()).limit(limit).all()
