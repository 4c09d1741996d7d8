"""Group chat: one "All Members" room shared by members and the admin."""

from datetime import datetime, timezone

from snootclub.errors import InvalidInput
from snootclub.models import ChatMessage


ROOMS = [{'id': 'all', 'name': 'All Members'}]
HISTORY_LIMIT = 200
EPOCH = '1970-01-01T00:00:00Z'


def parse_cursor(cursor):
    """ISO-8601 timestamp -> naive UTC datetime."""
    try:
        parsed = datetime.fromisoformat(cursor.strip().replace('Z', '+00:00'))
    except ValueError as e:
        raise InvalidInput('cursor must be an ISO-8601 timestamp') from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class ChatService:

    def __init__(self, store):
        self.store = store

    def rooms(self):
        return list(ROOMS)

    def _check_room(self, room_id):
        if room_id not in {room['id'] for room in ROOMS}:
            raise InvalidInput(f'unknown room: {room_id}')

    def list_messages(self, room_id='all', cursor=None) -> dict:
        """
        Messages after ``cursor`` (exclusive), oldest first, at most the last 200.

        The returned cursor is the newest message's timestamp, or the cursor
        passed in when nothing is newer.
        """
        self._check_room(room_id)
        after = parse_cursor(cursor) if cursor else None
        messages = [m.to_dict() for m in self.store.chat_messages(room_id, after=after, limit=HISTORY_LIMIT)]
        next_cursor = messages[-1]['ts'] if messages else (cursor or EPOCH)
        return {'messages': messages, 'cursor': next_cursor}

    def send(self, text, member=None, room_id='all') -> ChatMessage:
        """Post as ``member``, or as the admin when no member is given."""
        self._check_room(room_id)
        text = (text or '').strip()
        if not text:
            raise InvalidInput('text required')

        if member is not None:
            author = (member.id, member.name or member.phone or 'Member', 'member')
        else:
            author = ('admin', 'Admin', 'admin')

        message = ChatMessage(
            room_id=room_id,
            text=text,
            from_id=author[0],
            from_name=author[1],
            role=author[2],
        )
        self.store.add(message)
        self.store.write()
        return message
