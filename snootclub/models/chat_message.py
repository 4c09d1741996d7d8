from datetime import datetime
from snootclub import db
from snootclub.models.member import new_id


class ChatMessage(db.Model):
    """Message posted to a group chat room."""
    __tablename__ = 'chat_messages'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    room_id = db.Column(db.String(50), nullable=False, default='all', index=True)
    text = db.Column(db.Text, nullable=False)
    from_id = db.Column(db.String(32), nullable=False)  # member id, or 'admin'
    from_name = db.Column(db.String(100), nullable=False, default='')
    role = db.Column(db.String(20), nullable=False, default='member')  # member, admin
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<ChatMessage {self.room_id} from={self.from_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'roomId': self.room_id,
            'text': self.text,
            'fromId': self.from_id,
            'fromName': self.from_name,
            'role': self.role,
            'ts': self.created_at.isoformat() + 'Z',
        }
