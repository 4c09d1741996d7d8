from datetime import datetime
from snootclub import db


class DeliveryLog(db.Model):
    """Outcome of one SMS or push send attempt."""
    __tablename__ = 'delivery_logs'

    id = db.Column(db.Integer, primary_key=True)
    channel = db.Column(db.String(10), nullable=False)  # sms, push
    kind = db.Column(db.String(30), nullable=False)  # announcement, reminder, login_code
    recipient = db.Column(db.String(255), nullable=False)  # phone number or push token

    # Link to meeting if applicable
    meeting_id = db.Column(db.String(32), db.ForeignKey('meetings.id', ondelete='SET NULL'), nullable=True)

    status = db.Column(db.String(20), default='sent')  # sent, failed
    error_message = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<DeliveryLog {self.channel} {self.kind} to {self.recipient}>'

    def to_dict(self):
        return {
            'id': self.id,
            'channel': self.channel,
            'kind': self.kind,
            'recipient': self.recipient,
            'meetingId': self.meeting_id,
            'status': self.status,
            'error': self.error_message,
            'createdAt': self.created_at.isoformat() + 'Z' if self.created_at else None,
        }
