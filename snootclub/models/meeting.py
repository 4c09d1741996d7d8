from datetime import datetime
from snootclub import db
from snootclub.models.member import new_id


class Meeting(db.Model):
    """Club meeting announced to approved members."""
    __tablename__ = 'meetings'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    location = db.Column(db.String(300), nullable=False, default='')
    starts_at = db.Column(db.DateTime, nullable=False, index=True)  # naive UTC
    reminder_minutes = db.Column(db.Integer, nullable=False, default=60)
    did_notify_24h = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {'version_id_col': version_id}

    @property
    def location_label(self):
        return self.location or "TBA"

    def __repr__(self):
        return f'<Meeting {self.title} {self.starts_at}>'

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'startsAt': self.starts_at.isoformat() + 'Z',
            'reminderMinutes': self.reminder_minutes,
            'didNotify24h': self.did_notify_24h,
        }
