import uuid
from datetime import datetime
from snootclub import db


MEMBER_STATUSES = ('pending', 'approved', 'rejected')


def new_id():
    return uuid.uuid4().hex


class Member(db.Model):
    """Club member, identified by phone number."""
    __tablename__ = 'members'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    phone = db.Column(db.String(32), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False, default='')
    email = db.Column(db.String(120), nullable=False, default='')
    status = db.Column(db.String(20), nullable=False, default='pending')  # pending, approved, rejected
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Revision counter; a stale write raises StaleDataError on flush
    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {'version_id_col': version_id}

    # Relationships
    push_tokens = db.relationship('PushToken', backref='member', lazy='select',
                                  cascade='all, delete-orphan', order_by='PushToken.id')
    session_tokens = db.relationship('SessionToken', backref='member', lazy='select',
                                     cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Member {self.phone} {self.status}>'

    @property
    def is_approved(self):
        return self.status == 'approved'

    @property
    def expo_tokens(self):
        return [t.token for t in self.push_tokens]

    def add_push_token(self, token):
        """Append a push token unless the member already has it."""
        if not token or token in self.expo_tokens:
            return False
        self.push_tokens.append(PushToken(token=token))
        return True

    def public_dict(self):
        """Projection safe to hand back to the member themselves."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
        }

    def to_dict(self):
        """Admin listing view. Session tokens are never included."""
        return {
            'id': self.id,
            'phone': self.phone,
            'name': self.name,
            'email': self.email,
            'status': self.status,
            'isAdmin': self.is_admin,
            'expoTokens': self.expo_tokens,
            'createdAt': self.created_at.isoformat() + 'Z' if self.created_at else None,
        }


class PushToken(db.Model):
    """Expo push token registered by one of a member's devices."""
    __tablename__ = 'push_tokens'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.String(32), db.ForeignKey('members.id'), nullable=False, index=True)
    token = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('member_id', 'token', name='unique_member_push_token'),
    )

    def __repr__(self):
        return f'<PushToken member={self.member_id}>'


class SessionToken(db.Model):
    """Opaque bearer token minted on a successful login code check."""
    __tablename__ = 'session_tokens'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.String(32), db.ForeignKey('members.id'), nullable=False, index=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<SessionToken member={self.member_id}>'
