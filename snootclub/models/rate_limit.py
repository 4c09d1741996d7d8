"""
Rate limiting model for tracking request counts.

Used to throttle login code requests, each of which may cost an SMS.
"""

from datetime import datetime, timedelta
from snootclub import db


class RateLimit(db.Model):
    """Track rate-limited actions by key (e.g., a phone number)."""
    __tablename__ = 'rate_limits'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(255), nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False, index=True)  # e.g., 'login_code'
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @classmethod
    def check_rate_limit(cls, key, action, max_requests, window_minutes, now=None):
        """
        Check if the key has exceeded the rate limit for the given action.

        Returns:
            tuple: (is_allowed: bool, retry_after_seconds: int or None)
        """
        now = now or datetime.utcnow()
        window_start = now - timedelta(minutes=window_minutes)

        in_window = cls.query.filter(
            cls.key == key,
            cls.action == action,
            cls.timestamp >= window_start
        )

        if in_window.count() < max_requests:
            return (True, None)

        # Oldest request in the window decides when a slot frees up
        oldest = in_window.order_by(cls.timestamp.asc()).first()
        retry_after = (oldest.timestamp + timedelta(minutes=window_minutes) - now).total_seconds()
        return (False, max(0, int(retry_after)))

    @classmethod
    def record_request(cls, key, action, now=None):
        """Record a request; committed with the caller's next write."""
        db.session.add(cls(key=key, action=action, timestamp=now or datetime.utcnow()))

    @classmethod
    def cleanup_old_records(cls, older_than_minutes=60, now=None):
        """Delete records older than the given age. Returns the number removed."""
        cutoff = (now or datetime.utcnow()) - timedelta(minutes=older_than_minutes)
        return cls.query.filter(cls.timestamp < cutoff).delete()
