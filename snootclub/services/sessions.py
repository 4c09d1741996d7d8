"""
Phone-number login and session tokens.

Flow:
1. request_code(phone) - approved members get a 6-digit code by SMS
2. verify_code(phone, code) - a matching live code mints a session token
3. resolve_session(token) - every protected request maps the token back to
   an approved member

Administrators authenticate separately with a shared PIN, optionally
combined with the phone of a member flagged as admin.
"""

import hmac
import secrets
from flask import current_app

from snootclub.errors import (
    BadCredentials, DeliveryError, InvalidInput, NotApproved, NotRegistered, RateLimited, Unauthorized,
)
from snootclub.models import DeliveryLog, RateLimit, SessionToken
from snootclub.services.directory import normalize_phone


def make_token() -> str:
    return secrets.token_hex(24)


def secrets_match(given, expected) -> bool:
    """Constant-time comparison of a presented secret against a configured one."""
    if not given or not expected:
        return False
    return hmac.compare_digest(str(given).encode('utf-8'), str(expected).encode('utf-8'))


class SessionManager:
    """Turns possession of a phone into a bearer credential."""

    RATE_LIMIT_ACTION = 'login_code'
    VERIFY_LIMIT_ACTION = 'login_verify'

    def __init__(self, store, directory, otp_registry, sms_channel):
        self.store = store
        self.directory = directory
        self.otp = otp_registry
        self.sms = sms_channel

    def _approved_member(self, phone):
        self.store.read()
        member = self.directory.by_phone(phone)
        if member is None:
            raise NotRegistered()
        if not member.is_approved:
            raise NotApproved(member.status)
        return member

    def request_code(self, phone) -> dict:
        """
        Issue a login code and try to text it.

        Returns:
            dict with 'sent' and, when SMS did not go out and the demo
            fallback is enabled, 'demo_code'
        """
        phone = normalize_phone(phone)
        if not phone:
            raise InvalidInput('phone required')

        self._approved_member(phone)

        config = current_app.config
        allowed, retry_after = RateLimit.check_rate_limit(
            phone, self.RATE_LIMIT_ACTION,
            max_requests=config['OTP_RATE_LIMIT_MAX'],
            window_minutes=config['OTP_RATE_LIMIT_WINDOW_MINUTES'],
        )
        if not allowed:
            raise RateLimited(retry_after, 'too many code requests, try again later')
        RateLimit.record_request(phone, self.RATE_LIMIT_ACTION)

        ttl = config['OTP_TTL_MINUTES']
        code = self.otp.issue(phone, ttl_minutes=ttl)

        if self.sms.is_configured():
            body = f"{config['CLUB_NAME']} login code: {code} (valid {ttl} minutes)."
            try:
                self.sms.send(phone, body)
                self.store.add(DeliveryLog(channel='sms', kind='login_code', recipient=phone, status='sent'))
                self.store.write()
                return {'sent': True}
            except DeliveryError as e:
                current_app.logger.error(f"Login code SMS error: {e}")
                self.store.add(DeliveryLog(channel='sms', kind='login_code', recipient=phone,
                                           status='failed', error_message=e.message))
        else:
            current_app.logger.warning("SMS not configured - login code not texted")

        self.store.write()

        # Fallback for testing without Twilio
        if config['OTP_DEMO_FALLBACK']:
            return {'sent': False, 'demo_code': code}
        return {'sent': False}

    def verify_code(self, phone, code, push_token=None) -> dict:
        """
        Exchange a live login code for a new session token.

        Wrong codes count against a per-phone throttle; once it trips, even
        the right code is refused until the window moves on.

        Returns:
            dict with 'token' and the member's public projection as 'member'
        """
        phone = normalize_phone(phone)
        code = (code or '').strip()
        if not phone or not code:
            raise InvalidInput('phone & code required')

        member = self._approved_member(phone)

        config = current_app.config
        allowed, retry_after = RateLimit.check_rate_limit(
            phone, self.VERIFY_LIMIT_ACTION,
            max_requests=config['OTP_VERIFY_MAX_FAILURES'],
            window_minutes=config['OTP_RATE_LIMIT_WINDOW_MINUTES'],
        )
        if not allowed:
            raise RateLimited(retry_after, 'too many wrong codes, try again later')

        if not self.otp.check(phone, code):
            RateLimit.record_request(phone, self.VERIFY_LIMIT_ACTION)
            self.store.write()
            current_app.logger.warning(f"Wrong login code for {phone}")
            raise BadCredentials()

        token = make_token()
        member.session_tokens.append(SessionToken(token=token))
        member.add_push_token(push_token)
        self.store.write()

        current_app.logger.info(f"Session started for member {member.id}")
        return {'token': token, 'member': member.public_dict()}

    def resolve_session(self, token):
        """Member owning ``token``, or None unless that member is approved."""
        if not token:
            return None
        member = self.directory.by_session_token(token)
        if member is None or not member.is_approved:
            return None
        return member

    def logout(self, token) -> None:
        """Revoke one token; unknown tokens are ignored."""
        record = self.store.session_token(token)
        if record is None:
            return
        self.store.delete(record)
        self.store.write()

    def housekeeping(self) -> dict:
        """Drop expired login codes and rate-limit rows older than the throttle window."""
        codes = self.otp.purge_expired()
        rows = RateLimit.cleanup_old_records(
            older_than_minutes=current_app.config['OTP_RATE_LIMIT_WINDOW_MINUTES'])
        self.store.write()
        return {'codes': codes, 'rate_limits': rows}

    # ---------- administrator credentials ----------

    def is_admin_pin(self, pin) -> bool:
        return secrets_match((pin or '').strip(), current_app.config.get('ADMIN_PIN'))

    def is_cron_secret(self, secret) -> bool:
        return secrets_match(secret, current_app.config.get('CRON_SECRET'))

    def admin_login(self, phone, pin):
        """Stricter admin login: PIN plus the phone of an approved admin member."""
        if not self.is_admin_pin(pin):
            raise Unauthorized('admin pin required')
        self.store.read()
        member = self.directory.by_phone(phone)
        if member is None or not member.is_admin or not member.is_approved:
            raise Unauthorized('not an admin')
        return member
