"""
Member directory: identity and approval lifecycle.

Status only changes through an administrator action:
    pending -> approved | rejected
and an admin may move a member between approved and rejected later.
"""

import re
from typing import Optional
from flask import current_app

from snootclub.errors import InvalidInput, NotFound
from snootclub.models import Member


def normalize_phone(phone) -> str:
    """Normalize US numbers to E.164 (+1XXXXXXXXXX); empty string if no digits."""
    raw = (phone or '').strip()
    digits = re.sub(r'\D', '', raw)
    if len(digits) == 10:
        return f'+1{digits}'
    if len(digits) == 11 and digits.startswith('1'):
        return f'+{digits}'
    if raw.startswith('+'):
        return raw
    return f'+{digits}' if digits else ''


class MemberDirectory:
    """Single source of truth for members and their status."""

    SETTABLE_STATUSES = ('approved', 'rejected')

    def __init__(self, store):
        self.store = store

    def get(self, member_id) -> Optional[Member]:
        return self.store.member(member_id)

    def by_phone(self, phone) -> Optional[Member]:
        return self.store.member_by_phone(normalize_phone(phone))

    def by_session_token(self, token) -> Optional[Member]:
        return self.store.member_by_session_token(token)

    def require(self, member_id) -> Member:
        member = self.get(member_id)
        if not member:
            raise NotFound('member not found')
        return member

    def register_or_touch(self, phone, name=None, email=None, push_token=None) -> dict:
        """
        Create a pending member for a new phone, or fill in an existing one.

        Existing non-empty name/email are never overwritten; the push token is
        appended once.

        Returns:
            dict with 'status' and 'member_id'
        """
        normalized = normalize_phone(phone)
        if not normalized:
            raise InvalidInput('phone required')

        self.store.read()
        member = self.by_phone(normalized)
        if member is None:
            member = Member(
                phone=normalized,
                name=name or '',
                email=email or '',
                status='pending',
                is_admin=False,
            )
            self.store.add(member)
            current_app.logger.info(f"Registered new member {normalized}")
        else:
            if name and not member.name:
                member.name = name
            if email and not member.email:
                member.email = email

        member.add_push_token(push_token)
        self.store.write()

        return {'status': member.status, 'member_id': member.id}

    def set_status(self, member_id, status) -> Member:
        """Approve or reject a member. Outstanding sessions follow the new status."""
        if status not in self.SETTABLE_STATUSES:
            raise InvalidInput(f"status must be one of {', '.join(self.SETTABLE_STATUSES)}")
        member = self.require(member_id)
        if member.status != status:
            current_app.logger.info(f"Member {member.phone}: {member.status} -> {status}")
            member.status = status
        self.store.write()
        return member

    def set_admin_flag(self, member_id, is_admin: bool) -> Member:
        member = self.require(member_id)
        member.is_admin = bool(is_admin)
        self.store.write()
        return member

    def remove(self, member_id) -> None:
        """Hard delete; removing an unknown id is not an error."""
        member = self.get(member_id)
        if member is None:
            return
        self.store.delete(member)
        self.store.write()
        current_app.logger.info(f"Removed member {member_id}")

    def list_by_status(self, status=None) -> list:
        self.store.read()
        return self.store.members(status=status)
